"""
Shared embed utilities for the Race Board bot.

Provides reusable embed building functions for leaderboards, the award
podium and the roster overview.
"""

import discord
from typing import Dict, List, Optional, Sequence, Tuple

from race_board.constants import AwardConstants, RosterConstants, UIConstants
from race_board.data_models.leaderboard import LeaderboardEntry, LeaderboardPage
from race_board.data_models.team import RankedTeam, Team
from race_board.utils.formatting import (
    format_currency, format_level, format_minutes, format_number, format_team_name
)
from race_board.utils.metrics import TeamMetrics


def visible_row_window(entries: Sequence[LeaderboardEntry], max_rows: int = UIConstants.MAX_ROWS) -> Tuple[int, int]:
    """
    Slice of leaderboard rows to render when the board is too long.

    Ranks are revealed from the bottom, so the window follows the boundary
    between hidden and revealed rows: the newest revealed row stays in view
    with a few hidden rows above it. Nothing revealed shows the bottom rows.
    """
    if len(entries) <= max_rows:
        return 0, len(entries)

    frontier = next((index for index, entry in enumerate(entries) if entry.revealed), len(entries))
    start = min(max(0, frontier - UIConstants.ROWS_ABOVE_REVEAL), len(entries) - max_rows)
    return start, start + max_rows


def build_leaderboard_embed(page: LeaderboardPage) -> discord.Embed:
    """
    Build the leaderboard table embed.

    Hidden rows stay in place with masked values so the audience can see how
    many teams are still to be announced.

    Args:
        page: Display-ready leaderboard with masked entries

    Returns:
        Formatted Discord embed ready for display
    """
    embed = discord.Embed(
        title=page.title,
        description=page.description,
        color=discord.Color.gold() if page.is_fully_revealed else discord.Color.blue()
    )

    if not page.entries:
        embed.description += "\n\nNo teams to show yet."
        return embed

    lines = ["```"]
    lines.append(f"{'#':<4} {'Team':<16} {'Score':<14} {'Amount':<11} {'Time':<8} {'HP':<5} {'Lv':<4}")
    lines.append("-" * 68)

    start, end = visible_row_window(page.entries)
    if start > 0:
        lines.append(f"... {start} more above")

    for entry in page.entries[start:end]:
        rank = f"{entry.rank}{'=' if entry.is_tie else ''}"
        lines.append(
            f"{rank:<4} {entry.name[:16]:<16} {entry.score[:14]:<14} "
            f"{entry.final_amount[:11]:<11} {entry.play_time:<8} "
            f"{entry.hp_total:<5} {entry.level:<4}"
        )

    if end < len(page.entries):
        lines.append(f"... {len(page.entries) - end} more below")

    lines.append("```")
    embed.description += "\n" + "\n".join(lines)

    embed.set_footer(
        text=f"Revealed {page.revealed_count}/{page.total_ranks} ranks | Teams: {page.total_teams} | '=' marks a {UIConstants.TIE_LABEL}"
    )
    return embed


def build_podium_embed(title: str, top_three: Sequence[RankedTeam]) -> discord.Embed:
    """Build the award announcement with the revealed 1st to 3rd places."""
    embed = discord.Embed(title=title, color=UIConstants.GOLD_RANK_COLOR)

    by_rank: Dict[int, List[str]] = {}
    for ranked in top_three:
        by_rank.setdefault(ranked.rank, []).append(format_team_name(ranked.team.name))

    for rank in (1, 2, 3):
        names = by_rank.get(rank)
        value = " / ".join(names) if names else UIConstants.HIDDEN_VALUE
        label = f"{UIConstants.CROWN_EMOJI} {rank}" if rank == 1 and names else str(rank)
        embed.add_field(name=label, value=value, inline=True)

    return embed


def build_roster_embed(
    roster: Sequence[Team],
    rank_summary: Dict[str, Dict[str, Optional[int]]],
    master_scores: Dict[str, Optional[float]],
) -> discord.Embed:
    """Build the roster overview with each team's inputs and current ranks."""
    embed = discord.Embed(
        title="📋 Team Roster",
        description=f"{len(roster)} team(s)",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )

    # Discord embeds hold at most 25 fields
    for index, team in enumerate(roster[:25], start=1):
        hp = TeamMetrics.get_hp_total_detail(team.members)
        ranks = rank_summary.get(team.id, {})

        def rank_text(award: str) -> str:
            rank = ranks.get(award)
            return f"#{rank}" if rank else UIConstants.EMPTY_VALUE

        score = master_scores.get(team.id)
        score_text = f" ({format_number(score)})" if score is not None else ""
        members = ", ".join(
            f"{member.name or '?'} {format_number(member.hp) if member.hp is not None else '-'}"
            for member in team.members if not member.is_empty
        ) or UIConstants.EMPTY_VALUE

        embed.add_field(
            name=f"{index}. {format_team_name(team.name)}",
            value=(
                f"`{team.id}`\n"
                f"**Amount:** {format_currency(team.final_amount)} | "
                f"**Time:** {format_minutes(team.play_time_minutes)} | "
                f"**{format_level(team.level)}**\n"
                f"**HP:** {format_number(hp.total)} "
                f"({format_number(hp.actual)} + {format_number(hp.compensation)} for "
                f"{hp.missing_member_count}/{RosterConstants.MAX_MEMBER_COUNT} empty)\n"
                f"**Members:** {members}\n"
                f"**Master:** {rank_text(AwardConstants.MASTER)}{score_text} | "
                f"**Collection:** {rank_text(AwardConstants.COLLECTION)} | "
                f"**Time-Attack:** {rank_text(AwardConstants.TIME_ATTACK)} | "
                f"**Order:** {rank_text(AwardConstants.QUALIFYING_ORDER)}"
            ),
            inline=False
        )

    if len(roster) > 25:
        embed.set_footer(text=f"Showing 25 of {len(roster)} teams")
    return embed
