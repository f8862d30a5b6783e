"""
Leaderboard service for the three award rankings.

Each award owns one AwardLeaderboard: its scoring strategy, its last computed
ranking and its own RevealState. Boards never share reveal state.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from race_board.constants import AwardConstants, UIConstants
from race_board.data_models.leaderboard import LeaderboardEntry, LeaderboardPage
from race_board.data_models.team import RankedTeam, Team
from race_board.services.reveal import RevealState
from race_board.utils.formatting import format_currency, format_level, format_minutes, format_number, format_team_name
from race_board.utils.ranking import RankingUtility
from race_board.utils.scoring_strategies import AwardStrategy, AwardStrategyFactory

logger = logging.getLogger(__name__)


def get_visible(
    ranking: Sequence[RankedTeam],
    reveal_state: RevealState,
    strategy: AwardStrategy,
) -> List[LeaderboardEntry]:
    """Display rows for a ranking; rows of hidden ranks are fully masked."""
    entries = []
    for ranked in ranking:
        if reveal_state.is_rank_revealed(ranked.rank):
            entries.append(LeaderboardEntry(
                team_id=ranked.team_id,
                rank=ranked.rank,
                name=format_team_name(ranked.team.name),
                score=strategy.display_value(ranked),
                final_amount=format_currency(ranked.team.final_amount),
                play_time=format_minutes(ranked.team.play_time_minutes),
                hp_total=format_number(ranked.hp_total),
                level=format_level(ranked.team.level),
                is_tie=ranked.is_tie,
                revealed=True,
            ))
        else:
            entries.append(LeaderboardEntry(
                team_id=ranked.team_id,
                rank=UIConstants.HIDDEN_RANK,
                name=UIConstants.HIDDEN_VALUE,
                score=UIConstants.HIDDEN_VALUE,
                final_amount=UIConstants.HIDDEN_VALUE,
                play_time=UIConstants.HIDDEN_VALUE,
                hp_total=UIConstants.HIDDEN_VALUE,
                level=UIConstants.HIDDEN_VALUE,
                is_tie=False,
                revealed=False,
            ))
    return entries


class AwardLeaderboard:
    """One award's ranking plus its reveal state."""

    def __init__(self, strategy: AwardStrategy, reveal_state: Optional[RevealState] = None):
        self.strategy = strategy
        self.reveal_state = reveal_state or RevealState(name=strategy.key)
        self.ranking: List[RankedTeam] = []
        self._snapshot: Optional[Tuple[Team, ...]] = None

    @property
    def award(self) -> str:
        return self.strategy.key

    @property
    def present_ranks(self) -> List[int]:
        return RankingUtility.distinct_ranks(self.ranking)

    def compute_ranking(self, roster: Sequence[Team]) -> List[RankedTeam]:
        """Fresh ranking for a roster; no side effects."""
        return RankingUtility.compute_ranking(roster, self.strategy)

    def refresh(self, roster: Sequence[Team]) -> List[RankedTeam]:
        """Recompute the stored ranking, reusing it when the roster is unchanged."""
        snapshot = tuple(roster)
        if snapshot != self._snapshot:
            self.ranking = self.compute_ranking(snapshot)
            self._snapshot = snapshot
        return self.ranking

    def get_visible(self) -> List[LeaderboardEntry]:
        return get_visible(self.ranking, self.reveal_state, self.strategy)

    def get_page(self) -> LeaderboardPage:
        present = self.present_ranks
        return LeaderboardPage(
            award=self.award,
            title=self.strategy.title,
            description=self.strategy.description,
            entries=self.get_visible(),
            total_teams=len(self.ranking),
            total_ranks=len(present),
            revealed_count=len(self.reveal_state.revealed_in(present)),
            is_fully_revealed=self.reveal_state.is_fully_revealed(present),
            is_revealing=self.reveal_state.is_revealing,
        )

    def top_three(self) -> List[RankedTeam]:
        """Revealed teams placed 1st to 3rd, best first (the podium)."""
        podium = [
            ranked for ranked in self.ranking
            if ranked.rank <= 3 and self.reveal_state.is_rank_revealed(ranked.rank)
        ]
        return sorted(podium, key=lambda ranked: ranked.rank)

    def is_fully_revealed(self) -> bool:
        return self.reveal_state.is_fully_revealed(self.present_ranks)

    async def reveal_next(self):
        await self.reveal_state.reveal_next(self.present_ranks)

    async def reveal_batch(self):
        await self.reveal_state.reveal_batch(self.present_ranks)

    def reveal_all(self):
        self.reveal_state.reveal_all(self.present_ranks)


class LeaderboardService:
    """The three independent award leaderboards."""

    def __init__(self, reveal_delay: Optional[float] = None, batch_size: Optional[int] = None):
        self.boards: Dict[str, AwardLeaderboard] = {}
        for award in AwardStrategyFactory.get_available_awards():
            strategy = AwardStrategyFactory.create_strategy(award)
            reveal_state = RevealState(name=award, delay=reveal_delay, batch_size=batch_size)
            self.boards[award] = AwardLeaderboard(strategy, reveal_state)

    def get_board(self, award: str) -> AwardLeaderboard:
        board = self.boards.get(award.lower())
        if board is None:
            raise ValueError(f"Unknown award: {award}")
        return board

    def refresh(self, roster: Sequence[Team]):
        """Recompute every award ranking for the current roster."""
        for board in self.boards.values():
            board.refresh(roster)
        logger.debug(f"Leaderboards refreshed for {len(roster)} team(s)")

    def rank_summary(self, roster: Sequence[Team]) -> Dict[str, Dict[str, Optional[int]]]:
        """
        Qualified rank of every team under every award.

        Teams outside an award's qualified block map to None. The extra
        "qualifying" column is the plain qualifying order (amount, then name).
        """
        self.refresh(roster)
        award_ranks = {
            award: RankingUtility.rank_map(board.ranking)
            for award, board in self.boards.items()
        }
        qualifying = RankingUtility.rank_map(RankingUtility.qualifying_order(roster))

        summary = {}
        for team in roster:
            ranks = {award: ranks_by_team.get(team.id) for award, ranks_by_team in award_ranks.items()}
            ranks[AwardConstants.QUALIFYING_ORDER] = qualifying.get(team.id)
            summary[team.id] = ranks
        return summary

    def master_score(self, team_id: str) -> Optional[float]:
        for ranked in self.boards[AwardConstants.MASTER].ranking:
            if ranked.team_id == team_id:
                return ranked.score
        return None
