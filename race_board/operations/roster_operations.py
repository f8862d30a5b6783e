"""
Roster Operations Module

This module provides business logic operations for the team roster: input
normalization, field edits, team templates and JSON import/export.

Key functionality:
- normalize_team(): coerces loose input into a well-formed Team
- RosterOperations: roster edits persisted through Database, with every
  change pushed to the LeaderboardService so the three award rankings are
  recomputed immediately

The ranking engine assumes a well-typed roster; everything that can be
malformed is rejected or coerced here.
"""

import json
import math
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from race_board.config import Config
from race_board.constants import RosterConstants
from race_board.data_models.team import Member, Team
from race_board.utils.logger import setup_logger
from race_board.utils.roster_exceptions import (
    InvalidFieldError, LastTeamError, MemberSlotError, RosterImportError,
    TeamNotFoundError, TemplateNotFoundError
)

logger = setup_logger(__name__)

EXPORT_FORMAT_VERSION = "1.0"

TEAM_FIELDS = ("name", "final_amount", "play_time_minutes", "level")
MEMBER_FIELDS = ("name", "hp")


def create_id() -> str:
    return uuid.uuid4().hex


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


def parse_number(value: Union[str, float, int, None], minimum: float = 0,
                 maximum: float = math.inf) -> Optional[float]:
    """
    Parse operator input into a clamped number.

    Empty input means "absent"; text that is not a finite number counts as 0.
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = 0.0
    if not math.isfinite(parsed):
        parsed = 0.0
    # Bounds may be ints; keep a float so is_integer() is available
    parsed = float(min(max(parsed, minimum), maximum))
    return int(parsed) if parsed.is_integer() else parsed


def normalize_member(raw: Union[Member, Mapping[str, Any], None]) -> Member:
    if isinstance(raw, Member):
        return raw
    raw = raw or {}
    return Member(
        id=str(raw.get("id") or create_id()),
        name=str(raw.get("name") or ""),
        hp=_finite_number(raw.get("hp")),
    )


def ensure_member_slots(members: Optional[Iterable[Any]]) -> tuple:
    """Exactly MAX_MEMBER_COUNT slots: extra members dropped, blanks appended."""
    slots = [normalize_member(member) for member in (members or [])]
    slots = slots[:RosterConstants.MAX_MEMBER_COUNT]
    while len(slots) < RosterConstants.MAX_MEMBER_COUNT:
        slots.append(Member(id=create_id()))
    return tuple(slots)


def normalize_team(raw: Union[Team, Mapping[str, Any], None] = None) -> Team:
    """Build a well-formed Team from a partial or loosely typed record."""
    if isinstance(raw, Team):
        return replace(raw, members=ensure_member_slots(raw.members))
    raw = raw or {}

    level = raw.get("level")
    try:
        level = int(level)
    except (TypeError, ValueError):
        level = RosterConstants.DEFAULT_LEVEL
    if level not in RosterConstants.LEVELS:
        level = RosterConstants.DEFAULT_LEVEL

    return Team(
        id=str(raw.get("id") or create_id()),
        name=str(raw.get("name") or ""),
        final_amount=_finite_number(raw.get("final_amount")),
        play_time_minutes=_finite_number(raw.get("play_time_minutes")),
        level=level,
        members=ensure_member_slots(raw.get("members")),
    )


SAMPLE_TEAMS = [
    ("Team Alpha", 250000, 35, 5, [("Member A", 95), ("Member B", 88), ("Member C", 92), ("Member D", 85)]),
    ("Team Beta", 280000, 42, 5, [("Member E", 100), ("Member F", 95), ("Member G", 90), ("Member H", 88)]),
    ("Team Gamma", 220000, 38, 4, [("Member I", 85), ("Member J", 80), ("Member K", 82), ("Member L", 78)]),
    ("Team Delta", 300000, 45, 5, [("Member M", 98), ("Member N", 96), ("Member O", 94), ("Member P", 92)]),
    ("Team Epsilon", 180000, 32, 3, [("Member Q", 75), ("Member R", 72), ("Member S", 70), ("Member T", 68)]),
    ("Team Zeta", 320000, 50, 5, [("Member U", 100), ("Member V", 98), ("Member W", 97), ("Member X", 95)]),
    ("Team Eta", 200000, 36, 4, [("Member Y", 82), ("Member Z", 80), ("Member AA", 78), ("Member AB", 76)]),
    ("Team Theta", 260000, 40, 5, [("Member AC", 90), ("Member AD", 88), ("Member AE", 86), ("Member AF", 84)]),
    ("Team Iota", 240000, 37, 5, [("Member AG", 89), ("Member AH", 87), ("Member AI", 85), ("Member AJ", 83)]),
    ("Team Kappa", 190000, 33, 3, [("Member AK", 74), ("Member AL", 72), ("Member AM", 70), ("Member AN", 68)]),
    ("Team Lambda", 270000, 41, 5, [("Member AO", 91), ("Member AP", 89), ("Member AQ", 87), ("Member AR", 85)]),
    ("Team Mu", 210000, 34, 4, [("Member AS", 81), ("Member AT", 79), ("Member AU", 77), ("Member AV", 75)]),
    ("Team Nu", 230000, 39, 4, [("Member AW", 83), ("Member AX", 81), ("Member AY", 79), ("Member AZ", 77)]),
]


def create_sample_roster() -> List[Team]:
    """Thirteen filled-in teams for rehearsing a ceremony."""
    return [
        normalize_team({
            "name": name,
            "final_amount": amount,
            "play_time_minutes": minutes,
            "level": level,
            "members": [{"name": member_name, "hp": hp} for member_name, hp in members],
        })
        for name, amount, minutes, level, members in SAMPLE_TEAMS
    ]


def create_initial_roster() -> List[Team]:
    if Config.USE_SAMPLE_ROSTER:
        return create_sample_roster()
    return [normalize_team()]


def _recorded_members(team_or_members: Iterable[Member]) -> List[Dict[str, Any]]:
    """Members worth keeping in a template or export (name or HP filled)."""
    return [
        {"name": member.name, "hp": member.hp}
        for member in team_or_members
        if member.name.strip() != "" or member.hp is not None
    ]


def export_teams_as_json(teams: Iterable[Team]) -> str:
    """Serialize team names and members (not results) for reuse."""
    export_data = {
        "version": EXPORT_FORMAT_VERSION,
        "exportDate": datetime.now(timezone.utc).isoformat(),
        "teams": [
            {"name": team.name, "members": _recorded_members(team.members)}
            for team in teams
        ],
    }
    return json.dumps(export_data, ensure_ascii=False, indent=2)


def import_teams_from_json(json_string: str) -> List[Dict[str, Any]]:
    """
    Parse an exported roster file.

    Accepts the versioned export format or a bare list of teams.

    Raises:
        RosterImportError: If the text is not JSON or not a known format
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise RosterImportError(f"invalid JSON ({e.msg})")

    if isinstance(data, dict) and data.get("version") == EXPORT_FORMAT_VERSION and isinstance(data.get("teams"), list):
        teams = data["teams"]
    elif isinstance(data, list):
        teams = data
    else:
        raise RosterImportError("unsupported file format")

    if not all(isinstance(team, dict) for team in teams):
        raise RosterImportError("every team must be an object")
    for team in teams:
        members = team.get("members")
        if members is None:
            continue
        if not isinstance(members, list) or not all(isinstance(member, dict) for member in members):
            raise RosterImportError("every member must be an object")
    return teams


class RosterOperations:
    """
    Business logic operations for the team roster.

    Every mutation is persisted first, then the current roster is handed to
    the leaderboard service for a full synchronous recompute.
    """

    def __init__(self, database, leaderboard_service=None):
        """Initialize with database instance and optional leaderboard service"""
        self.db = database
        self.leaderboard_service = leaderboard_service
        self.logger = logger

    async def _publish(self) -> List[Team]:
        roster = await self.db.get_all_teams()
        if self.leaderboard_service is not None:
            self.leaderboard_service.refresh(roster)
        return roster

    async def load_roster(self) -> List[Team]:
        """Current roster; an empty database is seeded with the initial roster."""
        if await self.db.count_teams() == 0:
            self.logger.info("Roster is empty, seeding initial teams")
            await self.db.replace_all_teams(create_initial_roster())
        return await self._publish()

    async def get_team(self, team_id: str) -> Team:
        team = await self.db.get_team(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    async def add_team(self, name: str = "") -> Team:
        team = await self.db.save_team(normalize_team({"name": name}))
        self.logger.info(f"Added team {team.id} ({team.name or 'unnamed'})")
        await self._publish()
        return team

    async def remove_team(self, team_id: str) -> Team:
        team = await self.get_team(team_id)
        if await self.db.count_teams() <= 1:
            raise LastTeamError()
        await self.db.delete_team(team_id)
        self.logger.info(f"Removed team {team_id} ({team.name or 'unnamed'})")
        await self._publish()
        return team

    async def set_team_field(self, team_id: str, field: str, value: Any) -> Team:
        """
        Edit one team field from operator input.

        Args:
            team_id: Team to edit
            field: One of name, final_amount, play_time_minutes, level
            value: Raw input; numbers are parsed and clamped

        Returns:
            The updated team
        """
        if field not in TEAM_FIELDS:
            raise InvalidFieldError(field, TEAM_FIELDS)
        team = await self.get_team(team_id)

        if field == "name":
            updated = replace(team, name=str(value or ""))
        elif field == "final_amount":
            updated = replace(team, final_amount=parse_number(value))
        elif field == "play_time_minutes":
            updated = replace(team, play_time_minutes=parse_number(value, 0, RosterConstants.MAX_INPUT_VALUE))
        else:
            updated = normalize_team({
                "id": team.id, "name": team.name, "final_amount": team.final_amount,
                "play_time_minutes": team.play_time_minutes, "level": value, "members": team.members,
            })

        updated = await self.db.save_team(updated)
        self.logger.info(f"Team {team_id}: {field} set to {getattr(updated, field)!r}")
        await self._publish()
        return updated

    async def set_member_field(self, team_id: str, slot: int, field: str, value: Any) -> Team:
        """Edit a member slot (1-based) of a team."""
        if field not in MEMBER_FIELDS:
            raise InvalidFieldError(field, MEMBER_FIELDS)
        if not 1 <= slot <= RosterConstants.MAX_MEMBER_COUNT:
            raise MemberSlotError(slot, RosterConstants.MAX_MEMBER_COUNT)
        team = await self.get_team(team_id)

        members = list(team.members)
        member = members[slot - 1]
        if field == "name":
            members[slot - 1] = replace(member, name=str(value or ""))
        else:
            members[slot - 1] = replace(member, hp=parse_number(value, 0, RosterConstants.MAX_INPUT_VALUE))

        updated = await self.db.save_team(replace(team, members=tuple(members)))
        self.logger.info(f"Team {team_id}: member {slot} {field} updated")
        await self._publish()
        return updated

    async def reset_roster(self) -> List[Team]:
        await self.db.replace_all_teams(create_initial_roster())
        self.logger.info("Roster reset")
        return await self._publish()

    # Templates

    async def save_template(self, team_id: str, template_name: str):
        team = await self.get_team(team_id)
        template = await self.db.create_template(
            template_id=create_id(),
            name=template_name,
            team_name=team.name,
            members=_recorded_members(team.members),
        )
        self.logger.info(f"Saved template '{template_name}' from team {team_id}")
        return template

    async def list_templates(self):
        return await self.db.get_all_templates()

    async def delete_template(self, template_id: str):
        if not await self.db.delete_template(template_id):
            raise TemplateNotFoundError(template_id)
        self.logger.info(f"Deleted template {template_id}")

    async def add_team_from_template(self, template_id: str) -> Team:
        """New team with the template's name and members and blank results."""
        template = await self.db.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        team = await self.db.save_team(normalize_team({
            "name": template.team_name,
            "members": template.members,
        }))
        self.logger.info(f"Added team {team.id} from template '{template.name}'")
        await self._publish()
        return team

    # Import / export

    async def export_roster(self) -> str:
        return export_teams_as_json(await self.db.get_all_teams())

    async def import_roster(self, json_string: str) -> List[Team]:
        """Append the teams of an exported file to the roster."""
        imported = [
            normalize_team({"name": raw.get("name"), "members": raw.get("members")})
            for raw in import_teams_from_json(json_string)
        ]
        async with self.db.transaction() as session:
            for team in imported:
                await self.db.save_team(team, session=session)
        self.logger.info(f"Imported {len(imported)} team(s)")
        await self._publish()
        return imported
