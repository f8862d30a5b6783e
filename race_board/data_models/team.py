"""
Team data models for the award leaderboards.

Provides immutable records for the roster and for ranked leaderboard rows.
Absent numeric inputs are ``None``; edits build a new record with
``dataclasses.replace`` so a team's ``id`` never changes.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Member:
    """One member slot of a team. Empty slots have no name and no HP."""
    id: str
    name: str = ""
    hp: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.name.strip() == "" and self.hp is None


@dataclass(frozen=True)
class Team:
    """A competing team as entered by the operator."""
    id: str
    name: str = ""
    final_amount: Optional[float] = None
    play_time_minutes: Optional[float] = None
    level: int = 1
    members: Tuple[Member, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HpTotalDetail:
    """Breakdown of a team's survival HP total."""
    actual: float
    compensation: float
    total: float
    active_member_count: int
    missing_member_count: int


@dataclass(frozen=True)
class RankedTeam:
    """A team placed on one award leaderboard."""
    team: Team
    hp_total: float
    score: Optional[float]  # None when the award is not applicable
    rank: int
    is_tie: bool
    qualified: bool = True

    @property
    def team_id(self) -> str:
        return self.team.id
