"""
Leaderboard data models for the reveal display.

Provides immutable data transfer objects for rendering a leaderboard whose
rows may still be hidden.
"""

from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class LeaderboardEntry:
    """Single leaderboard row, masked while its rank is hidden."""
    team_id: str
    rank: Union[int, str]
    name: str
    score: str
    final_amount: str
    play_time: str
    hp_total: str
    level: str
    is_tie: bool
    revealed: bool


@dataclass(frozen=True)
class LeaderboardPage:
    """Display-ready leaderboard for one award."""
    award: str
    title: str
    description: str
    entries: List[LeaderboardEntry]
    total_teams: int
    total_ranks: int
    revealed_count: int
    is_fully_revealed: bool
    is_revealing: bool
