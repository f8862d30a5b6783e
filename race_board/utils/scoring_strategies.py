"""
Scoring Strategy Pattern for Award Calculations

This module implements the Strategy pattern for the three award formulas,
so the ranking code stays the same for every leaderboard and only the
comparable value and its direction differ.

Each strategy either produces a comparable value for a team or returns
None ("not applicable"), which keeps the team on the roster but outside
the qualified part of that award's leaderboard.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from race_board.constants import AwardConstants, RosterConstants, UIConstants
from race_board.data_models.team import RankedTeam, Team
from race_board.utils.formatting import format_currency, format_minutes, format_number


class AwardStrategy(ABC):
    """
    Abstract base class for award scoring strategies.

    Subclasses define how a team and its survival HP total turn into a
    single comparable value, and whether higher or lower values win.
    """

    key: str = ""
    higher_is_better: bool = True

    @property
    def title(self) -> str:
        return AwardConstants.TITLES[self.key]

    @property
    def description(self) -> str:
        return AwardConstants.DESCRIPTIONS[self.key]

    @abstractmethod
    def score(self, team: Team, hp_total: float) -> Optional[float]:
        """
        Calculate the comparable value for a team.

        Args:
            team: The team record
            hp_total: The team's survival HP total (with compensation)

        Returns:
            The comparable value, or None when the award does not apply
        """
        pass

    @abstractmethod
    def display_value(self, ranked: RankedTeam) -> str:
        """Human-readable form of a ranked team's value for this award"""
        pass

    def sort_key(self, value: float) -> float:
        """Key that orders better values first."""
        return -value if self.higher_is_better else value


class MasterAwardStrategy(AwardStrategy):
    """
    Composite efficiency score.

    (final amount / play minutes) x survival HP total x level. Teams without
    an amount, without minutes, or with zero HP cannot be scored, which also
    keeps the division safe.
    """

    key = AwardConstants.MASTER
    higher_is_better = True

    def score(self, team: Team, hp_total: float) -> Optional[float]:
        amount = team.final_amount if team.final_amount is not None else 0
        minutes = team.play_time_minutes if team.play_time_minutes is not None else 0

        if minutes == 0 or amount == 0 or hp_total == 0:
            return None

        return (amount / minutes) * hp_total * team.level

    def display_value(self, ranked: RankedTeam) -> str:
        if ranked.score is None:
            return UIConstants.EMPTY_VALUE
        return format_number(ranked.score)


class CollectionAwardStrategy(AwardStrategy):
    """Raw resource total. Every team is ranked, an absent amount counts as 0."""

    key = AwardConstants.COLLECTION
    higher_is_better = True

    def score(self, team: Team, hp_total: float) -> Optional[float]:
        return team.final_amount if team.final_amount is not None else 0

    def display_value(self, ranked: RankedTeam) -> str:
        return format_currency(ranked.team.final_amount)


class TimeAttackStrategy(AwardStrategy):
    """
    Fastest completion.

    Only teams that reached the maximum level with a known, nonzero play
    time qualify; fewer minutes is better.
    """

    key = AwardConstants.TIME_ATTACK
    higher_is_better = False

    def score(self, team: Team, hp_total: float) -> Optional[float]:
        if team.level != RosterConstants.MAX_LEVEL:
            return None
        minutes = team.play_time_minutes
        if minutes is None or minutes == 0:
            return None
        return minutes

    def display_value(self, ranked: RankedTeam) -> str:
        if ranked.score is None:
            return UIConstants.NOT_REACHED
        return format_minutes(ranked.score)


class AwardStrategyFactory:
    """Factory for creating award strategies by key"""

    _STRATEGIES = {
        AwardConstants.MASTER: MasterAwardStrategy,
        AwardConstants.COLLECTION: CollectionAwardStrategy,
        AwardConstants.TIME_ATTACK: TimeAttackStrategy,
    }

    @staticmethod
    def create_strategy(award: str) -> AwardStrategy:
        """
        Create the scoring strategy for an award.

        Args:
            award: Award key ("master", "collection", "timeattack")

        Returns:
            Configured AwardStrategy instance
        """
        strategy_class = AwardStrategyFactory._STRATEGIES.get(award.lower())
        if strategy_class is None:
            raise ValueError(f"Unknown award: {award}")
        return strategy_class()

    @staticmethod
    def get_available_awards() -> List[str]:
        """Get list of available award keys"""
        return list(AwardConstants.ALL_AWARDS)
