from typing import Iterable, Optional

from race_board.constants import RosterConstants
from race_board.data_models.team import HpTotalDetail, Member, Team


class TeamMetrics:
    """Derives team-level numbers from the raw roster input"""
    
    @staticmethod
    def is_active_member(member: Member) -> bool:
        """A slot counts as played if it has a name or a positive HP."""
        has_name = member.name.strip() != ""
        has_hp = member.hp is not None and member.hp > 0
        return has_name or has_hp
    
    @staticmethod
    def count_active_members(members: Iterable[Member]) -> int:
        return sum(1 for member in members if TeamMetrics.is_active_member(member))
    
    @staticmethod
    def get_hp_total_detail(members: Iterable[Member]) -> HpTotalDetail:
        """
        Calculate the survival HP total with short-handed compensation
        
        Every slot without an active member adds a fixed HP credit so teams
        that played with fewer members are not penalized for it.
        
        Args:
            members: The team's member slots
            
        Returns:
            HpTotalDetail with the recorded HP, the compensation and the total
        """
        members = list(members)
        actual = sum(member.hp for member in members if member.hp is not None)
        active_count = TeamMetrics.count_active_members(members)
        missing_count = max(0, RosterConstants.MAX_MEMBER_COUNT - active_count)
        compensation = missing_count * RosterConstants.HP_PER_MISSING_MEMBER
        
        return HpTotalDetail(
            actual=actual,
            compensation=compensation,
            total=actual + compensation,
            active_member_count=active_count,
            missing_member_count=missing_count,
        )
    
    @staticmethod
    def get_hp_total(members: Iterable[Member]) -> float:
        return TeamMetrics.get_hp_total_detail(members).total
    
    @staticmethod
    def get_play_time_minutes(team: Team) -> Optional[float]:
        """Recorded minutes, or None when unknown (never coerced to zero)."""
        return team.play_time_minutes
    
    @staticmethod
    def get_total_seconds(team: Team) -> Optional[float]:
        if team.play_time_minutes is None:
            return None
        return team.play_time_minutes * 60
