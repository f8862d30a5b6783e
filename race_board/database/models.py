import json
from sqlalchemy import (
    Column, Integer, String, DateTime, Float, Text, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from typing import List, Dict, Any

from race_board.data_models.team import Member, Team

Base = declarative_base()

class TeamRecord(Base):
    __tablename__ = 'teams'

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False, default="")
    final_amount = Column(Float, nullable=True)
    play_time_minutes = Column(Float, nullable=True)
    level = Column(Integer, nullable=False, default=1)

    # Roster order
    position = Column(Integer, nullable=False, default=0, index=True)

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    members = relationship(
        "MemberRecord",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="MemberRecord.slot"
    )

    def to_team(self) -> Team:
        """Convert to the immutable roster record"""
        return Team(
            id=self.id,
            name=self.name or "",
            final_amount=self.final_amount,
            play_time_minutes=self.play_time_minutes,
            level=self.level,
            members=tuple(member.to_member() for member in self.members),
        )

    def __repr__(self):
        return f"<TeamRecord(id='{self.id}', name='{self.name}', level={self.level})>"

class MemberRecord(Base):
    __tablename__ = 'members'

    id = Column(Integer, primary_key=True)
    team_id = Column(String(64), ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    slot = Column(Integer, nullable=False)
    member_uid = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False, default="")
    hp = Column(Float, nullable=True)

    team = relationship("TeamRecord", back_populates="members")

    # One member per slot within a team
    __table_args__ = (UniqueConstraint('team_id', 'slot'),)

    def to_member(self) -> Member:
        return Member(id=self.member_uid, name=self.name or "", hp=self.hp)

    def __repr__(self):
        return f"<MemberRecord(team_id='{self.team_id}', slot={self.slot}, name='{self.name}')>"

class TeamTemplate(Base):
    """Reusable team name and member list"""
    __tablename__ = 'team_templates'

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    team_name = Column(String(200), nullable=False, default="")
    members_json = Column(Text, nullable=False, default="[]")  # [{"name": ..., "hp": ...}]
    created_at = Column(DateTime, default=func.now())

    @property
    def members(self) -> List[Dict[str, Any]]:
        return json.loads(self.members_json or "[]")

    @members.setter
    def members(self, value: List[Dict[str, Any]]):
        self.members_json = json.dumps(value, ensure_ascii=False)

    def __repr__(self):
        return f"<TeamTemplate(id='{self.id}', name='{self.name}', team='{self.team_name}')>"
