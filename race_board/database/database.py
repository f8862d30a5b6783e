from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy import select, delete, func
from contextlib import asynccontextmanager

from race_board.config import Config
from race_board.data_models.team import Team
from race_board.database.models import Base, TeamRecord, MemberRecord, TeamTemplate
from race_board.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.async_session = None

    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.

        All operations within the context are committed together on success
        or rolled back together on failure.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")

    # Team operations
    async def get_all_teams(self) -> List[Team]:
        """Get the roster in display order"""
        async with self.get_session() as session:
            result = await session.execute(
                select(TeamRecord)
                .options(selectinload(TeamRecord.members))
                .order_by(TeamRecord.position, TeamRecord.created_at)
            )
            return [record.to_team() for record in result.scalars().all()]

    async def get_team(self, team_id: str) -> Optional[Team]:
        async with self.get_session() as session:
            record = await self._get_team_record(session, team_id)
            return record.to_team() if record else None

    async def _get_team_record(self, session: AsyncSession, team_id: str) -> Optional[TeamRecord]:
        result = await session.execute(
            select(TeamRecord)
            .options(selectinload(TeamRecord.members))
            .where(TeamRecord.id == team_id)
        )
        return result.scalar_one_or_none()

    async def save_team(self, team: Team, session: Optional[AsyncSession] = None) -> Team:
        """Insert or update a team and its member slots"""
        if session is None:
            async with self.transaction() as new_session:
                return await self.save_team(team, session=new_session)

        record = await self._get_team_record(session, team.id)
        if record is None:
            max_position = await session.scalar(select(func.max(TeamRecord.position)))
            record = TeamRecord(id=team.id, position=(max_position or 0) + 1, members=[])
            session.add(record)

        record.name = team.name
        record.final_amount = team.final_amount
        record.play_time_minutes = team.play_time_minutes
        record.level = team.level

        # Update slots in place so member row ids stay stable
        existing = {member.slot: member for member in record.members}
        for slot, member in enumerate(team.members):
            member_record = existing.pop(slot, None)
            if member_record is None:
                member_record = MemberRecord(slot=slot)
                record.members.append(member_record)
            member_record.member_uid = member.id
            member_record.name = member.name
            member_record.hp = member.hp
        for leftover in existing.values():
            record.members.remove(leftover)

        await session.flush()
        return record.to_team()

    async def delete_team(self, team_id: str) -> bool:
        """Delete a team; returns False if it did not exist"""
        async with self.transaction() as session:
            record = await self._get_team_record(session, team_id)
            if record is None:
                return False
            await session.delete(record)
            return True

    async def replace_all_teams(self, teams: List[Team]) -> List[Team]:
        """Replace the whole roster atomically"""
        async with self.transaction() as session:
            await session.execute(delete(MemberRecord))
            await session.execute(delete(TeamRecord))
            saved = []
            for team in teams:
                saved.append(await self.save_team(team, session=session))
            return saved

    async def count_teams(self) -> int:
        async with self.get_session() as session:
            return await session.scalar(select(func.count(TeamRecord.id))) or 0

    # Template operations
    async def create_template(self, template_id: str, name: str, team_name: str,
                              members: List[Dict[str, Any]]) -> TeamTemplate:
        async with self.transaction() as session:
            template = TeamTemplate(id=template_id, name=name, team_name=team_name)
            template.members = members
            session.add(template)
            await session.flush()
            return template

    async def get_all_templates(self) -> List[TeamTemplate]:
        async with self.get_session() as session:
            result = await session.execute(
                select(TeamTemplate).order_by(TeamTemplate.created_at, TeamTemplate.name)
            )
            return list(result.scalars().all())

    async def get_template(self, template_id: str) -> Optional[TeamTemplate]:
        async with self.get_session() as session:
            return await session.get(TeamTemplate, template_id)

    async def delete_template(self, template_id: str) -> bool:
        async with self.transaction() as session:
            template = await session.get(TeamTemplate, template_id)
            if template is None:
                return False
            await session.delete(template)
            return True
