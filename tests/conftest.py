"""Shared fixtures for the Race Board tests."""

import asyncio

import pytest

from race_board.config import Config
from race_board.data_models.team import Member, Team
from race_board.database.database import Database


def build_team(name, amount=None, minutes=None, level=1, hps=(), team_id=None, member_names=None):
    """Team with one active member per HP value; remaining slots stay empty."""
    members = []
    for index in range(4):
        if index < len(hps):
            member_name = member_names[index] if member_names else f"{name} #{index + 1}"
            members.append(Member(id=f"{name}-m{index}", name=member_name, hp=hps[index]))
        else:
            members.append(Member(id=f"{name}-m{index}"))
    return Team(
        id=team_id or name,
        name=name,
        final_amount=amount,
        play_time_minutes=minutes,
        level=level,
        members=tuple(members),
    )


@pytest.fixture
def make_team():
    return build_team


@pytest.fixture
def abc_roster():
    """Three teams whose Master scores are known in advance."""
    return [
        build_team("A", 250000, 35, 5, (95, 88, 92, 85)),
        build_team("B", 280000, 42, 5, (100, 95, 90, 88)),
        build_team("C", 180000, 32, 3, (75, 72, 70, 68)),
    ]


@pytest.fixture
def with_database(tmp_path, monkeypatch):
    """
    Run an async scenario against a fresh SQLite database file.

    The engine is created and disposed inside the same event loop as the
    scenario, so each call gets its own loop and connection pool.
    """
    monkeypatch.setattr(Config, "USE_SAMPLE_ROSTER", False)
    database_url = f"sqlite:///{tmp_path / 'race_board_test.db'}"

    def run(scenario):
        async def runner():
            db = Database(database_url)
            await db.initialize()
            try:
                return await scenario(db)
            finally:
                await db.close()
        return asyncio.run(runner())

    return run
