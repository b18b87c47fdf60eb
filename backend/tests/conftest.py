"""
Database fixtures: an in-memory SQLite database per test, seeded with one
club, two islands, three saunas and two boats.
"""

from datetime import datetime
from typing import AsyncIterator

import pytest_asyncio
from saunabook.models import Base, Boat, Club, Island, Sauna
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SEEDED_AT = datetime(2025, 1, 1)

# island 1 holds saunas 1 and 2, island 2 holds sauna 3
ISLAND_ID = 1
OTHER_ISLAND_ID = 2
SAUNA_ID = 1
SECOND_SAUNA_ID = 2
OTHER_ISLAND_SAUNA_ID = 3
BOAT_ID = 1
OTHER_BOAT_ID = 2


def _seed_rows() -> list:
    return [
        Club(id=1, name="Pursiseura", timezone="Europe/Helsinki", created_at=SEEDED_AT, updated_at=SEEDED_AT),
        Island(id=ISLAND_ID, club_id=1, name="Iso-Pukki"),
        Island(id=OTHER_ISLAND_ID, club_id=1, name="Pikku-Pukki"),
        Sauna(id=SAUNA_ID, island_id=ISLAND_ID, name="Rantasauna", heating_time_hours=2, auto_club_sauna_enabled=True),
        Sauna(id=SECOND_SAUNA_ID, island_id=ISLAND_ID, name="Savusauna", heating_time_hours=4, auto_club_sauna_enabled=False),
        Sauna(id=OTHER_ISLAND_SAUNA_ID, island_id=OTHER_ISLAND_ID, name="Kalliosauna", heating_time_hours=1, auto_club_sauna_enabled=False),
        Boat(id=BOAT_ID, club_id=1, name="Aalto", membership_number="A-1"),
        Boat(id=OTHER_BOAT_ID, club_id=1, name="Kuura", membership_number="K-2"),
    ]


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as session:
        async with session.begin():
            session.add_all(_seed_rows())
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session
