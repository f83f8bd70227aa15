"""Shared test fixtures."""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chunav.config import Settings
from chunav.database import Base
from chunav.models import PredictionSet, User
from chunav.repositories import PredictionSetRepository

from tests.fixtures.factories import create_prediction_set, create_user


@pytest.fixture
async def db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session with transaction rollback."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a user profile."""
    user = create_user(id="user-1", username="voter1", full_name="Asha Kumari", points=120)
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def prediction_set(db_session: AsyncSession) -> PredictionSet:
    """Create an empty prediction set for user-1, 2025, Bihar."""
    repo = PredictionSetRepository(db_session)
    return await repo.create_for_user(
        user_id="user-1",
        election_year=2025,
        state="Bihar",
        election_type="assembly",
        total_constituencies=243,
    )


@pytest.fixture
def empty_prediction_set() -> PredictionSet:
    """Transient prediction set, not attached to a session."""
    return create_prediction_set()
