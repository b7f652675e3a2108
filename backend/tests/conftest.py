"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh SQLite database (never the configured PostgreSQL)
    - `store` is backed by an in-memory database: one shared connection,
      fine for sequential tests
    - `concurrent_store` is backed by a file database under tmp_path: one
      connection per session, so concurrent transactions really interleave

Design Decisions:
    - DatabaseSessionManager built via __new__: reuses the production
      session()/error mapping while skipping pool arguments SQLite rejects
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from persona.db.session import create_all_tables, create_session_factory
from persona.infrastructure.database import DatabaseSessionManager
from persona.infrastructure.profile_store import SqlProfileStore
from persona.models.profile_viewer import ProfileViewer


def _manager_for(engine, session_factory) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = session_factory
    return manager


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    await create_all_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def db_manager(test_engine, test_session_factory):
    return _manager_for(test_engine, test_session_factory)


@pytest.fixture
async def store(db_manager):
    return SqlProfileStore(db_manager)


@pytest.fixture
async def concurrent_db_manager(tmp_path):
    factory = create_session_factory(
        f"sqlite+aiosqlite:///{tmp_path / 'profiles.db'}",
    )
    engine = factory.kw["bind"]
    await create_all_tables(engine)
    yield _manager_for(engine, factory)
    await engine.dispose()


@pytest.fixture
async def concurrent_store(concurrent_db_manager):
    return SqlProfileStore(concurrent_db_manager)


@pytest.fixture
def count_viewer_records():
    """Count ProfileViewer rows for a profile through a given session manager."""

    async def _count(manager: DatabaseSessionManager, key: str) -> int:
        async with manager.session() as db:
            result = await db.execute(
                select(func.count()).select_from(ProfileViewer)
                .where(ProfileViewer.profile_key == key),
            )
            return result.scalar_one()

    return _count
