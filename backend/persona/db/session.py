"""Raw session factory and schema bootstrap, for code running outside the API.

Invariants:
    - Sessions use the same options as DatabaseSessionManager
      (expire_on_commit=False), so store code behaves identically
    - create_all_tables only creates missing tables; it never alters or drops

Design Decisions:
    - No DatabaseError mapping here: scripts and test fixtures want the raw
      SQLAlchemy exceptions
    - Production schema comes from alembic; create_all_tables serves local
      SQLite (database_auto_create) and tests
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from persona.db.base import Base
from persona.infrastructure.database import engine_options


def create_session_factory(
    database_url: str, pool_size: int = 5, max_overflow: int = 10,
) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(
        database_url, **engine_options(database_url, pool_size, max_overflow),
    )
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all_tables(engine: AsyncEngine) -> None:
    import persona.models  # noqa: F401 — registers profiles and profile_viewers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
