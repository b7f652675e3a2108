"""Alembic environment — migrations for the profiles / profile_viewers schema.

The database URL is taken from persona.config.Settings (DATABASE_URL or .env),
so migrations always target the same database as the API; alembic.ini only
supplies the fallback used when Settings is left at its default.

Design Decisions:
    - Async engine with NullPool: one connection per migration run
    - render_as_batch on SQLite: ALTER TABLE support for local databases
    - compare_type: column type changes (e.g. String lengths on keys and
      viewer ids) show up in autogenerate
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import persona.models  # noqa: F401 — registers profiles and profile_viewers
from persona.config import Settings
from persona.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    settings = Settings()
    if "database_url" in settings.model_fields_set:
        return settings.database_url
    return config.get_main_option("sqlalchemy.url") or settings.database_url


def _configure(url: str, **kwargs) -> None:
    context.configure(
        url=url,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    url = _database_url()
    _configure(
        url, literal_binds=True, dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(
        connection.engine.url.render_as_string(hide_password=False),
        connection=connection,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
