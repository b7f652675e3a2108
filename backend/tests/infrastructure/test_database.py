"""Session Manager — SQLAlchemy errors become DatabaseError; domain errors pass through."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from persona.core.errors import DatabaseError, ResourceNotFoundError
from persona.infrastructure.database import engine_options


def test_sqlite_engines_get_no_pool_sizing():
    assert engine_options("sqlite+aiosqlite:///:memory:", 20, 10) == {}


def test_postgres_engines_get_bounded_pool():
    options = engine_options("postgresql+asyncpg://u:p@h/db", 20, 10)
    assert options["pool_size"] == 20
    assert options["max_overflow"] == 10
    assert options["pool_pre_ping"] is True


@pytest.mark.parametrize("exc,operation", [
    (IntegrityError("INSERT", {}, Exception("UNIQUE")), "commit"),
    (OperationalError("SELECT", {}, Exception("timeout")), "execute"),
])
async def test_sqlalchemy_errors_mapped(db_manager, exc, operation):
    with pytest.raises(DatabaseError) as exc_info:
        async with db_manager.session():
            raise exc
    assert exc_info.value.operation == operation
    assert exc_info.value.http_status == 503
    assert "UNIQUE" not in exc_info.value.to_response()["error"]["message"]


async def test_domain_errors_pass_through(db_manager):
    with pytest.raises(ResourceNotFoundError):
        async with db_manager.session():
            raise ResourceNotFoundError("Profile", "p1")


async def test_health_check_succeeds_on_live_database(db_manager):
    assert await db_manager.health_check() is True
