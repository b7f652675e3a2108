"""API test fixtures — httpx client against the FastAPI app with an in-memory database.

Invariants:
    - The lifespan never runs: the service is wired onto app.state directly
    - db_manager and dependency overrides are restored after each test

Design Decisions:
    - make_client lets a test pick Settings (e.g. the reject policy) without
      touching the process-wide get_settings cache
"""

import pytest
from httpx import ASGITransport, AsyncClient

import persona.infrastructure.database as db_module
from persona.config import Settings, get_settings
from persona.main import app, build_profile_service


def _test_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "interaction_base_delay_ms": 0,
        "interaction_max_delay_ms": 0,
        "share_url_template": "https://invitepage.netlify.app/?roomId={key}",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
async def make_client(db_manager):
    original_manager = db_module.db_manager
    clients = []

    async def _make(**setting_overrides) -> AsyncClient:
        settings = _test_settings(**setting_overrides)
        app.state.profile_service = build_profile_service(db_manager, settings)
        app.dependency_overrides[get_settings] = lambda: settings
        db_module.db_manager = db_manager
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    if hasattr(app.state, "profile_service"):
        del app.state.profile_service


@pytest.fixture
async def client(make_client):
    return await make_client()


@pytest.fixture
def owner_headers():
    return {"X-Viewer-Id": "owner-1"}
