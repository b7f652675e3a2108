"""Persona Profiles API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PersonaError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, store, recorder and service built once on startup via lifespan
      and shared through app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - build_profile_service is the single composition point: tests call it with
      their own session manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from persona.api.error_handlers import register_error_handlers
from persona.api.routes import health, profiles
from persona.config import Settings, get_settings
from persona.db.session import create_all_tables
from persona.infrastructure.database import DatabaseSessionManager, init_db
from persona.infrastructure.observability import SERVICE_VERSION, setup_logging
from persona.infrastructure.profile_store import SqlProfileStore
from persona.services.interaction_recorder import InteractionRecorder
from persona.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def build_profile_service(
    db: DatabaseSessionManager, settings: Settings,
) -> ProfileService:
    """Wire store → recorder → service for one session manager."""
    store = SqlProfileStore(db)
    recorder = InteractionRecorder(
        store,
        max_retries=settings.interaction_max_retries,
        base_delay_ms=settings.interaction_base_delay_ms,
        max_delay_ms=settings.interaction_max_delay_ms,
    )
    return ProfileService(
        store, recorder, share_url_template=settings.share_url_template,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_auto_create:
        await create_all_tables(db.engine)
    app.state.profile_service = build_profile_service(db, settings)
    logger.info("Persona Profiles API started")
    yield
    logger.info("Persona Profiles API shutting down")
    await db.dispose()


app = FastAPI(
    title="Persona Profiles API", version=SERVICE_VERSION, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(profiles.router)

register_error_handlers(app)
