"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - interaction_max_retries >= 0: the recorder always makes at least one attempt

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Anonymous viewer policy is a setting, not a code path choice: deployments
      decide whether anonymous loads count (see core/viewer_identity.py)
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from persona.core.domain_types import AnonymousViewerPolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://persona:persona@db:5432/persona"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    # Local SQLite only — production schema is owned by alembic
    database_auto_create: bool = False

    # Interaction recording (optimistic retry budget)
    interaction_max_retries: int = Field(5, ge=0)
    interaction_base_delay_ms: int = Field(20, ge=0)
    interaction_max_delay_ms: int = Field(500, ge=0)

    # Viewer identity
    anonymous_viewer_policy: AnonymousViewerPolicy = AnonymousViewerPolicy.SYNTHETIC
    viewer_header: str = "X-Viewer-Id"

    # Sharing
    share_url_template: str = "https://invitepage.netlify.app/?roomId={key}"

    @field_validator("share_url_template")
    @classmethod
    def require_key_placeholder(cls, v: str) -> str:
        if "{key}" not in v:
            raise ValueError("share_url_template must contain a {key} placeholder")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
