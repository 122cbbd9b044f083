"""API service configuration.

All configuration is read from environment variables (and an optional `.env`
file) into a single `Settings` object. Every value defaults to a local
development placeholder so the service boots without any setup; nothing is
validated beyond type coercion.

Environment variables:
    DATABASE_URL: SQLAlchemy URL (falls back to POSTGRES_* pieces, see `common.db`).
    AUTH_URL: Public base URL of the service, used in issued tokens.
    AUTH_SECRET: HMAC secret used to sign bearer tokens.
    OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET: external identity provider credentials.
    CORS_ORIGINS: JSON list of allowed browser origins.
    LOG_LEVEL: Root log level.
    TOKEN_TTL_SECONDS: Bearer token lifetime.
    AUTO_CREATE_TABLES: Create missing tables on startup.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.db import database_url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(default_factory=database_url)

    auth_url: str = "http://localhost:8000"
    auth_secret: str = "dev-secret-change-me"
    oauth_client_id: str = ""
    oauth_client_secret: str = ""

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    log_level: str = "INFO"
    # 30 days
    token_ttl_seconds: int = 60 * 60 * 24 * 30
    auto_create_tables: bool = True


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, parsed once on first use."""
    return Settings()
