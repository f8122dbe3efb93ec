"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in code paths)
    - get_settings() is cached (lru_cache) — single instance per process
    - The placeholder token secret and admin password are refused unless
      ALLOW_INSECURE_DEFAULTS is set (local development only)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

PLACEHOLDER_JWT_SECRET = "change-me-in-production-use-a-32-byte-secret"
PLACEHOLDER_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://restaurant:restaurant@db:5432/restaurant"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity provider: tokens are verified locally with the shared secret
    auth_jwt_secret: str = PLACEHOLDER_JWT_SECRET
    auth_jwt_algorithm: str = "HS256"
    auth_session_cookie: str = "__session"
    auth_audience: str | None = None
    auth_leeway_seconds: int = 30

    # Admin console login
    admin_username: str = "admin"
    admin_password: str = PLACEHOLDER_ADMIN_PASSWORD
    admin_token_ttl_hours: int = 24

    # Local development only: accept the placeholder secret and password
    allow_insecure_defaults: bool = False

    @model_validator(mode="after")
    def refuse_placeholder_secrets(self) -> "Settings":
        if self.allow_insecure_defaults:
            return self
        if self.auth_jwt_secret == PLACEHOLDER_JWT_SECRET:
            raise ValueError(
                "AUTH_JWT_SECRET is the placeholder value; set a real secret "
                "or ALLOW_INSECURE_DEFAULTS=true for local development"
            )
        if self.admin_password == PLACEHOLDER_ADMIN_PASSWORD:
            raise ValueError(
                "ADMIN_PASSWORD is the placeholder value; set a real password "
                "or ALLOW_INSECURE_DEFAULTS=true for local development"
            )
        return self

    # Offers / menu
    popup_interaction_window_hours: int = 24
    search_result_limit: int = 20

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
