"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - supabase_url, supabase_key and port have no default: startup fails without them
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - frontend_url unset means any origin may call the API
    - environment defaults to production: error details are opt-in
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database service
    supabase_url: str
    supabase_key: str
    posts_table: str = "posts"
    store_timeout_seconds: float = 10.0

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Server
    port: int
    environment: str = "production"
    max_body_bytes: int = 10 * 1024 * 1024

    # API
    frontend_url: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def cors_origins(self) -> list[str]:
        return [self.frontend_url] if self.frontend_url else ["*"]

    @property
    def expose_error_details(self) -> bool:
        """Echo suppressed error details to clients (development only)."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
