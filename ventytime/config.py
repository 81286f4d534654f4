"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache) — single instance per process
    - database_url always carries an async driver

Design Decisions:
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - JWT issuer/audience are validated on every decode, so both are required settings
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://ventytime:ventytime@db:5432/ventytime"
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

    # JWT
    jwt_secret: str = "change-me-ventytime-development-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "VentyTime"
    jwt_audience: str = "VentyTimeClient"
    jwt_expiration_minutes: int = 480

    # Account lockout
    lockout_max_attempts: int = 5
    lockout_minutes: int = 15

    # Uploads
    upload_dir: str = "uploads"
    uploads_url_prefix: str = "/uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    # Event query cache
    cache_ttl_seconds: int = 300
    cache_max_entries: int = 1024

    # API
    cors_origins: list[str] = ["http://localhost:5000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Seed data
    seed_admin_email: str = "admin@ventytime.com"
    seed_admin_password: str = "Admin123!"


@lru_cache
def get_settings() -> Settings:
    return Settings()
