"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    service_name: str = "quietbackend"
    listen_host: str = "0.0.0.0"
    listen_port: int = 8000

    # Database
    database_url: str = (
        "postgresql+psycopg://quiet:quiet@db:5432/quiet"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// but the driver is psycopg 3."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_pool_timeout_seconds: float = 30.0
    # No migrations: tables are created on startup when missing
    database_create_tables: bool = True

    # Store
    store_backend: Literal["sql", "memory"] = "sql"
    store_workers: int = 8

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    # "log" swaps the Prometheus sink for one log line per handler call
    metrics_sink: Literal["prometheus", "log"] = "prometheus"

    # Requests
    max_body_size: int = 65_536


@lru_cache
def get_settings() -> Settings:
    return Settings()
