"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Document store (in-memory when unset)
    database_url: str | None = None

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Optimistic concurrency
    write_retry_attempts: int = 3

    # Money
    default_currency: str = "USD"

    # Rankings
    top_countries_limit: int = 10
    top_vendors_limit: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
