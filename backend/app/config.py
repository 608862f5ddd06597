"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External data store
    store_base_url: str = "http://localhost:5000"
    store_api_token: str | None = None
    store_timeout_seconds: float = 10.0

    # Builder suggestions
    quick_add_limit: int = 8
    other_destination_suggestion_limit: int = 50

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
