"""
Application configuration using Pydantic Settings.

Centralizes infrastructure configuration with environment variable support.
Engine tunables (week start, score penalties) live in typed_config_loader.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/habit_metrics.db"

    # Metrics config file (defaults to config/defaults.yaml in the project)
    metrics_config_path: Optional[str] = None

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
