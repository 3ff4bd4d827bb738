"""
Configuration management for the folder watcher.

Uses pydantic-settings to load tuning knobs from environment variables
and .env files. Command-line arguments always take precedence.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Folder Defaults
    default_watch_path: Path = Path.home() / "Documents" / "WatchedItems"
    default_move_to_folder: Path = Path.home() / "Documents" / "ProcessedFiles"

    # Processing Configuration
    settle_delay: float = 0.5  # seconds before a new file is read
    print_cleanup_delay: float = 5.0  # seconds before a temp print file is removed

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FOLDER_WATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
