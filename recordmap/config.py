"""Settings for the command line tools, read from ``RECORDMAP_*`` environment variables."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Migration CLI settings; an optional ``.env`` file is read too."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = "sqlite:///recordmap.sqlite3"
    migrations_path: str = "database/migrations"
    migrations_table: str = "migrations"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings (for testing)."""
    global _settings
    _settings = None


__all__ = ["Settings", "get_settings", "reset_settings"]
