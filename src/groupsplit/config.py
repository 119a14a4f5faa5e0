"""Configuration management for groupsplit."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROUPSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Default snapshot file used when a command is given no path
    snapshot_path: Path | None = None

    # Settlement settings
    sort_by_magnitude: bool = False  # Largest debtors/creditors matched first
    include_recorded_settlements: bool = True  # Fold recorded payments into balances


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your GROUPSPLIT_* environment "
            f"variables and .env file.\n"
            f"Error: {e}"
        ) from e
