"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures consistent configuration across the journal.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Dict, List, Optional
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Journal settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Storage
    WELLNESS_DATA_DIR: str = Field(default="~/.wellness-journal")
    # Overrides the SQLite file under WELLNESS_DATA_DIR when set
    DATABASE_URL: Optional[str] = Field(default=None)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")  # json or text

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Analytics windows
    STATS_WINDOW_DAYS: int = Field(default=7, ge=1)
    TREND_WINDOW_DAYS: int = Field(default=7, ge=2)
    TREND_RECENT_DAYS: int = Field(default=3, ge=1)
    TREND_THRESHOLD_PCT: float = Field(default=5.0, ge=0)
    STREAK_MAX_DAYS: int = Field(default=60, ge=1)
    HABIT_STATS_WINDOW_DAYS: int = Field(default=7, ge=1)

    # Working window used for free-block detection (local hours)
    WORKDAY_START_HOUR: int = Field(default=9, ge=0, le=23)
    WORKDAY_END_HOUR: int = Field(default=18, ge=1, le=24)

    # Reminder windows (local hours, end exclusive)
    MORNING_REMINDER_START_HOUR: int = Field(default=6, ge=0, le=23)
    MORNING_REMINDER_END_HOUR: int = Field(default=10, ge=1, le=24)
    EVENING_REMINDER_START_HOUR: int = Field(default=20, ge=0, le=23)
    EVENING_REMINDER_END_HOUR: int = Field(default=23, ge=1, le=24)

    # Integration credentials. Providers live outside the journal core;
    # these are only inspected to report what is connected.
    WHOOP_CLIENT_ID: Optional[str] = Field(default=None)
    WHOOP_CLIENT_SECRET: Optional[str] = Field(default=None)
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None)
    GOOGLE_CLIENT_SECRET: Optional[str] = Field(default=None)
    ANTHROPIC_API_KEY: Optional[str] = Field(default=None)

    @property
    def data_dir(self) -> Path:
        return Path(self.WELLNESS_DATA_DIR).expanduser()


def resolve_database_url(config: Settings) -> str:
    """
    Return the database URL for the journal.

    Falls back to ``wellness.db`` inside the data directory, creating the
    directory on first use.
    """
    if config.DATABASE_URL:
        return config.DATABASE_URL

    data_dir = config.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{data_dir / 'wellness.db'}"


def missing_integration_settings(config: Settings) -> List[str]:
    """Names of required provider credentials that are not set."""
    required = {
        "WHOOP_CLIENT_ID": config.WHOOP_CLIENT_ID,
        "WHOOP_CLIENT_SECRET": config.WHOOP_CLIENT_SECRET,
        "GOOGLE_CLIENT_ID": config.GOOGLE_CLIENT_ID,
        "GOOGLE_CLIENT_SECRET": config.GOOGLE_CLIENT_SECRET,
    }
    return [name for name, value in required.items() if not value]


def integration_status(config: Settings) -> Dict[str, bool]:
    """Which providers have credentials configured (Claude is optional)."""
    return {
        "whoop": bool(config.WHOOP_CLIENT_ID and config.WHOOP_CLIENT_SECRET),
        "google": bool(config.GOOGLE_CLIENT_ID and config.GOOGLE_CLIENT_SECRET),
        "claude": bool(config.ANTHROPIC_API_KEY),
    }


# Global settings instance
settings = Settings()
