"""Configuration settings for the workout analytics engine."""

from datetime import datetime, tzinfo
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


# __file__ = src/lyftup_analytics/config.py
# .parent.parent.parent = repository root
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Calendar policy. Empty string means the host's local time zone.
    timezone: str = ""

    # Aggregation windows
    week_window_days: int = 7
    month_window_days: int = 30
    weekly_series_weeks: int = 12
    daily_series_days: int = 7
    monthly_series_months: int = 3

    # Session store reload
    reload_attempts: int = 3
    reload_delay_seconds: float = 0.5

    # Write recalculated counters back to the profile store after a reload
    sync_profile_on_recompute: bool = True

    # Storage
    db_path: Path | None = None
    user_id: str = "default"

    log_level: str = "INFO"

    def model_post_init(self, __context) -> None:
        """Set default database path after initialization."""
        if self.db_path is None:
            self.db_path = PROJECT_ROOT / "workouts.db"

    def tzinfo(self) -> tzinfo:
        """Resolve the single time zone used for all calendar-day logic."""
        if self.timezone:
            try:
                return ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ConfigurationError(
                    f"Unknown time zone '{self.timezone}'",
                    setting="timezone",
                ) from e
        return datetime.now().astimezone().tzinfo

    class Config:
        env_prefix = "LYFTUP_"
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
