"""Tests for settings."""

from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from lyftup_analytics.config import PROJECT_ROOT, Settings
from lyftup_analytics.exceptions import ConfigurationError


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.week_window_days == 7
        assert settings.month_window_days == 30
        assert settings.weekly_series_weeks == 12
        assert settings.reload_attempts == 3
        assert settings.db_path == PROJECT_ROOT / "workouts.db"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("LYFTUP_WEEK_WINDOW_DAYS", "14")
        monkeypatch.setenv("LYFTUP_DB_PATH", "/tmp/other.db")
        monkeypatch.setenv("LYFTUP_SYNC_PROFILE_ON_RECOMPUTE", "false")

        settings = Settings()

        assert settings.week_window_days == 14
        assert settings.db_path == Path("/tmp/other.db")
        assert settings.sync_profile_on_recompute is False

    def test_named_time_zone(self):
        assert Settings(timezone="Europe/Madrid").tzinfo() == ZoneInfo("Europe/Madrid")

    def test_empty_time_zone_is_local(self):
        tz = Settings(timezone="").tzinfo()
        now = datetime.now(timezone.utc)
        assert now.astimezone(tz).utcoffset() == now.astimezone().utcoffset()

    def test_unknown_time_zone(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(timezone="Mars/Olympus_Mons").tzinfo()
        assert exc_info.value.details["setting"] == "timezone"
        assert "Mars/Olympus_Mons" in exc_info.value.message
