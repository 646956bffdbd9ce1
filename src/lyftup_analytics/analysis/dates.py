"""
Calendar helpers and clocks.

Every day, week and month boundary in the analytics engine is computed in a
single time zone passed around as ``tz``. Timestamps are converted into that
zone before their calendar date is taken, so "same day" means the same local
calendar date rather than a rolling 24 hours.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Protocol, Tuple

from ..models.sessions import ensure_aware


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock, timezone-aware."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to one instant. Used by tests and the CLI ``--now`` flag."""

    def __init__(self, instant: datetime):
        self._instant = ensure_aware(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        self._instant = self._instant + delta


def resolve_tz(tz: Optional[tzinfo]) -> tzinfo:
    """Fall back to the host's local zone when no zone is given."""
    if tz is not None:
        return tz
    return datetime.now().astimezone().tzinfo


def local_date(value: datetime, tz: tzinfo) -> date:
    """Calendar date of ``value`` in ``tz``."""
    return ensure_aware(value).astimezone(tz).date()


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """Local midnight of ``day``."""
    return datetime.combine(day, time.min, tzinfo=tz)


def week_start_date(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def month_key(day: date) -> Tuple[int, int]:
    return (day.year, day.month)


def window_cutoff(now: datetime, days: int) -> datetime:
    """Start of the trailing ``days``-day window ending at ``now``."""
    return now - timedelta(days=days)


def in_window(value: datetime, now: datetime, days: int) -> bool:
    """True when ``value`` lies in ``[now - days, now]``."""
    return window_cutoff(now, days) <= value <= now
