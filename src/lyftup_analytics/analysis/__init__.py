"""
Analysis module for workout sessions.

Provides the aggregation of sessions into progress metrics, the calendar
helpers it depends on, and read-only query views over the results.
"""

from .aggregator import (
    average_session_duration,
    build_daily_series,
    build_exercise_progress,
    build_monthly_series,
    build_weekly_series,
    calculate_streak,
    completed_sessions,
    compute_metrics,
    count_workouts_in_window,
    group_exercise_progress,
    total_duration_in_window,
    total_volume,
    total_volume_in_window,
)
from .dates import (
    Clock,
    FixedClock,
    SystemClock,
    local_date,
    start_of_day,
    week_start_date,
)
from .queries import ProgressQueries

__all__ = [
    # Aggregation
    "average_session_duration",
    "build_daily_series",
    "build_exercise_progress",
    "build_monthly_series",
    "build_weekly_series",
    "calculate_streak",
    "completed_sessions",
    "compute_metrics",
    "count_workouts_in_window",
    "group_exercise_progress",
    "total_duration_in_window",
    "total_volume",
    "total_volume_in_window",
    # Calendar
    "Clock",
    "FixedClock",
    "SystemClock",
    "local_date",
    "start_of_day",
    "week_start_date",
    # Queries
    "ProgressQueries",
]
