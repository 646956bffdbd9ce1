"""Domain and derived progress models."""

from .sessions import (
    WorkoutSet,
    SessionExercise,
    WorkoutSession,
    to_camel,
)
from .progress import (
    AnalyticsSnapshot,
    ChartDataPoint,
    ChartMetric,
    DailyProgress,
    ExerciseProgress,
    LastSetInfo,
    LastWorkout,
    MonthlyProgress,
    PersonalRecord,
    ProgressMetrics,
    TimeRange,
    WeeklyProgress,
)
from .profile import ProfileStats, UserProfile

__all__ = [
    # Sessions
    "WorkoutSet",
    "SessionExercise",
    "WorkoutSession",
    "to_camel",
    # Derived progress
    "AnalyticsSnapshot",
    "ChartDataPoint",
    "ChartMetric",
    "DailyProgress",
    "ExerciseProgress",
    "LastSetInfo",
    "LastWorkout",
    "MonthlyProgress",
    "PersonalRecord",
    "ProgressMetrics",
    "TimeRange",
    "WeeklyProgress",
    # Profile
    "ProfileStats",
    "UserProfile",
]
