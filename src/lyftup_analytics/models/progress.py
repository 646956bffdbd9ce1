"""Derived progress models produced by the aggregator.

None of these are persisted. They are rebuilt from the session list on every
aggregation pass.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .sessions import WorkoutSession, to_camel


class TimeRange(str, Enum):
    """Display time ranges for progress views."""
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "three_months"

    @property
    def days(self) -> int:
        return {
            TimeRange.WEEK: 7,
            TimeRange.MONTH: 30,
            TimeRange.THREE_MONTHS: 90,
        }[self]


class ChartMetric(str, Enum):
    """Metric plotted on progress charts."""
    VOLUME = "volume"
    DURATION = "duration"

    @property
    def label(self) -> str:
        if self is ChartMetric.VOLUME:
            return "Total Weight (lbs)"
        return "Duration (min)"


class ExerciseProgress(BaseModel):
    """One row per (exercise, completed session) pair."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    exercise_name: str = Field(..., description="Exercise name as logged")
    date: datetime = Field(..., description="Start time of the session")
    session_id: str = Field(default="", description="Session the row was derived from")
    max_weight: float = Field(default=0.0, description="Heaviest set weight")
    max_reps: int = Field(default=0, description="Most reps in a set")
    total_volume: float = Field(default=0.0, description="Sum of set volumes")
    sets: int = Field(default=0, description="Number of sets logged")


class WeeklyProgress(BaseModel):
    """Aggregates for one ISO week (Monday start)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    week_start: datetime = Field(..., description="Local midnight on the Monday of the week")
    workouts: int = Field(default=0, description="Completed sessions that week")
    total_volume: float = Field(default=0.0, description="Sum of set volumes that week")
    average_duration: float = Field(default=0.0, description="Mean session duration in seconds")


class DailyProgress(BaseModel):
    """Aggregates for one local calendar day."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    day_start: datetime = Field(..., description="Local midnight of the day")
    workouts: int = Field(default=0)
    total_volume: float = Field(default=0.0)
    average_duration: float = Field(default=0.0, description="Mean session duration in seconds")


class MonthlyProgress(BaseModel):
    """Aggregates for one calendar month."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    month_start: datetime = Field(..., description="Local midnight on the 1st of the month")
    workouts: int = Field(default=0)
    total_volume: float = Field(default=0.0)
    average_duration: float = Field(default=0.0, description="Mean session duration in seconds")


class ProgressMetrics(BaseModel):
    """Aggregate counters for one user's sessions."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    weekly_workouts: int = Field(default=0, description="Completed sessions in the last 7 days")
    monthly_workouts: int = Field(default=0, description="Completed sessions in the last 30 days")
    total_workouts: int = Field(default=0, description="All completed sessions")
    streak_days: int = Field(default=0, description="Consecutive days with a completed session")
    average_workout_duration: float = Field(default=0.0, description="Seconds")
    total_volume_this_week: float = Field(default=0.0)
    total_volume_this_month: float = Field(default=0.0)
    total_duration_this_week: float = Field(default=0.0, description="Seconds")
    total_duration_this_month: float = Field(default=0.0, description="Seconds")
    exercise_progress: List[ExerciseProgress] = Field(default_factory=list)

    @classmethod
    def zero(cls) -> "ProgressMetrics":
        """Metrics for a user with no completed sessions."""
        return cls()


class ChartDataPoint(BaseModel):
    """A single point on a progress chart."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    date: datetime
    value: float
    label: str


class PersonalRecord(BaseModel):
    """Heaviest recorded weight for an exercise, all time."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    exercise_name: str
    weight: float
    reps: int
    date: datetime


class LastWorkout(BaseModel):
    """Most recent completed session."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    date: datetime
    title: str


class LastSetInfo(BaseModel):
    """Weight and reps of the most recently logged set for an exercise."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    weight: float
    reps: int
    date: datetime


class AnalyticsSnapshot(BaseModel):
    """Everything one recompute publishes to subscribers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    revision: int = Field(..., description="Monotonic recompute counter")
    computed_at: datetime = Field(..., description="The 'now' the metrics were computed for")
    metrics: ProgressMetrics
    weekly_progress: List[WeeklyProgress] = Field(default_factory=list)
    exercise_progress: Dict[str, List[ExerciseProgress]] = Field(
        default_factory=dict,
        description="Progress rows keyed by lower-cased exercise name",
    )
    session_count: int = Field(default=0, description="Sessions in the snapshot, completed or not")
    sessions: List[WorkoutSession] = Field(
        default_factory=list,
        exclude=True,
        description="Session list the snapshot was computed from",
    )
