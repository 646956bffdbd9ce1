"""
Progress aggregation.

Turns a user's workout sessions into progress metrics: windowed workout
counts and volumes, the workout streak, average duration, per-exercise
progress rows and dense weekly/daily series for charts.

Everything here is a pure function of the session list plus an explicit
``now``. Only completed sessions count; incomplete ones are ignored
entirely. Nothing is cached or patched incrementally; callers recompute
from the full list whenever it changes.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.progress import (
    DailyProgress,
    ExerciseProgress,
    MonthlyProgress,
    ProgressMetrics,
    WeeklyProgress,
)
from ..models.sessions import WorkoutSession, ensure_aware
from .dates import (
    in_window,
    local_date,
    month_key,
    resolve_tz,
    start_of_day,
    week_start_date,
)

logger = logging.getLogger(__name__)

DEFAULT_WEEK_DAYS = 7
DEFAULT_MONTH_DAYS = 30
DEFAULT_SERIES_WEEKS = 12
DEFAULT_SERIES_DAYS = 7
DEFAULT_SERIES_MONTHS = 3


@dataclass
class _Bucket:
    """Running totals for one chart bucket."""

    workouts: int = 0
    volume: float = 0.0
    duration: float = 0.0

    def add(self, session: WorkoutSession) -> None:
        self.workouts += 1
        self.volume += session.volume
        self.duration += session.duration or 0.0

    @property
    def average_duration(self) -> float:
        if self.workouts == 0:
            return 0.0
        return self.duration / self.workouts


def completed_sessions(sessions: Iterable[WorkoutSession]) -> List[WorkoutSession]:
    """Sessions explicitly marked completed, in input order."""
    return [s for s in sessions if s.is_completed]


def count_workouts_in_window(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    days: int,
) -> int:
    """Count completed sessions that started within ``[now - days, now]``."""
    now = ensure_aware(now)
    return sum(
        1 for s in completed_sessions(sessions)
        if in_window(s.start_time, now, days)
    )


def calculate_streak(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Count consecutive local calendar days with at least one completed session.

    The walk starts today. When today has no completed session yet the anchor
    moves to yesterday first, so an unfinished day does not break a streak
    that ran through yesterday. The walk stops at the first empty day.

    Args:
        sessions: Sessions to inspect (incomplete ones are ignored)
        now: Current instant
        tz: Time zone defining calendar days

    Returns:
        Streak length in days
    """
    tz = resolve_tz(tz)
    workout_days = {local_date(s.start_time, tz) for s in completed_sessions(sessions)}
    if not workout_days:
        return 0

    day = local_date(now, tz)
    if day not in workout_days:
        day -= timedelta(days=1)

    streak = 0
    while day in workout_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def average_session_duration(sessions: Iterable[WorkoutSession]) -> float:
    """Mean duration in seconds of completed sessions that have an end time."""
    durations = [
        s.duration for s in completed_sessions(sessions)
        if s.duration is not None
    ]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def total_volume_in_window(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    days: int,
) -> float:
    """Sum of set volumes for completed sessions started in ``[now - days, now]``."""
    now = ensure_aware(now)
    return sum(
        s.volume for s in completed_sessions(sessions)
        if in_window(s.start_time, now, days)
    )


def total_duration_in_window(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    days: int,
) -> float:
    """Summed duration in seconds of windowed completed sessions with an end time."""
    now = ensure_aware(now)
    return sum(
        s.duration for s in completed_sessions(sessions)
        if s.duration is not None and in_window(s.start_time, now, days)
    )


def total_volume(sessions: Iterable[WorkoutSession]) -> float:
    """Sum of set volumes over every completed session, unwindowed."""
    return sum(s.volume for s in completed_sessions(sessions))


def build_exercise_progress(sessions: Iterable[WorkoutSession]) -> List[ExerciseProgress]:
    """
    Emit one progress row per exercise of every completed session.

    Rows follow session order, then exercise order within the session.
    Sorting by date is left to the query layer.
    """
    rows: List[ExerciseProgress] = []
    for session in completed_sessions(sessions):
        for exercise in session.exercises:
            rows.append(ExerciseProgress(
                exercise_name=exercise.exercise_name,
                date=session.start_time,
                session_id=session.id,
                max_weight=exercise.max_weight,
                max_reps=exercise.max_reps,
                total_volume=exercise.volume,
                sets=len(exercise.sets),
            ))
    return rows


def group_exercise_progress(
    rows: Iterable[ExerciseProgress],
) -> Dict[str, List[ExerciseProgress]]:
    """Group progress rows by lower-cased exercise name, keeping row order."""
    grouped: Dict[str, List[ExerciseProgress]] = {}
    for row in rows:
        grouped.setdefault(row.exercise_name.lower(), []).append(row)
    return grouped


def build_weekly_series(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: Optional[tzinfo] = None,
    weeks: int = DEFAULT_SERIES_WEEKS,
) -> List[WeeklyProgress]:
    """
    Bucket completed sessions into ISO weeks for the trailing ``weeks`` weeks.

    The series is dense: every week from the current one back appears, with
    zeros when nothing was logged. Only sessions with an end time are
    bucketed, by the week containing their start time.

    Returns:
        WeeklyProgress rows sorted ascending by week start
    """
    tz = resolve_tz(tz)
    current_week = week_start_date(local_date(now, tz))
    buckets: Dict[date, _Bucket] = {
        current_week - timedelta(weeks=i): _Bucket() for i in range(weeks)
    }

    for session in completed_sessions(sessions):
        if session.end_time is None:
            continue
        key = week_start_date(local_date(session.start_time, tz))
        bucket = buckets.get(key)
        if bucket is not None:
            bucket.add(session)

    return [
        WeeklyProgress(
            week_start=start_of_day(week, tz),
            workouts=bucket.workouts,
            total_volume=bucket.volume,
            average_duration=bucket.average_duration,
        )
        for week, bucket in sorted(buckets.items())
    ]


def build_daily_series(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: Optional[tzinfo] = None,
    days: int = DEFAULT_SERIES_DAYS,
) -> List[DailyProgress]:
    """
    Dense per-day buckets for the trailing ``days`` local days including today.

    Every completed session counts towards its day; one without an end time
    adds zero duration but still counts as a workout.
    """
    tz = resolve_tz(tz)
    today = local_date(now, tz)
    buckets: Dict[date, _Bucket] = {
        today - timedelta(days=i): _Bucket() for i in range(days)
    }

    for session in completed_sessions(sessions):
        bucket = buckets.get(local_date(session.start_time, tz))
        if bucket is not None:
            bucket.add(session)

    return [
        DailyProgress(
            day_start=start_of_day(day, tz),
            workouts=bucket.workouts,
            total_volume=bucket.volume,
            average_duration=bucket.average_duration,
        )
        for day, bucket in sorted(buckets.items())
    ]


def build_monthly_series(
    sessions: Iterable[WorkoutSession],
    tz: Optional[tzinfo] = None,
    months: int = DEFAULT_SERIES_MONTHS,
) -> List[MonthlyProgress]:
    """Calendar-month buckets for the most recent ``months`` months that have data."""
    tz = resolve_tz(tz)
    buckets: Dict[Tuple[int, int], _Bucket] = {}
    for session in completed_sessions(sessions):
        key = month_key(local_date(session.start_time, tz))
        buckets.setdefault(key, _Bucket()).add(session)

    recent = sorted(buckets.items())[-months:] if months > 0 else []
    return [
        MonthlyProgress(
            month_start=start_of_day(date(year, month, 1), tz),
            workouts=bucket.workouts,
            total_volume=bucket.volume,
            average_duration=bucket.average_duration,
        )
        for (year, month), bucket in recent
    ]


def compute_metrics(
    sessions: Iterable[WorkoutSession],
    now: datetime,
    tz: Optional[tzinfo] = None,
    week_days: int = DEFAULT_WEEK_DAYS,
    month_days: int = DEFAULT_MONTH_DAYS,
) -> ProgressMetrics:
    """
    Compute all progress metrics in one pass over the sessions.

    Args:
        sessions: Every session of the user, in any order, completed or not
        now: Current instant (the only implicit input, made explicit)
        tz: Time zone for the streak's calendar days
        week_days: Length of the "this week" window
        month_days: Length of the "this month" window

    Returns:
        ProgressMetrics; ``ProgressMetrics.zero()`` when nothing is completed
    """
    now = ensure_aware(now)
    completed = completed_sessions(sessions)
    if not completed:
        return ProgressMetrics.zero()

    metrics = ProgressMetrics(
        weekly_workouts=count_workouts_in_window(completed, now, week_days),
        monthly_workouts=count_workouts_in_window(completed, now, month_days),
        total_workouts=len(completed),
        streak_days=calculate_streak(completed, now, tz),
        average_workout_duration=average_session_duration(completed),
        total_volume_this_week=total_volume_in_window(completed, now, week_days),
        total_volume_this_month=total_volume_in_window(completed, now, month_days),
        total_duration_this_week=total_duration_in_window(completed, now, week_days),
        total_duration_this_month=total_duration_in_window(completed, now, month_days),
        exercise_progress=build_exercise_progress(completed),
    )

    logger.debug(
        f"Computed metrics from {len(completed)} completed sessions: "
        f"week={metrics.weekly_workouts}, month={metrics.monthly_workouts}, "
        f"streak={metrics.streak_days}"
    )
    return metrics
