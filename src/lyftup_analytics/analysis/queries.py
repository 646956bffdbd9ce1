"""
Query layer over aggregated progress.

ProgressQueries holds one session snapshot together with the metrics and
weekly series computed from it, and exposes the narrower views display code
asks for: per-exercise history, personal records, chart series and
all-time totals. Nothing here mutates the snapshot or the metrics.
"""

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

from ..models.profile import ProfileStats
from ..models.progress import (
    ChartDataPoint,
    ChartMetric,
    ExerciseProgress,
    LastSetInfo,
    LastWorkout,
    PersonalRecord,
    ProgressMetrics,
    TimeRange,
    WeeklyProgress,
)
from ..models.sessions import WorkoutSession, ensure_aware
from .aggregator import (
    DEFAULT_SERIES_DAYS,
    DEFAULT_SERIES_MONTHS,
    DEFAULT_SERIES_WEEKS,
    build_daily_series,
    build_monthly_series,
    build_weekly_series,
    completed_sessions,
    compute_metrics,
    total_volume,
)
from .dates import resolve_tz, window_cutoff


def _chart_value(metric: ChartMetric, volume: float, average_duration: float) -> float:
    """Volume as-is; duration converted from seconds to minutes."""
    if metric is ChartMetric.VOLUME:
        return volume
    return average_duration / 60


class ProgressQueries:
    """Read-only views over one session snapshot."""

    def __init__(
        self,
        sessions: Iterable[WorkoutSession],
        now: datetime,
        tz: Optional[tzinfo] = None,
        metrics: Optional[ProgressMetrics] = None,
        weekly_progress: Optional[List[WeeklyProgress]] = None,
        weeks: int = DEFAULT_SERIES_WEEKS,
    ):
        """
        Args:
            sessions: Session snapshot the views are answered from
            now: Instant that windows are measured back from
            tz: Time zone for calendar buckets
            metrics: Precomputed metrics for ``sessions`` (computed if omitted)
            weekly_progress: Precomputed weekly series (computed if omitted)
            weeks: Weekly series length when it has to be computed
        """
        self._sessions = tuple(sessions)
        self._now = ensure_aware(now)
        self._tz = resolve_tz(tz)
        self._metrics = metrics if metrics is not None else compute_metrics(
            self._sessions, self._now, self._tz
        )
        self._weekly = list(weekly_progress) if weekly_progress is not None else build_weekly_series(
            self._sessions, self._now, self._tz, weeks
        )

    @property
    def metrics(self) -> ProgressMetrics:
        return self._metrics

    @property
    def weekly_progress(self) -> List[WeeklyProgress]:
        return list(self._weekly)

    def _rows_for(self, exercise_name: str) -> List[ExerciseProgress]:
        wanted = exercise_name.lower()
        return [
            row for row in self._metrics.exercise_progress
            if row.exercise_name.lower() == wanted
        ]

    def exercise_progress(
        self,
        exercise_name: str,
        time_range: TimeRange,
    ) -> List[ExerciseProgress]:
        """History of one exercise within ``time_range``, oldest first."""
        cutoff = window_cutoff(self._now, time_range.days)
        rows = [row for row in self._rows_for(exercise_name) if row.date >= cutoff]
        return sorted(rows, key=lambda row: row.date)

    def personal_record(self, exercise_name: str) -> Optional[PersonalRecord]:
        """
        All-time heaviest session for an exercise.

        Ties on ``max_weight`` keep the first row in session order.
        """
        best: Optional[ExerciseProgress] = None
        for row in self._rows_for(exercise_name):
            if best is None or row.max_weight > best.max_weight:
                best = row
        if best is None:
            return None
        return PersonalRecord(
            exercise_name=best.exercise_name,
            weight=best.max_weight,
            reps=best.max_reps,
            date=best.date,
        )

    def chart_series(
        self,
        time_range: TimeRange,
        metric: ChartMetric,
    ) -> List[ChartDataPoint]:
        """Weekly chart points whose week starts inside ``time_range``."""
        cutoff = window_cutoff(self._now, time_range.days)
        return [
            ChartDataPoint(
                date=week.week_start,
                value=_chart_value(metric, week.total_volume, week.average_duration),
                label=metric.label,
            )
            for week in self._weekly
            if week.week_start >= cutoff
        ]

    def daily_chart_series(
        self,
        metric: ChartMetric,
        days: int = DEFAULT_SERIES_DAYS,
    ) -> List[ChartDataPoint]:
        """One point per local day for the trailing ``days`` days."""
        return [
            ChartDataPoint(
                date=day.day_start,
                value=_chart_value(metric, day.total_volume, day.average_duration),
                label=metric.label,
            )
            for day in build_daily_series(self._sessions, self._now, self._tz, days)
        ]

    def monthly_chart_series(
        self,
        metric: ChartMetric,
        months: int = DEFAULT_SERIES_MONTHS,
    ) -> List[ChartDataPoint]:
        """One point per calendar month over the three-month range."""
        cutoff = window_cutoff(self._now, TimeRange.THREE_MONTHS.days)
        recent = [s for s in self._sessions if s.start_time >= cutoff]
        return [
            ChartDataPoint(
                date=month.month_start,
                value=_chart_value(metric, month.total_volume, month.average_duration),
                label=metric.label,
            )
            for month in build_monthly_series(recent, self._tz, months)
        ]

    def total_volume_all_time(self) -> float:
        return total_volume(self._sessions)

    def last_workout(self) -> Optional[LastWorkout]:
        """Completed session with the latest start time."""
        completed = completed_sessions(self._sessions)
        if not completed:
            return None
        latest = max(completed, key=lambda s: s.start_time)
        return LastWorkout(date=latest.start_time, title=latest.routine_name)

    def last_set_for_exercise(self, exercise_name: str) -> Optional[LastSetInfo]:
        """
        Weight and reps last logged for an exercise, to prefill a new session.

        Looks at every session, completed or not. Within the latest session the
        first set logged for the exercise wins.
        """
        latest: Optional[LastSetInfo] = None
        for session in self._sessions:
            if latest is not None and session.start_time <= latest.date:
                continue
            for exercise in session.exercises:
                if exercise.matches(exercise_name) and exercise.sets:
                    first = exercise.sets[0]
                    latest = LastSetInfo(weight=first.weight, reps=first.reps, date=session.start_time)
                    break
        return latest

    def exercise_names(self) -> List[str]:
        """Distinct exercise names from completed sessions, first spelling wins."""
        seen = {}
        for row in self._metrics.exercise_progress:
            seen.setdefault(row.exercise_name.lower(), row.exercise_name)
        return sorted(seen.values(), key=str.lower)

    def profile_stats(self) -> ProfileStats:
        """Counters to write back to the profile store."""
        last = self.last_workout()
        return ProfileStats(
            total_workouts=self._metrics.total_workouts,
            total_weight_lifted=self.total_volume_all_time(),
            last_workout_date=last.date if last else None,
        )
