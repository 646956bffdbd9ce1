"""Progress analytics service.

This service handles:
- Recomputing progress metrics whenever the session list changes
- Publishing snapshots to subscribers
- Reloading sessions from the session store
- Writing recalculated counters back to the profile store
"""

import asyncio
import logging
from datetime import tzinfo
from typing import Callable, Dict, Iterable, List, Optional

from ..analysis.aggregator import (
    build_weekly_series,
    compute_metrics,
    group_exercise_progress,
)
from ..analysis.dates import Clock, SystemClock
from ..analysis.queries import ProgressQueries
from ..config import Settings, get_settings
from ..exceptions import (
    LyftUpError,
    ProfileNotFoundError,
    ProfileSyncError,
    SessionStoreError,
)
from ..models.profile import UserProfile
from ..models.progress import (
    AnalyticsSnapshot,
    ExerciseProgress,
    ProgressMetrics,
    WeeklyProgress,
)
from ..models.sessions import WorkoutSession
from .base import ProfileStore, SessionStore

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AnalyticsSnapshot], None]


class ProgressAnalyticsService:
    """
    Keeps progress metrics in step with a session store.

    Every change notification from the store triggers a full recompute over
    the whole session list, with no batching. Snapshots carry a revision
    number; a snapshot older than the last one published is dropped, so the
    newest computation is always the one subscribers end up with.
    """

    def __init__(
        self,
        session_store: SessionStore,
        profile_store: Optional[ProfileStore] = None,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
        tz: Optional[tzinfo] = None,
    ):
        """Initialize the service and compute the first snapshot.

        Args:
            session_store: Source of the canonical session list
            profile_store: Where recalculated counters are written (optional)
            clock: Source of "now"; the system clock when omitted
            settings: Settings to use instead of the cached global ones
            tz: Time zone override; defaults to the configured one
        """
        self._settings = settings or get_settings()
        self._session_store = session_store
        self._profile_store = profile_store
        self._clock = clock or SystemClock()
        self._tz = tz or self._settings.tzinfo()

        self._subscribers: List[SnapshotListener] = []
        self._revision = 0
        self._snapshot: Optional[AnalyticsSnapshot] = None

        self._unsubscribe_store = session_store.on_sessions_changed(self._on_sessions_changed)
        self.recompute(session_store.current_sessions())

    # =========================================================================
    # Published state
    # =========================================================================

    @property
    def snapshot(self) -> AnalyticsSnapshot:
        """Latest published snapshot."""
        return self._snapshot

    @property
    def metrics(self) -> ProgressMetrics:
        return self._snapshot.metrics

    @property
    def weekly_progress(self) -> List[WeeklyProgress]:
        return self._snapshot.weekly_progress

    @property
    def exercise_progress(self) -> Dict[str, List[ExerciseProgress]]:
        return self._snapshot.exercise_progress

    def subscribe(self, callback: SnapshotListener) -> Callable[[], None]:
        """
        Register a snapshot listener.

        Listeners are called in registration order after every publish.

        Returns:
            Function that removes the listener
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def queries(self) -> ProgressQueries:
        """Query views over the latest published snapshot."""
        return ProgressQueries(
            self._snapshot.sessions,
            self._snapshot.computed_at,
            tz=self._tz,
            metrics=self._snapshot.metrics,
            weekly_progress=self._snapshot.weekly_progress,
        )

    # =========================================================================
    # Recompute
    # =========================================================================

    def _on_sessions_changed(self, sessions: List[WorkoutSession]) -> None:
        logger.debug(f"Session store changed: {len(sessions)} sessions")
        self.recompute(sessions)

    def build_snapshot(self, sessions: Iterable[WorkoutSession]) -> AnalyticsSnapshot:
        """
        Compute a snapshot without publishing it.

        The revision is reserved at call time, so a snapshot built earlier
        loses to one built later regardless of which is published first.
        """
        self._revision += 1
        sessions = list(sessions)
        now = self._clock.now()

        metrics = compute_metrics(
            sessions,
            now,
            self._tz,
            week_days=self._settings.week_window_days,
            month_days=self._settings.month_window_days,
        )
        weekly = build_weekly_series(
            sessions, now, self._tz, weeks=self._settings.weekly_series_weeks
        )

        return AnalyticsSnapshot(
            revision=self._revision,
            computed_at=now,
            metrics=metrics,
            weekly_progress=weekly,
            exercise_progress=group_exercise_progress(metrics.exercise_progress),
            session_count=len(sessions),
            sessions=sessions,
        )

    def publish(self, snapshot: AnalyticsSnapshot) -> bool:
        """
        Make a snapshot current and notify subscribers.

        The snapshot carries the session list it was computed from, so
        ``queries()`` always pairs metrics with the matching sessions.

        Args:
            snapshot: Snapshot from ``build_snapshot``

        Returns:
            False when the snapshot is stale and was dropped
        """
        if self._snapshot is not None and snapshot.revision <= self._snapshot.revision:
            logger.debug(
                f"Dropping stale snapshot revision {snapshot.revision} "
                f"(current {self._snapshot.revision})"
            )
            return False

        self._snapshot = snapshot

        for subscriber in list(self._subscribers):
            try:
                subscriber(snapshot)
            except Exception as e:
                logger.warning(f"Progress subscriber failed on revision {snapshot.revision}: {e}")
        return True

    def recompute(self, sessions: Optional[Iterable[WorkoutSession]] = None) -> AnalyticsSnapshot:
        """Recompute from ``sessions`` (or the store's current list) and publish."""
        if sessions is None:
            sessions = self._session_store.current_sessions()
        sessions = list(sessions)

        snapshot = self.build_snapshot(sessions)
        self.publish(snapshot)

        logger.info(
            f"Recomputed progress revision {snapshot.revision}: "
            f"{snapshot.metrics.total_workouts} completed of {len(sessions)} sessions, "
            f"streak {snapshot.metrics.streak_days}"
        )
        return snapshot

    # =========================================================================
    # Store round-trips
    # =========================================================================

    async def reload(self) -> AnalyticsSnapshot:
        """
        Re-fetch sessions from the store and recompute.

        The store is refreshed ``reload_attempts`` times with a short pause in
        between. Every successful refresh notifies listeners, so each one is
        published as it lands.

        Raises:
            SessionStoreError: If a refresh fails. Snapshots published by
                earlier successful attempts stay current; if the first attempt
                fails, the snapshot from before the reload stays current.
        """
        attempts = max(1, self._settings.reload_attempts)
        for attempt in range(1, attempts + 1):
            logger.info(f"Reloading sessions, attempt {attempt}/{attempts}")
            try:
                await self._session_store.refresh()
            except SessionStoreError:
                raise
            except Exception as e:
                raise SessionStoreError("Session reload failed", original_error=e) from e
            if attempt < attempts and self._settings.reload_delay_seconds > 0:
                await asyncio.sleep(self._settings.reload_delay_seconds)

        snapshot = self.recompute()

        if self._profile_store is not None and self._settings.sync_profile_on_recompute:
            try:
                await self.recalculate_profile_stats()
            except LyftUpError as e:
                logger.warning(f"Profile stats sync skipped: {e.message}")

        return snapshot

    async def recalculate_profile_stats(self) -> UserProfile:
        """
        Recalculate the profile counters from the sessions and persist them.

        Returns:
            The profile as written

        Raises:
            ProfileSyncError: If no profile store is configured or the write fails
            ProfileNotFoundError: If the store has no profile
        """
        if self._profile_store is None:
            raise ProfileSyncError("No profile store configured")

        profile = self._profile_store.current_profile()
        if profile is None:
            raise ProfileNotFoundError(self._settings.user_id)

        stats = ProgressQueries(
            self._session_store.current_sessions(),
            self._clock.now(),
            tz=self._tz,
        ).profile_stats()
        updated = profile.with_stats(stats)

        try:
            await self._profile_store.save_profile(updated)
        except ProfileSyncError:
            raise
        except Exception as e:
            raise ProfileSyncError("Failed to save profile stats", original_error=e) from e

        logger.info(
            f"Synced profile stats: {stats.total_workouts} workouts, "
            f"{stats.total_weight_lifted:.0f} lbs lifted"
        )
        return updated

    def close(self) -> None:
        """Stop listening to the session store and drop all subscribers."""
        self._unsubscribe_store()
        self._subscribers.clear()
