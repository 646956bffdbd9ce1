"""
Store protocols consumed by the analytics service.

The session store owns the canonical session list; the profile store owns
the denormalized per-user counters. The analytics code only reads snapshots
from them and, on request, writes recalculated counters back.
"""

from typing import Callable, List, Optional, Protocol, runtime_checkable

from ..models.profile import UserProfile
from ..models.sessions import WorkoutSession


SessionsListener = Callable[[List[WorkoutSession]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class SessionStore(Protocol):
    """
    Protocol for the collection of a user's workout sessions.

    Implementations notify listeners with a snapshot of the full list after
    every insert, update, delete or reload.
    """

    def current_sessions(self) -> List[WorkoutSession]:
        """Synchronous snapshot of all sessions."""
        ...

    def on_sessions_changed(self, callback: SessionsListener) -> Unsubscribe:
        """Register a change listener. Returns a function that removes it."""
        ...

    async def refresh(self) -> None:
        """Re-fetch sessions from the backing store."""
        ...


@runtime_checkable
class ProfileStore(Protocol):
    """Protocol for the per-user profile counters."""

    def current_profile(self) -> Optional[UserProfile]:
        """Get the current profile, if one exists."""
        ...

    async def save_profile(self, profile: UserProfile) -> None:
        """Persist a profile."""
        ...


class ListenerRegistry:
    """Ordered set of session listeners shared by the store implementations."""

    def __init__(self) -> None:
        self._listeners: List[SessionsListener] = []

    def add(self, callback: SessionsListener) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def notify(self, sessions: List[WorkoutSession]) -> None:
        for listener in list(self._listeners):
            listener(list(sessions))

    def __len__(self) -> int:
        return len(self._listeners)
