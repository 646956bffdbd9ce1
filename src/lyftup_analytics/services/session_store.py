"""Session store implementations."""

import asyncio
import logging
import sqlite3
from typing import Awaitable, Callable, Iterable, List, Optional

from ..db.database import WorkoutDatabase
from ..exceptions import SessionStoreError
from ..models.sessions import WorkoutSession
from .base import ListenerRegistry, SessionsListener, Unsubscribe

logger = logging.getLogger(__name__)

SessionLoader = Callable[[], Awaitable[List[WorkoutSession]]]


class InMemorySessionStore:
    """
    Session list held in memory.

    An optional async ``loader`` plays the part of a remote backend: each
    ``refresh()`` replaces the list with whatever it returns.
    """

    def __init__(
        self,
        sessions: Optional[Iterable[WorkoutSession]] = None,
        loader: Optional[SessionLoader] = None,
    ):
        self._sessions: List[WorkoutSession] = list(sessions or [])
        self._loader = loader
        self._listeners = ListenerRegistry()

    def current_sessions(self) -> List[WorkoutSession]:
        return list(self._sessions)

    def on_sessions_changed(self, callback: SessionsListener) -> Unsubscribe:
        return self._listeners.add(callback)

    def _notify(self) -> None:
        self._listeners.notify(self._sessions)

    def save_session(self, session: WorkoutSession) -> None:
        """Insert a session, or replace the one with the same id in place."""
        for index, existing in enumerate(self._sessions):
            if existing.id == session.id:
                self._sessions[index] = session
                break
        else:
            self._sessions.append(session)
        self._notify()

    def delete_session(self, session_id: str) -> bool:
        before = len(self._sessions)
        self._sessions = [s for s in self._sessions if s.id != session_id]
        removed = len(self._sessions) != before
        if removed:
            self._notify()
        return removed

    def replace_all(self, sessions: Iterable[WorkoutSession]) -> None:
        self._sessions = list(sessions)
        self._notify()

    async def refresh(self) -> None:
        if self._loader is None:
            self._notify()
            return
        try:
            sessions = await self._loader()
        except Exception as e:
            raise SessionStoreError("Failed to load sessions", original_error=e) from e
        logger.info(f"Loaded {len(sessions)} sessions")
        self.replace_all(sessions)


class DatabaseSessionStore:
    """Session store backed by WorkoutDatabase.

    Writes go straight to SQLite; the in-memory snapshot is what listeners and
    ``current_sessions()`` see.
    """

    def __init__(self, db: WorkoutDatabase, user_id: str = "default"):
        self._db = db
        self._user_id = user_id
        self._listeners = ListenerRegistry()
        self._sessions: List[WorkoutSession] = self._load()

    def _load(self) -> List[WorkoutSession]:
        try:
            return self._db.get_sessions(self._user_id)
        except sqlite3.Error as e:
            raise SessionStoreError(
                "Failed to read sessions from database",
                original_error=e,
                details={"db_path": str(self._db.db_path)},
            ) from e

    def current_sessions(self) -> List[WorkoutSession]:
        return list(self._sessions)

    def on_sessions_changed(self, callback: SessionsListener) -> Unsubscribe:
        return self._listeners.add(callback)

    def save_session(self, session: WorkoutSession) -> None:
        self._db.upsert_session(session, self._user_id)
        self._sessions = self._load()
        self._listeners.notify(self._sessions)

    def delete_session(self, session_id: str) -> bool:
        removed = self._db.delete_session(session_id, self._user_id)
        if removed:
            self._sessions = self._load()
            self._listeners.notify(self._sessions)
        return removed

    def replace_all(self, sessions: Iterable[WorkoutSession]) -> None:
        self._db.replace_sessions(sessions, self._user_id)
        self._sessions = self._load()
        self._listeners.notify(self._sessions)

    async def refresh(self) -> None:
        self._sessions = await asyncio.to_thread(self._load)
        logger.info(f"Reloaded {len(self._sessions)} sessions for user {self._user_id}")
        self._listeners.notify(self._sessions)
