"""SQLite database for workout sessions and profile counters."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import get_settings
from ..exceptions import InvalidSessionDataError
from ..models.profile import UserProfile
from ..models.sessions import WorkoutSession
from .schema import SCHEMA

logger = logging.getLogger(__name__)


def get_default_db_path() -> Path:
    """Get the default database path from settings."""
    return Path(get_settings().db_path)


class WorkoutDatabase:
    """SQLite database manager for workout sessions."""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the workout database.

        Args:
            db_path: Path to SQLite database file. If not provided,
                     uses LYFTUP_DB_PATH or the default location.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            self.db_path = get_default_db_path()

        self._init_db()

    def _init_db(self):
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # === Session Methods ===

    def upsert_session(self, session: WorkoutSession, user_id: str = "default") -> None:
        """Insert a session or replace the stored copy with the same id."""
        with self._get_connection() as conn:
            self._write_session(conn, session, user_id)

    def _write_session(self, conn: sqlite3.Connection, session: WorkoutSession, user_id: str) -> None:
        conn.execute(
            """
            INSERT OR REPLACE INTO workout_sessions
            (id, user_id, routine_name, start_time, is_completed, document, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
            """,
            (
                session.id,
                user_id,
                session.routine_name,
                session.start_time.timestamp(),
                1 if session.is_completed else 0,
                json.dumps(session.to_document()),
            ),
        )

    def replace_sessions(self, sessions: Iterable[WorkoutSession], user_id: str = "default") -> int:
        """Replace every stored session of a user. Returns the number written."""
        count = 0
        with self._get_connection() as conn:
            conn.execute("DELETE FROM workout_sessions WHERE user_id = ?", (user_id,))
            for session in sessions:
                self._write_session(conn, session, user_id)
                count += 1
        return count

    def delete_session(self, session_id: str, user_id: str = "default") -> bool:
        """Delete one of a user's sessions. Returns True if a row was removed."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM workout_sessions WHERE id = ? AND user_id = ?",
                (session_id, user_id),
            )
            return cursor.rowcount > 0

    def get_sessions(self, user_id: str = "default") -> List[WorkoutSession]:
        """Get all sessions of a user ordered by start time.

        Rows whose document no longer parses are skipped with a warning.
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT id, document FROM workout_sessions
                WHERE user_id = ?
                ORDER BY start_time
                """,
                (user_id,),
            ).fetchall()

        sessions = []
        for row in rows:
            try:
                sessions.append(WorkoutSession.from_document(json.loads(row["document"])))
            except (InvalidSessionDataError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable session {row['id']}: {e}")
        return sessions

    def count_sessions(self, user_id: str = "default", completed_only: bool = False) -> int:
        query = "SELECT COUNT(*) AS cnt FROM workout_sessions WHERE user_id = ?"
        if completed_only:
            query += " AND is_completed = 1"
        with self._get_connection() as conn:
            return conn.execute(query, (user_id,)).fetchone()["cnt"]

    # === Profile Methods ===

    def get_profile(self, user_id: str = "default") -> Optional[UserProfile]:
        """Get the profile counters for a user."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM user_profile WHERE id = ?", (user_id,)
            ).fetchone()

        if not row:
            return None

        last_workout = None
        if row["last_workout_date"] is not None:
            last_workout = datetime.fromtimestamp(row["last_workout_date"], tz=timezone.utc)

        return UserProfile(
            id=row["id"],
            username=row["username"] or "",
            total_workouts=row["total_workouts"] or 0,
            total_weight_lifted=row["total_weight_lifted"] or 0.0,
            last_workout_date=last_workout,
        )

    def save_profile(self, profile: UserProfile) -> None:
        """Insert or update the profile counters."""
        last_workout = (
            profile.last_workout_date.timestamp() if profile.last_workout_date else None
        )
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO user_profile
                (id, username, total_workouts, total_weight_lifted,
                 last_workout_date, updated_at)
                VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (
                    profile.id,
                    profile.username,
                    profile.total_workouts,
                    profile.total_weight_lifted,
                    last_workout,
                ),
            )
