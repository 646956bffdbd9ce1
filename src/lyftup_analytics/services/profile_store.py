"""Profile store implementations."""

import asyncio
import sqlite3
from typing import Optional

from ..db.database import WorkoutDatabase
from ..exceptions import ProfileSyncError
from ..models.profile import UserProfile


class InMemoryProfileStore:
    """Profile held in memory."""

    def __init__(self, profile: Optional[UserProfile] = None):
        self._profile = profile

    def current_profile(self) -> Optional[UserProfile]:
        return self._profile

    async def save_profile(self, profile: UserProfile) -> None:
        self._profile = profile


class DatabaseProfileStore:
    """Profile store backed by WorkoutDatabase."""

    def __init__(self, db: WorkoutDatabase, user_id: str = "default"):
        self._db = db
        self._user_id = user_id

    def current_profile(self) -> Optional[UserProfile]:
        return self._db.get_profile(self._user_id)

    async def save_profile(self, profile: UserProfile) -> None:
        try:
            await asyncio.to_thread(self._db.save_profile, profile)
        except sqlite3.Error as e:
            raise ProfileSyncError("Failed to write profile", original_error=e) from e
