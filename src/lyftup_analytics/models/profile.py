"""User profile counters kept by the profile store."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .sessions import to_camel


class ProfileStats(BaseModel):
    """Counters recalculated from the session list."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    total_workouts: int = Field(default=0, description="Completed sessions, all time")
    total_weight_lifted: float = Field(default=0.0, description="Sum of set volumes, all time")
    last_workout_date: Optional[datetime] = Field(None, description="Start of the latest completed session")


class UserProfile(BaseModel):
    """Denormalized per-user counters.

    These are displayed outside the analytics engine and may drift from the
    session list until ``recalculate_profile_stats`` writes them back.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(..., description="User identifier")
    username: str = Field(default="", description="Display username")
    total_workouts: int = Field(default=0)
    total_weight_lifted: float = Field(default=0.0)
    last_workout_date: Optional[datetime] = Field(None)

    def with_stats(self, stats: ProfileStats) -> "UserProfile":
        """Return a copy carrying the given counters."""
        return self.model_copy(update=stats.model_dump())
