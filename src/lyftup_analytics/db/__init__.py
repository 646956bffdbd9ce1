"""Database module for workout sessions."""

from .database import WorkoutDatabase, get_default_db_path

__all__ = ["WorkoutDatabase", "get_default_db_path"]
