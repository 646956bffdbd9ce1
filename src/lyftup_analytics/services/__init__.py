"""
Services layer.

Stores that hold sessions and profile counters, and the analytics service
that recomputes progress when sessions change.
"""

from .base import ListenerRegistry, ProfileStore, SessionStore
from .profile_store import DatabaseProfileStore, InMemoryProfileStore
from .progress_service import ProgressAnalyticsService
from .session_store import DatabaseSessionStore, InMemorySessionStore

__all__ = [
    # Protocols
    "ListenerRegistry",
    "ProfileStore",
    "SessionStore",
    # Stores
    "DatabaseProfileStore",
    "DatabaseSessionStore",
    "InMemoryProfileStore",
    "InMemorySessionStore",
    # Analytics
    "ProgressAnalyticsService",
]
