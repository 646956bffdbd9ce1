"""
LyftUp progress analytics.

Aggregates workout sessions into streaks, windowed volumes, personal records
and weekly chart series, and keeps those metrics current as sessions change.
"""

__version__ = "0.1.0"

from .analysis import ProgressQueries, compute_metrics
from .models import ProgressMetrics, WorkoutSession
from .services import ProgressAnalyticsService

__all__ = [
    "ProgressAnalyticsService",
    "ProgressMetrics",
    "ProgressQueries",
    "WorkoutSession",
    "compute_metrics",
]
