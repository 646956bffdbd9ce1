"""Shared fixtures for analytics tests."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from lyftup_analytics.config import Settings
from lyftup_analytics.models.sessions import SessionExercise, WorkoutSession, WorkoutSet

# Thursday afternoon, UTC
NOW = datetime(2025, 8, 14, 18, 0, tzinfo=timezone.utc)
UTC = timezone.utc

_ids = itertools.count(1)


def _make_exercise(name, sets):
    """Build an exercise from (weight, reps) pairs."""
    return SessionExercise(
        id=f"ex-{next(_ids)}",
        exercise_name=name,
        sets=[
            WorkoutSet(id=f"set-{next(_ids)}", set_number=i, weight=w, reps=r, is_completed=True)
            for i, (w, r) in enumerate(sets, start=1)
        ],
    )


def _make_session(
    start,
    minutes=60,
    completed=True,
    exercises=None,
    routine="Push Day",
    session_id=None,
):
    """Build a session starting at ``start`` lasting ``minutes`` (None = no end time)."""
    return WorkoutSession(
        id=session_id or f"session-{next(_ids)}",
        routine_name=routine,
        start_time=start,
        end_time=start + timedelta(minutes=minutes) if minutes is not None else None,
        is_completed=completed,
        exercises=exercises if exercises is not None else [_make_exercise("Bench Press", [(100, 5)])],
    )


def _days_ago(days, hour=9):
    """Start time ``days`` calendar days before NOW at ``hour`` UTC."""
    day = (NOW - timedelta(days=days)).date()
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Settings pinned to UTC with no reload pauses."""
    return Settings(timezone="UTC", reload_delay_seconds=0)


@pytest.fixture
def make_session():
    return _make_session


@pytest.fixture
def make_exercise():
    return _make_exercise


@pytest.fixture
def days_ago():
    return _days_ago


@pytest.fixture
def sample_sessions():
    """A realistic mix: completed sessions over three weeks plus one in progress."""
    return [
        _make_session(_days_ago(0), minutes=50, exercises=[
            _make_exercise("Bench Press", [(135, 8), (155, 5)]),
            _make_exercise("Overhead Press", [(95, 8)]),
        ]),
        _make_session(_days_ago(1), minutes=70, routine="Leg Day", exercises=[
            _make_exercise("Squat", [(225, 5), (245, 3)]),
        ]),
        _make_session(_days_ago(2), minutes=40, routine="Pull Day", exercises=[
            _make_exercise("Deadlift", [(315, 3)]),
        ]),
        _make_session(_days_ago(9), minutes=60, routine="Leg Day", exercises=[
            _make_exercise("squat", [(215, 5)]),
        ]),
        _make_session(_days_ago(20), minutes=None, routine="Push Day", exercises=[
            _make_exercise("Bench Press", [(145, 5)]),
        ]),
        _make_session(_days_ago(0, hour=17), minutes=None, completed=False, routine="Arms", exercises=[
            _make_exercise("Curl", [(40, 12)]),
        ]),
    ]
