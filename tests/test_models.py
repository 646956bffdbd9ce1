"""Tests for session models, document parsing and exceptions."""

import pytest
from datetime import datetime, timedelta, timezone

from lyftup_analytics.exceptions import (
    ConfigurationError,
    ErrorCode,
    InvalidSessionDataError,
    LyftUpError,
    ProfileNotFoundError,
    SessionStoreError,
)
from lyftup_analytics.models.profile import ProfileStats, UserProfile
from lyftup_analytics.models.progress import ChartMetric, ProgressMetrics, TimeRange
from lyftup_analytics.models.sessions import SessionExercise, WorkoutSession, WorkoutSet

UTC = timezone.utc


def _document(**overrides):
    document = {
        "id": "s1",
        "routineName": "Push Day",
        "startTime": 1755162000.0,  # 2025-08-14 09:00 UTC
        "endTime": 1755165000.0,
        "isCompleted": True,
        "exercises": [
            {
                "id": "e1",
                "exerciseName": "Bench Press",
                "sets": [
                    {"id": "w1", "setNumber": 1, "weight": 135, "reps": 8, "isCompleted": True},
                    {"id": "w2", "setNumber": 2, "weight": 155.5, "reps": 5, "isCompleted": True},
                ],
            }
        ],
    }
    document.update(overrides)
    return document


class TestWorkoutSession:
    """Tests for WorkoutSession."""

    def test_volume_and_duration(self, make_session, make_exercise, days_ago):
        session = make_session(days_ago(0), minutes=45, exercises=[
            make_exercise("Squat", [(200, 5), (220, 3)]),
            make_exercise("Lunge", [(40, 10)]),
        ])
        assert session.volume == pytest.approx(1000 + 660 + 400)
        assert session.duration == pytest.approx(45 * 60)

    def test_no_end_time_has_no_duration(self, make_session, days_ago):
        assert make_session(days_ago(0), minutes=None).duration is None

    def test_naive_timestamps_are_utc(self):
        session = WorkoutSession(id="s", start_time=datetime(2025, 8, 14, 9, 0), is_completed=True)
        assert session.start_time.tzinfo is not None
        assert session.start_time == datetime(2025, 8, 14, 9, 0, tzinfo=UTC)

    def test_end_before_start_rejected(self):
        start = datetime(2025, 8, 14, 9, 0, tzinfo=UTC)
        with pytest.raises(InvalidSessionDataError) as exc_info:
            WorkoutSession(id="s", start_time=start, end_time=start - timedelta(minutes=1))
        assert exc_info.value.details["field"] == "end_time"

    def test_not_completed_by_default(self):
        session = WorkoutSession(id="s", start_time=datetime(2025, 8, 14, 9, 0, tzinfo=UTC))
        assert session.is_completed is False

    def test_exercise_helpers(self, make_exercise):
        exercise = make_exercise("Bench Press", [(135, 10), (155, 6)])
        assert exercise.max_weight == 155
        assert exercise.max_reps == 10
        assert exercise.matches("BENCH press")
        assert not exercise.matches("Bench")

    def test_set_volume(self):
        assert WorkoutSet(weight=100, reps=5).volume == 500


class TestSessionDocuments:
    """Tests for parsing stored session documents."""

    def test_from_document(self):
        session = WorkoutSession.from_document(_document())

        assert session.id == "s1"
        assert session.routine_name == "Push Day"
        assert session.start_time == datetime(2025, 8, 14, 9, 0, tzinfo=UTC)
        assert session.duration == pytest.approx(50 * 60)
        assert session.exercises[0].sets[1].weight == 155.5
        assert session.volume == pytest.approx(135 * 8 + 155.5 * 5)

    def test_missing_optional_fields(self):
        session = WorkoutSession.from_document(_document(endTime=None, isCompleted=None))
        assert session.end_time is None
        assert session.is_completed is False

    def test_completion_flag_absent(self):
        document = _document()
        del document["isCompleted"]
        assert WorkoutSession.from_document(document).is_completed is False

    @pytest.mark.parametrize("key", ["id", "routineName", "startTime", "exercises"])
    def test_missing_required_key(self, key):
        document = _document()
        del document[key]
        with pytest.raises(InvalidSessionDataError) as exc_info:
            WorkoutSession.from_document(document)
        assert exc_info.value.details["field"] == key

    def test_non_numeric_timestamp(self):
        with pytest.raises(InvalidSessionDataError):
            WorkoutSession.from_document(_document(startTime="yesterday"))

    def test_malformed_set_skipped(self, caplog):
        document = _document()
        document["exercises"][0]["sets"].append({"id": "w3", "weight": "heavy", "reps": 5})

        session = WorkoutSession.from_document(document)

        assert len(session.exercises[0].sets) == 2
        assert "Skipping malformed set" in caplog.text

    def test_malformed_exercise_skipped(self):
        document = _document()
        document["exercises"].append({"id": "e2", "sets": []})

        session = WorkoutSession.from_document(document)

        assert [e.exercise_name for e in session.exercises] == ["Bench Press"]

    def test_set_with_unparsable_set_number_skipped(self, caplog):
        """A set that fails model validation is dropped, the rest is kept."""
        document = _document()
        document["exercises"][0]["sets"][1]["setNumber"] = "two"

        session = WorkoutSession.from_document(document)

        assert [s.id for s in session.exercises[0].sets] == ["w1"]
        assert "Skipping malformed set" in caplog.text

    def test_non_object_set_skipped(self):
        document = _document()
        document["exercises"][0]["sets"].append("135x8")

        session = WorkoutSession.from_document(document)

        assert len(session.exercises[0].sets) == 2

    def test_non_string_exercise_name_skipped(self, caplog):
        document = _document()
        document["exercises"].append({"id": "e2", "exerciseName": 5, "sets": []})

        session = WorkoutSession.from_document(document)

        assert [e.id for e in session.exercises] == ["e1"]
        assert "Skipping malformed exercise" in caplog.text

    def test_exercise_sets_not_a_list_skipped(self):
        document = _document()
        document["exercises"].append({"id": "e2", "exerciseName": "Squat", "sets": None})

        session = WorkoutSession.from_document(document)

        assert [e.id for e in session.exercises] == ["e1"]

    def test_null_routine_name_rejected(self):
        with pytest.raises(InvalidSessionDataError) as exc_info:
            WorkoutSession.from_document(_document(routineName=None))
        assert exc_info.value.details["field"] in {"routineName", "routine_name"}

    def test_null_exercises_rejected(self):
        with pytest.raises(InvalidSessionDataError) as exc_info:
            WorkoutSession.from_document(_document(exercises=None))
        assert exc_info.value.details["field"] == "exercises"

    def test_out_of_range_timestamp_rejected(self):
        with pytest.raises(InvalidSessionDataError) as exc_info:
            WorkoutSession.from_document(_document(startTime=1e20))
        assert exc_info.value.details["field"] == "startTime"

    @pytest.mark.parametrize("document", [None, [], "session"])
    def test_non_object_document_rejected(self, document):
        with pytest.raises(InvalidSessionDataError):
            WorkoutSession.from_document(document)

    def test_to_document_round_trip(self):
        session = WorkoutSession.from_document(_document())
        assert WorkoutSession.from_document(session.to_document()) == session

    def test_set_number_defaults_to_position(self):
        set_ = WorkoutSet.from_document({"id": "w", "weight": 50, "reps": 10}, position=3)
        assert set_.set_number == 3

    def test_exercise_document(self):
        exercise = SessionExercise.from_document(_document()["exercises"][0])
        assert exercise.to_document()["exerciseName"] == "Bench Press"


class TestDerivedModels:
    """Tests for progress and profile models."""

    def test_zero_metrics(self):
        zero = ProgressMetrics.zero()
        assert zero.total_workouts == 0
        assert zero.streak_days == 0
        assert zero.exercise_progress == []

    def test_time_range_days(self):
        assert [r.days for r in TimeRange] == [7, 30, 90]

    def test_chart_labels(self):
        assert ChartMetric.VOLUME.label == "Total Weight (lbs)"
        assert ChartMetric.DURATION.label == "Duration (min)"

    def test_metrics_serialize_camel_case(self):
        data = ProgressMetrics(weekly_workouts=2).model_dump(by_alias=True)
        assert data["weeklyWorkouts"] == 2
        assert "streakDays" in data

    def test_profile_with_stats(self):
        profile = UserProfile(id="u1", username="lifter", total_workouts=99)
        updated = profile.with_stats(ProfileStats(total_workouts=3, total_weight_lifted=1500.0))

        assert updated.username == "lifter"
        assert updated.total_workouts == 3
        assert updated.total_weight_lifted == 1500.0
        assert profile.total_workouts == 99


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_base_error_to_dict(self):
        error = LyftUpError("Something broke", details={"k": "v"})
        assert error.to_dict() == {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "Something broke",
                "details": {"k": "v"},
            }
        }

    def test_to_dict_without_details(self):
        assert "details" not in LyftUpError("x").to_dict()["error"]

    def test_store_error_keeps_original(self):
        cause = OSError("network down")
        error = SessionStoreError("Reload failed", original_error=cause)
        assert error.code == ErrorCode.SESSION_STORE_ERROR
        assert error.original_error is cause
        assert error.details["original_error"] == "network down"

    def test_profile_not_found(self):
        error = ProfileNotFoundError("u1")
        assert error.code == ErrorCode.PROFILE_NOT_FOUND
        assert "u1" in error.message
        assert isinstance(error, LyftUpError)

    def test_repr(self):
        assert repr(InvalidSessionDataError("bad")) == (
            "InvalidSessionDataError(code=INVALID_SESSION_DATA, message='bad')"
        )

    def test_configuration_error(self):
        error = ConfigurationError("Unknown time zone 'X'", setting="timezone")
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert error.to_dict()["error"]["details"] == {"setting": "timezone"}
