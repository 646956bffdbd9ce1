"""Workout session data models.

Sessions are stored as documents with camelCase keys and timestamps in
seconds since 1970. The models below accept either that document shape
(``from_document``) or regular keyword arguments.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..exceptions import InvalidSessionDataError

logger = logging.getLogger(__name__)


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(value: Any, field: str) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSessionDataError(
            f"'{field}' must be seconds since 1970, got {type(value).__name__}",
            field=field,
        )
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidSessionDataError(
            f"'{field}' is not a valid timestamp: {value!r}",
            field=field,
        ) from e


def _require_mapping(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidSessionDataError(
            f"{kind} document must be an object, got {type(data).__name__}"
        )
    return data


def _require_list(data: Dict[str, Any], key: str, kind: str) -> List[Any]:
    value = data[key]
    if not isinstance(value, list):
        raise InvalidSessionDataError(
            f"{kind} '{key}' must be a list, got {type(value).__name__}",
            field=key,
        )
    return value


def _invalid_document(kind: str, error: ValidationError) -> InvalidSessionDataError:
    """Translate a pydantic validation failure into the document error."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return InvalidSessionDataError(
        f"Invalid {kind} document: {first.get('msg', str(error))}",
        field=field,
        details={"errors": error.error_count()},
    )


class WorkoutSet(BaseModel):
    """One set of an exercise."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default="", description="Set identifier")
    set_number: int = Field(default=1, description="1-based position within the exercise")
    weight: float = Field(default=0.0, description="Weight lifted (lbs)")
    reps: int = Field(default=0, description="Repetitions performed")
    is_completed: bool = Field(default=False, description="Whether the set was ticked off")
    notes: str = Field(default="", description="Free-text notes")

    @property
    def volume(self) -> float:
        """Weight x reps."""
        return self.weight * self.reps

    @classmethod
    def from_document(cls, data: Dict[str, Any], position: int = 1) -> "WorkoutSet":
        data = _require_mapping(data, "Set")
        for key in ("id", "weight", "reps"):
            if key not in data:
                raise InvalidSessionDataError(f"Set document missing '{key}'", field=key)
        weight = data["weight"]
        reps = data["reps"]
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise InvalidSessionDataError("Set weight must be numeric", field="weight")
        if isinstance(reps, bool) or not isinstance(reps, int):
            raise InvalidSessionDataError("Set reps must be an integer", field="reps")
        try:
            return cls(
                id=str(data["id"]),
                set_number=data.get("setNumber", position),
                weight=float(weight),
                reps=reps,
                is_completed=bool(data.get("isCompleted", False)),
                notes=data.get("notes") or "",
            )
        except ValidationError as e:
            raise _invalid_document("set", e) from e

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SessionExercise(BaseModel):
    """One exercise performed within a session."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default="", description="Exercise entry identifier")
    exercise_name: str = Field(..., description="Exercise name, matched case-insensitively")
    sets: List[WorkoutSet] = Field(default_factory=list, description="Ordered sets")

    @property
    def volume(self) -> float:
        return sum(s.volume for s in self.sets)

    @property
    def max_weight(self) -> float:
        return max((s.weight for s in self.sets), default=0.0)

    @property
    def max_reps(self) -> int:
        return max((s.reps for s in self.sets), default=0)

    def matches(self, name: str) -> bool:
        """Case-insensitive exercise identity."""
        return self.exercise_name.lower() == name.lower()

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "SessionExercise":
        data = _require_mapping(data, "Exercise")
        for key in ("id", "exerciseName", "sets"):
            if key not in data:
                raise InvalidSessionDataError(f"Exercise document missing '{key}'", field=key)

        sets: List[WorkoutSet] = []
        for position, set_data in enumerate(_require_list(data, "sets", "Exercise"), start=1):
            try:
                sets.append(WorkoutSet.from_document(set_data, position=position))
            except InvalidSessionDataError as e:
                logger.warning(f"Skipping malformed set in exercise {data['id']}: {e.message}")

        try:
            return cls(id=str(data["id"]), exercise_name=data["exerciseName"], sets=sets)
        except ValidationError as e:
            raise _invalid_document("exercise", e) from e

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "exerciseName": self.exercise_name,
            "sets": [s.to_document() for s in self.sets],
        }


class WorkoutSession(BaseModel):
    """One workout instance, completed or in progress.

    Completion is only what ``is_completed`` says; an end time on its own
    does not make a session completed.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(..., description="Unique session identifier")
    routine_name: str = Field(default="", description="Name of the routine performed")
    start_time: datetime = Field(..., description="When the workout began")
    end_time: Optional[datetime] = Field(None, description="When the workout ended")
    is_completed: bool = Field(default=False, description="Explicit completion flag")
    exercises: List[SessionExercise] = Field(default_factory=list, description="Ordered exercises")

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_aware(value)

    @model_validator(mode="after")
    def _check_end_after_start(self) -> "WorkoutSession":
        if self.end_time is not None and self.end_time < self.start_time:
            raise InvalidSessionDataError(
                f"Session {self.id} ends before it starts",
                field="end_time",
                details={
                    "start_time": self.start_time.isoformat(),
                    "end_time": self.end_time.isoformat(),
                },
            )
        return self

    @property
    def volume(self) -> float:
        """Sum of weight x reps over every set of every exercise."""
        return sum(e.volume for e in self.exercises)

    @property
    def duration(self) -> Optional[float]:
        """Duration in seconds, or None while the session has no end time."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "WorkoutSession":
        """Build a session from a stored document.

        Missing session-level keys raise ``InvalidSessionDataError``. A
        malformed exercise or set is dropped with a warning so one bad entry
        does not hide the rest of the workout.
        """
        data = _require_mapping(data, "Session")
        for key in ("id", "routineName", "startTime", "exercises"):
            if key not in data:
                raise InvalidSessionDataError(f"Session document missing '{key}'", field=key)

        start_time = _parse_timestamp(data["startTime"], "startTime")
        end_time = None
        if data.get("endTime") is not None:
            end_time = _parse_timestamp(data["endTime"], "endTime")

        exercises: List[SessionExercise] = []
        for exercise_data in _require_list(data, "exercises", "Session"):
            try:
                exercises.append(SessionExercise.from_document(exercise_data))
            except InvalidSessionDataError as e:
                logger.warning(f"Skipping malformed exercise in session {data['id']}: {e.message}")

        try:
            return cls(
                id=str(data["id"]),
                routine_name=data["routineName"],
                start_time=start_time,
                end_time=end_time,
                is_completed=bool(data.get("isCompleted", False)),
                exercises=exercises,
            )
        except ValidationError as e:
            raise _invalid_document("session", e) from e

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "routineName": self.routine_name,
            "startTime": self.start_time.timestamp(),
            "endTime": self.end_time.timestamp() if self.end_time else None,
            "isCompleted": self.is_completed,
            "exercises": [e.to_document() for e in self.exercises],
        }
