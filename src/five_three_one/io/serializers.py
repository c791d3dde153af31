"""
JSON serialization for training data models.

Handles conversion between dataclasses and the camelCase JSON documents
used by the store and by backup files, plus field-level validation of
imported backups.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.config import (
    BACKUP_VERSION,
    DEFAULT_BBB_PERCENTAGE,
    DEFAULT_TM_PERCENTAGE,
    LIFTS,
    MAX_WARMUP_SETS,
    THEMES,
    UNITS,
    resolve_lift,
)
from ..core.models import (
    AppData,
    AppSettings,
    AssistanceConfig,
    PersonalRecord,
    TrainingMaxRecord,
    WarmupConfig,
    WarmupSet,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO date or datetime string.

    Accepts "YYYY-MM-DD" and full timestamps, including a trailing "Z".

    Raises:
        ValidationError: If the string is not ISO formatted
    """
    if not isinstance(value, str) or not re.match(r"^\d{4}-\d{2}-\d{2}", value):
        raise ValidationError(f"Invalid date: {value!r}. Expected ISO format YYYY-MM-DD")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def validate_date(date_str: str) -> str:
    """Validate an ISO date/datetime string and return it unchanged."""
    parse_iso_datetime(date_str)
    return date_str


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _require_number(value: Any, name: str) -> float:
    if not _is_number(value):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    return value


def _require_object(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be an object")
    return value


def _lift_numbers(data: Any, name: str) -> dict[str, float]:
    """Validate a {lift: number} mapping; unknown keys are kept as-is."""
    mapping = _require_object(data, name)
    return {k: float(_require_number(v, f"{name}.{k}")) for k, v in mapping.items()}


# =============================================================================
# Calculator configuration
# =============================================================================


def warmup_to_dict(warmup: WarmupConfig) -> dict[str, Any]:
    return {
        "enabled": warmup.enabled,
        "sets": [{"percentage": s.percentage, "reps": s.reps} for s in warmup.sets],
    }


def dict_to_warmup(data: dict[str, Any]) -> WarmupConfig:
    """
    Convert dict to WarmupConfig.

    Raises:
        ValidationError: If a set is malformed or there are too many sets
    """
    _require_object(data, "warmup")
    try:
        steps = []
        for i, raw in enumerate(data.get("sets", [])):
            _require_object(raw, f"warmup.sets[{i}]")
            steps.append(
                WarmupSet(
                    percentage=float(
                        _require_number(raw.get("percentage"), f"warmup.sets[{i}].percentage")
                    ),
                    reps=int(_require_number(raw.get("reps"), f"warmup.sets[{i}].reps")),
                )
            )
        return WarmupConfig(enabled=bool(data.get("enabled", True)), sets=tuple(steps))
    except ValueError as e:
        raise ValidationError(str(e)) from e


def assistance_to_dict(assistance: AssistanceConfig) -> dict[str, Any]:
    return {"enabled": assistance.enabled, "percentage": assistance.percentage}


def dict_to_assistance(data: dict[str, Any]) -> AssistanceConfig:
    _require_object(data, "assistance")
    return AssistanceConfig(
        enabled=bool(data.get("enabled", True)),
        percentage=float(
            _require_number(data.get("percentage", DEFAULT_BBB_PERCENTAGE), "assistance.percentage")
        ),
    )


# =============================================================================
# Workout history
# =============================================================================


def workout_set_to_dict(workout_set: WorkoutSet) -> dict[str, Any]:
    data: dict[str, Any] = {
        "weight": workout_set.weight,
        "reps": workout_set.reps,
        "completed": workout_set.completed,
    }
    if workout_set.notes is not None:
        data["notes"] = workout_set.notes
    return data


def dict_to_workout_set(data: dict[str, Any]) -> WorkoutSet:
    _require_object(data, "set")
    try:
        return WorkoutSet(
            weight=float(_require_number(data.get("weight"), "set.weight")),
            reps=int(_require_number(data.get("reps"), "set.reps")),
            completed=bool(data.get("completed", False)),
            notes=data.get("notes"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def workout_exercise_to_dict(exercise: WorkoutExercise) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": exercise.name,
        "sets": [workout_set_to_dict(s) for s in exercise.sets],
    }
    if exercise.notes is not None:
        data["notes"] = exercise.notes
    return data


def dict_to_workout_exercise(data: dict[str, Any]) -> WorkoutExercise:
    _require_object(data, "exercise")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ValidationError("exercise.name must be a non-empty string")
    return WorkoutExercise(
        name=name,
        sets=[dict_to_workout_set(s) for s in data.get("sets", [])],
        notes=data.get("notes"),
    )


def workout_session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    """
    Convert WorkoutSession to JSON-compatible dict.

    Args:
        session: WorkoutSession to convert

    Returns:
        Dict with the backup document's camelCase keys
    """
    data: dict[str, Any] = {
        "id": session.id,
        "date": session.date,
        "workoutType": session.workout_type,
        "week": session.week,
        "cycle": session.cycle,
        "exercises": [workout_exercise_to_dict(e) for e in session.exercises],
        "completed": session.completed,
    }
    if session.notes is not None:
        data["notes"] = session.notes
    return data


def dict_to_workout_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Raises:
        ValidationError: If data is invalid
    """
    _require_object(data, "workout")
    try:
        return WorkoutSession(
            id=str(data["id"]),
            date=validate_date(data["date"]),
            workout_type=data["workoutType"],
            week=int(_require_number(data["week"], "workout.week")),
            cycle=int(_require_number(data["cycle"], "workout.cycle")),
            exercises=[dict_to_workout_exercise(e) for e in data.get("exercises", [])],
            notes=data.get("notes"),
            completed=bool(data.get("completed", True)),
        )
    except KeyError as e:
        raise ValidationError(f"workout is missing field {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


def personal_record_to_dict(record: PersonalRecord) -> dict[str, Any]:
    return {
        "exercise": record.exercise,
        "weight": record.weight,
        "reps": record.reps,
        "date": record.date,
        "workoutId": record.workout_id,
    }


def dict_to_personal_record(data: dict[str, Any]) -> PersonalRecord:
    _require_object(data, "personalRecord")
    try:
        return PersonalRecord(
            exercise=str(data["exercise"]),
            weight=float(_require_number(data["weight"], "personalRecord.weight")),
            reps=int(_require_number(data["reps"], "personalRecord.reps")),
            date=validate_date(data["date"]),
            workout_id=str(data.get("workoutId", "")),
        )
    except KeyError as e:
        raise ValidationError(f"personal record is missing field {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


def training_max_record_to_dict(record: TrainingMaxRecord) -> dict[str, Any]:
    data: dict[str, Any] = dict(record.as_dict())
    data["lastUpdated"] = record.last_updated
    return data


def dict_to_training_max_record(data: dict[str, Any]) -> TrainingMaxRecord:
    _require_object(data, "trainingMax")
    maxes = {lift: float(_require_number(data.get(lift, 0), f"trainingMax.{lift}")) for lift in LIFTS}
    last_updated = data.get("lastUpdated")
    if last_updated is None:
        raise ValidationError("trainingMax is missing field 'lastUpdated'")
    return TrainingMaxRecord.from_lifts(maxes, validate_date(last_updated))


# =============================================================================
# Settings and full document
# =============================================================================


def app_settings_to_dict(settings: AppSettings) -> dict[str, Any]:
    return {
        "unit": settings.unit,
        "theme": settings.theme,
        "workoutSchedule": dict(settings.workout_schedule),
        "exerciseProgression": dict(settings.exercise_progression),
        "oneRepMaxes": dict(settings.one_rep_maxes),
        "trainingMaxPercentage": settings.training_max_percentage,
        "failureDecreases": dict(settings.failure_decreases),
        "warmup": warmup_to_dict(settings.warmup),
        "assistance": assistance_to_dict(settings.assistance),
    }


def dict_to_app_settings(data: dict[str, Any]) -> AppSettings:
    """
    Convert dict to AppSettings.

    The calculator keys are optional so 1.0.0 backups without them import
    with defaults.
    """
    _require_object(data, "settings")
    failures = _require_object(data.get("failureDecreases", {}), "settings.failureDecreases")
    for lift, count in failures.items():
        if not _is_number(count) or count < 0 or int(count) != count:
            raise ValidationError(
                f"settings.failureDecreases.{lift} must be a non-negative integer"
            )
    try:
        return AppSettings(
            unit=data.get("unit", "kg"),
            theme=data.get("theme", "system"),
            workout_schedule={
                k: str(v)
                for k, v in _require_object(
                    data.get("workoutSchedule", {}), "settings.workoutSchedule"
                ).items()
            },
            exercise_progression=_lift_numbers(
                data.get("exerciseProgression", {}), "settings.exerciseProgression"
            ),
            one_rep_maxes=_lift_numbers(data.get("oneRepMaxes", {}), "settings.oneRepMaxes"),
            training_max_percentage=float(
                _require_number(
                    data.get("trainingMaxPercentage", DEFAULT_TM_PERCENTAGE),
                    "settings.trainingMaxPercentage",
                )
            ),
            failure_decreases={k: int(v) for k, v in failures.items()},
            warmup=dict_to_warmup(data["warmup"]) if "warmup" in data else WarmupConfig(),
            assistance=(
                dict_to_assistance(data["assistance"]) if "assistance" in data else AssistanceConfig()
            ),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def app_data_to_dict(data: AppData) -> dict[str, Any]:
    """
    Convert AppData to the backup document.

    Args:
        data: Complete application state

    Returns:
        JSON-compatible dict, ready for json.dump(indent=2)
    """
    return {
        "version": data.version,
        "exportDate": data.export_date,
        "settings": app_settings_to_dict(data.settings),
        "trainingMaxes": [training_max_record_to_dict(r) for r in data.training_maxes],
        "personalRecords": [personal_record_to_dict(r) for r in data.personal_records],
        "workoutHistory": [workout_session_to_dict(s) for s in data.workout_history],
        "currentCycle": data.current_cycle,
        "currentWeek": data.current_week,
    }


def validate_import_data(data: Any) -> None:
    """
    Check the structure of a backup document before import.

    Args:
        data: Parsed JSON

    Raises:
        ValidationError: Naming the first field that is missing or invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Backup must be a JSON object")
    if not isinstance(data.get("version"), str) or not data["version"]:
        raise ValidationError("version must be a non-empty string")
    if not isinstance(data.get("settings"), dict):
        raise ValidationError("settings must be an object")
    if not isinstance(data.get("exportDate"), str) or not data["exportDate"]:
        raise ValidationError("exportDate must be a non-empty string")

    settings = data["settings"]
    if settings.get("unit") not in UNITS:
        raise ValidationError(f"settings.unit must be one of {UNITS}")
    if settings.get("theme") not in THEMES:
        raise ValidationError(f"settings.theme must be one of {THEMES}")
    if not isinstance(settings.get("workoutSchedule"), dict):
        raise ValidationError("settings.workoutSchedule must be an object")
    if not isinstance(settings.get("exerciseProgression"), dict):
        raise ValidationError("settings.exerciseProgression must be an object")

    for key in ("trainingMaxes", "personalRecords", "workoutHistory"):
        if not isinstance(data.get(key), list):
            raise ValidationError(f"{key} must be an array")

    cycle = data.get("currentCycle")
    if not _is_number(cycle) or cycle < 1 or int(cycle) != cycle:
        raise ValidationError("currentCycle must be a whole number >= 1")
    week = data.get("currentWeek")
    if not _is_number(week) or int(week) != week or not 1 <= week <= 4:
        raise ValidationError("currentWeek must be a whole number between 1 and 4")


def dict_to_app_data(data: Any) -> AppData:
    """
    Validate and convert a backup document.

    Raises:
        ValidationError: If the document or any nested record is invalid
    """
    validate_import_data(data)
    try:
        return AppData(
            version=data["version"],
            export_date=data["exportDate"],
            settings=dict_to_app_settings(data["settings"]),
            training_maxes=[dict_to_training_max_record(r) for r in data["trainingMaxes"]],
            personal_records=[dict_to_personal_record(r) for r in data["personalRecords"]],
            workout_history=[dict_to_workout_session(s) for s in data["workoutHistory"]],
            current_cycle=int(data["currentCycle"]),
            current_week=int(data["currentWeek"]),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def parse_lift_values(text: str) -> dict[str, str]:
    """
    Parse "bench=2.5,squat=5" into {lift id: raw value}.

    Lift names may be ids or aliases (see config.resolve_lift).

    Raises:
        ValidationError: On a malformed pair or unknown lift
    """
    result: dict[str, str] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ValidationError(f"Expected lift=value, got '{part}'")
        name, value = (p.strip() for p in part.split("=", 1))
        try:
            lift = resolve_lift(name)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        result[lift] = value
    return result


def parse_lift_numbers(text: str) -> dict[str, float]:
    """Parse "bench=100,ohp=60" into {lift id: float}."""
    result = {}
    for lift, raw in parse_lift_values(text).items():
        try:
            value = float(raw)
        except ValueError as e:
            raise ValidationError(f"Invalid number for {lift}: '{raw}'") from e
        if not math.isfinite(value):
            raise ValidationError(f"Invalid number for {lift}: '{raw}'")
        result[lift] = value
    return result


def parse_warmup_scheme(text: str) -> tuple[WarmupSet, ...]:
    """
    Parse a warm-up scheme such as "40x5,50x5,60x3" (percent x reps).

    Raises:
        ValidationError: On malformed entries or more than three sets
    """
    steps = []
    for part in text.split(","):
        part = part.strip().lower().replace("%", "")
        if not part:
            continue
        m = re.match(r"^(\d+(?:\.\d+)?)\s*[x×]\s*(\d+)$", part)
        if not m:
            raise ValidationError(f"Invalid warm-up set '{part}'. Expected PERCENTxREPS, e.g. 40x5")
        steps.append(WarmupSet(percentage=float(m.group(1)), reps=int(m.group(2))))
    if len(steps) > MAX_WARMUP_SETS:
        raise ValidationError(f"At most {MAX_WARMUP_SETS} warm-up sets are allowed")
    return tuple(steps)


@dataclass
class DataSummary:
    """Preview of a backup shown before import."""

    total_workouts: int
    total_prs: int
    oldest_workout: str | None
    newest_workout: str | None
    cycle: int
    week: int


def get_data_summary(data: AppData) -> DataSummary:
    """Counts and date range of a backup document."""
    oldest: str | None = None
    newest: str | None = None
    if data.workout_history:
        dates = sorted(parse_iso_datetime(s.date).date() for s in data.workout_history)
        oldest = dates[0].isoformat()
        newest = dates[-1].isoformat()
    return DataSummary(
        total_workouts=len(data.workout_history),
        total_prs=len(data.personal_records),
        oldest_workout=oldest,
        newest_workout=newest,
        cycle=data.current_cycle,
        week=data.current_week,
    )


def generate_backup_filename(now: datetime | None = None) -> str:
    """531-workout-backup-YYYY-MM-DD.json"""
    now = now or datetime.now()
    return f"531-workout-backup-{now.strftime('%Y-%m-%d')}.json"


def new_export_document(**kwargs: Any) -> AppData:
    """AppData stamped with the current time and backup version."""
    return AppData(
        version=BACKUP_VERSION,
        export_date=datetime.now().isoformat(timespec="seconds"),
        **kwargs,
    )
