"""
JSON-file key-value storage for settings and workout data.

Every value is stored under a flat key (``settings_unit``,
``workout_history``, ...) in a single JSON object on disk.  Each ``set``
rewrites the file; the last write wins.
"""

import json
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.calculator import advance_week, training_maxes
from ..core.config import LIFTS
from ..core.engine.config_loader import ProgramDefaults, load_program_defaults
from ..core.models import (
    AppData,
    AppSettings,
    AssistanceConfig,
    PersonalRecord,
    TrainingMaxRecord,
    TrainingSettings,
    WarmupConfig,
    WorkoutSession,
)
from ..core.one_rm import is_personal_record
from ..core.workout_log import amrap_result, has_failed_working_set, is_week_complete
from .serializers import (
    ValidationError,
    app_data_to_dict,
    assistance_to_dict,
    dict_to_app_data,
    dict_to_assistance,
    dict_to_personal_record,
    dict_to_training_max_record,
    dict_to_warmup,
    dict_to_workout_session,
    new_export_document,
    personal_record_to_dict,
    training_max_record_to_dict,
    warmup_to_dict,
    workout_session_to_dict,
)

# Storage keys
UNIT_KEY = "settings_unit"
THEME_KEY = "settings_theme"
SCHEDULE_KEY = "settings_workoutSchedule"
PROGRESSION_KEY = "settings_exerciseProgression"
ONE_REP_MAXES_KEY = "settings_oneRepMaxes"
TM_PERCENTAGE_KEY = "settings_trainingMaxPercentage"
FAILURES_KEY = "settings_failureDecreases"
WARMUP_KEY = "settings_warmup"
ASSISTANCE_KEY = "settings_assistance"
TRAINING_MAXES_KEY = "workout_trainingMaxes"
PERSONAL_RECORDS_KEY = "workout_personalRecords"
HISTORY_KEY = "workout_history"
CURRENT_CYCLE_KEY = "workout_currentCycle"
CURRENT_WEEK_KEY = "workout_currentWeek"


@dataclass
class RecordOutcome:
    """Side effects of logging a workout."""

    session: WorkoutSession
    personal_record: PersonalRecord | None = None
    failure_count: int | None = None  # new count when a working set failed
    advanced_to: tuple[int, int] | None = None  # (cycle, week) after advancing


class SettingsStore:
    """
    Manages persisted state in a single JSON object file.

    ``get``/``set`` are the raw key-value operations; the typed helpers on
    top of them convert to and from the core dataclasses.
    """

    def __init__(self, store_path: str | Path, defaults: ProgramDefaults | None = None):
        """
        Initialize the store.

        Args:
            store_path: Path to the JSON store file
            defaults: Values used for absent settings keys
                (default: bundled/user program.yaml)
        """
        self.store_path = Path(store_path)
        self._defaults = defaults

    @property
    def defaults(self) -> ProgramDefaults:
        if self._defaults is None:
            self._defaults = load_program_defaults()
        return self._defaults

    def exists(self) -> bool:
        """Check if the store file exists."""
        return self.store_path.exists()

    def init(self) -> None:
        """
        Create an empty store file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.store_path.exists():
            self._write({})

    # ------------------------------------------------------------------
    # Raw key-value access
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        if not self.store_path.exists():
            return {}
        with open(self.store_path, "r", encoding="utf-8") as f:
            text = f.read()
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Store file {self.store_path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Store file {self.store_path} must hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.store_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default when absent."""
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key."""
        data = self._read()
        data[key] = value
        self._write(data)

    def set_many(self, values: dict[str, Any]) -> None:
        """Store several keys with a single write."""
        data = self._read()
        data.update(values)
        self._write(data)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_unit(self) -> str:
        return self.get(UNIT_KEY, self.defaults.unit)

    def set_unit(self, unit: str) -> None:
        self.set(UNIT_KEY, unit)

    def get_theme(self) -> str:
        return self.get(THEME_KEY, "system")

    def set_theme(self, theme: str) -> None:
        self.set(THEME_KEY, theme)

    def get_schedule(self) -> dict[str, str]:
        stored = self.get(SCHEDULE_KEY) or {}
        return {lift: stored.get(lift, "") for lift in LIFTS}

    def set_schedule(self, schedule: dict[str, str]) -> None:
        self.set(SCHEDULE_KEY, schedule)

    def get_progression(self) -> dict[str, float]:
        stored = self.get(PROGRESSION_KEY) or {}
        return {lift: float(stored.get(lift, self.defaults.progression[lift])) for lift in LIFTS}

    def set_progression(self, progression: dict[str, float]) -> None:
        self.set(PROGRESSION_KEY, progression)

    def get_one_rep_maxes(self) -> dict[str, float]:
        stored = self.get(ONE_REP_MAXES_KEY) or {}
        return {lift: float(v) for lift, v in stored.items()}

    def set_one_rep_maxes(self, maxes: dict[str, float]) -> None:
        self.set(ONE_REP_MAXES_KEY, maxes)

    def get_training_max_percentage(self) -> float:
        return float(self.get(TM_PERCENTAGE_KEY, self.defaults.training_max_percentage))

    def set_training_max_percentage(self, percentage: float) -> None:
        self.set(TM_PERCENTAGE_KEY, percentage)

    def get_failure_decreases(self) -> dict[str, int]:
        stored = self.get(FAILURES_KEY) or {}
        return {lift: int(v) for lift, v in stored.items()}

    def set_failure_decreases(self, counts: dict[str, int]) -> None:
        self.set(FAILURES_KEY, counts)

    def get_warmup(self) -> WarmupConfig:
        stored = self.get(WARMUP_KEY)
        return dict_to_warmup(stored) if stored is not None else self.defaults.warmup

    def set_warmup(self, warmup: WarmupConfig) -> None:
        self.set(WARMUP_KEY, warmup_to_dict(warmup))

    def get_assistance(self) -> AssistanceConfig:
        stored = self.get(ASSISTANCE_KEY)
        return dict_to_assistance(stored) if stored is not None else self.defaults.assistance

    def set_assistance(self, assistance: AssistanceConfig) -> None:
        self.set(ASSISTANCE_KEY, assistance_to_dict(assistance))

    def get_position(self) -> tuple[int, int]:
        """Current (cycle, week)."""
        data = self._read()
        return int(data.get(CURRENT_CYCLE_KEY, 1)), int(data.get(CURRENT_WEEK_KEY, 1))

    def set_position(self, cycle: int, week: int) -> None:
        self.set_many({CURRENT_CYCLE_KEY: cycle, CURRENT_WEEK_KEY: week})

    def load_training_settings(self) -> TrainingSettings:
        """
        Snapshot of everything the calculator needs.

        Raises:
            ValidationError: If no one-rep maxes have been entered yet
        """
        maxes = self.get_one_rep_maxes()
        if not maxes:
            raise ValidationError("No one-rep maxes recorded. Run 'init' first.")
        cycle, week = self.get_position()
        return TrainingSettings(
            one_rep_maxes=maxes,
            progression=self.get_progression(),
            training_max_percentage=self.get_training_max_percentage(),
            failure_decreases=self.get_failure_decreases(),
            warmup=self.get_warmup(),
            assistance=self.get_assistance(),
            cycle=cycle,
            week=week,
        )

    def load_app_settings(self) -> AppSettings:
        return AppSettings(
            unit=self.get_unit(),  # type: ignore[arg-type]
            theme=self.get_theme(),  # type: ignore[arg-type]
            workout_schedule=self.get_schedule(),
            exercise_progression=self.get_progression(),
            one_rep_maxes=self.get_one_rep_maxes(),
            training_max_percentage=self.get_training_max_percentage(),
            failure_decreases=self.get_failure_decreases(),
            warmup=self.get_warmup(),
            assistance=self.get_assistance(),
        )

    # ------------------------------------------------------------------
    # Workout data
    # ------------------------------------------------------------------

    def load_history(self) -> list[WorkoutSession]:
        """
        Load all logged sessions.

        Returns:
            List of WorkoutSession, sorted by date

        Raises:
            ValidationError: If a stored session is malformed
        """
        sessions = [dict_to_workout_session(d) for d in self.get(HISTORY_KEY) or []]
        sessions.sort(key=lambda s: s.date)
        return sessions

    def _write_history(self, sessions: list[WorkoutSession]) -> None:
        self.set(HISTORY_KEY, [workout_session_to_dict(s) for s in sessions])

    def delete_session_at(self, index: int) -> WorkoutSession:
        """
        Delete the session at the given 0-based index in sorted history.

        Raises:
            IndexError: If index is out of range
        """
        sessions = self.load_history()
        if index < 0 or index >= len(sessions):
            raise IndexError(f"Session index {index} out of range (0–{len(sessions) - 1})")
        removed = sessions.pop(index)
        self._write_history(sessions)
        return removed

    def load_personal_records(self) -> list[PersonalRecord]:
        return [dict_to_personal_record(d) for d in self.get(PERSONAL_RECORDS_KEY) or []]

    def load_training_max_history(self) -> list[TrainingMaxRecord]:
        records = [dict_to_training_max_record(d) for d in self.get(TRAINING_MAXES_KEY) or []]
        records.sort(key=lambda r: r.last_updated)
        return records

    def append_training_max_record(self, record: TrainingMaxRecord) -> None:
        stored = list(self.get(TRAINING_MAXES_KEY) or [])
        stored.append(training_max_record_to_dict(record))
        self.set(TRAINING_MAXES_KEY, stored)

    def snapshot_training_maxes(self, date: str | None = None) -> TrainingMaxRecord:
        """Append the current training maxes to the training-max history."""
        maxes = training_maxes(self.load_training_settings())
        record = TrainingMaxRecord.from_lifts(
            maxes, date or datetime.now().strftime("%Y-%m-%d")
        )
        self.append_training_max_record(record)
        return record

    def record_workout(self, session: WorkoutSession) -> RecordOutcome:
        """
        Persist a logged session and apply its consequences.

        - The completed AMRAP set is stored as a personal record when it
          beats every earlier estimate for the lift.
        - A failed working set increments the lift's failure count.
        - Once all lifts are logged for the current week, the program
          advances; entering a new cycle snapshots the new training maxes.

        Args:
            session: Session built by core.workout_log.build_session

        Returns:
            RecordOutcome describing what changed
        """
        lift = session.lift
        if lift is None:
            raise ValidationError("Session has no exercises")

        history = self.load_history()
        history.append(session)
        history.sort(key=lambda s: s.date)
        self._write_history(history)
        outcome = RecordOutcome(session=session)

        amrap = amrap_result(session)
        if amrap is not None:
            records = self.load_personal_records()
            if is_personal_record(records, lift, amrap.weight, amrap.reps):
                pr = PersonalRecord(
                    exercise=lift,
                    weight=amrap.weight,
                    reps=amrap.reps,
                    date=session.date,
                    workout_id=session.id,
                )
                records.append(pr)
                self.set(PERSONAL_RECORDS_KEY, [personal_record_to_dict(r) for r in records])
                outcome.personal_record = pr

        if has_failed_working_set(session):
            counts = self.get_failure_decreases()
            counts[lift] = counts.get(lift, 0) + 1
            self.set_failure_decreases(counts)
            outcome.failure_count = counts[lift]

        cycle, week = self.get_position()
        if session.cycle == cycle and session.week == week and is_week_complete(history, cycle, week):
            outcome.advanced_to = self.advance()

        return outcome

    def advance(self) -> tuple[int, int]:
        """Move to the next week; a new cycle also snapshots training maxes."""
        cycle, week = self.get_position()
        new_cycle, new_week = advance_week(cycle, week)
        self.set_position(new_cycle, new_week)
        if new_cycle != cycle and self.get_one_rep_maxes():
            self.snapshot_training_maxes()
        return new_cycle, new_week

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def export_app_data(self) -> AppData:
        """Collect every stored key into a backup document."""
        cycle, week = self.get_position()
        return new_export_document(
            settings=self.load_app_settings(),
            training_maxes=self.load_training_max_history(),
            personal_records=self.load_personal_records(),
            workout_history=self.load_history(),
            current_cycle=cycle,
            current_week=week,
        )

    def export_to_file(self, path: str | Path) -> AppData:
        data = self.export_app_data()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(app_data_to_dict(data), f, indent=2)
        return data

    def import_app_data(self, data: AppData) -> None:
        """
        Replace every stored key with the backup's values in one write.
        """
        doc = app_data_to_dict(data)
        settings = doc["settings"]
        self.set_many(
            {
                UNIT_KEY: settings["unit"],
                THEME_KEY: settings["theme"],
                SCHEDULE_KEY: settings["workoutSchedule"],
                PROGRESSION_KEY: settings["exerciseProgression"],
                ONE_REP_MAXES_KEY: settings["oneRepMaxes"],
                TM_PERCENTAGE_KEY: settings["trainingMaxPercentage"],
                FAILURES_KEY: settings["failureDecreases"],
                WARMUP_KEY: settings["warmup"],
                ASSISTANCE_KEY: settings["assistance"],
                TRAINING_MAXES_KEY: doc["trainingMaxes"],
                PERSONAL_RECORDS_KEY: doc["personalRecords"],
                HISTORY_KEY: doc["workoutHistory"],
                CURRENT_CYCLE_KEY: doc["currentCycle"] or 1,
                CURRENT_WEEK_KEY: doc["currentWeek"] or 1,
            }
        )

    def clear(self) -> None:
        """Remove all stored data (dangerous - use with caution)."""
        if self.store_path.exists():
            self._write({})


def read_backup_file(path: str | Path) -> AppData:
    """
    Parse and validate a backup file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the JSON is malformed or fails validation
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{path} is not valid JSON: {e}") from e
    return dict_to_app_data(raw)


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


def get_default_store_path() -> Path:
    """Default store location: ~/.five-three-one/store.json"""
    return Path.home() / ".five-three-one" / "store.json"
