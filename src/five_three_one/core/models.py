"""
Data models for five-three-one.

Two families of dataclasses live here:

- Calculator inputs/outputs (WarmupConfig, AssistanceConfig, SetPlan,
  TrainingSettings) are frozen value records.  They are built fresh from
  the store for every calculation and never mutated.
- Persisted records (WorkoutSession, PersonalRecord, TrainingMaxRecord,
  AppSettings, AppData) mirror the backup document and validate themselves
  on construction.
"""

from dataclasses import dataclass, field
from typing import Literal

from .config import (
    BACKUP_VERSION,
    DEFAULT_BBB_PERCENTAGE,
    DEFAULT_TM_PERCENTAGE,
    LIFTS,
    MAX_WARMUP_SETS,
    THEMES,
    UNITS,
    WORKOUT_TYPES,
)

Lift = str  # one of config.LIFTS
Unit = Literal["kg", "lbs"]
Theme = Literal["system", "light", "dark"]
SetKind = Literal["warmup", "working", "bbb"]
WorkoutType = Literal["5/5/5+", "3/3/3+", "5/3/1+", "deload"]


# =============================================================================
# Calculator value records
# =============================================================================


@dataclass(frozen=True)
class WarmupSet:
    """One warm-up step: a percentage of training max for a number of reps."""

    percentage: float
    reps: int

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("warm-up reps must be non-negative")


@dataclass(frozen=True)
class WarmupConfig:
    """Warm-up scheme applied before the working sets (weeks 1-3 only)."""

    enabled: bool = True
    sets: tuple[WarmupSet, ...] = ()

    def __post_init__(self) -> None:
        if len(self.sets) > MAX_WARMUP_SETS:
            raise ValueError(f"at most {MAX_WARMUP_SETS} warm-up sets are allowed")


@dataclass(frozen=True)
class AssistanceConfig:
    """Boring But Big assistance: 5x10 at a fixed percentage of training max."""

    enabled: bool = True
    percentage: float = DEFAULT_BBB_PERCENTAGE


@dataclass(frozen=True)
class SetPlan:
    """A single prescribed set as shown to the lifter."""

    weight: float
    reps: int
    is_amrap: bool
    kind: SetKind


@dataclass(frozen=True)
class TrainingSettings:
    """
    Everything the calculator needs for one lifter.

    Built from the store on demand and passed by value; the calculator never
    reads ambient state.
    """

    one_rep_maxes: dict[str, float]
    progression: dict[str, float]
    training_max_percentage: float = DEFAULT_TM_PERCENTAGE
    failure_decreases: dict[str, int] = field(default_factory=dict)
    warmup: WarmupConfig = field(default_factory=WarmupConfig)
    assistance: AssistanceConfig = field(default_factory=AssistanceConfig)
    cycle: int = 1
    week: int = 1

    def failures_for(self, lift: Lift) -> int:
        """Recorded failure count for a lift (0 when never failed)."""
        return self.failure_decreases.get(lift, 0)


@dataclass(frozen=True)
class WeekOverview:
    """Top working set of every lift for one week of the cycle."""

    week: int
    workout_type: str
    top_sets: dict[str, SetPlan]


# =============================================================================
# Persisted records (backup document)
# =============================================================================


@dataclass
class WorkoutSet:
    """
    A logged set.

    ``notes`` carries the set kind ("warmup", "working", "amrap", "bbb") for
    sets logged by this tool; imported documents may hold free text.
    """

    weight: float
    reps: int
    completed: bool
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")


@dataclass
class WorkoutExercise:
    """All sets logged for one exercise within a session."""

    name: str
    sets: list[WorkoutSet] = field(default_factory=list)
    notes: str | None = None


@dataclass
class WorkoutSession:
    """A logged workout."""

    id: str
    date: str  # ISO date or datetime
    workout_type: WorkoutType
    week: int
    cycle: int
    exercises: list[WorkoutExercise] = field(default_factory=list)
    notes: str | None = None
    completed: bool = True

    def __post_init__(self) -> None:
        if self.workout_type not in WORKOUT_TYPES.values():
            raise ValueError(f"Invalid workout_type: {self.workout_type}")
        if self.week not in WORKOUT_TYPES:
            raise ValueError(f"week must be 1-4, got {self.week}")
        if self.cycle < 1:
            raise ValueError(f"cycle must be >= 1, got {self.cycle}")

    @property
    def lift(self) -> str | None:
        """Main lift of the session (first exercise), or None if empty."""
        return self.exercises[0].name if self.exercises else None


@dataclass
class PersonalRecord:
    """An AMRAP set whose estimated 1RM beat every earlier one for the lift."""

    exercise: str
    weight: float
    reps: int
    date: str
    workout_id: str

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError("weight must be positive")
        if self.reps <= 0:
            raise ValueError("reps must be positive")


@dataclass
class TrainingMaxRecord:
    """Training maxes of all four lifts at a point in time."""

    bench_press: float
    squat: float
    deadlift: float
    overhead_press: float
    last_updated: str

    def as_dict(self) -> dict[str, float]:
        """Lift id -> training max."""
        return {
            "benchPress": self.bench_press,
            "squat": self.squat,
            "deadlift": self.deadlift,
            "overheadPress": self.overhead_press,
        }

    @classmethod
    def from_lifts(cls, maxes: dict[str, float], last_updated: str) -> "TrainingMaxRecord":
        return cls(
            bench_press=maxes.get("benchPress", 0.0),
            squat=maxes.get("squat", 0.0),
            deadlift=maxes.get("deadlift", 0.0),
            overhead_press=maxes.get("overheadPress", 0.0),
            last_updated=last_updated,
        )


@dataclass
class AppSettings:
    """
    User preferences.

    ``workout_schedule`` maps each lift to a day name ("Monday", or "" when
    unscheduled).  The calculator keys (one-rep maxes, TM percentage,
    failure decreases, warm-up, assistance) are optional in older backups.
    """

    unit: Unit = "kg"
    theme: Theme = "system"
    workout_schedule: dict[str, str] = field(default_factory=lambda: {lift: "" for lift in LIFTS})
    exercise_progression: dict[str, float] = field(
        default_factory=lambda: {lift: 0.0 for lift in LIFTS}
    )
    one_rep_maxes: dict[str, float] = field(default_factory=dict)
    training_max_percentage: float = DEFAULT_TM_PERCENTAGE
    failure_decreases: dict[str, int] = field(default_factory=dict)
    warmup: WarmupConfig = field(default_factory=WarmupConfig)
    assistance: AssistanceConfig = field(default_factory=AssistanceConfig)

    def __post_init__(self) -> None:
        if self.unit not in UNITS:
            raise ValueError(f"Invalid unit: {self.unit}")
        if self.theme not in THEMES:
            raise ValueError(f"Invalid theme: {self.theme}")


@dataclass
class AppData:
    """The complete backup document."""

    settings: AppSettings
    export_date: str
    version: str = BACKUP_VERSION
    training_maxes: list[TrainingMaxRecord] = field(default_factory=list)
    personal_records: list[PersonalRecord] = field(default_factory=list)
    workout_history: list[WorkoutSession] = field(default_factory=list)
    current_cycle: int = 1
    current_week: int = 1

    def __post_init__(self) -> None:
        if self.current_cycle < 1:
            raise ValueError("current_cycle must be >= 1")
        if self.current_week not in WORKOUT_TYPES:
            raise ValueError("current_week must be 1-4")
