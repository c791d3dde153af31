"""
Configuration constants for the 5/3/1 training model.

All fixed program parameters are centralized here.  User-tunable defaults
(warm-up scheme, BBB percentage, progression per lift) are read from
program.yaml by engine/config_loader.py and fall back to the values below.
"""

from typing import Final

# =============================================================================
# LIFTS
# =============================================================================

# Keys match the backup document field names.
LIFTS: Final[tuple[str, ...]] = ("benchPress", "squat", "deadlift", "overheadPress")

LIFT_NAMES: Final[dict[str, str]] = {
    "benchPress": "Bench Press",
    "squat": "Squat",
    "deadlift": "Deadlift",
    "overheadPress": "Overhead Press",
}

# Short aliases accepted on the command line
LIFT_ALIASES: Final[dict[str, str]] = {
    "bench": "benchPress",
    "bp": "benchPress",
    "squat": "squat",
    "sq": "squat",
    "deadlift": "deadlift",
    "dl": "deadlift",
    "ohp": "overheadPress",
    "press": "overheadPress",
}

# =============================================================================
# WEEK PERCENTAGE TABLE (percent of training max)
# =============================================================================

DELOAD_WEEK: Final[int] = 4
WEEKS_PER_CYCLE: Final[int] = 4

WEEK_PERCENTAGES: Final[dict[int, tuple[float, float, float]]] = {
    1: (65.0, 75.0, 85.0),
    2: (70.0, 80.0, 90.0),
    3: (75.0, 85.0, 95.0),
    4: (40.0, 50.0, 60.0),  # Deload
}

WEEK_REPS: Final[dict[int, tuple[int, int, int]]] = {
    1: (5, 5, 5),
    2: (3, 3, 3),
    3: (5, 3, 1),
    4: (5, 5, 5),
}

WORKOUT_TYPES: Final[dict[int, str]] = {
    1: "5/5/5+",
    2: "3/3/3+",
    3: "5/3/1+",
    4: "deload",
}

# =============================================================================
# TRAINING MAX
# =============================================================================

WEIGHT_INCREMENT: Final[float] = 2.5  # Every derived weight is a multiple of this
FAILURE_DECREASE_FACTOR: Final[float] = 0.9  # Compounding, per recorded failure
DEFAULT_TM_PERCENTAGE: Final[float] = 90.0
ONBOARDING_TM_MIN: Final[float] = 80.0
ONBOARDING_TM_MAX: Final[float] = 100.0

# =============================================================================
# WARM-UP AND ASSISTANCE (BBB)
# =============================================================================

MAX_WARMUP_SETS: Final[int] = 3
DEFAULT_WARMUP: Final[tuple[tuple[float, int], ...]] = ((40.0, 5), (50.0, 5), (60.0, 3))

BBB_SETS: Final[int] = 5
BBB_REPS: Final[int] = 10
DEFAULT_BBB_PERCENTAGE: Final[float] = 50.0

# =============================================================================
# PROGRESSION (added to the 1RM once per completed cycle)
# =============================================================================

DEFAULT_PROGRESSION: Final[dict[str, float]] = {
    "benchPress": 2.5,
    "squat": 5.0,
    "deadlift": 5.0,
    "overheadPress": 2.5,
}

# =============================================================================
# UNITS AND BACKUP FORMAT
# =============================================================================

UNITS: Final[tuple[str, ...]] = ("kg", "lbs")
THEMES: Final[tuple[str, ...]] = ("system", "light", "dark")
KG_TO_LBS: Final[float] = 2.20462

BACKUP_VERSION: Final[str] = "1.0.0"

# Epley: 1RM = weight * (1 + reps / EPLEY_DIVISOR)
EPLEY_DIVISOR: Final[float] = 30.0


def resolve_lift(name: str) -> str:
    """
    Map a lift id or command-line alias to its canonical lift id.

    Args:
        name: "benchPress", "bench", "ohp", ... (case-insensitive for aliases)

    Returns:
        Canonical lift id

    Raises:
        ValueError: If the name is not a known lift
    """
    if name in LIFTS:
        return name
    key = name.strip().lower()
    if key in LIFT_ALIASES:
        return LIFT_ALIASES[key]
    for lift in LIFTS:
        if lift.lower() == key:
            return lift
    valid = ", ".join(sorted(set(LIFT_ALIASES) | set(LIFTS)))
    raise ValueError(f"Unknown lift '{name}'. Valid names: {valid}")
