"""
Training plan calculator.

Pure functions that turn a lifter's one-rep maxes and program settings into
training maxes and the prescribed sets for a session.  Nothing here reads
or writes the store; callers pass a TrainingSettings built fresh per call.

Formulas:
    adjusted_max  = 1RM + progression * (cycle - 1)
    training_max  = round_2.5(adjusted_max * pct / 100 * 0.9^failures)
    set_weight    = round_2.5(training_max * week_pct / 100)
"""

import math

from .config import (
    BBB_REPS,
    BBB_SETS,
    DELOAD_WEEK,
    FAILURE_DECREASE_FACTOR,
    LIFTS,
    WEEK_PERCENTAGES,
    WEEK_REPS,
    WEEKS_PER_CYCLE,
    WEIGHT_INCREMENT,
    WORKOUT_TYPES,
)
from .models import (
    AssistanceConfig,
    SetPlan,
    TrainingSettings,
    WarmupConfig,
    WeekOverview,
)


def _require_finite(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


def _require_week(week: int) -> int:
    if week not in WEEK_PERCENTAGES:
        raise ValueError(f"week must be 1-{WEEKS_PER_CYCLE}, got {week!r}")
    return week


def round_to_increment(value: float, increment: float = WEIGHT_INCREMENT) -> float:
    """
    Round a weight to the nearest multiple of ``increment``, halves rounding up.

    The quotient is rounded to 9 decimals first so that float noise such as
    36.99999999 does not flip the result.

    Args:
        value: Weight to round
        increment: Plate increment (default 2.5)

    Returns:
        Nearest multiple of increment

    Raises:
        ValueError: If value is not finite or increment is not positive
    """
    _require_finite(value, "value")
    _require_finite(increment, "increment")
    if increment <= 0:
        raise ValueError(f"increment must be positive, got {increment}")
    steps = math.floor(round(value / increment, 9) + 0.5)
    return steps * increment + 0.0  # + 0.0 normalizes -0.0


def resolve_training_max(
    one_rep_max: float,
    progression: float,
    training_max_percentage: float,
    cycle_number: int,
    failure_decrease_count: int = 0,
) -> float:
    """
    Calculate the training max for one lift.

    The 1RM grows by ``progression`` for every completed cycle (cycle 1 has
    no increase), is scaled to the training-max percentage, then reduced by
    10% per recorded failure, compounding.

    Non-positive one-rep maxes are not rejected; they yield a zero or
    negative training max.

    Args:
        one_rep_max: Tested or estimated 1RM
        progression: Increment added per completed cycle
        training_max_percentage: Percent of the adjusted 1RM (>= 0)
        cycle_number: Current cycle, 1-based
        failure_decrease_count: Number of recorded failures for this lift

    Returns:
        Training max rounded to the nearest 2.5

    Raises:
        ValueError: On non-finite input, cycle < 1, negative percentage or
            negative failure count
    """
    _require_finite(one_rep_max, "one_rep_max")
    _require_finite(progression, "progression")
    _require_finite(training_max_percentage, "training_max_percentage")
    if training_max_percentage < 0:
        raise ValueError(f"training_max_percentage must be >= 0, got {training_max_percentage}")
    if int(cycle_number) != cycle_number or cycle_number < 1:
        raise ValueError(f"cycle_number must be an integer >= 1, got {cycle_number!r}")
    if int(failure_decrease_count) != failure_decrease_count or failure_decrease_count < 0:
        raise ValueError(
            f"failure_decrease_count must be a non-negative integer, got {failure_decrease_count!r}"
        )

    adjusted_max = one_rep_max + progression * (cycle_number - 1)
    raw_training_max = adjusted_max * (training_max_percentage / 100)
    if failure_decrease_count == 0:
        return round_to_increment(raw_training_max)
    decrease_factor = FAILURE_DECREASE_FACTOR ** int(failure_decrease_count)
    return round_to_increment(raw_training_max * decrease_factor)


def week_percentages(week: int) -> tuple[float, float, float]:
    """Working-set percentages of training max for a program week."""
    return WEEK_PERCENTAGES[_require_week(week)]


def weight_for_set(training_max: float, week: int, set_index: int) -> float:
    """
    Weight for one working set.

    Args:
        training_max: Lift training max
        week: Program week 1-4
        set_index: 0, 1 or 2

    Returns:
        round_2.5(training_max * pct / 100)
    """
    _require_finite(training_max, "training_max")
    percentages = week_percentages(week)
    if set_index not in range(len(percentages)):
        raise ValueError(f"set_index must be 0-{len(percentages) - 1}, got {set_index!r}")
    return round_to_increment(training_max * percentages[set_index] / 100)


def is_deload_week(week: int) -> bool:
    return _require_week(week) == DELOAD_WEEK


def workout_type_for_week(week: int) -> str:
    """'5/5/5+', '3/3/3+', '5/3/1+' or 'deload'."""
    return WORKOUT_TYPES[_require_week(week)]


def generate_session_sets(
    training_max: float,
    week: int,
    warmup: WarmupConfig | None = None,
    assistance: AssistanceConfig | None = None,
) -> list[SetPlan]:
    """
    Assemble the ordered sets for one lift's session.

    Order: warm-up sets, three working sets, BBB sets.  The deload week gets
    working sets only and never an AMRAP.

    Args:
        training_max: Lift training max
        week: Program week 1-4
        warmup: Warm-up scheme (None = no warm-up)
        assistance: BBB configuration (None = no assistance)

    Returns:
        A new list of SetPlan on every call
    """
    _require_finite(training_max, "training_max")
    deload = is_deload_week(week)
    sets: list[SetPlan] = []

    if warmup is not None and warmup.enabled and not deload:
        for step in warmup.sets:
            if step.percentage <= 0:
                continue
            sets.append(
                SetPlan(
                    weight=round_to_increment(training_max * step.percentage / 100),
                    reps=step.reps,
                    is_amrap=False,
                    kind="warmup",
                )
            )

    reps = WEEK_REPS[week]
    last = len(WEEK_PERCENTAGES[week]) - 1
    for i in range(last + 1):
        sets.append(
            SetPlan(
                weight=weight_for_set(training_max, week, i),
                reps=reps[i],
                is_amrap=(i == last and not deload),
                kind="working",
            )
        )

    if (
        assistance is not None
        and assistance.enabled
        and assistance.percentage > 0
        and not deload
    ):
        bbb_weight = round_to_increment(training_max * assistance.percentage / 100)
        sets.extend(
            SetPlan(weight=bbb_weight, reps=BBB_REPS, is_amrap=False, kind="bbb")
            for _ in range(BBB_SETS)
        )

    return sets


def training_max_for(settings: TrainingSettings, lift: str, cycle: int | None = None) -> float:
    """Resolve one lift's training max from settings (current cycle by default)."""
    if lift not in settings.one_rep_maxes:
        raise ValueError(f"No one-rep max recorded for {lift}")
    return resolve_training_max(
        settings.one_rep_maxes[lift],
        settings.progression.get(lift, 0.0),
        settings.training_max_percentage,
        settings.cycle if cycle is None else cycle,
        settings.failures_for(lift),
    )


def training_maxes(settings: TrainingSettings, cycle: int | None = None) -> dict[str, float]:
    """Training max of every lift that has a one-rep max recorded."""
    return {
        lift: training_max_for(settings, lift, cycle)
        for lift in LIFTS
        if lift in settings.one_rep_maxes
    }


def session_plan(settings: TrainingSettings, lift: str, week: int | None = None) -> list[SetPlan]:
    """Sets for one lift in the given week (current week by default)."""
    return generate_session_sets(
        training_max_for(settings, lift),
        settings.week if week is None else week,
        settings.warmup,
        settings.assistance,
    )


def cycle_overview(settings: TrainingSettings) -> list[WeekOverview]:
    """
    Top working set of every lift for each week of the current cycle.

    Returns:
        Four WeekOverview entries, weeks 1-4
    """
    maxes = training_maxes(settings)
    overview: list[WeekOverview] = []
    for week in sorted(WEEK_PERCENTAGES):
        top_sets = {}
        for lift, tm in maxes.items():
            working = [s for s in generate_session_sets(tm, week) if s.kind == "working"]
            top_sets[lift] = working[-1]
        overview.append(
            WeekOverview(week=week, workout_type=WORKOUT_TYPES[week], top_sets=top_sets)
        )
    return overview


def advance_week(cycle: int, week: int) -> tuple[int, int]:
    """
    Next (cycle, week) position; the deload week rolls into week 1 of the next cycle.
    """
    _require_week(week)
    if cycle < 1:
        raise ValueError(f"cycle must be >= 1, got {cycle}")
    if week == WEEKS_PER_CYCLE:
        return cycle + 1, 1
    return cycle, week + 1
