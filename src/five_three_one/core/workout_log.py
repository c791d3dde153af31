"""
Turning a prescribed session plus per-set outcomes into a logged workout.

Each planned set is marked done or failed; the AMRAP set also carries the
reps achieved.  These helpers are pure: the store decides what to persist.
"""

from dataclasses import dataclass

from .config import LIFTS, WORKOUT_TYPES
from .models import SetPlan, WorkoutExercise, WorkoutSession, WorkoutSet

# WorkoutSet.notes carries the set kind; the AMRAP set is marked separately
AMRAP_NOTE = "amrap"


@dataclass(frozen=True)
class SetOutcome:
    """What happened on one planned set; ``reps`` is required for a completed AMRAP."""

    completed: bool
    reps: int | None = None


def outcomes_from_failures(
    plan: list[SetPlan],
    failed_sets: set[int],
    amrap_reps: int | None,
) -> list[SetOutcome]:
    """
    Build outcomes from 1-based failed set numbers and the AMRAP rep count.

    An AMRAP set with 0 reps counts as failed.
    """
    outcomes: list[SetOutcome] = []
    for number, planned in enumerate(plan, 1):
        if planned.is_amrap:
            done = number not in failed_sets and bool(amrap_reps)
            outcomes.append(SetOutcome(completed=done, reps=amrap_reps if done else 0))
        else:
            outcomes.append(SetOutcome(completed=number not in failed_sets))
    return outcomes


def build_session(
    session_id: str,
    lift: str,
    plan: list[SetPlan],
    outcomes: list[SetOutcome],
    cycle: int,
    week: int,
    date: str,
    notes: str | None = None,
) -> WorkoutSession:
    """
    Combine a plan and its outcomes into a WorkoutSession.

    Args:
        session_id: Unique id for the workout
        lift: Lift id of the session
        plan: Sets as generated by the calculator
        outcomes: One SetOutcome per planned set, same order
        cycle: Program cycle
        week: Program week 1-4
        date: ISO date
        notes: Free-text session notes

    Returns:
        WorkoutSession with one WorkoutExercise holding every set

    Raises:
        ValueError: If outcomes do not line up with the plan, or a completed
            AMRAP set has no positive rep count
    """
    if lift not in LIFTS:
        raise ValueError(f"Unknown lift: {lift}")
    if len(outcomes) != len(plan):
        raise ValueError(f"Expected {len(plan)} set results, got {len(outcomes)}")

    sets: list[WorkoutSet] = []
    for planned, outcome in zip(plan, outcomes):
        if planned.is_amrap:
            if outcome.completed and not (outcome.reps and outcome.reps > 0):
                raise ValueError("A completed AMRAP set needs the number of reps done")
            reps = outcome.reps if outcome.completed else (outcome.reps or 0)
            note = AMRAP_NOTE
        else:
            reps = planned.reps if outcome.reps is None else outcome.reps
            note = planned.kind
        sets.append(
            WorkoutSet(weight=planned.weight, reps=int(reps), completed=outcome.completed, notes=note)
        )

    return WorkoutSession(
        id=session_id,
        date=date,
        workout_type=WORKOUT_TYPES[week],  # type: ignore[arg-type]
        week=week,
        cycle=cycle,
        exercises=[WorkoutExercise(name=lift, sets=sets)],
        notes=notes,
        completed=True,
    )


def has_failed_working_set(session: WorkoutSession) -> bool:
    """True if any working (or AMRAP) set of the session was not completed."""
    for exercise in session.exercises:
        for s in exercise.sets:
            if s.notes in ("working", AMRAP_NOTE) and not s.completed:
                return True
    return False


def amrap_result(session: WorkoutSession) -> WorkoutSet | None:
    """The completed AMRAP set of a session, or None."""
    for exercise in session.exercises:
        for s in exercise.sets:
            if s.notes == AMRAP_NOTE and s.completed and s.reps > 0:
                return s
    return None


def lifts_done(history: list[WorkoutSession], cycle: int, week: int) -> set[str]:
    """Lifts with a completed session in the given cycle and week."""
    return {
        s.lift
        for s in history
        if s.completed and s.cycle == cycle and s.week == week and s.lift in LIFTS
    }


def is_week_complete(history: list[WorkoutSession], cycle: int, week: int) -> bool:
    """True once every main lift has been logged for the week."""
    return lifts_done(history, cycle, week) >= set(LIFTS)
