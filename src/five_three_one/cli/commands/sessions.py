"""Session commands: log-session, history, delete-record."""

from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.calculator import session_plan, training_max_for, workout_type_for_week
from ...core.config import LIFT_NAMES, WEEKS_PER_CYCLE
from ...core.models import SetPlan
from ...core.one_rm import calculate_one_rm, format_weight
from ...core.workout_log import build_session, outcomes_from_failures
from ...io.serializers import ValidationError, validate_date
from ...io.settings_store import new_session_id
from .. import views
from ..app import LiftOption, StorePathOption, app, get_store


def _parse_set_numbers(text: str, total: int) -> set[int]:
    """
    Parse "3,5" into {3, 5}, checking each number is a planned set.

    Raises:
        ValidationError: On non-numeric or out-of-range entries
    """
    numbers: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            n = int(part)
        except ValueError as e:
            raise ValidationError(f"Set numbers must be integers, got '{part}'") from e
        if not 1 <= n <= total:
            raise ValidationError(f"Set number {n} out of range (1–{total})")
        numbers.add(n)
    return numbers


def _prompt_amrap_reps(amrap: SetPlan, unit: str) -> int:
    """Ask how many reps were done on the AMRAP set (0 = failed)."""
    while True:
        raw = views.console.input(
            f"Reps done on the AMRAP set ({format_weight(amrap.weight, unit)} × {amrap.reps}+): "
        ).strip()
        try:
            reps = int(raw)
            if reps < 0:
                raise ValueError
            return reps
        except ValueError:
            views.print_error("Enter a whole number, 0 if the set was failed")


@app.command("log-session")
def log_session(
    lift: LiftOption = None,
    failed_sets: Annotated[
        Optional[str],
        typer.Option("--failed-sets", "-x", help="Set numbers not completed, e.g. '5,6' (as shown by plan)"),
    ] = None,
    amrap_reps: Annotated[
        Optional[int],
        typer.Option("--amrap-reps", "-r", help="Reps done on the AMRAP set"),
    ] = None,
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help=f"Program week 1-{WEEKS_PER_CYCLE} (default: current)"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session date (YYYY-MM-DD, default: now)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Session notes"),
    ] = None,
    store_path: StorePathOption = None,
) -> None:
    """
    Log a session of the current week's plan.

    Every planned set counts as done unless listed in --failed-sets.  A
    failed working set lowers that lift's training max by 10% from the next
    session on.  Logging the last lift of the week advances the program.

      five-three-one log-session --lift bench --amrap-reps 8
    """
    if lift is None:
        views.print_error("Choose a lift with --lift (bench, squat, deadlift, ohp)")
        raise typer.Exit(1)
    if week is not None and not 1 <= week <= WEEKS_PER_CYCLE:
        views.print_error(f"Week must be between 1 and {WEEKS_PER_CYCLE}")
        raise typer.Exit(1)
    if amrap_reps is not None and amrap_reps < 0:
        views.print_error("AMRAP reps must be non-negative")
        raise typer.Exit(1)

    store = get_store(store_path)
    try:
        settings = store.load_training_settings()
        unit = store.get_unit()
        target_week = settings.week if week is None else week
        sets = session_plan(settings, lift, target_week)
        tm = training_max_for(settings, lift)
        failed = _parse_set_numbers(failed_sets or "", len(sets))
        session_date = validate_date(date) if date else datetime.now().isoformat(timespec="seconds")
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_session_plan(lift, sets, tm, target_week, workout_type_for_week(target_week), unit)

    amrap_number = next((i for i, s in enumerate(sets, 1) if s.is_amrap), None)
    if amrap_number is not None and amrap_number not in failed and amrap_reps is None:
        amrap_reps = _prompt_amrap_reps(sets[amrap_number - 1], unit)

    try:
        outcomes = outcomes_from_failures(sets, failed, amrap_reps)
        session = build_session(
            new_session_id(),
            lift,
            sets,
            outcomes,
            cycle=settings.cycle,
            week=target_week,
            date=session_date,
            notes=notes,
        )
        result = store.record_workout(session)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    done = sum(1 for o in outcomes if o.completed)
    views.print_success(f"Logged {LIFT_NAMES[lift]}: {done}/{len(outcomes)} sets completed.")

    if result.personal_record is not None:
        pr = result.personal_record
        e1rm = calculate_one_rm(pr.weight, pr.reps)
        views.print_success(
            f"New personal record! {format_weight(pr.weight, unit)} × {pr.reps} "
            f"(e1RM {format_weight(round(e1rm, 1), unit)})"
        )
    if result.failure_count is not None:
        views.print_warning(
            f"Working set missed. {LIFT_NAMES[lift]} training max reduced "
            f"({result.failure_count} failure{'s' if result.failure_count != 1 else ''} recorded)."
        )
    if result.advanced_to is not None:
        new_cycle, new_week = result.advanced_to
        views.print_info(f"Week complete. Now on cycle {new_cycle}, week {new_week}.")


@app.command()
def history(
    lift: LiftOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show only the most recent N sessions"),
    ] = None,
    store_path: StorePathOption = None,
) -> None:
    """Display logged workouts, oldest first."""
    store = get_store(store_path)
    try:
        sessions = store.load_history()
        unit = store.get_unit()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    # Number before filtering so ids match delete-record
    entries = list(enumerate(sessions, 1))
    if lift is not None:
        entries = [(i, s) for i, s in entries if s.lift == lift]
    if limit is not None and limit > 0:
        entries = entries[-limit:]
    views.print_history(entries, unit)


@app.command("delete-record")
def delete_record(
    record_id: Annotated[
        int,
        typer.Argument(help="Session number as shown by 'history'"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Delete a logged session by its number in 'history'.

    Personal records, failure counts and the program position are left as
    they are.
    """
    store = get_store(store_path)
    try:
        sessions = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if record_id < 1 or record_id > len(sessions):
        views.print_error(f"No session #{record_id} (history has {len(sessions)})")
        raise typer.Exit(1)

    target = sessions[record_id - 1]
    label = f"{target.date[:10]} {LIFT_NAMES.get(target.lift or '', '-')} ({target.workout_type})"
    if not force and not views.confirm_action(f"Delete {label}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_session_at(record_id - 1)
    views.print_success(f"Deleted session #{record_id}: {label}")
