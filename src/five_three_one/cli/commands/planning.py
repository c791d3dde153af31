"""Planning commands: plan, cycle, next-week."""

from typing import Annotated, Optional

import typer

from ...core.calculator import cycle_overview, session_plan, training_max_for, workout_type_for_week
from ...core.config import LIFT_NAMES, LIFTS, WEEKS_PER_CYCLE
from ...core.workout_log import lifts_done
from ...io.serializers import ValidationError
from .. import views
from ..app import LiftOption, StorePathOption, app, get_store


@app.command()
def plan(
    lift: LiftOption = None,
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help=f"Program week 1-{WEEKS_PER_CYCLE} (default: current)"),
    ] = None,
    store_path: StorePathOption = None,
) -> None:
    """
    Show the prescribed sets for the current (or given) week.

    Warm-up and BBB sets follow the saved settings; the deload week
    shows working sets only.
    """
    if week is not None and not 1 <= week <= WEEKS_PER_CYCLE:
        views.print_error(f"Week must be between 1 and {WEEKS_PER_CYCLE}")
        raise typer.Exit(1)

    store = get_store(store_path)
    try:
        settings = store.load_training_settings()
        unit = store.get_unit()
        history = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    target_week = settings.week if week is None else week
    done = lifts_done(history, settings.cycle, target_week)
    lifts = [lift] if lift else [name for name in LIFTS if name in settings.one_rep_maxes]

    views.console.print(
        f"[bold]Cycle {settings.cycle}, week {target_week}[/bold] "
        f"({workout_type_for_week(target_week)})"
    )
    for name in lifts:
        try:
            sets = session_plan(settings, name, target_week)
            tm = training_max_for(settings, name)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        views.console.print()
        views.print_session_plan(name, sets, tm, target_week, workout_type_for_week(target_week), unit)
        if name in done:
            views.print_info(f"{LIFT_NAMES[name]} already logged this week.")


@app.command()
def cycle(
    store_path: StorePathOption = None,
) -> None:
    """Show the top set of each lift for all four weeks of the current cycle."""
    store = get_store(store_path)
    try:
        settings = store.load_training_settings()
        unit = store.get_unit()
        schedule = store.get_schedule()
        overview = cycle_overview(settings)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_cycle_overview(overview, settings.week, settings.cycle, schedule, unit)


@app.command("next-week")
def next_week(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Advance without confirming unlogged lifts"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Advance to the next program week.

    Week 4 rolls over into week 1 of the next cycle, which raises every
    training max by its progression increment.
    """
    store = get_store(store_path)
    try:
        current_cycle, current_week = store.get_position()
        history = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    missing = [name for name in LIFTS if name not in lifts_done(history, current_cycle, current_week)]
    if missing and not force:
        names = ", ".join(LIFT_NAMES[name] for name in missing)
        views.print_warning(f"Not logged this week: {names}")
        if not views.confirm_action("Advance anyway?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        new_cycle, new_week = store.advance()
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if new_cycle != current_cycle:
        views.print_success(f"Cycle {current_cycle} complete. Starting cycle {new_cycle}, week 1.")
    else:
        views.print_success(
            f"Now on cycle {new_cycle}, week {new_week} ({workout_type_for_week(new_week)})."
        )
