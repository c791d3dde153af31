"""Analysis commands: stats, one-rm."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.ascii_plot import create_progress_plot, create_weekly_volume_chart
from ...core.calculator import training_maxes, workout_type_for_week
from ...core.config import LIFT_NAMES, LIFTS
from ...core.one_rm import (
    best_one_rm,
    calculate_max_reps,
    calculate_one_rm,
    calculate_weight_for_reps,
    format_weight,
    from_display_unit,
)
from ...io.serializers import ValidationError, parse_iso_datetime
from .. import views
from ..app import LiftOption, StorePathOption, app, get_store

# Rep counts shown in the one-rm table
_REP_TABLE = (1, 2, 3, 5, 8, 10, 12)


def _stamp(value: str) -> datetime:
    return parse_iso_datetime(value).replace(tzinfo=None)


@app.command()
def stats(
    lift: LiftOption = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", help="Weeks shown in the volume chart"),
    ] = 4,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Show totals, training maxes and progress.

    The progress chart follows the training max of one lift (bench press
    unless --lift is given) across the cycles recorded so far.
    """
    store = get_store(store_path)
    try:
        settings = store.load_training_settings()
        unit = store.get_unit()
        history = store.load_history()
        records = store.load_personal_records()
        tm_history = store.load_training_max_history()
        maxes = training_maxes(settings)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    best = {name: best_one_rm(records, name) for name in LIFTS}

    if json_out:
        print(json.dumps({
            "total_workouts": len(history),
            "total_prs": len(records),
            "cycle": settings.cycle,
            "week": settings.week,
            "training_maxes": maxes,
            "one_rep_maxes": settings.one_rep_maxes,
            "failure_decreases": settings.failure_decreases,
            "best_estimated_1rm": {k: round(v, 1) for k, v in best.items() if v > 0},
        }, indent=2))
        return

    views.console.print()
    views.console.print("[bold]Overview[/bold]")
    views.console.print(f"- Workouts logged: {len(history)}")
    views.console.print(f"- Personal records: {len(records)}")
    views.console.print(
        f"- Position: cycle {settings.cycle}, week {settings.week} "
        f"({workout_type_for_week(settings.week)})"
    )
    views.console.print()
    views.print_training_maxes(
        maxes, settings.one_rep_maxes, settings.failure_decreases, best, unit
    )

    chart_lift = lift or "benchPress"
    points = [
        (_stamp(r.last_updated), r.as_dict()[chart_lift])
        for r in tm_history
    ]
    views.console.print()
    views.console.print(
        create_progress_plot(points, title=f"{LIFT_NAMES[chart_lift]} Training Max", unit=unit)
    )
    views.console.print()
    views.console.print(create_weekly_volume_chart(history, weeks=weeks, unit=unit))


@app.command("one-rm")
def one_rm(
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Weight lifted, in the display unit"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", "-r", help="Reps performed"),
    ] = None,
    lift: LiftOption = None,
    store_path: StorePathOption = None,
) -> None:
    """
    Estimate a one-rep max with the Epley formula.

    Give --weight and --reps for a set, or --lift to use the best personal
    record of that lift.  Prints the estimate and the expected weight for
    common rep counts.

      five-three-one one-rm --weight 100 --reps 5
    """
    store = get_store(store_path)
    try:
        unit = store.get_unit()
        records = store.load_personal_records() if lift else []
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if weight is not None or reps is not None:
        if weight is None or reps is None:
            views.print_error("Give both --weight and --reps")
            raise typer.Exit(1)
        if weight <= 0 or reps <= 0:
            views.print_error("Weight and reps must be positive")
            raise typer.Exit(1)
        weight_kg = from_display_unit(weight, unit)
        estimate = calculate_one_rm(weight_kg, reps)
        source = f"{format_weight(weight_kg, unit)} × {reps}"
    elif lift is not None:
        estimate = best_one_rm(records, lift)
        if estimate <= 0:
            views.print_error(f"No personal records for {LIFT_NAMES[lift]} yet")
            raise typer.Exit(1)
        source = f"best {LIFT_NAMES[lift]} record"
    else:
        views.print_error("Give --weight and --reps, or --lift")
        raise typer.Exit(1)

    views.console.print()
    views.console.print(
        f"[bold cyan]Estimated 1RM: {format_weight(round(estimate, 1), unit)}[/bold cyan]  ({source})"
    )
    views.console.print()
    views.console.print(f"  {'Reps':>4}  {'Weight':>10}")
    views.console.print("  " + "─" * 16)
    for n in _REP_TABLE:
        # A single is the estimate itself
        at_reps = estimate if n == 1 else calculate_weight_for_reps(estimate, n)
        views.console.print(f"  {n:>4}  {format_weight(round(at_reps, 1), unit):>10}")
    if weight is not None:
        views.console.print()
        views.print_info(
            f"About {calculate_max_reps(estimate, weight_kg)} reps are possible at this weight."
        )

