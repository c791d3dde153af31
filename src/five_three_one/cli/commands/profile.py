"""Profile management commands: init and settings."""

import math
from typing import Annotated, Optional

import typer

from ...core.config import LIFT_NAMES, LIFTS, ONBOARDING_TM_MAX, ONBOARDING_TM_MIN, THEMES, UNITS
from ...core.models import AssistanceConfig, WarmupConfig
from ...core.one_rm import format_weight, from_display_unit
from ...io.serializers import (
    ValidationError,
    parse_lift_numbers,
    parse_lift_values,
    parse_warmup_scheme,
)
from ...io.settings_store import FAILURES_KEY, ONE_REP_MAXES_KEY, TM_PERCENTAGE_KEY, UNIT_KEY
from .. import views
from ..app import StorePathOption, app, get_store


def _prompt_one_rep_max(lift: str, unit: str) -> float:
    """Ask for a one-rep max until a positive number is entered."""
    while True:
        raw = views.console.input(f"{LIFT_NAMES[lift]} 1RM ({unit}): ").strip()
        try:
            value = float(raw)
            if not math.isfinite(value) or value <= 0:
                raise ValueError
            return value
        except ValueError:
            views.print_error("Enter a positive number")


@app.command()
def init(
    bench: Annotated[
        Optional[float],
        typer.Option("--bench", help="Bench press 1RM"),
    ] = None,
    squat: Annotated[
        Optional[float],
        typer.Option("--squat", help="Squat 1RM"),
    ] = None,
    deadlift: Annotated[
        Optional[float],
        typer.Option("--deadlift", help="Deadlift 1RM"),
    ] = None,
    ohp: Annotated[
        Optional[float],
        typer.Option("--ohp", help="Overhead press 1RM"),
    ] = None,
    tm_percent: Annotated[
        Optional[float],
        typer.Option("--tm-percent", "-t", help="Training max as % of 1RM (80-100)"),
    ] = None,
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="Weight unit: kg | lbs"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing data without prompting"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Onboarding: record one-rep maxes and start cycle 1, week 1.

    Missing 1RMs are asked for interactively.  Weights are entered in the
    chosen unit.  Re-running init resets the program position and every
    failure count; logged workouts and personal records are kept.
    """
    store = get_store(store_path)

    try:
        unit = unit or store.get_unit()
        if unit not in UNITS:
            views.print_error(f"Unit must be one of: {', '.join(UNITS)}")
            raise typer.Exit(1)

        percentage = tm_percent if tm_percent is not None else store.get_training_max_percentage()
        if not ONBOARDING_TM_MIN <= percentage <= ONBOARDING_TM_MAX:
            views.print_error(
                f"Training max percentage must be between {ONBOARDING_TM_MIN:g} and {ONBOARDING_TM_MAX:g}"
            )
            raise typer.Exit(1)

        if store.exists() and store.get_one_rep_maxes() and not force:
            views.print_warning("One-rep maxes are already recorded.")
            if not views.confirm_action("Replace them and restart at cycle 1, week 1?"):
                views.print_info("Cancelled.")
                raise typer.Exit(0)

        entered = {"benchPress": bench, "squat": squat, "deadlift": deadlift, "overheadPress": ohp}
        maxes: dict[str, float] = {}
        for lift in LIFTS:
            value = entered[lift]
            if value is None:
                value = _prompt_one_rep_max(lift, unit)
            elif not math.isfinite(value) or value <= 0:
                views.print_error(f"{LIFT_NAMES[lift]} 1RM must be a positive number")
                raise typer.Exit(1)
            maxes[lift] = from_display_unit(value, unit)

        store.init()
        store.set_many(
            {
                UNIT_KEY: unit,
                TM_PERCENTAGE_KEY: percentage,
                ONE_REP_MAXES_KEY: maxes,
                FAILURES_KEY: {},
            }
        )
        # Persist defaults so the backup carries the progression in use
        store.set_progression(store.get_progression())
        store.set_position(1, 1)
        record = store.snapshot_training_maxes()
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Profile saved to {store.store_path}")
    tms = record.as_dict()
    for lift in LIFTS:
        views.console.print(
            f"  {LIFT_NAMES[lift]}: 1RM {format_weight(maxes[lift], unit)} → "
            f"TM {format_weight(tms[lift], unit)}"
        )
    views.print_info("Run 'five-three-one plan' to see this week's sets.")


@app.command()
def settings(
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="Weight unit: kg | lbs"),
    ] = None,
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", help="Theme preference: system | light | dark"),
    ] = None,
    tm_percent: Annotated[
        Optional[float],
        typer.Option("--tm-percent", "-t", help="Training max as % of 1RM"),
    ] = None,
    one_rm: Annotated[
        Optional[str],
        typer.Option("--one-rm", help="Update 1RMs, e.g. 'bench=105,ohp=62.5' (resets their failures)"),
    ] = None,
    progression: Annotated[
        Optional[str],
        typer.Option("--progression", help="Increment per cycle, e.g. 'bench=2.5,squat=5'"),
    ] = None,
    warmup: Annotated[
        Optional[bool],
        typer.Option("--warmup/--no-warmup", help="Enable or disable warm-up sets"),
    ] = None,
    warmup_scheme: Annotated[
        Optional[str],
        typer.Option("--warmup-scheme", help="Warm-up sets as PERCENTxREPS, e.g. '40x5,50x5,60x3'"),
    ] = None,
    bbb: Annotated[
        Optional[bool],
        typer.Option("--bbb/--no-bbb", help="Enable or disable BBB assistance"),
    ] = None,
    bbb_percent: Annotated[
        Optional[float],
        typer.Option("--bbb-percent", help="BBB weight as % of training max"),
    ] = None,
    schedule: Annotated[
        Optional[str],
        typer.Option("--schedule", help="Training days, e.g. 'bench=Monday,squat=Tuesday'"),
    ] = None,
    reset_failures: Annotated[
        bool,
        typer.Option("--reset-failures", help="Clear every failure decrease"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Show or update settings.

    Without options, prints the current settings.
    """
    store = get_store(store_path)

    try:
        current_unit = unit or store.get_unit()

        if unit is not None:
            if unit not in UNITS:
                views.print_error(f"Unit must be one of: {', '.join(UNITS)}")
                raise typer.Exit(1)
            store.set_unit(unit)

        if theme is not None:
            if theme not in THEMES:
                views.print_error(f"Theme must be one of: {', '.join(THEMES)}")
                raise typer.Exit(1)
            store.set_theme(theme)

        if tm_percent is not None:
            if not math.isfinite(tm_percent) or tm_percent <= 0 or tm_percent > ONBOARDING_TM_MAX:
                views.print_error("Training max percentage must be in (0, 100]")
                raise typer.Exit(1)
            if tm_percent < ONBOARDING_TM_MIN:
                views.print_warning(
                    f"{tm_percent:g}% is below the usual {ONBOARDING_TM_MIN:g}-{ONBOARDING_TM_MAX:g}% range"
                )
            store.set_training_max_percentage(tm_percent)

        if one_rm is not None:
            updates = parse_lift_numbers(one_rm)
            if any(v <= 0 for v in updates.values()):
                views.print_error("One-rep maxes must be positive")
                raise typer.Exit(1)
            maxes = store.get_one_rep_maxes()
            failures = store.get_failure_decreases()
            for lift, value in updates.items():
                maxes[lift] = from_display_unit(value, current_unit)
                failures.pop(lift, None)
            store.set_one_rep_maxes(maxes)
            store.set_failure_decreases(failures)

        if progression is not None:
            updates = parse_lift_numbers(progression)
            if any(v < 0 for v in updates.values()):
                views.print_error("Progression increments must be non-negative")
                raise typer.Exit(1)
            current = store.get_progression()
            current.update({k: from_display_unit(v, current_unit) for k, v in updates.items()})
            store.set_progression(current)

        if warmup is not None or warmup_scheme is not None:
            existing = store.get_warmup()
            steps = parse_warmup_scheme(warmup_scheme) if warmup_scheme is not None else existing.sets
            enabled = existing.enabled if warmup is None else warmup
            store.set_warmup(WarmupConfig(enabled=enabled, sets=steps))

        if bbb is not None or bbb_percent is not None:
            existing_bbb = store.get_assistance()
            if bbb_percent is not None and (not math.isfinite(bbb_percent) or bbb_percent < 0):
                views.print_error("BBB percentage must be a non-negative number")
                raise typer.Exit(1)
            store.set_assistance(
                AssistanceConfig(
                    enabled=existing_bbb.enabled if bbb is None else bbb,
                    percentage=existing_bbb.percentage if bbb_percent is None else bbb_percent,
                )
            )

        if schedule is not None:
            days = store.get_schedule()
            days.update(parse_lift_values(schedule))
            store.set_schedule(days)

        if reset_failures:
            store.set_failure_decreases({})

        views.print_settings(store.load_app_settings())
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
