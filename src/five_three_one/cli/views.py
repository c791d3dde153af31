"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, history and settings.
"""

from rich.console import Console
from rich.table import Table

from ..core.config import LIFT_NAMES, LIFTS
from ..core.models import AppSettings, SetPlan, WeekOverview, WorkoutSession
from ..core.one_rm import calculate_one_rm, format_weight
from ..core.workout_log import AMRAP_NOTE
from ..io.serializers import DataSummary

console = Console()

_KIND_STYLE = {"warmup": "dim", "working": "bold", "bbb": "cyan"}
_KIND_LABEL = {"warmup": "Warm-up", "working": "Working", "bbb": "BBB"}


def _fmt_set(s: SetPlan, unit: str) -> str:
    suffix = "+" if s.is_amrap else ""
    return f"{format_weight(s.weight, unit)} × {s.reps}{suffix}"


def format_session_plan(
    lift: str,
    sets: list[SetPlan],
    training_max: float,
    week: int,
    workout_type: str,
    unit: str = "kg",
) -> Table:
    """
    Create a Rich table of one lift's session.

    Args:
        lift: Lift id
        sets: Sets from the calculator
        training_max: Training max used for the sets
        week: Program week
        workout_type: '5/5/5+', ..., 'deload'
        unit: Display unit

    Returns:
        Rich Table object
    """
    table = Table(
        title=f"{LIFT_NAMES[lift]} — Week {week} ({workout_type})",
        caption=f"Training max: {format_weight(training_max, unit)}",
    )
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Type")
    table.add_column("Set", justify="right")

    for i, s in enumerate(sets, 1):
        style = _KIND_STYLE[s.kind]
        table.add_row(
            str(i),
            _KIND_LABEL[s.kind],
            f"[{style}]{_fmt_set(s, unit)}[/{style}]",
        )
    return table


def print_session_plan(
    lift: str,
    sets: list[SetPlan],
    training_max: float,
    week: int,
    workout_type: str,
    unit: str = "kg",
) -> None:
    console.print(format_session_plan(lift, sets, training_max, week, workout_type, unit))


def print_cycle_overview(
    overview: list[WeekOverview],
    current_week: int,
    cycle: int,
    schedule: dict[str, str],
    unit: str = "kg",
) -> None:
    """
    Print the 4-week cycle with the top set of each lift.

    Args:
        overview: Output of calculator.cycle_overview
        current_week: Week to highlight
        cycle: Current cycle number
        schedule: Lift -> day name
        unit: Display unit
    """
    table = Table(title=f"Cycle {cycle} — 4-Week Overview")
    table.add_column("Week", style="cyan")
    table.add_column("Scheme", style="magenta")
    lifts = [lift for lift in LIFTS if overview and lift in overview[0].top_sets]
    for lift in lifts:
        day = schedule.get(lift, "")
        header = f"{LIFT_NAMES[lift]}\n[dim]{day}[/dim]" if day else LIFT_NAMES[lift]
        table.add_column(header, justify="right")

    for entry in overview:
        if entry.week < current_week:
            marker = "✓"
        elif entry.week == current_week:
            marker = "→"
        else:
            marker = " "
        row = [f"{marker} Week {entry.week}", entry.workout_type]
        row.extend(_fmt_set(entry.top_sets[lift], unit) for lift in lifts)
        style = "bold" if entry.week == current_week else None
        table.add_row(*row, style=style)

    console.print(table)


def format_history_table(
    entries: list[tuple[int, WorkoutSession]], unit: str = "kg"
) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        entries: (number, session) pairs, oldest first.  The number is the
            session's 1-based position in the full history, as used by
            delete-record, so filtered views keep their ids.

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Lift", style="green")
    table.add_column("Cycle/Week", justify="center")
    table.add_column("Type", style="magenta")
    table.add_column("Top set", justify="right", style="bold")
    table.add_column("e1RM", justify="right")
    table.add_column("Done", justify="right")

    for number, session in entries:
        sets = [s for e in session.exercises for s in e.sets]
        amrap = next((s for s in sets if s.notes == AMRAP_NOTE), None)
        working = [s for s in sets if s.notes in ("working", AMRAP_NOTE)]
        top = amrap or (working[-1] if working else None)
        e1rm = calculate_one_rm(top.weight, top.reps) if top and top.completed else 0.0
        done = sum(1 for s in sets if s.completed)

        table.add_row(
            str(number),
            session.date[:10],
            LIFT_NAMES.get(session.lift or "", session.lift or "-"),
            f"{session.cycle}/{session.week}",
            session.workout_type,
            f"{format_weight(top.weight, unit)} × {top.reps}" if top else "-",
            format_weight(round(e1rm, 1), unit) if e1rm > 0 else "-",
            f"{done}/{len(sets)}",
        )

    return table


def print_history(entries: list[tuple[int, WorkoutSession]], unit: str = "kg") -> None:
    if not entries:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(entries, unit))


def print_training_maxes(
    maxes: dict[str, float],
    one_rep_maxes: dict[str, float],
    failures: dict[str, int],
    best_e1rm: dict[str, float],
    unit: str = "kg",
) -> None:
    table = Table(title="Lifts")
    table.add_column("Lift", style="green")
    table.add_column("1RM", justify="right")
    table.add_column("Training max", justify="right", style="bold")
    table.add_column("Failures", justify="right")
    table.add_column("Best e1RM", justify="right")

    for lift in LIFTS:
        if lift not in maxes:
            continue
        best = best_e1rm.get(lift, 0.0)
        table.add_row(
            LIFT_NAMES[lift],
            format_weight(one_rep_maxes[lift], unit),
            format_weight(maxes[lift], unit),
            str(failures.get(lift, 0)),
            format_weight(round(best, 1), unit) if best > 0 else "-",
        )
    console.print(table)


def print_settings(settings: AppSettings) -> None:
    """Print the current settings summary."""
    unit = settings.unit
    lines = [
        "[bold]Current settings[/bold]",
        f"- Unit: {unit}",
        f"- Theme: {settings.theme}",
        f"- Training max: {settings.training_max_percentage:g}% of 1RM",
    ]
    if settings.warmup.enabled and settings.warmup.sets:
        scheme = ", ".join(f"{s.percentage:g}%×{s.reps}" for s in settings.warmup.sets)
        lines.append(f"- Warm-up: {scheme}")
    else:
        lines.append("- Warm-up: off")
    if settings.assistance.enabled and settings.assistance.percentage > 0:
        lines.append(f"- BBB: 5×10 @ {settings.assistance.percentage:g}% of TM")
    else:
        lines.append("- BBB: off")
    lines.append("- Progression per cycle:")
    for lift in LIFTS:
        inc = settings.exercise_progression.get(lift, 0.0)
        day = settings.workout_schedule.get(lift, "")
        day_str = f"  ({day})" if day else ""
        lines.append(f"    {LIFT_NAMES[lift]}: +{format_weight(inc, unit)}{day_str}")
    console.print("\n".join(lines))


def print_data_summary(summary: DataSummary) -> None:
    """Print the preview of a backup document."""
    console.print("[bold]Backup contents[/bold]")
    console.print(f"- Workouts: {summary.total_workouts}")
    console.print(f"- Personal records: {summary.total_prs}")
    if summary.oldest_workout:
        console.print(f"- Range: {summary.oldest_workout} → {summary.newest_workout}")
    console.print(f"- Position: cycle {summary.cycle}, week {summary.week}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
