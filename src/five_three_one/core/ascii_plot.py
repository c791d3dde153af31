"""
ASCII plotting for strength progress visualization.

Creates terminal-friendly charts of training-max / estimated-1RM history
and weekly training volume.
"""

from datetime import datetime, timedelta

from .models import WorkoutSession
from .one_rm import to_display_unit


def create_progress_plot(
    points: list[tuple[datetime, float]],
    width: int = 60,
    height: int = 16,
    title: str = "Training Max Progress",
    unit: str = "kg",
) -> str:
    """
    Create an ASCII line plot of a weight value over time.

    Args:
        points: (date, weight in kg) pairs
        width: Plot width in characters
        height: Plot height in lines
        title: Chart title
        unit: Display unit for axis labels ("kg" or "lbs")

    Returns:
        ASCII art string
    """
    if not points:
        return "No data recorded yet."

    points = sorted((d, to_display_unit(v, unit)) for d, v in points)

    min_date = points[0][0]
    max_date = points[-1][0]
    date_range = (max_date - min_date).days or 1

    values = [v for _, v in points]
    y_min = max(0.0, min(values) - 5)
    y_max = max(values) + 5
    y_range = (y_max - y_min) or 1.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    plot_points: list[tuple[int, int, float]] = []
    for date, value in points:
        x = int(((date - min_date).days / date_range) * (plot_width - 1))
        y = int(((value - y_min) / y_range) * (plot_height - 1))
        plot_points.append((x, plot_height - 1 - y, value))  # Flip y-axis

    def _put(x: int, r: int, ch: str) -> None:
        if 0 <= x < plot_width and 0 <= r < plot_height and grid[r][x] == " ":
            grid[r][x] = ch

    # Connecting lines (staircase style: ╭─╯)
    for (col1, row1, _), (col2, row2, _) in zip(plot_points, plot_points[1:]):
        if row1 == row2:
            for x in range(col1 + 1, col2):
                _put(x, row1, "─")
            continue
        if col1 == col2:
            for r in range(min(row1, row2) + 1, max(row1, row2)):
                _put(col1, r, "│")
            continue

        up = row2 < row1
        mid = (col1 + col2) // 2
        for x in range(col1 + 1, mid):
            _put(x, row1, "─")
        _put(mid, row1, "╯" if up else "╮")
        for r in range(min(row1, row2) + 1, max(row1, row2)):
            _put(mid, r, "│")
        _put(mid, row2, "╭" if up else "╰")
        for x in range(mid + 1, col2):
            _put(x, row2, "─")

    for x, y, _ in plot_points:
        if 0 <= x < plot_width and 0 <= y < plot_height:
            grid[y][x] = "●"

    lines = [title, "─" * width]

    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:6.1f} ┤" + "".join(row))

    lines.append("─" * width)

    label_line = [" "] * plot_width
    mid_date = min_date + (max_date - min_date) / 2
    for x_pos, date in ((0, min_date), (plot_width // 2, mid_date), (plot_width - 10, max_date)):
        for i, c in enumerate(date.strftime("%b %d")):
            if 0 <= x_pos + i < plot_width:
                label_line[x_pos + i] = c
    lines.append("        " + "".join(label_line))
    lines.append(f"● {unit}")

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(label) for label in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        lines.append(f"{label:>{max_label_len}} │{'█' * bar_len} {value:.0f}")

    return "\n".join(lines)


def session_volume(session: WorkoutSession) -> float:
    """Total weight moved (weight x reps) over completed sets."""
    return sum(
        s.weight * s.reps
        for exercise in session.exercises
        for s in exercise.sets
        if s.completed
    )


def create_weekly_volume_chart(
    history: list[WorkoutSession],
    weeks: int = 4,
    unit: str = "kg",
    today: datetime | None = None,
) -> str:
    """
    Create a chart of weekly training volume (weight x reps).

    Args:
        history: Logged sessions
        weeks: Number of weeks to show
        unit: Display unit
        today: Reference date (default: now)

    Returns:
        ASCII chart string
    """
    if not history:
        return "No training history."

    today = today or datetime.now()
    start_of_week = (today - timedelta(days=today.weekday())).date()

    weekly_volume: dict[int, float] = {}
    for session in history:
        session_date = datetime.fromisoformat(session.date.replace("Z", "+00:00")).date()
        weeks_ago = max(0, (start_of_week - session_date).days + 6) // 7
        if weeks_ago < weeks:
            weekly_volume[weeks_ago] = weekly_volume.get(weeks_ago, 0.0) + to_display_unit(
                session_volume(session), unit
            )

    labels = []
    values = []
    for i in range(weeks - 1, -1, -1):
        if i == 0:
            labels.append("This week")
        elif i == 1:
            labels.append("Last week")
        else:
            labels.append(f"{i} weeks ago")
        values.append(weekly_volume.get(i, 0.0))

    return create_simple_bar_chart(labels, values, title=f"Weekly Volume ({unit} x reps)")
