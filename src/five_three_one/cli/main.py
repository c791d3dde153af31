"""
CLI entry point using Typer.

Provides commands for running a 5/3/1 program:
- init: Record one-rep maxes and start cycle 1
- plan / cycle: Show this week's sets and the 4-week overview
- log-session: Log a session and advance the program
- history / delete-record: Review and correct logged workouts
- stats / one-rm: Progress and 1RM estimates
- settings: Unit, warm-up, BBB, progression and schedule
- export / import: JSON backups
"""

# Importing the command modules registers their commands on ``app``
from .app import app
from .commands import analysis, backup, planning, profile, sessions  # noqa: F401


def main() -> None:
    app()


if __name__ == "__main__":
    main()
