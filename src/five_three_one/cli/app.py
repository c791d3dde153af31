"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import resolve_lift
from ..io.settings_store import SettingsStore, get_default_store_path

# Shared --store-path option type used across all commands
StorePathOption = Annotated[
    Optional[Path],
    typer.Option("--store-path", "-p", help="Path to the JSON store file"),
]


def _lift_callback(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return resolve_lift(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


# Shared --lift option type: accepts ids (benchPress) and aliases (bench, ohp, dl)
LiftOption = Annotated[
    Optional[str],
    typer.Option(
        "--lift", "-l",
        help="Lift: bench | squat | deadlift | ohp (default: all)",
        callback=_lift_callback,
    ),
]

app = typer.Typer(
    name="five-three-one",
    help="5/3/1 strength training planner: training maxes, weekly sets, BBB and backups.",
    no_args_is_help=True,
)


def get_store(store_path: Path | None) -> SettingsStore:
    """Get the settings store from path or default location."""
    if store_path is None:
        store_path = get_default_store_path()
    return SettingsStore(store_path)
