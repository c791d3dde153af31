"""Backup commands: export, import."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ...io.serializers import ValidationError, generate_backup_filename, get_data_summary
from ...io.settings_store import read_backup_file
from .. import views
from ..app import StorePathOption, app, get_store


@app.command("export")
def export_data(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Backup file (default: 531-workout-backup-YYYY-MM-DD.json)"),
    ] = None,
    store_path: StorePathOption = None,
) -> None:
    """Write every stored setting and workout to a JSON backup file."""
    store = get_store(store_path)
    target = output or Path(generate_backup_filename())

    try:
        data = store.export_to_file(target)
    except (ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_data_summary(get_data_summary(data))
    views.print_success(f"Backup written to {target}")


@app.command("import")
def import_data(
    backup_file: Annotated[
        Path,
        typer.Argument(help="Backup JSON file to restore"),
    ],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Import without confirmation"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Restore a JSON backup, replacing all stored data.

    The file is validated first; nothing is written if any field is
    malformed.
    """
    try:
        data = read_backup_file(backup_file)
    except FileNotFoundError:
        views.print_error(f"Backup file not found: {backup_file}")
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(f"Invalid backup: {e}")
        raise typer.Exit(1)

    views.print_data_summary(get_data_summary(data))

    if not yes and not views.confirm_action("Replace all current data with this backup?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store = get_store(store_path)
    store.init()
    store.import_app_data(data)
    views.print_success(f"Imported {backup_file} into {store.store_path}")
