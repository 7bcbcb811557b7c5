# kbsync/cli/commands/reset.py
"""
Set records back to pending so the next sync reprocesses them.

Usage:
    kbsync reset <record-id>
    kbsync reset --all-errors
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui
from kbsync.core.exceptions import CatalogError


def command(
    record_id: Optional[str] = typer.Argument(None, help="Catalog record id."),
    all_errors: bool = typer.Option(
        False, "--all-errors", help="Reset every record in the error state."
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Reset a record (or all error records) to pending."""
    if record_id is None and not all_errors:
        ui.error("Give a record id or --all-errors")
        raise typer.Exit(2)

    _, service = load_service(config)

    try:
        if all_errors:
            ids = service.reset_errors()
            ui.success(f"Reset {len(ids)} error records to pending")
            return

        record = service.reset_status(record_id)
    except CatalogError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    ui.success(f"Reset {record.name} to pending")
