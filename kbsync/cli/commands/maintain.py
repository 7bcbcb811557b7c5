# kbsync/cli/commands/maintain.py
"""
Catalog maintenance.

Records of temporary files (~$..., ._...) are always removed. The options add:

    --remove-missing   records whose file is gone (unrecoverable ones removed,
                       the rest marked as error)
    --all              with --remove-missing: remove every missing record
    --clean-errors     remove error records that cannot recover
    --reset-errors     reset error records to pending instead of removing them
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui
from kbsync.core.exceptions import CatalogError


def command(
    remove_missing: bool = typer.Option(
        False, "--remove-missing", help="Handle records whose file is gone."
    ),
    remove_all: bool = typer.Option(
        False, "--all", help="Remove every missing record instead of marking it."
    ),
    clean_errors: bool = typer.Option(
        False, "--clean-errors", help="Remove unrecoverable error records."
    ),
    reset_errors: bool = typer.Option(
        False, "--reset-errors", help="Reset error records to pending instead of removing them."
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Clean up the catalog."""
    _, service = load_service(config)

    try:
        report = service.maintain(
            remove_missing=remove_missing,
            remove_all_missing=remove_missing and remove_all,
            clean_errors=clean_errors,
            remove_all_errors=clean_errors and remove_all,
            reset_errors=reset_errors,
        )
    except CatalogError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    ui.summary_panel(
        "\n".join(
            [
                f"Examined:       {report.examined}",
                f"Removed:        {len(report.removed)}",
                f"Reset:          {len(report.reset)}",
                f"Marked missing: {len(report.marked_missing)}",
            ]
        ),
        title="Maintenance",
    )
