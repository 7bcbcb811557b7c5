# kbsync/cli/commands/errors.py
"""List catalog records in the error state."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui
from kbsync.core.exceptions import CatalogError


def command(config: Optional[Path] = CONFIG_OPTION) -> None:
    """List files that failed to ingest."""
    _, service = load_service(config)

    try:
        records = service.list_errors()
    except CatalogError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    if not records:
        ui.success("No files in error state")
        return

    rows = [[r["id"], r["name"], r.get("errorMessage") or ""] for r in records]
    ui.table(["ID", "Name", "Error"], rows, title=f"{len(records)} files in error state")
