# kbsync/cli/commands/status.py
"""Show the catalog: status counts and one row per file."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui
from kbsync.core.exceptions import CatalogError


def command(
    files: bool = typer.Option(True, "--files/--no-files", help="List every file."),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Show catalog status."""
    _, service = load_service(config)

    try:
        snapshot = service.snapshot()
    except CatalogError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    records = list(snapshot["files"].values())
    counts = Counter(r["processingStatus"] for r in records)

    ui.header("Catalog status", f"updated {snapshot['lastUpdated']}")
    ui.table(
        ["Documents", "Success", "Pending", "Error", "Chunks"],
        [
            [
                str(len(records)),
                str(counts.get("success", 0)),
                str(counts.get("pending", 0)),
                str(counts.get("error", 0)),
                str(sum(r["chunkCount"] for r in records)),
            ]
        ],
    )

    if not files or not records:
        return

    rows = [
        [
            r["name"],
            ui.status_label(r["processingStatus"]),
            str(r["chunkCount"]),
            r["sourceLocation"],
            r.get("processedAt") or "-",
        ]
        for r in sorted(records, key=lambda r: r["name"].lower())
    ]
    ui.table(["Name", "Status", "Chunks", "Source", "Processed"], rows, title="Files")
