# kbsync/cli/commands/sync.py
"""
Run one sync pass over the knowledge base.

Usage:
    kbsync sync
    kbsync sync --full
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui
from kbsync.core.exceptions import CatalogError
from kbsync.sync.service import SyncSummary, run_sync_once


def command(
    full: bool = typer.Option(
        False,
        "--full",
        "-f",
        help="Clear the vector store and reprocess every document.",
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Sync the watched directory into the vector store."""
    cfg, service = load_service(config)

    mode = "Full resync" if full else "Incremental sync"
    ui.header(f"kbsync {mode}", str(cfg.source.directory))

    try:
        summary = run_sync_once(service, full_resync=full)
    except CatalogError as e:
        ui.error(f"Sync aborted: {e}")
        raise typer.Exit(1)

    _print_summary(summary)


def _print_summary(summary: SyncSummary) -> None:
    lines = [
        f"Processed: {summary.processed}",
        f"Skipped:   {summary.skipped}",
        f"Deleted:   {summary.deleted}",
        f"Renamed:   {summary.renamed}",
        f"Errors:    {summary.errors}",
        f"Chunks:    +{summary.chunks_added} / -{summary.chunks_removed}",
        f"Duration:  {summary.duration_seconds:.1f}s",
    ]
    style = "yellow" if summary.errors else "green"
    ui.summary_panel("\n".join(lines), title="Sync summary", style=style)

    if summary.error_details:
        ui.section("Errors")
        for detail in summary.error_details:
            ui.error(detail)
