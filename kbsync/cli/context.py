# kbsync/cli/context.py
"""
Shared CLI setup: load config, configure logging, build the sync service.

Every command goes through load_service() so configuration errors are reported
the same way everywhere.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import typer

from kbsync.cli.ui import ui
from kbsync.core.config import KBSyncConfig, load_config
from kbsync.core.exceptions import ConfigError, KBSyncError
from kbsync.logging.logger import configure_logging
from kbsync.sync.factory import build_sync_service
from kbsync.sync.service import SyncService


def load_service(config_path: Optional[Path] = None) -> Tuple[KBSyncConfig, SyncService]:
    """Load config and build the service, exiting with status 1 on failure."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        ui.error(f"Configuration error: {e}")
        raise typer.Exit(1)

    configure_logging(config.logging.level)

    try:
        service = build_sync_service(config)
    except (KBSyncError, RuntimeError) as e:
        ui.error(f"Could not set up sync: {e}")
        raise typer.Exit(1)

    return config, service


CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Config file (default: .kbsync/config.yaml).",
    exists=True,
    dir_okay=False,
)
