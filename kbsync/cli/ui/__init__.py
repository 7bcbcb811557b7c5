# kbsync/cli/ui/__init__.py
"""
CLI UI components.

Usage:
    from kbsync.cli.ui import ui

    ui.header("Sync")
    ui.success("Done!")
"""

from __future__ import annotations

from .console import console
from .output import UI

ui = UI()

__all__ = ["UI", "ui", "console"]
