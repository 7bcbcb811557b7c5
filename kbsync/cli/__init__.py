"""
Main kbsync CLI module.

Provides the top-level `kbsync` command.
"""

from kbsync.cli.cli import app

__all__ = ["app"]
