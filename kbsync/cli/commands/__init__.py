# kbsync/cli/commands/__init__.py
"""CLI commands."""

from kbsync.cli.commands import errors, maintain, reset, serve, status, sync

__all__ = ["errors", "maintain", "reset", "serve", "status", "sync"]
