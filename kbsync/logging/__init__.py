# kbsync/logging/__init__.py
"""Logging helpers and log tags."""

from kbsync.logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
