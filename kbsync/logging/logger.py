# kbsync/logging/logger.py
"""
Central logger factory.

Modules call get_logger(__name__) at import time. Handlers are only installed by
configure_logging(), which entry points (CLI, API) call once. Library use stays
silent unless the host application configures logging itself.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_ROOT = "kbsync"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the kbsync root logger."""
    if name != _ROOT and not name.startswith(f"{_ROOT}."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "INFO") -> None:
    """
    Install a Rich handler on the kbsync root logger.

    Safe to call more than once; later calls only change the level.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level.
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger(_ROOT)
    root.setLevel(level)

    if _configured:
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.propagate = False

    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)

    _configured = True


__all__ = ["get_logger", "configure_logging"]
