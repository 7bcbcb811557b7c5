# kbsync/core/paths.py
"""
Workspace path resolution.

Everything kbsync writes lives under one workspace directory, `.kbsync/` in the
current working directory unless KBSYNC_HOME points elsewhere.
"""

from __future__ import annotations

import os
from pathlib import Path


class KBSyncPaths:
    """Resolves well-known workspace locations."""

    ENV_VAR = "KBSYNC_HOME"
    DIR_NAME = ".kbsync"

    @classmethod
    def workspace(cls) -> Path:
        env = os.getenv(cls.ENV_VAR)
        if env:
            return Path(env).expanduser()
        return Path.cwd() / cls.DIR_NAME

    @classmethod
    def config(cls) -> Path:
        return cls.workspace() / "config.yaml"

    @classmethod
    def catalog(cls) -> Path:
        return cls.workspace() / "file-catalog.json"

    @classmethod
    def ensure_workspace(cls) -> Path:
        path = cls.workspace()
        path.mkdir(parents=True, exist_ok=True)
        return path


__all__ = ["KBSyncPaths"]
