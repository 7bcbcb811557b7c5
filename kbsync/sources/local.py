# kbsync/sources/local.py
"""Local directory source: files are already where the sync expects them."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, List

from kbsync.core.exceptions import SourceError
from kbsync.loaders.factory import is_supported_file_type
from kbsync.sources.base import SourceFile


class LocalDirectorySource:
    """Lists supported files in a directory; fetch only copies when the target differs."""

    authoritative = False

    def __init__(
        self,
        directory: str | Path,
        supported: Callable[[str], bool] = is_supported_file_type,
    ) -> None:
        self.directory = Path(directory)
        self._supported = supported

    def list(self) -> List[SourceFile]:
        if not self.directory.is_dir():
            raise SourceError(f"Source directory does not exist: {self.directory}")
        return [
            SourceFile(name=p.name, size=p.stat().st_size)
            for p in sorted(self.directory.iterdir())
            if p.is_file() and self._supported(p.name)
        ]

    def fetch(self, descriptor: SourceFile, dest_dir: str | Path) -> Path:
        src = self.directory / descriptor.name
        dest = Path(dest_dir) / descriptor.name
        if src.resolve() == dest.resolve():
            return dest
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError as e:
            raise SourceError(f"Cannot copy {src} to {dest}: {e}") from e
        return dest


__all__ = ["LocalDirectorySource"]
