# kbsync/sync/scanner.py
"""
Directory scanning.

Lists the regular files directly inside the watched directory that pass the
supported-type predicate, and fingerprints each one. A file that cannot be
hashed is still reported, with the error attached, so the detector can treat it
conservatively instead of losing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from kbsync.catalog.hashing import hash_file
from kbsync.catalog.mime import mime_type_from_name
from kbsync.core.exceptions import HashError
from kbsync.loaders.factory import is_supported_file_type
from kbsync.sync.protocols import SupportedPredicate


@dataclass(frozen=True)
class ScannedFile:
    name: str
    path: Path
    ext: str
    size: int
    mime_type: str
    content_hash: Optional[str]
    hash_error: Optional[str] = None

    @property
    def hashed(self) -> bool:
        return self.content_hash is not None


@dataclass
class ScanResult:
    files: List[ScannedFile]

    @property
    def hash_failures(self) -> List[ScannedFile]:
        return [f for f in self.files if not f.hashed]


def _scan_one(path: Path) -> ScannedFile:
    try:
        size = path.stat().st_size
    except OSError:
        size = 0

    content_hash: Optional[str] = None
    hash_error: Optional[str] = None
    try:
        content_hash = hash_file(path)
    except HashError as e:
        hash_error = str(e)

    return ScannedFile(
        name=path.name,
        path=path,
        ext=path.suffix.lower(),
        size=size,
        mime_type=mime_type_from_name(path.name),
        content_hash=content_hash,
        hash_error=hash_error,
    )


def scan_directory(
    directory: str | Path,
    supported: SupportedPredicate = is_supported_file_type,
) -> ScanResult:
    """Scan synchronously. A missing directory scans as empty."""
    root = Path(directory)
    if not root.is_dir():
        return ScanResult(files=[])
    paths = sorted(p for p in root.iterdir() if p.is_file() and supported(p.name))
    return ScanResult(files=[_scan_one(p) for p in paths])


__all__ = ["ScannedFile", "ScanResult", "scan_directory"]
