# kbsync/sync/protocols.py
"""
Capabilities the sync core consumes.

The core never imports a concrete loader, vector database or cache; it is
handed objects satisfying these protocols. Sync implementations are fine: the
core runs every call in a worker thread.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Protocol, Sequence, runtime_checkable

from kbsync.chunking.chunk import Chunk
from kbsync.loaders.base import DocumentLoader, Segment
from kbsync.sources.base import SourceFile


@runtime_checkable
class DocumentSource(Protocol):
    """Provisions files into the watched directory."""

    # True when the source is the source of truth for the directory's contents.
    authoritative: bool

    def list(self) -> List[SourceFile]:
        """List the files the source currently offers."""
        ...

    def fetch(self, descriptor: SourceFile, dest_dir: Path) -> Path:
        """Write one file into dest_dir and return its local path."""
        ...


@runtime_checkable
class Splitter(Protocol):
    """Breaks segments into bounded, overlapping chunks."""

    def split(self, segments: Sequence[Segment]) -> List[Chunk]:
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Stores chunks and hands back one id per chunk, in order."""

    def add(self, chunks: Sequence[Chunk]) -> List[str]:
        ...

    def delete(self, ids: Sequence[str]) -> None:
        ...

    def delete_all(self) -> None:
        ...


@runtime_checkable
class Cache(Protocol):
    """Downstream cache invalidated on full resync."""

    def flush_all(self) -> None:
        ...


LoaderFactory = Callable[[Path], DocumentLoader]
SupportedPredicate = Callable[[str], bool]


__all__ = [
    "DocumentSource",
    "DocumentLoader",
    "Splitter",
    "VectorStore",
    "Cache",
    "LoaderFactory",
    "SupportedPredicate",
    "Segment",
    "Chunk",
    "SourceFile",
]
