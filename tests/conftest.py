# tests/conftest.py
"""
Shared fixtures and hand-written collaborators.

The stub vector store hands out ids "v1", "v2", ... in call order, so the
catalog contents after a pass can be asserted exactly.
"""

from __future__ import annotations

import itertools
import threading
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from kbsync.catalog.store import CatalogStore
from kbsync.chunking.chunk import Chunk
from kbsync.core.exceptions import VectorStoreError
from kbsync.loaders.base import Segment
from kbsync.sync.service import SyncService


class StubLoader:
    """
    Loader and loader factory in one: reads the file as text into one segment.

    Names in `empty` load as zero segments; names in `failures` raise the
    given exception.
    """

    def __init__(
        self,
        empty: Iterable[str] = (),
        failures: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.empty = set(empty)
        self.failures = dict(failures or {})
        self.calls: List[str] = []

    def __call__(self, path: Path) -> "StubLoader":
        return self

    def load(self, path: Path, file_id: Optional[str] = None) -> List[Segment]:
        path = Path(path)
        self.calls.append(path.name)
        if path.name in self.failures:
            raise self.failures[path.name]
        if path.name in self.empty:
            return []
        text = path.read_text(encoding="utf-8")
        return [Segment(text=text, metadata={"fileName": path.name, "fileId": file_id})]


class WordSplitter:
    """One chunk per whitespace-separated word."""

    def split(self, segments: Sequence[Segment]) -> List[Chunk]:
        chunks: List[Chunk] = []
        for segment in segments:
            for word in segment.text.split():
                chunks.append(
                    Chunk(
                        doc_id=segment.metadata.get("fileName", "unknown"),
                        chunk_index=len(chunks),
                        content=word,
                        metadata=dict(segment.metadata),
                    )
                )
        return chunks


class ScriptedVectorStore:
    """Vector store double: sequential ids, call log, optional failures and delay."""

    def __init__(self, fail_on: Iterable[str] = (), delay: float = 0.0) -> None:
        self.fail_on = set(fail_on)
        self.delay = delay
        self.stored: Dict[str, Chunk] = {}
        self.added: List[List[str]] = []
        self.deleted: List[List[str]] = []
        self.delete_all_calls = 0
        self.active = 0
        self.max_active = 0
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, chunks: Sequence[Chunk]) -> List[str]:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            failing = {c.doc_id for c in chunks} & self.fail_on
            if failing:
                raise VectorStoreError(f"add failed for {sorted(failing)}")
            with self._lock:
                ids = [f"v{next(self._counter)}" for _ in chunks]
                for chunk_id, chunk in zip(ids, chunks):
                    self.stored[chunk_id] = chunk
                self.added.append(ids)
            return ids
        finally:
            with self._lock:
                self.active -= 1

    def delete(self, ids: Sequence[str]) -> None:
        with self._lock:
            self.deleted.append(list(ids))
            for chunk_id in ids:
                self.stored.pop(chunk_id, None)

    def delete_all(self) -> None:
        with self._lock:
            self.delete_all_calls += 1
            self.stored.clear()


class FakeCache:
    def __init__(self) -> None:
        self.flushes = 0

    def flush_all(self) -> None:
        self.flushes += 1


@pytest.fixture
def kb_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "knowledgebase"
    directory.mkdir()
    return directory


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "file-catalog.json"


@pytest.fixture
def store(catalog_path: Path) -> CatalogStore:
    return CatalogStore(catalog_path)


@pytest.fixture
def loader() -> StubLoader:
    return StubLoader()


@pytest.fixture
def vector_store() -> ScriptedVectorStore:
    return ScriptedVectorStore()


@pytest.fixture
def make_service(store, kb_dir, loader, vector_store):
    def _make(**overrides) -> SyncService:
        kwargs = dict(
            store=store,
            directory=kb_dir,
            loader_factory=loader,
            splitter=WordSplitter(),
            vector_store=vector_store,
        )
        kwargs.update(overrides)
        return SyncService(**kwargs)

    return _make
