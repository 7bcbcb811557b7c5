# kbsync/vector_db/memory.py
"""
In-process vector store.

Keeps chunks in a dict keyed by a fresh uuid per chunk. Used when no vector
database is configured (vector_db.plugin_name: memory) and by the test suite.
"""

from __future__ import annotations

import threading
import uuid
from typing import Dict, List, Optional, Sequence

from kbsync.chunking.chunk import Chunk
from kbsync.embedding.base import Embedder
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import VECTOR_DB

logger = get_logger(__name__)


class InMemoryVectorStore:
    def __init__(self, embedder: Optional[Embedder] = None) -> None:
        self._embedder = embedder
        self._chunks: Dict[str, Chunk] = {}
        self._vectors: Dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._chunks)

    def __contains__(self, chunk_id: str) -> bool:
        return chunk_id in self._chunks

    def get(self, chunk_id: str) -> Optional[Chunk]:
        return self._chunks.get(chunk_id)

    def add(self, chunks: Sequence[Chunk]) -> List[str]:
        vectors = self._embedder.embed_texts(c.content for c in chunks) if self._embedder else None
        ids = [str(uuid.uuid4()) for _ in chunks]
        with self._lock:
            for i, (chunk_id, chunk) in enumerate(zip(ids, chunks)):
                self._chunks[chunk_id] = chunk
                if vectors is not None:
                    self._vectors[chunk_id] = vectors[i]
        logger.debug(f"{VECTOR_DB} Stored {len(ids)} chunks in memory")
        return ids

    def delete(self, ids: Sequence[str]) -> None:
        with self._lock:
            for chunk_id in ids:
                self._chunks.pop(chunk_id, None)
                self._vectors.pop(chunk_id, None)

    def delete_all(self) -> None:
        with self._lock:
            self._chunks.clear()
            self._vectors.clear()
        logger.info(f"{VECTOR_DB} Cleared in-memory store")


__all__ = ["InMemoryVectorStore"]
