# kbsync/vector_db/qdrant.py
"""
Qdrant vector store.

Features:
- Creates the collection on first add, sized from the first embedding
- Fresh uuid4 point id per chunk; those ids are what the catalog records
- delete_all drops the collection (recreated lazily on the next add)
- Library errors are raised as VectorStoreError
"""

from __future__ import annotations

import uuid
from typing import Any, List, Optional, Sequence

from kbsync.chunking.chunk import Chunk
from kbsync.core.exceptions import VectorStoreError
from kbsync.embedding.base import Embedder
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import VECTOR_DB

logger = get_logger(__name__)

DEFAULT_COLLECTION = "rag-knowledgebase"


class QdrantVectorStore:
    """
    Usage:
        store = QdrantVectorStore(embedder=OllamaEmbedder(), host="localhost", port=6333)
        ids = store.add(chunks)
        store.delete(ids)

        # Local mode, no server
        store = QdrantVectorStore(embedder=LocalEmbedder(), location=":memory:")
    """

    def __init__(
        self,
        embedder: Embedder,
        collection: str = DEFAULT_COLLECTION,
        host: str = "localhost",
        port: int = 6333,
        api_key: Optional[str] = None,
        location: Optional[str] = None,
        timeout: int = 10,
    ) -> None:
        try:
            from qdrant_client import QdrantClient
        except ImportError:
            raise RuntimeError("qdrant-client is required. Install with: pip install qdrant-client")

        self.collection = collection
        self._embedder = embedder
        self._collection_ready = False

        if location is not None:
            self._client = QdrantClient(location=location)
            logger.info(f"{VECTOR_DB} Using local Qdrant ({location})")
        else:
            self._client = QdrantClient(host=host, port=port, api_key=api_key, timeout=timeout)
            logger.info(f"{VECTOR_DB} Using Qdrant at {host}:{port}")

    # =========================================================================
    # Collection Management
    # =========================================================================

    def _collection_exists(self) -> bool:
        try:
            return bool(self._client.collection_exists(self.collection))
        except Exception as e:
            raise VectorStoreError(f"Cannot reach Qdrant collection '{self.collection}': {e}") from e

    def _ensure_collection(self, vector_dim: int) -> None:
        from qdrant_client.models import Distance, VectorParams

        if self._collection_ready or self._collection_exists():
            self._collection_ready = True
            return

        logger.info(f"{VECTOR_DB} Creating collection '{self.collection}' with dim={vector_dim}")
        self._client.create_collection(
            collection_name=self.collection,
            vectors_config=VectorParams(size=vector_dim, distance=Distance.COSINE),
        )
        self._collection_ready = True

    # =========================================================================
    # VectorStore Interface
    # =========================================================================

    def add(self, chunks: Sequence[Chunk]) -> List[str]:
        from qdrant_client.models import PointStruct

        if not chunks:
            return []

        vectors = self._embedder.embed_texts(c.content for c in chunks)
        if len(vectors) != len(chunks):
            raise VectorStoreError(
                f"Embedder returned {len(vectors)} vectors for {len(chunks)} chunks"
            )

        ids = [str(uuid.uuid4()) for _ in chunks]
        points = [
            PointStruct(id=point_id, vector=vector, payload=self._payload(chunk))
            for point_id, vector, chunk in zip(ids, vectors, chunks)
        ]

        try:
            self._ensure_collection(len(vectors[0]))
            self._client.upsert(collection_name=self.collection, points=points)
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(f"Qdrant upsert failed: {e}") from e

        logger.debug(f"{VECTOR_DB} Added {len(points)} points to '{self.collection}'")
        return ids

    def delete(self, ids: Sequence[str]) -> None:
        from qdrant_client.models import PointIdsList

        if not ids:
            return
        if not self._collection_exists():
            logger.debug(f"{VECTOR_DB} Collection '{self.collection}' absent, nothing to delete")
            return

        try:
            self._client.delete(
                collection_name=self.collection,
                points_selector=PointIdsList(points=list(ids)),
            )
        except Exception as e:
            raise VectorStoreError(f"Qdrant delete failed: {e}") from e

        logger.debug(f"{VECTOR_DB} Deleted {len(ids)} points from '{self.collection}'")

    def delete_all(self) -> None:
        try:
            if self._collection_exists():
                self._client.delete_collection(collection_name=self.collection)
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(f"Qdrant delete_all failed: {e}") from e
        finally:
            self._collection_ready = False

        logger.info(f"{VECTOR_DB} Dropped collection '{self.collection}'")

    def count(self) -> int:
        if not self._collection_exists():
            return 0
        return self._client.count(collection_name=self.collection, exact=True).count

    @staticmethod
    def _payload(chunk: Chunk) -> dict[str, Any]:
        return {
            "content": chunk.content,
            "doc_id": chunk.doc_id,
            "chunk_index": chunk.chunk_index,
            "metadata": chunk.metadata,
        }


__all__ = ["QdrantVectorStore", "DEFAULT_COLLECTION"]
