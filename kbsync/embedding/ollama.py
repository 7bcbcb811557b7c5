# kbsync/embedding/ollama.py
"""
Ollama embedding client.

Talks to the Ollama HTTP API (POST /api/embed) with httpx. One request per
batch; Ollama returns the vectors in input order.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import httpx

from kbsync.core.exceptions import VectorStoreError
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import EMBEDDING

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "nomic-embed-text"


class OllamaEmbedder:
    """
    Usage:
        embedder = OllamaEmbedder(base_url="http://localhost:11434")
        vectors = embedder.embed_texts(["hello", "world"])
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
        batch_size: int = 32,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.model = model
        self.batch_size = max(1, batch_size)
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def embed_texts(self, texts: Iterable[str]) -> List[list[float]]:
        items = list(texts)
        vectors: List[list[float]] = []
        for start in range(0, len(items), self.batch_size):
            vectors.extend(self._embed_batch(items[start : start + self.batch_size]))
        return vectors

    def _embed_batch(self, batch: List[str]) -> List[list[float]]:
        try:
            response = self._client.post("/api/embed", json={"model": self.model, "input": batch})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise VectorStoreError(f"Ollama embedding request failed: {e}") from e

        embeddings = response.json().get("embeddings") or []
        if len(embeddings) != len(batch):
            raise VectorStoreError(
                f"Ollama returned {len(embeddings)} embeddings for {len(batch)} texts"
            )
        logger.debug(f"{EMBEDDING} Embedded {len(batch)} texts with {self.model}")
        return embeddings

    def close(self) -> None:
        self._client.close()


__all__ = ["OllamaEmbedder", "DEFAULT_BASE_URL", "DEFAULT_MODEL"]
