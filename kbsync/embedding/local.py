# kbsync/embedding/local.py
from __future__ import annotations

from dataclasses import dataclass
from hashlib import blake2b
from typing import Iterable, List

from kbsync.logging.logger import get_logger
from kbsync.logging.tags import EMBEDDING

logger = get_logger(__name__)


@dataclass(frozen=True)
class LocalEmbedderConfig:
    """
    Deterministic offline embedding.

    Not semantic. Stable across machines, which is enough to exercise the
    vector store wiring without an embedding server.
    """

    dim: int = 384
    seed: int = 0


class LocalEmbedder:
    """Deterministic hash-embedding backend."""

    def __init__(self, cfg: LocalEmbedderConfig | None = None) -> None:
        self._cfg = cfg or LocalEmbedderConfig()

    @property
    def dim(self) -> int:
        return self._cfg.dim

    def embed_texts(self, texts: Iterable[str]) -> List[list[float]]:
        logger.debug(f"{EMBEDDING} Using local hash embeddings")
        return [_hash_embed(t or "", dim=self._cfg.dim, seed=self._cfg.seed) for t in texts]


def _hash_embed(text: str, *, dim: int, seed: int) -> list[float]:
    # blake2b over (seed, text, counter) until there are 2 bytes per dimension,
    # mapped to [-1, 1] and L2-normalized.
    msg = f"{seed}\n{text}".encode("utf-8", errors="ignore")

    out = bytearray()
    ctr = 0
    while len(out) < dim * 2:
        out.extend(blake2b(msg + ctr.to_bytes(4, "little"), digest_size=32).digest())
        ctr += 1

    vec = [(((out[2 * i] << 8) | out[2 * i + 1]) / 32767.5) - 1.0 for i in range(dim)]

    norm = sum(x * x for x in vec) ** 0.5
    if norm > 0:
        vec = [x / norm for x in vec]
    return vec


__all__ = ["LocalEmbedder", "LocalEmbedderConfig"]
