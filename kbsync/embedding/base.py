# kbsync/embedding/base.py
from __future__ import annotations

from typing import Iterable, List, Protocol, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    """Protocol for batch text embedding."""

    def embed_texts(self, texts: Iterable[str]) -> List[list[float]]:
        """Embed texts, one vector per input, in input order."""
        ...
