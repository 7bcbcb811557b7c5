# kbsync/chunking/overlap.py
"""
Overlapping character splitter.

Splits each segment into windows of at most chunk_size characters, consecutive
windows sharing chunk_overlap characters. A window end is pulled back to the
last paragraph break, line break or space near its end when one exists, so
words are not cut in the middle. The pull-back is limited so that the next
window still starts at least half a stride (chunk_size - chunk_overlap) later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from kbsync.chunking.chunk import Chunk
from kbsync.loaders.base import Segment

_SEPARATORS = ("\n\n", "\n", " ")


@dataclass
class OverlapSplitter:
    """
    Fixed-size splitter with overlap.

    Example:
        >>> splitter = OverlapSplitter(chunk_size=5000, chunk_overlap=500)
        >>> chunks = splitter.split(segments)
    """

    plugin_name: str = field(default="overlap", repr=False)
    chunk_size: int = 5000
    chunk_overlap: int = 500

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must be >= 0, got {self.chunk_overlap}")
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )

    @property
    def splitter_id(self) -> str:
        return f"{self.plugin_name}:{self.chunk_size}:{self.chunk_overlap}"

    def split(self, segments: Sequence[Segment]) -> List[Chunk]:
        """Split all segments, numbering chunks across the whole document."""
        chunks: List[Chunk] = []
        for segment in segments:
            doc_id = str(
                segment.metadata.get("fileName") or segment.metadata.get("source") or "unknown"
            )
            for piece in self.split_text(segment.text):
                chunks.append(
                    Chunk(
                        doc_id=doc_id,
                        chunk_index=len(chunks),
                        content=piece,
                        metadata=dict(segment.metadata),
                    )
                )
        return chunks

    def split_text(self, text: str) -> List[str]:
        if not text or not text.strip():
            return []

        pieces: List[str] = []
        pos = 0
        length = len(text)

        while pos < length:
            end = min(pos + self.chunk_size, length)
            if end < length:
                end = self._soft_break(text, pos, end)

            piece = text[pos:end].strip()
            if piece:
                pieces.append(piece)

            if end >= length:
                break
            pos = max(end - self.chunk_overlap, pos + 1)

        return pieces

    def _soft_break(self, text: str, start: int, end: int) -> int:
        stride = self.chunk_size - self.chunk_overlap
        floor = start + max(self.chunk_size // 2, self.chunk_overlap + stride // 2)
        for sep in _SEPARATORS:
            idx = text.rfind(sep, floor, end)
            if idx > start:
                return idx + len(sep)
        return end


__all__ = ["OverlapSplitter"]
