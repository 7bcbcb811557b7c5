# kbsync/chunking/chunk.py
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """
    One embeddable unit of text.

    The vector store assigns the id it is stored under; a Chunk only knows its
    parent document and position.
    """

    doc_id: str = Field(..., description="Parent document (file name)")
    chunk_index: int = Field(..., description="Order inside parent document")
    content: str = Field(..., description="Chunk text content")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.content
