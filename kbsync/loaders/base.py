# kbsync/loaders/base.py
"""
Segment model and the loader protocol.

A loader turns one file into an ordered list of text segments (one per PDF page,
one per text or DOCX file). An empty list is a meaningful result: the document
has no extractable content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from kbsync.catalog.mime import mime_type_from_name
from kbsync.catalog.schema import utc_now_iso


class Segment(BaseModel):
    """Extracted text of one document part, with source metadata."""

    text: str = Field(..., description="Extracted text")
    metadata: Dict[str, Any] = Field(default_factory=dict)


@runtime_checkable
class DocumentLoader(Protocol):
    """Protocol for document loaders."""

    def load(self, path: Path, file_id: Optional[str] = None) -> List[Segment]:
        """Extract text segments from a file. May raise DocumentLoadingError."""
        ...


def base_metadata(
    path: Path,
    file_id: Optional[str] = None,
    page_number: int = 1,
    total_pages: int = 1,
) -> Dict[str, Any]:
    """Metadata attached to every segment."""
    meta: Dict[str, Any] = {
        "source": str(path),
        "fileName": path.name,
        "fileType": path.suffix.lower().lstrip("."),
        "mimeType": mime_type_from_name(path.name),
        "pageNumber": page_number,
        "totalPages": total_pages,
        "createdAt": utc_now_iso(),
    }
    if file_id:
        meta["fileId"] = file_id
    return meta


__all__ = ["Segment", "DocumentLoader", "base_metadata"]
