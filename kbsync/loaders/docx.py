# kbsync/loaders/docx.py
"""DOCX loader backed by python-docx."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from kbsync.core.exceptions import DocumentLoadingError
from kbsync.loaders.base import Segment, base_metadata
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import LOADER

logger = get_logger(__name__)


class DocxLoader:
    """
    Extracts paragraph text and table cell text into a single segment.

    python-docx raises PackageNotFoundError (and zipfile errors) for files that
    are not valid .docx packages; both become DocumentLoadingError.
    """

    def load(self, path: Path, file_id: Optional[str] = None) -> List[Segment]:
        try:
            import docx
        except ImportError:
            raise RuntimeError(
                "python-docx is required for DOCX files. Install with: pip install python-docx"
            )

        path = Path(path)
        if not path.is_file():
            raise DocumentLoadingError(f"File does not exist: {path}", str(path))

        try:
            document = docx.Document(str(path))
        except Exception as e:
            raise DocumentLoadingError(f"Cannot open DOCX {path.name}: {e}", str(path)) from e

        parts = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))

        text = "\n".join(parts)
        if not text.strip():
            logger.warning(f"{LOADER} No text extracted from DOCX {path.name}")
            return []

        return [Segment(text=text, metadata=base_metadata(path, file_id))]


__all__ = ["DocxLoader"]
