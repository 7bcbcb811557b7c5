# kbsync/loaders/pdf.py
"""PDF loader backed by pypdf: one segment per page with text."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from kbsync.core.exceptions import DocumentLoadingError
from kbsync.loaders.base import Segment, base_metadata
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import LOADER

logger = get_logger(__name__)


class PdfLoader:
    def load(self, path: Path, file_id: Optional[str] = None) -> List[Segment]:
        try:
            from pypdf import PdfReader
            from pypdf.errors import PdfReadError
        except ImportError:
            raise RuntimeError("pypdf is required for PDF files. Install with: pip install pypdf")

        path = Path(path)
        if not path.is_file():
            raise DocumentLoadingError(f"File does not exist: {path}", str(path))

        try:
            reader = PdfReader(str(path))
            pages = [page.extract_text() or "" for page in reader.pages]
        except PdfReadError as e:
            raise DocumentLoadingError(f"Invalid PDF structure: {e}", str(path)) from e
        except OSError as e:
            raise DocumentLoadingError(f"Cannot read {path.name}: {e}", str(path)) from e

        total = len(pages)
        segments = [
            Segment(text=text, metadata=base_metadata(path, file_id, index + 1, total))
            for index, text in enumerate(pages)
            if text.strip()
        ]
        if not segments:
            logger.warning(f"{LOADER} No text extracted from PDF {path.name} ({total} pages)")
        return segments


__all__ = ["PdfLoader"]
