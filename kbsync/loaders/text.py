# kbsync/loaders/text.py
"""Plain text and Markdown loader."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from kbsync.core.exceptions import DocumentLoadingError
from kbsync.loaders.base import Segment, base_metadata
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import LOADER

logger = get_logger(__name__)


class TextLoader:
    """Reads the whole file as UTF-8 (undecodable bytes replaced) into one segment."""

    def load(self, path: Path, file_id: Optional[str] = None) -> List[Segment]:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DocumentLoadingError(f"Cannot read {path.name}: {e}", str(path)) from e

        if not text.strip():
            logger.warning(f"{LOADER} Empty text file {path.name}")
            return []

        return [Segment(text=text, metadata=base_metadata(path, file_id))]


__all__ = ["TextLoader"]
