# kbsync/loaders/factory.py
"""
Loader selection by file extension.

Usage:
    loader = get_document_loader(path)
    segments = loader.load(path)
"""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Dict, Type

from kbsync.catalog.mime import is_temporary_name
from kbsync.loaders.base import DocumentLoader
from kbsync.loaders.docx import DocxLoader
from kbsync.loaders.pdf import PdfLoader
from kbsync.loaders.text import TextLoader
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import LOADER

logger = get_logger(__name__)

LOADERS: Dict[str, Type] = {
    ".pdf": PdfLoader,
    ".docx": DocxLoader,
    ".txt": TextLoader,
    ".md": TextLoader,
}

SUPPORTED_EXTENSIONS = frozenset(LOADERS)


def is_supported_file_type(name: str | Path) -> bool:
    """
    Whether a file should be catalogued.

    Temporary files (Office lock files, macOS resource forks) are never supported,
    even with a supported extension.
    """
    if not name:
        return False
    pure = PurePath(name)
    if is_temporary_name(pure.name):
        return False
    return pure.suffix.lower() in SUPPORTED_EXTENSIONS


def get_document_loader(path: str | Path) -> DocumentLoader:
    """Loader for the file's extension; unknown extensions are read as text."""
    ext = PurePath(path).suffix.lower()
    loader_cls = LOADERS.get(ext)
    if loader_cls is None:
        logger.warning(f"{LOADER} No specific loader for extension {ext!r}, using TextLoader")
        loader_cls = TextLoader
    return loader_cls()


__all__ = [
    "LOADERS",
    "SUPPORTED_EXTENSIONS",
    "is_supported_file_type",
    "get_document_loader",
]
