# kbsync/loaders/__init__.py
"""Document loaders: file -> text segments."""

from kbsync.loaders.base import DocumentLoader, Segment
from kbsync.loaders.docx import DocxLoader
from kbsync.loaders.factory import (
    SUPPORTED_EXTENSIONS,
    get_document_loader,
    is_supported_file_type,
)
from kbsync.loaders.pdf import PdfLoader
from kbsync.loaders.text import TextLoader

__all__ = [
    "DocumentLoader",
    "Segment",
    "TextLoader",
    "PdfLoader",
    "DocxLoader",
    "SUPPORTED_EXTENSIONS",
    "get_document_loader",
    "is_supported_file_type",
]
