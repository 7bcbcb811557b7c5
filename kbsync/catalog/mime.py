# kbsync/catalog/mime.py
"""MIME types derived from file extensions, and temporary-file names."""

from __future__ import annotations

from pathlib import PurePath

DEFAULT_MIME_TYPE = "application/octet-stream"

# Office lock files (~$x.docx) and macOS resource forks (._x.pdf).
TEMPORARY_PREFIXES = ("~$", "._")

MIME_BY_EXTENSION: dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain",
    "md": "text/markdown",
    "gdoc": "application/vnd.google-apps.document",
    "html": "text/html",
    "htm": "text/html",
    "csv": "text/csv",
    "json": "application/json",
    "xml": "application/xml",
}


def mime_type_from_extension(extension: str) -> str:
    """Map an extension ("pdf", ".PDF") to a MIME type."""
    return MIME_BY_EXTENSION.get(extension.lower().lstrip("."), DEFAULT_MIME_TYPE)


def is_temporary_name(name: str) -> bool:
    return PurePath(name).name.startswith(TEMPORARY_PREFIXES)


def mime_type_from_name(name: str) -> str:
    return mime_type_from_extension(PurePath(name).suffix)


__all__ = [
    "DEFAULT_MIME_TYPE",
    "MIME_BY_EXTENSION",
    "TEMPORARY_PREFIXES",
    "is_temporary_name",
    "mime_type_from_extension",
    "mime_type_from_name",
]
