# kbsync/core/exceptions.py
"""
Exception hierarchy for kbsync.

Only CatalogIOError aborts a sync pass. Everything raised per file (hashing,
loading, vector store) is caught by the orchestrator and recorded on the
file's catalog entry instead.
"""

from __future__ import annotations


class KBSyncError(Exception):
    """Base class for all kbsync errors."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(KBSyncError):
    """Invalid or unreadable configuration."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CatalogError(KBSyncError):
    """Base class for catalog errors."""


class CatalogIOError(CatalogError):
    """The persisted catalog could not be read or written."""


class CatalogIntegrityError(CatalogError):
    """A write would break a catalog invariant (e.g. a shared chunk id)."""


class RecordNotFoundError(CatalogError):
    """No catalog record exists for the given id."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"File with ID {record_id} not found in catalog")


# ---------------------------------------------------------------------------
# Per-file errors
# ---------------------------------------------------------------------------


class HashError(KBSyncError):
    """A file's bytes could not be read for hashing."""

    def __init__(self, path: str, original_error: Exception):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Cannot hash {path}: {original_error}")


class DocumentLoadingError(KBSyncError):
    """A document loader could not extract text from a file."""

    def __init__(self, message: str, file_path: str):
        self.file_path = file_path
        super().__init__(message)


class VectorStoreError(KBSyncError):
    """A vector store call failed."""


class SourceError(KBSyncError):
    """A document source could not list or fetch files."""


class CacheError(KBSyncError):
    """The answer cache could not be flushed."""


__all__ = [
    "KBSyncError",
    "ConfigError",
    "ConfigNotFoundError",
    "CatalogError",
    "CatalogIOError",
    "CatalogIntegrityError",
    "RecordNotFoundError",
    "HashError",
    "DocumentLoadingError",
    "VectorStoreError",
    "SourceError",
    "CacheError",
]
