# kbsync/core/__init__.py
"""Shared foundations: exceptions, paths and configuration."""

from kbsync.core.exceptions import (
    CacheError,
    CatalogError,
    CatalogIntegrityError,
    CatalogIOError,
    ConfigError,
    ConfigNotFoundError,
    DocumentLoadingError,
    HashError,
    KBSyncError,
    RecordNotFoundError,
    SourceError,
    VectorStoreError,
)
from kbsync.core.paths import KBSyncPaths

__all__ = [
    "KBSyncPaths",
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
