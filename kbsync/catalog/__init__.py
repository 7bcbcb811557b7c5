# kbsync/catalog/__init__.py
"""
File catalog: data model, content hashing and persistence.
"""

from kbsync.catalog.hashing import hash_bytes, hash_file, hash_file_async
from kbsync.catalog.maintenance import (
    MaintenanceReport,
    clean_error_records,
    find_missing_records,
    remove_missing_records,
    remove_temporary_records,
)
from kbsync.catalog.mime import mime_type_from_extension, mime_type_from_name
from kbsync.catalog.schema import (
    Catalog,
    FileRecord,
    LegacyCatalogEntry,
    ProcessingStatus,
    SourceLocation,
    utc_now_iso,
)
from kbsync.catalog.store import CatalogStore

__all__ = [
    "Catalog",
    "CatalogStore",
    "FileRecord",
    "LegacyCatalogEntry",
    "MaintenanceReport",
    "ProcessingStatus",
    "SourceLocation",
    "clean_error_records",
    "find_missing_records",
    "hash_bytes",
    "hash_file",
    "hash_file_async",
    "mime_type_from_extension",
    "mime_type_from_name",
    "remove_missing_records",
    "remove_temporary_records",
    "utc_now_iso",
]
