# kbsync/catalog/maintenance.py
"""
Operator maintenance for the file catalog.

These operations fix up a catalog that drifted from the watched directory
(temporary office files that slipped in, documents deleted while no sync ran,
files stuck in error). Every function saves the catalog once and returns a
MaintenanceReport whose stale_chunk_ids must be purged from the vector store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from kbsync.catalog.mime import is_temporary_name
from kbsync.catalog.schema import FileRecord, ProcessingStatus
from kbsync.catalog.store import CatalogStore
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import CATALOG

_module_logger = get_logger(__name__)

MISSING_FILE_MESSAGE = "File not found in knowledgebase"

# Error messages that reprocessing will not fix.
UNRECOVERABLE_ERRORS = (
    "no content extracted",
    "invalid pdf structure",
    "file not found",
)


@dataclass
class MaintenanceReport:
    """Outcome of a maintenance pass."""

    examined: int = 0
    removed: List[str] = field(default_factory=list)
    reset: List[str] = field(default_factory=list)
    marked_missing: List[str] = field(default_factory=list)
    stale_chunk_ids: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return (
            f"examined={self.examined}, removed={len(self.removed)}, "
            f"reset={len(self.reset)}, marked_missing={len(self.marked_missing)}, "
            f"stale_chunks={len(self.stale_chunk_ids)}"
        )

    def merge(self, other: "MaintenanceReport") -> "MaintenanceReport":
        return MaintenanceReport(
            examined=max(self.examined, other.examined),
            removed=self.removed + other.removed,
            reset=self.reset + other.reset,
            marked_missing=self.marked_missing + other.marked_missing,
            stale_chunk_ids=self.stale_chunk_ids + other.stale_chunk_ids,
        )


def is_unrecoverable_error(message: Optional[str]) -> bool:
    if not message:
        return False
    lowered = message.lower()
    return any(marker in lowered for marker in UNRECOVERABLE_ERRORS)


def _remove(store: CatalogStore, record: FileRecord, report: MaintenanceReport) -> None:
    chunk_ids = store.remove_with_chunks(record.id)
    if chunk_ids is None:
        return
    report.removed.append(record.id)
    report.stale_chunk_ids.extend(chunk_ids)


def remove_temporary_records(
    store: CatalogStore, logger: Optional[logging.Logger] = None
) -> MaintenanceReport:
    """Drop records for temporary files (names starting with ~$ or ._)."""
    log = logger or _module_logger
    records = list(store.catalog.files.values())
    report = MaintenanceReport(examined=len(records))

    for record in records:
        if is_temporary_name(record.name):
            log.info(f"{CATALOG} Removing temporary file from catalog: {record.name}")
            _remove(store, record, report)

    store.save()
    log.info(f"{CATALOG} Temporary cleanup: {report.summary}")
    return report


def find_missing_records(store: CatalogStore, directory: str | Path) -> List[FileRecord]:
    """Copies of the records whose file is no longer in the directory."""
    root = Path(directory)
    return [
        record.model_copy(deep=True)
        for record in store.catalog.files.values()
        if not (root / record.name).is_file()
    ]


def remove_missing_records(
    store: CatalogStore,
    directory: str | Path,
    remove_all: bool = False,
    logger: Optional[logging.Logger] = None,
) -> MaintenanceReport:
    """
    Handle records whose file has disappeared from the directory.

    With remove_all every missing record is dropped. Otherwise a missing record
    is dropped only if it is temporary or already failed with an unrecoverable
    error; the rest are kept and marked as error so an operator can see them.
    """
    log = logger or _module_logger
    missing = find_missing_records(store, directory)
    report = MaintenanceReport(examined=len(store.catalog))

    for record in missing:
        if (
            remove_all
            or is_temporary_name(record.name)
            or (record.is_error and is_unrecoverable_error(record.error_message))
        ):
            log.info(f"{CATALOG} Removing missing file from catalog: {record.name}")
            _remove(store, record, report)
        else:
            store.update(
                record.id,
                processing_status=ProcessingStatus.ERROR,
                error_message=MISSING_FILE_MESSAGE,
            )
            report.marked_missing.append(record.id)

    store.save()
    log.info(f"{CATALOG} Found {len(missing)} missing files: {report.summary}")
    return report


def clean_error_records(
    store: CatalogStore,
    directory: str | Path,
    remove_all: bool = False,
    reset: bool = False,
    logger: Optional[logging.Logger] = None,
) -> MaintenanceReport:
    """
    Deal with records in error status.

    remove_all drops all of them, reset puts all of them back to pending. By
    default only error records whose file is gone or whose error is
    unrecoverable are dropped.
    """
    log = logger or _module_logger
    root = Path(directory)
    errors = [r for r in store.catalog.files.values() if r.is_error]
    report = MaintenanceReport(examined=len(store.catalog))

    for record in errors:
        if remove_all:
            log.info(f"{CATALOG} Removing error file from catalog: {record.name}")
            _remove(store, record, report)
        elif reset:
            store.reset_status(record.id)
            report.reset.append(record.id)
        elif not (root / record.name).is_file() or is_unrecoverable_error(
            record.error_message
        ):
            log.info(f"{CATALOG} Removing unrecoverable error file: {record.name}")
            _remove(store, record, report)

    store.save()
    log.info(f"{CATALOG} Found {len(errors)} files with errors: {report.summary}")
    return report


__all__ = [
    "MaintenanceReport",
    "MISSING_FILE_MESSAGE",
    "is_temporary_name",
    "is_unrecoverable_error",
    "remove_temporary_records",
    "find_missing_records",
    "remove_missing_records",
    "clean_error_records",
]
