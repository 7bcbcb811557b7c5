# kbsync/sync/detector.py
"""
Change detection between the watched directory and the catalog.

Classifies every observed file:

    prior record            observation                     result
    ------------            -----------                     ------
    absent                  present                         NEW       -> process
    hash+size equal, ok     present                         UNCHANGED -> skip
    hash/size differ,
      or not yet succeeded  present                         MODIFIED  -> process
    present                 absent                          CANDIDATE-DELETED

Records are looked up by external id first (when the source supplies one for the
file), then by name. Manual-upload records that disappeared are matched against
new files by content hash, so a local rename keeps its record.

MODIFIED and NEW records are written to the catalog immediately, and the catalog
is saved once at the end. A later crash therefore never loses a detection.

This module ONLY classifies and records - it does NOT ingest.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set

from kbsync.catalog.schema import FileRecord, ProcessingStatus, SourceLocation
from kbsync.catalog.store import CatalogStore
from kbsync.loaders.factory import is_supported_file_type
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import DETECT
from kbsync.sync.protocols import SupportedPredicate
from kbsync.sync.scanner import ScannedFile, scan_directory

_module_logger = get_logger(__name__)


@dataclass
class DetectionResult:
    """
    Result of change detection.

    - files_to_process: names that must be (re)ingested
    - files_to_skip: names whose record is up to date
    - deleted_record_ids: records with no file in the directory
    - renamed: old name -> new name, for records matched across a rename
    - hash_failures: names that could not be hashed (always in files_to_process)
    """

    files_to_process: List[str] = field(default_factory=list)
    files_to_skip: List[str] = field(default_factory=list)
    deleted_record_ids: List[str] = field(default_factory=list)
    renamed: Dict[str, str] = field(default_factory=dict)
    hash_failures: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return (
            f"process={len(self.files_to_process)}, "
            f"skip={len(self.files_to_skip)}, "
            f"delete={len(self.deleted_record_ids)}, "
            f"renamed={len(self.renamed)}, "
            f"hash_failures={len(self.hash_failures)}"
        )


class ChangeDetector:
    """
    Usage:
        detector = ChangeDetector(store)
        result = detector.detect("knowledgebase")

        for name in result.files_to_process:
            ...
    """

    def __init__(
        self,
        store: CatalogStore,
        supported: SupportedPredicate = is_supported_file_type,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._supported = supported
        self._log = logger or _module_logger

    async def detect_async(
        self,
        directory: str | Path,
        external_ids: Optional[Mapping[str, str]] = None,
    ) -> DetectionResult:
        """detect() in a worker thread; hashing is blocking file I/O."""
        return await asyncio.to_thread(self.detect, directory, external_ids)

    def detect(
        self,
        directory: str | Path,
        external_ids: Optional[Mapping[str, str]] = None,
    ) -> DetectionResult:
        """
        Compare the directory against the catalog and record the outcome.

        Args:
            directory: Watched directory (not recursed).
            external_ids: Optional file name -> external id, from the document source.

        Returns:
            DetectionResult. Catalog I/O errors propagate.
        """
        external_ids = external_ids or {}
        result = DetectionResult()
        catalog = self._store.catalog

        scan = scan_directory(directory, self._supported)
        self._log.info(f"{DETECT} Scanned {len(scan.files)} files in {directory}")

        matched: Set[str] = set()
        unmatched_files: List[ScannedFile] = []

        for scanned in scan.files:
            external_id = external_ids.get(scanned.name)
            record: Optional[FileRecord] = None
            if external_id:
                record = catalog.find_by_external_id(external_id)
            if record is None:
                record = catalog.find_by_name(scanned.name)

            if record is None or record.id in matched:
                unmatched_files.append(scanned)
                continue

            matched.add(record.id)
            self._classify_existing(record, scanned, external_id, result)

        candidates = [r for rid, r in catalog.files.items() if rid not in matched]
        remaining, renamed_ids = self._detect_renames(
            candidates, unmatched_files, external_ids, result
        )

        for scanned in remaining:
            self._register_new(scanned, external_ids.get(scanned.name), result)

        result.deleted_record_ids = [r.id for r in candidates if r.id not in renamed_ids]

        self._store.save()
        self._log.info(f"{DETECT} Detection complete: {result.summary}")
        return result

    def _classify_existing(
        self,
        record: FileRecord,
        scanned: ScannedFile,
        external_id: Optional[str],
        result: DetectionResult,
    ) -> None:
        renamed = record.name != scanned.name
        updates: dict = {}
        if renamed:
            updates["name"] = scanned.name
            result.renamed[record.name] = scanned.name
            self._log.info(f"{DETECT} {record.name} renamed to {scanned.name} (same external id)")
        if external_id and record.external_id != external_id:
            updates["external_id"] = external_id

        if not scanned.hashed:
            self._log.warning(
                f"{DETECT} Could not hash {scanned.name}, processing anyway: {scanned.hash_error}"
            )
            self._store.update(
                record.id,
                size=scanned.size,
                processing_status=ProcessingStatus.PENDING,
                **updates,
            )
            result.hash_failures.append(scanned.name)
            result.files_to_process.append(scanned.name)
            return

        changed = (
            renamed
            or record.content_hash != scanned.content_hash
            or record.size != scanned.size
            or record.processing_status != ProcessingStatus.SUCCESS
        )

        if changed:
            self._log.debug(f"{DETECT} {scanned.name} modified")
            self._store.update(
                record.id,
                size=scanned.size,
                content_hash=scanned.content_hash,
                processing_status=ProcessingStatus.PENDING,
                **updates,
            )
            result.files_to_process.append(scanned.name)
            return

        if updates:
            # Backfill an external id on an otherwise unchanged record.
            self._store.update(record.id, **updates)
        result.files_to_skip.append(scanned.name)

    def _detect_renames(
        self,
        candidates: List[FileRecord],
        unmatched_files: List[ScannedFile],
        external_ids: Mapping[str, str],
        result: DetectionResult,
    ) -> tuple[List[ScannedFile], Set[str]]:
        """Match vanished manual records to new manual files by content hash."""
        remaining = list(unmatched_files)
        renamed_ids: Set[str] = set()

        for record in candidates:
            if record.source_location != SourceLocation.MANUAL or not record.content_hash:
                continue

            match = next(
                (
                    f
                    for f in remaining
                    if f.hashed
                    and f.content_hash == record.content_hash
                    and f.name != record.name
                    and f.name not in external_ids
                ),
                None,
            )
            if match is None:
                continue

            remaining.remove(match)
            renamed_ids.add(record.id)
            self._store.update(
                record.id,
                name=match.name,
                size=match.size,
                processing_status=ProcessingStatus.PENDING,
            )
            result.renamed[record.name] = match.name
            result.files_to_process.append(match.name)
            self._log.info(f"{DETECT} {record.name} renamed to {match.name} (same content)")

        return remaining, renamed_ids

    def _register_new(
        self,
        scanned: ScannedFile,
        external_id: Optional[str],
        result: DetectionResult,
    ) -> None:
        source = SourceLocation.EXTERNAL_SYNC if external_id else SourceLocation.MANUAL
        record = self._store.upsert_by_identity(
            name=scanned.name,
            size=scanned.size,
            mime_type=scanned.mime_type,
            source_location=source,
            external_id=external_id,
        )

        if scanned.hashed:
            self._store.update(record.id, content_hash=scanned.content_hash)
        else:
            self._log.warning(
                f"{DETECT} Could not hash new file {scanned.name}, processing anyway: "
                f"{scanned.hash_error}"
            )
            result.hash_failures.append(scanned.name)

        self._log.debug(f"{DETECT} {scanned.name} is new")
        result.files_to_process.append(scanned.name)


def detect_changes(
    store: CatalogStore,
    directory: str | Path,
    external_ids: Optional[Mapping[str, str]] = None,
    supported: SupportedPredicate = is_supported_file_type,
) -> DetectionResult:
    """Convenience function to run one detection."""
    return ChangeDetector(store, supported=supported).detect(directory, external_ids)


__all__ = ["ChangeDetector", "DetectionResult", "detect_changes"]
