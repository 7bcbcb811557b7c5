# kbsync/catalog/store.py
"""
Catalog persistence and record mutation.

CatalogStore owns the catalog JSON document. It loads it once per sync pass,
hands out the in-memory Catalog, applies record mutations and writes the whole
document back atomically (temp file + fsync + os.replace), so a crash never
leaves a half-written catalog behind.

Usage:
    store = CatalogStore(".kbsync/file-catalog.json")
    store.load()

    record = store.upsert_by_identity("a.pdf", size=1234, mime_type="application/pdf",
                                      source_location=SourceLocation.MANUAL)
    store.update(record.id, content_hash="...")
    store.save()
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from kbsync.catalog.mime import mime_type_from_extension
from kbsync.catalog.schema import (
    Catalog,
    FileRecord,
    LegacyCatalogEntry,
    ProcessingStatus,
    SourceLocation,
    utc_now_iso,
)
from kbsync.core.exceptions import (
    CatalogError,
    CatalogIntegrityError,
    CatalogIOError,
    RecordNotFoundError,
)
from kbsync.core.paths import KBSyncPaths
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import CATALOG

_module_logger = get_logger(__name__)


class CatalogStore:
    """
    Load/save the catalog and mutate its records in memory.

    Single writer: one process, one store instance per catalog file. save() is
    additionally serialized with a lock so worker threads never interleave writes.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Args:
            path: Catalog JSON path. Defaults to <workspace>/file-catalog.json.
            logger: Logger to use; defaults to this module's logger.
        """
        self._path = Path(path) if path is not None else KBSyncPaths.catalog()
        self._log = logger or _module_logger
        self._catalog: Optional[Catalog] = None
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def catalog(self) -> Catalog:
        """The in-memory catalog, loaded on first access."""
        if self._catalog is None:
            return self.load()
        return self._catalog

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> Catalog:
        """
        Read the catalog from disk.

        Missing file: empty catalog. Legacy array format: migrated and persisted.

        Raises:
            CatalogIOError: The file exists but cannot be read or parsed. An
                unreadable catalog is never replaced by an empty one.
        """
        if not self._path.exists():
            self._log.info(f"{CATALOG} No catalog at {self._path}, starting empty")
            self._catalog = Catalog()
            return self._catalog

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CatalogIOError(f"Cannot read catalog {self._path}: {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogIOError(f"Catalog {self._path} is not valid JSON: {e}") from e

        if isinstance(raw, list):
            self._catalog = self._migrate_legacy(raw)
            self.save()
            return self._catalog

        if not isinstance(raw, dict):
            raise CatalogIOError(f"Unexpected catalog shape in {self._path}")

        self._repair_chunk_counts(raw)
        try:
            self._catalog = Catalog.model_validate(raw)
        except ValidationError as e:
            raise CatalogIOError(f"Catalog {self._path} failed validation: {e}") from e

        self._log.debug(f"{CATALOG} Loaded {len(self._catalog)} records from {self._path}")
        return self._catalog

    def save(self, catalog: Optional[Catalog] = None) -> None:
        """
        Persist the catalog atomically, refreshing lastUpdated.

        Raises:
            CatalogIntegrityError: Two records claim the same chunk id.
            CatalogIOError: The write failed; the previous file is left intact.
        """
        catalog, payload = self._serialize(catalog)
        self._write(catalog, payload)

    async def save_async(self, catalog: Optional[Catalog] = None) -> None:
        """
        save() for coroutines: the document is serialized on the calling thread,
        only the file write runs in a worker thread.
        """
        catalog, payload = self._serialize(catalog)
        await asyncio.to_thread(self._write, catalog, payload)

    def _serialize(self, catalog: Optional[Catalog]) -> tuple[Catalog, str]:
        if catalog is None:
            catalog = self._catalog
        if catalog is None:
            raise CatalogError("No catalog loaded")

        shared = catalog.duplicate_chunk_ids()
        if shared:
            raise CatalogIntegrityError(
                f"Chunk ids owned by more than one record: {sorted(shared)[:5]}"
            )

        catalog.last_updated = utc_now_iso()
        return catalog, json.dumps(catalog.to_document(), indent=2)

    def _write(self, catalog: Catalog, payload: str) -> None:
        with self._write_lock:
            self._atomic_write(payload)
            self._catalog = catalog
        self._log.debug(f"{CATALOG} Saved {len(catalog)} records to {self._path}")

    def _atomic_write(self, payload: str) -> None:
        directory = self._path.parent
        tmp_name: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise CatalogIOError(f"Cannot write catalog {self._path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def _migrate_legacy(self, entries: list[Any]) -> Catalog:
        self._log.info(f"{CATALOG} Migrating file catalog from array to object format")
        now = utc_now_iso()
        catalog = Catalog()

        for raw in entries:
            try:
                entry = LegacyCatalogEntry.model_validate(raw)
            except ValidationError as e:
                raise CatalogIOError(f"Invalid legacy catalog entry {raw!r}: {e}") from e

            record_id = str(uuid.uuid4())
            # Legacy entries only recorded a count, never the ids, so no chunks are
            # claimed here; a full resync clears whatever the old format left behind.
            if entry.document_count:
                self._log.debug(
                    f"{CATALOG} {entry.filename}: legacy documentCount="
                    f"{entry.document_count} not carried over (no chunk ids)"
                )
            catalog.files[record_id] = FileRecord(
                id=record_id,
                name=entry.filename,
                mime_type=mime_type_from_extension(entry.type),
                size=entry.size,
                last_modified=now,
                source_location=SourceLocation.EXTERNAL_SYNC,
                processing_status=ProcessingStatus.SUCCESS,
                processed_at=now,
            )

        return catalog

    def _repair_chunk_counts(self, raw: dict) -> None:
        files = raw.get("files")
        if not isinstance(files, dict):
            return
        for key, record in files.items():
            if not isinstance(record, dict):
                continue
            record.setdefault("id", key)
            ids = record.get("chunkIds") or []
            if record.get("chunkCount", 0) != len(ids):
                self._log.warning(
                    f"{CATALOG} {record.get('name', key)}: chunkCount "
                    f"{record.get('chunkCount')} != {len(ids)} chunk ids, using ids"
                )
                record["chunkCount"] = len(ids)
                record["chunkIds"] = ids

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get(self, record_id: str) -> Optional[FileRecord]:
        return self.catalog.files.get(record_id)

    def find_by_name(self, name: str) -> Optional[FileRecord]:
        return self.catalog.find_by_name(name)

    def find_by_external_id(self, external_id: str) -> Optional[FileRecord]:
        return self.catalog.find_by_external_id(external_id)

    def records_with_status(self, status: ProcessingStatus) -> List[FileRecord]:
        """Copies of all records in the given status."""
        return [
            r.model_copy(deep=True)
            for r in self.catalog.files.values()
            if r.processing_status == status
        ]

    def snapshot(self) -> dict:
        """Denormalized, JSON-ready copy of the whole catalog."""
        return copy.deepcopy(self.catalog.to_document())

    # -------------------------------------------------------------------------
    # Mutations (in memory; call save() to persist)
    # -------------------------------------------------------------------------

    def upsert_by_identity(
        self,
        name: str,
        size: int,
        mime_type: str,
        source_location: SourceLocation,
        external_id: Optional[str] = None,
    ) -> FileRecord:
        """
        Register a file, reusing an existing record when one matches.

        Matching order: external id (external-sync sources only), then name. A
        renamed Drive file therefore keeps its record instead of being duplicated.
        Matched records are set back to pending.
        """
        catalog = self.catalog
        existing: Optional[FileRecord] = None

        if external_id and source_location == SourceLocation.EXTERNAL_SYNC:
            existing = catalog.find_by_external_id(external_id)
        if existing is None:
            existing = catalog.find_by_name(name)

        if existing is not None:
            self._log.debug(f"{CATALOG} {name} already in catalog, updating metadata")
            updates: dict[str, Any] = {
                "name": name,
                "size": size,
                "processing_status": ProcessingStatus.PENDING,
            }
            if external_id:
                updates["external_id"] = external_id
            return self.update(existing.id, **updates)

        record = FileRecord(
            id=str(uuid.uuid4()),
            name=name,
            mime_type=mime_type,
            size=size,
            source_location=source_location,
            external_id=external_id,
            processing_status=ProcessingStatus.PENDING,
        )
        catalog.files[record.id] = record
        self._log.debug(f"{CATALOG} Added {name} as {record.id}")
        return record

    def update(self, record_id: str, **fields: Any) -> FileRecord:
        """
        Merge fields into a record and refresh last_modified.

        error_message is cleared whenever the resulting status is not error.

        Raises:
            RecordNotFoundError: No record with this id.
            CatalogIntegrityError: The result breaks a record or catalog invariant.
        """
        catalog = self.catalog
        record = catalog.files.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)

        unknown = set(fields) - set(FileRecord.model_fields)
        if unknown:
            raise ValueError(f"Unknown FileRecord fields: {sorted(unknown)}")
        if fields.get("id", record_id) != record_id:
            raise ValueError("A record's id cannot be changed")

        data = record.model_dump()
        data.update(fields)
        data["last_modified"] = utc_now_iso()
        if ProcessingStatus(data["processing_status"]) != ProcessingStatus.ERROR:
            data["error_message"] = None

        try:
            updated = FileRecord.model_validate(data)
        except ValidationError as e:
            raise CatalogIntegrityError(f"Invalid update for {record_id}: {e}") from e

        if "chunk_ids" in fields and updated.chunk_ids:
            claimed = {
                cid
                for rid, other in catalog.files.items()
                if rid != record_id
                for cid in other.chunk_ids
            }
            clash = claimed.intersection(updated.chunk_ids)
            if clash:
                raise CatalogIntegrityError(
                    f"Chunk ids already owned by another record: {sorted(clash)[:5]}"
                )

        catalog.files[record_id] = updated
        return updated

    def remove(self, record_id: str) -> bool:
        """Delete a record. Returns whether it existed."""
        removed = self.catalog.files.pop(record_id, None)
        if removed is None:
            self._log.warning(f"{CATALOG} File with ID {record_id} not found in catalog")
            return False
        return True

    def remove_with_chunks(self, record_id: str) -> Optional[List[str]]:
        """
        Remove a record and hand back the chunk ids it owned.

        Collection and removal happen together, so chunk ids are never lost
        without the record being gone too. Returns None if the id is unknown.
        """
        record = self.catalog.files.pop(record_id, None)
        if record is None:
            self._log.warning(f"{CATALOG} File with ID {record_id} not found in catalog")
            return None
        return list(record.chunk_ids)

    def reset_status(self, record_id: str) -> FileRecord:
        """Operator escape hatch: force a record back to pending."""
        return self.update(record_id, processing_status=ProcessingStatus.PENDING)

    def reset_errors(self) -> List[str]:
        """Reset every error record to pending. Returns the affected ids."""
        ids = [
            rid
            for rid, r in self.catalog.files.items()
            if r.processing_status == ProcessingStatus.ERROR
        ]
        for rid in ids:
            self.reset_status(rid)
        if ids:
            self._log.info(f"{CATALOG} Reset {len(ids)} error records to pending")
        return ids


__all__ = ["CatalogStore"]
