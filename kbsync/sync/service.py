# kbsync/sync/service.py
"""
Sync service: one entry point for a complete sync pass.

A pass runs:
1. Load the catalog (catalog I/O errors abort the pass)
2. (Optional) Provision files from the document source into the watched directory
3. (Full resync only) Clear the vector store and cache, mark every record pending
4. Detect changes
5. Reconcile the catalog and purge stale chunks from the vector store
6. Ingest new and changed files, bounded by the configured timeout

Per-file problems never fail the pass; they end up in the summary and in the
records' error status.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from kbsync.catalog.maintenance import (
    MaintenanceReport,
    clean_error_records,
    remove_missing_records,
    remove_temporary_records,
)
from kbsync.catalog.schema import FileRecord, ProcessingStatus
from kbsync.catalog.store import CatalogStore
from kbsync.core.exceptions import KBSyncError, SourceError
from kbsync.loaders.factory import is_supported_file_type
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import SYNC
from kbsync.sync.detector import ChangeDetector
from kbsync.sync.orchestrator import IngestionOrchestrator, IngestReport
from kbsync.sync.protocols import (
    Cache,
    DocumentSource,
    LoaderFactory,
    Splitter,
    SupportedPredicate,
    VectorStore,
)
from kbsync.sync.reconciler import CatalogReconciler

_module_logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncSummary:
    """Summary of a sync pass."""

    processed: int = 0
    skipped: int = 0
    deleted: int = 0
    errors: int = 0
    renamed: int = 0
    chunks_added: int = 0
    chunks_removed: int = 0
    full_resync: bool = False
    error_details: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def add_error(self, detail: str) -> None:
        self.errors += 1
        self.error_details.append(detail)

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["finished_at"] = self.finished_at.isoformat() if self.finished_at else None
        data["duration_seconds"] = self.duration_seconds
        return data

    def __str__(self) -> str:
        return (
            f"processed {self.processed}, skipped {self.skipped}, "
            f"deleted {self.deleted}, errors {self.errors}, renamed {self.renamed}"
        )


class SyncService:
    """
    Usage:
        service = SyncService(
            store=CatalogStore(".kbsync/file-catalog.json"),
            directory="knowledgebase",
            loader_factory=get_document_loader,
            splitter=OverlapSplitter(),
            vector_store=QdrantVectorStore(embedder=OllamaEmbedder()),
        )

        summary = await service.run_sync()
        print(summary)
    """

    def __init__(
        self,
        *,
        store: CatalogStore,
        directory: str | Path,
        loader_factory: LoaderFactory,
        splitter: Splitter,
        vector_store: VectorStore,
        source: Optional[DocumentSource] = None,
        cache: Optional[Cache] = None,
        supported: SupportedPredicate = is_supported_file_type,
        max_workers: int = 1,
        timeout_seconds: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Args:
            store: Catalog store (owns the catalog file).
            directory: Watched directory holding the documents.
            loader_factory: Returns a DocumentLoader for a path.
            splitter: Splits loaded segments into chunks.
            vector_store: Where chunks are stored and purged.
            source: Optional source that provisions the directory before each pass.
            cache: Optional cache flushed on full resync.
            supported: Predicate deciding which file names are catalogued.
            max_workers: Files ingested in parallel.
            timeout_seconds: Upper bound for the ingestion phase of a pass.
            logger: Logger for this service and its components.
        """
        self._store = store
        self._directory = Path(directory)
        self._loader_factory = loader_factory
        self._splitter = splitter
        self._vector_store = vector_store
        self._source = source
        self._cache = cache
        self._supported = supported
        self._max_workers = max_workers
        self._timeout = timeout_seconds
        self._log = logger or _module_logger
        self._component_logger = logger

        self._detector = ChangeDetector(store, supported=supported, logger=logger)
        self._reconciler = CatalogReconciler(store, logger=logger)
        self._run_lock = asyncio.Lock()
        self._running = False

    @property
    def store(self) -> CatalogStore:
        return self._store

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def running(self) -> bool:
        return self._running

    # =========================================================================
    # Sync pass
    # =========================================================================

    async def run_sync(self, full_resync: bool = False) -> SyncSummary:
        """
        Run one sync pass. Only one pass runs at a time per service.

        Raises:
            CatalogIOError: The catalog could not be read or written.
        """
        async with self._run_lock:
            self._running = True
            try:
                return await self._run(full_resync)
            finally:
                self._running = False

    async def _run(self, full_resync: bool) -> SyncSummary:
        summary = SyncSummary(full_resync=full_resync)
        mode = "full resync" if full_resync else "incremental sync"
        self._log.info(f"{SYNC} Starting {mode} of {self._directory}")

        await asyncio.to_thread(self._store.load)
        await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)

        external_ids = await self._provision(summary)

        if full_resync:
            await self._reset_everything(summary)

        detection = await self._detector.detect_async(self._directory, external_ids)
        reconciled = await asyncio.to_thread(self._reconciler.reconcile, detection)

        summary.skipped = len(detection.files_to_skip)
        summary.deleted = len(reconciled.removed_record_ids)
        summary.renamed = len(detection.renamed)

        await self._purge(reconciled.stale_chunk_ids, summary)

        report = await self._ingest(reconciled.files_to_process, summary)
        summary.processed = len(report.succeeded)
        summary.chunks_added += report.chunks_added
        summary.chunks_removed += report.chunks_removed
        for name, message in report.failed.items():
            summary.add_error(f"{name}: {message}")

        summary.finished_at = _utcnow()
        self._log.info(f"{SYNC} Sync complete in {summary.duration_seconds:.1f}s: {summary}")
        return summary

    async def _provision(self, summary: SyncSummary) -> Optional[Dict[str, str]]:
        """Pull files from the source. Returns file name -> external id."""
        if self._source is None:
            return None

        try:
            descriptors = await asyncio.to_thread(self._source.list)
        except SourceError as e:
            self._log.error(f"{SYNC} Listing the document source failed: {e}")
            summary.add_error(f"source: {e}")
            return None

        external_ids: Dict[str, str] = {}
        for descriptor in descriptors:
            if descriptor.external_id:
                external_ids[descriptor.name] = descriptor.external_id
            try:
                await asyncio.to_thread(self._source.fetch, descriptor, self._directory)
            except SourceError as e:
                self._log.error(f"{SYNC} {e}")
                summary.add_error(f"{descriptor.name}: {e}")

        if self._source.authoritative:
            listed = {d.name for d in descriptors}
            await asyncio.to_thread(self._prune_unlisted, listed)

        self._log.info(f"{SYNC} Provisioned {len(descriptors)} files from source")
        return external_ids

    def _prune_unlisted(self, listed: set[str]) -> None:
        for path in self._directory.iterdir():
            if path.is_file() and self._supported(path.name) and path.name not in listed:
                self._log.info(f"{SYNC} Removing {path.name}: no longer in source")
                path.unlink()

    async def _reset_everything(self, summary: SyncSummary) -> None:
        try:
            await asyncio.to_thread(self._vector_store.delete_all)
        except Exception as e:
            self._log.error(f"{SYNC} Could not clear vector store, running incremental: {e}")
            summary.add_error(f"full resync: vector store not cleared: {e}")
            return

        if self._cache is not None:
            try:
                await asyncio.to_thread(self._cache.flush_all)
            except KBSyncError as e:
                self._log.warning(f"{SYNC} Cache flush failed: {e}")
                summary.add_error(f"cache: {e}")

        for record_id in list(self._store.catalog.files):
            self._store.update(
                record_id,
                chunk_count=0,
                chunk_ids=[],
                processing_status=ProcessingStatus.PENDING,
            )
        await self._store.save_async()
        self._log.info(f"{SYNC} Cleared vector store; all records marked pending")

    async def _purge(self, chunk_ids: Sequence[str], summary: SyncSummary) -> None:
        if not chunk_ids:
            return
        try:
            await asyncio.to_thread(self._vector_store.delete, list(chunk_ids))
        except Exception as e:
            # The records are already gone, so these vectors are orphans now.
            self._log.error(f"{SYNC} Failed to purge {len(chunk_ids)} stale chunks: {e}")
            summary.add_error(f"purge: {e}")
            return
        summary.chunks_removed += len(chunk_ids)
        self._log.info(f"{SYNC} Purged {len(chunk_ids)} stale chunks")

    async def _ingest(self, names: Sequence[str], summary: SyncSummary) -> IngestReport:
        orchestrator = IngestionOrchestrator(
            store=self._store,
            loader_factory=self._loader_factory,
            splitter=self._splitter,
            vector_store=self._vector_store,
            directory=self._directory,
            max_workers=self._max_workers,
            logger=self._component_logger,
        )
        report = IngestReport()
        if self._timeout is None:
            return await orchestrator.ingest(names, report)

        try:
            await asyncio.wait_for(orchestrator.ingest(names, report), self._timeout)
        except asyncio.TimeoutError:
            self._log.error(f"{SYNC} Ingestion timed out after {self._timeout}s")
            summary.add_error(
                f"timeout: ingestion stopped after {self._timeout}s; "
                f"unfinished files stay pending"
            )
            await self._store.save_async()
        return report

    # =========================================================================
    # Catalog views and operator actions
    # =========================================================================

    def _refresh(self) -> None:
        # Re-read from disk unless a pass in this process owns the catalog.
        if not self._running:
            self._store.load()

    def snapshot(self) -> dict:
        """Read-only, JSON-ready copy of the catalog."""
        self._refresh()
        return self._store.snapshot()

    def list_errors(self) -> List[dict]:
        """All error records, with their messages."""
        self._refresh()
        return [r.to_document() for r in self._store.records_with_status(ProcessingStatus.ERROR)]

    def reset_status(self, record_id: str) -> FileRecord:
        """
        Set one record back to pending so the next pass reprocesses it.

        Raises:
            RecordNotFoundError: No record with this id.
        """
        self._refresh()
        record = self._store.reset_status(record_id)
        self._store.save()
        self._log.info(f"{SYNC} Reset {record.name} to pending")
        return record.model_copy(deep=True)

    def reset_errors(self) -> List[str]:
        """Set every error record back to pending. Returns their ids."""
        self._refresh()
        ids = self._store.reset_errors()
        self._store.save()
        return ids

    def maintain(
        self,
        remove_missing: bool = False,
        remove_all_missing: bool = False,
        clean_errors: bool = False,
        remove_all_errors: bool = False,
        reset_errors: bool = False,
    ) -> MaintenanceReport:
        """
        Catalog maintenance, followed by a purge of the removed records' chunks.

        Temporary-file records are always removed.
        """
        self._refresh()
        report = remove_temporary_records(self._store, logger=self._log)

        if remove_missing or remove_all_missing:
            report = report.merge(
                remove_missing_records(
                    self._store, self._directory, remove_all=remove_all_missing, logger=self._log
                )
            )

        if clean_errors or remove_all_errors or reset_errors:
            report = report.merge(
                clean_error_records(
                    self._store,
                    self._directory,
                    remove_all=remove_all_errors,
                    reset=reset_errors,
                    logger=self._log,
                )
            )

        if report.stale_chunk_ids:
            try:
                self._vector_store.delete(report.stale_chunk_ids)
            except Exception as e:
                self._log.error(f"{SYNC} Failed to purge chunks of removed records: {e}")

        self._log.info(f"{SYNC} Maintenance complete: {report.summary}")
        return report


def run_sync_once(service: SyncService, full_resync: bool = False) -> SyncSummary:
    """
    Convenience function to run one pass from synchronous code.

    Args:
        service: Configured sync service.
        full_resync: Clear the vector store and reprocess everything.

    Returns:
        SyncSummary with results.
    """
    return asyncio.run(service.run_sync(full_resync=full_resync))


__all__ = ["SyncService", "SyncSummary", "run_sync_once"]
