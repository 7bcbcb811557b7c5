# kbsync/sync/orchestrator.py
"""
Per-file ingestion.

For each file to process, strictly in this order:

1. Resolve the catalog record by name (missing: warn and skip)
2. Load the document into segments (zero segments: error "no content extracted")
3. Split segments into chunks (zero chunks: same error)
4. If the record owns chunk ids: clear them in the catalog and save, THEN ask the
   vector store to delete them
5. Add the new chunks to the vector store
6. Record success with the new chunk ids

Any exception in 2-6 marks the file as error with the exception text and the
batch moves on. Only catalog I/O errors stop the batch. Steps 2-3 run before
any purge, so a file that fails to load keeps its previous chunks.

Files run concurrently up to max_workers. Two tasks never work on the same
record at once, and catalog saves are serialized.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from kbsync.catalog.schema import ProcessingStatus, utc_now_iso
from kbsync.catalog.store import CatalogStore
from kbsync.core.exceptions import CatalogIOError, RecordNotFoundError, VectorStoreError
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import INGEST
from kbsync.sync.protocols import LoaderFactory, Splitter, VectorStore

_module_logger = get_logger(__name__)

NO_CONTENT_MESSAGE = "no content extracted"


@dataclass
class IngestReport:
    """Outcome of one ingestion batch."""

    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
    chunks_added: int = 0
    chunks_removed: int = 0

    @property
    def summary(self) -> str:
        return (
            f"succeeded={len(self.succeeded)}, failed={len(self.failed)}, "
            f"missing={len(self.missing)}, chunks_added={self.chunks_added}, "
            f"chunks_removed={self.chunks_removed}"
        )


class _NoContent(Exception):
    """The loader or splitter produced nothing to embed."""


class IngestionOrchestrator:
    """
    Usage:
        orchestrator = IngestionOrchestrator(
            store=store,
            loader_factory=get_document_loader,
            splitter=OverlapSplitter(),
            vector_store=vector_store,
            directory="knowledgebase",
            max_workers=4,
        )
        report = await orchestrator.ingest(["a.pdf", "b.docx"])
    """

    def __init__(
        self,
        store: CatalogStore,
        loader_factory: LoaderFactory,
        splitter: Splitter,
        vector_store: VectorStore,
        directory: str | Path,
        max_workers: int = 1,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._store = store
        self._loader_factory = loader_factory
        self._splitter = splitter
        self._vector_store = vector_store
        self._directory = Path(directory)
        self._max_workers = max_workers
        self._log = logger or _module_logger

        self._record_locks: Dict[str, asyncio.Lock] = {}
        self._save_lock: Optional[asyncio.Lock] = None

    async def ingest(
        self,
        file_names: Iterable[str],
        report: Optional[IngestReport] = None,
    ) -> IngestReport:
        """
        Ingest the named files. Per-file failures are recorded, not raised.

        Pass a report to keep partial results when the batch is cancelled.

        Raises:
            CatalogIOError: The catalog could not be persisted; the batch stops.
        """
        names = list(dict.fromkeys(file_names))
        report = report if report is not None else IngestReport()
        if not names:
            return report

        self._record_locks = {}
        self._save_lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self._max_workers)
        self._log.info(f"{INGEST} Ingesting {len(names)} files (workers: {self._max_workers})")

        async def bounded(name: str) -> None:
            async with semaphore:
                await self._ingest_file(name, report)

        tasks = [asyncio.create_task(bounded(name)) for name in names]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        self._log.info(f"{INGEST} Ingestion complete: {report.summary}")
        return report

    def _lock_for(self, record_id: str) -> asyncio.Lock:
        lock = self._record_locks.get(record_id)
        if lock is None:
            lock = self._record_locks[record_id] = asyncio.Lock()
        return lock

    async def _save(self) -> None:
        if self._save_lock is None:
            raise RuntimeError("Catalog saves are only available inside ingest()")
        async with self._save_lock:
            await self._store.save_async()

    async def _ingest_file(self, name: str, report: IngestReport) -> None:
        record = self._store.find_by_name(name)
        if record is None:
            self._log.warning(f"{INGEST} No catalog record for {name}, skipping")
            report.missing.append(name)
            return

        record_id = record.id
        async with self._lock_for(record_id):
            try:
                added, removed = await self._process(record_id, self._directory / name)
            except CatalogIOError:
                raise
            except RecordNotFoundError as e:
                self._log.warning(f"{INGEST} {e}, skipping {name}")
                report.missing.append(name)
                return
            except _NoContent:
                self._log.warning(f"{INGEST} No content extracted from {name}")
                self._mark_error(record_id, NO_CONTENT_MESSAGE)
                report.failed[name] = NO_CONTENT_MESSAGE
            except Exception as e:
                message = str(e) or type(e).__name__
                self._log.error(f"{INGEST} Failed to ingest {name}: {message}")
                self._mark_error(record_id, message)
                report.failed[name] = message
            else:
                report.succeeded.append(name)
                report.chunks_added += added
                report.chunks_removed += removed
                self._log.info(f"{INGEST} {name}: {added} chunks")

            await self._save()

    async def _process(self, record_id: str, path: Path) -> tuple[int, int]:
        loader = self._loader_factory(path)
        segments = await asyncio.to_thread(loader.load, path, record_id)
        if not segments:
            raise _NoContent()

        chunks = await asyncio.to_thread(self._splitter.split, segments)
        if not chunks:
            raise _NoContent()

        record = self._store.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)

        old_ids = list(record.chunk_ids)
        if old_ids:
            # The catalog stops claiming the old ids before they are deleted.
            self._store.update(record_id, chunk_count=0, chunk_ids=[])
            await self._save()
            await asyncio.to_thread(self._vector_store.delete, old_ids)

        ids = list(await asyncio.to_thread(self._vector_store.add, chunks))
        if len(ids) != len(chunks):
            raise VectorStoreError(
                f"Vector store returned {len(ids)} ids for {len(chunks)} chunks"
            )

        self._store.update(
            record_id,
            processing_status=ProcessingStatus.SUCCESS,
            chunk_count=len(ids),
            chunk_ids=ids,
            processed_at=utc_now_iso(),
        )
        return len(ids), len(old_ids)

    def _mark_error(self, record_id: str, message: str) -> None:
        try:
            self._store.update(
                record_id,
                processing_status=ProcessingStatus.ERROR,
                error_message=message,
                processed_at=utc_now_iso(),
            )
        except RecordNotFoundError as e:
            self._log.warning(f"{INGEST} {e}")


__all__ = ["IngestionOrchestrator", "IngestReport", "NO_CONTENT_MESSAGE"]
