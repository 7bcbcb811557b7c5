# kbsync/sync/reconciler.py
"""
Catalog reconciliation.

Turns a DetectionResult into catalog mutations: every deleted record is removed
together with the collection of the chunk ids it owned, and those ids are
handed back for vector-store cleanup. The catalog is saved once per pass.

Chunks of files that are about to be reprocessed are not touched here; the
orchestrator releases them per file, once the replacement chunks exist.

Safe to re-run after an interrupted pass: a record that is already gone is a
logged warning, never an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from kbsync.catalog.store import CatalogStore
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import RECONCILE
from kbsync.sync.detector import DetectionResult

_module_logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    """
    - files_to_process: passed through from detection
    - removed_record_ids: records actually removed
    - stale_chunk_ids: chunk ids of removed records, to purge from the vector store
    """

    files_to_process: List[str] = field(default_factory=list)
    removed_record_ids: List[str] = field(default_factory=list)
    stale_chunk_ids: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return (
            f"removed={len(self.removed_record_ids)}, "
            f"stale_chunks={len(self.stale_chunk_ids)}"
        )


class CatalogReconciler:
    """
    Usage:
        reconciler = CatalogReconciler(store)
        result = reconciler.reconcile(detection)
        vector_store.delete(result.stale_chunk_ids)
    """

    def __init__(self, store: CatalogStore, logger: Optional[logging.Logger] = None) -> None:
        self._store = store
        self._log = logger or _module_logger

    def reconcile(self, detection: DetectionResult) -> ReconcileResult:
        result = ReconcileResult(files_to_process=list(detection.files_to_process))

        for record_id in detection.deleted_record_ids:
            chunk_ids = self._store.remove_with_chunks(record_id)
            if chunk_ids is None:
                continue
            result.removed_record_ids.append(record_id)
            result.stale_chunk_ids.extend(chunk_ids)
            self._log.debug(
                f"{RECONCILE} Removed {record_id} ({len(chunk_ids)} stale chunks)"
            )

        self._store.save()
        self._log.info(f"{RECONCILE} Reconciled catalog: {result.summary}")
        return result


__all__ = ["CatalogReconciler", "ReconcileResult"]
