# kbsync/sync/__init__.py
"""
Selective synchronization of the watched directory into the vector store.

Components:
- ChangeDetector: classifies files against the catalog
- CatalogReconciler: removes deleted records and collects stale chunk ids
- IngestionOrchestrator: load, split, purge and embed each file
- SyncService: runs a complete pass and exposes catalog views

Use kbsync.sync.factory.build_sync_service() to wire one from configuration.
"""

from kbsync.sync.detector import ChangeDetector, DetectionResult, detect_changes
from kbsync.sync.orchestrator import NO_CONTENT_MESSAGE, IngestionOrchestrator, IngestReport
from kbsync.sync.protocols import Cache, DocumentSource, Splitter, VectorStore
from kbsync.sync.reconciler import CatalogReconciler, ReconcileResult
from kbsync.sync.scanner import ScannedFile, ScanResult, scan_directory
from kbsync.sync.service import SyncService, SyncSummary, run_sync_once

__all__ = [
    "Cache",
    "CatalogReconciler",
    "ChangeDetector",
    "DetectionResult",
    "DocumentSource",
    "IngestReport",
    "IngestionOrchestrator",
    "NO_CONTENT_MESSAGE",
    "ReconcileResult",
    "ScanResult",
    "ScannedFile",
    "Splitter",
    "SyncService",
    "SyncSummary",
    "VectorStore",
    "detect_changes",
    "run_sync_once",
    "scan_directory",
]
