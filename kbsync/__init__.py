# kbsync/__init__.py
"""
kbsync - file catalog and selective synchronization for a RAG knowledge base.

Tracks every known source document in a JSON catalog, detects content changes by
hashing, and re-ingests only what changed, keeping vector-store chunk ids in step
with catalog entries.

Usage:
    import asyncio

    from kbsync.sync.factory import build_sync_service
    from kbsync.core.config import load_config

    service = build_sync_service(load_config())
    summary = asyncio.run(service.run_sync())
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
