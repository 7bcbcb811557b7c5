# kbsync/api/routes/__init__.py
"""API route modules."""

from kbsync.api.routes.catalog import router as catalog_router
from kbsync.api.routes.health import router as health_router
from kbsync.api.routes.sync import router as sync_router

__all__ = [
    "catalog_router",
    "health_router",
    "sync_router",
]
