# kbsync/api/routes/health.py
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from kbsync import __version__
from kbsync.api.dependencies import get_service
from kbsync.api.models.schemas import HealthResponse
from kbsync.sync.service import SyncService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(service: SyncService = Depends(get_service)) -> HealthResponse:
    """Server status, version, and whether a sync pass is running."""
    return HealthResponse(status="healthy", version=__version__, sync_running=service.running)
