# kbsync/api/routes/sync.py
"""
Sync trigger for schedulers (cron, CI, uptime pingers).

Both POST (secret in the JSON body) and GET (secret as query parameter) run a
pass and wait for it to finish.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from kbsync.api.dependencies import get_service, secret_matches
from kbsync.api.models.schemas import SyncRequest, SyncResponse
from kbsync.core.exceptions import KBSyncError
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import API
from kbsync.sync.service import SyncService

logger = get_logger(__name__)

router = APIRouter(tags=["sync"])


async def _run(service: SyncService, full: bool):
    if service.running:
        return JSONResponse({"error": "A sync pass is already running"}, status_code=409)

    logger.info(f"{API} Starting scheduled knowledge base update (full={full})")
    try:
        summary = await service.run_sync(full_resync=full)
    except KBSyncError as e:
        logger.error(f"{API} Error in scheduled knowledge base update: {e}")
        return JSONResponse(
            {"error": "Failed to update knowledge base", "details": str(e)},
            status_code=500,
        )

    logger.info(f"{API} Scheduled knowledge base update completed: {summary}")
    return SyncResponse(
        success=True,
        message="Knowledge base updated successfully",
        summary=summary.as_dict(),
    )


def _unauthorized(via: str) -> JSONResponse:
    logger.warning(f"{API} Unauthorized attempt to trigger sync via {via}")
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


@router.post("/sync", response_model=SyncResponse)
async def trigger_sync(
    body: SyncRequest,
    request: Request,
    service: SyncService = Depends(get_service),
):
    if not secret_matches(request, body.secret):
        return _unauthorized("POST")
    return await _run(service, body.full)


@router.get("/sync", response_model=SyncResponse)
async def trigger_sync_get(
    request: Request,
    secret: Optional[str] = Query(default=None),
    full: bool = Query(default=False),
    service: SyncService = Depends(get_service),
):
    """Same as POST /sync, for schedulers that can only issue GET requests."""
    if not secret_matches(request, secret):
        return _unauthorized("GET")
    return await _run(service, full)
