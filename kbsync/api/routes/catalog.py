# kbsync/api/routes/catalog.py
"""Catalog views and per-record reset."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from kbsync.api.dependencies import get_service
from kbsync.api.models.schemas import ErrorListResponse
from kbsync.core.exceptions import CatalogError, RecordNotFoundError
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import API
from kbsync.sync.service import SyncService

logger = get_logger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _failure(message: str, error: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"error": message, "details": str(error)}, status_code=status_code)


@router.get("")
async def get_catalog(service: SyncService = Depends(get_service)):
    """The full catalog document, as persisted."""
    logger.info(f"{API} Fetching file catalog")
    try:
        return service.snapshot()
    except CatalogError as e:
        logger.error(f"{API} Error fetching file catalog: {e}")
        return _failure("Failed to fetch file catalog", e)


@router.get("/errors", response_model=ErrorListResponse)
async def get_errors(service: SyncService = Depends(get_service)):
    try:
        files = service.list_errors()
    except CatalogError as e:
        return _failure("Failed to fetch error files", e)
    return ErrorListResponse(count=len(files), files=files)


@router.post("/{record_id}/reset")
async def reset_record(record_id: str, service: SyncService = Depends(get_service)):
    """Set one record back to pending; it is reprocessed on the next sync."""
    try:
        record = service.reset_status(record_id)
    except RecordNotFoundError as e:
        return _failure("File not found", e, status_code=404)
    except CatalogError as e:
        return _failure("Failed to reset file status", e)
    return record.to_document()
