# kbsync/api/models/schemas.py
"""Pydantic request and response models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str
    sync_running: bool


class SyncRequest(BaseModel):
    """Body of POST /sync."""

    secret: str = Field(..., description="Shared secret from api.secret")
    full: bool = Field(default=False, description="Clear the vector store and reprocess everything")


class SyncResponse(BaseModel):
    success: bool
    message: str
    summary: Dict[str, Any]


class ErrorListResponse(BaseModel):
    count: int
    files: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    """Failure body, shared by every route."""

    error: str
    details: Optional[str] = None
