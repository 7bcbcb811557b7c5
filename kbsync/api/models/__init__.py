# kbsync/api/models/__init__.py
"""API request and response models."""

from kbsync.api.models.schemas import (
    ErrorListResponse,
    ErrorResponse,
    HealthResponse,
    SyncRequest,
    SyncResponse,
)

__all__ = [
    "ErrorListResponse",
    "ErrorResponse",
    "HealthResponse",
    "SyncRequest",
    "SyncResponse",
]
