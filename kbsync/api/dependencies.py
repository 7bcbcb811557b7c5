# kbsync/api/dependencies.py
"""Shared dependencies for API routes."""

from __future__ import annotations

import hmac

from fastapi import Request

from kbsync.sync.service import SyncService


def get_service(request: Request) -> SyncService:
    return request.app.state.service


def secret_matches(request: Request, candidate: str | None) -> bool:
    """Constant-time comparison against the configured sync secret."""
    expected = request.app.state.secret
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
