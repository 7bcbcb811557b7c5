# kbsync/api/app.py
"""FastAPI application for the kbsync API."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kbsync import __version__
from kbsync.api.routes import catalog_router, health_router, sync_router
from kbsync.core.config import load_config
from kbsync.logging.logger import configure_logging
from kbsync.sync.factory import build_sync_service
from kbsync.sync.service import SyncService


def create_app(
    service: Optional[SyncService] = None,
    secret: Optional[str] = None,
    config_path: Optional[Path] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Without a service, one is built from config (config_path or the workspace
    default). The sync trigger secret defaults to `api.secret` from that config.

    Run with uvicorn:
        uvicorn kbsync.api.app:create_app --factory
    """
    if service is None or secret is None:
        config = load_config(config_path)
        configure_logging(config.logging.level)
        if service is None:
            service = build_sync_service(config)
        if secret is None:
            secret = config.api.secret

    app = FastAPI(
        title="kbsync API",
        description=(
            "Catalog and selective sync for a RAG knowledge base. "
            "Inspect file status, reset failed files and trigger sync passes."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.service = service
    app.state.secret = secret

    # Add CORS middleware for browser clients (dashboard)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(sync_router)

    return app
