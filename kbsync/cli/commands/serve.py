# kbsync/cli/commands/serve.py
"""
API server command.

Usage:
    kbsync serve              # Start on default port 8000
    kbsync serve --port 3000  # Custom port
    kbsync serve --host 0.0.0.0  # Listen on all interfaces
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kbsync.cli.context import CONFIG_OPTION, load_service
from kbsync.cli.ui import ui


def command(
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        "-h",
        help="Host to bind to.",
    ),
    port: int = typer.Option(
        8000,
        "--port",
        "-p",
        help="Port to listen on.",
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Start the kbsync API server.

    Exposes the catalog views, record reset and the sync trigger over HTTP.
    Once running, visit http://localhost:8000/docs for interactive docs.
    """
    try:
        import uvicorn
    except ImportError:
        ui.error("uvicorn not installed. Install with: pip install kbsync[api]")
        raise typer.Exit(1)

    try:
        from kbsync.api import create_app
    except ImportError as e:
        ui.error(f"Failed to import API module: {e}")
        ui.info("Install with: pip install kbsync[api]")
        raise typer.Exit(1)

    cfg, service = load_service(config)

    ui.header("kbsync API Server", f"http://{host}:{port}")
    ui.info(f"API docs: http://{host}:{port}/docs")
    ui.info("Press Ctrl+C to stop")

    app = create_app(service=service, secret=cfg.api.secret)

    uvicorn.run(app, host=host, port=port, log_level="info")
