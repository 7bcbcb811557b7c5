# kbsync/cli/cli.py
"""
kbsync CLI.

Commands:
    kbsync sync [--full]        Run one sync pass
    kbsync status               Catalog overview
    kbsync errors               Files in the error state
    kbsync reset ID             Reprocess one file on the next sync
    kbsync maintain             Catalog cleanup
    kbsync serve                Start the HTTP API
"""

from __future__ import annotations

import typer

from kbsync import __version__
from kbsync.cli.commands import errors, maintain, reset, serve, status, sync

app = typer.Typer(
    name="kbsync",
    help="Keep a RAG vector store in step with a directory of documents.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"kbsync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """kbsync - catalog and selective sync for a RAG knowledge base."""


app.command("sync")(sync.command)
app.command("status")(status.command)
app.command("errors")(errors.command)
app.command("reset")(reset.command)
app.command("maintain")(maintain.command)
app.command("serve")(serve.command)
