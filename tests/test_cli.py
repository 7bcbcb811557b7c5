# tests/test_cli.py
"""CLI smoke tests: real config file, in-memory vector store, local embeddings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kbsync import __version__
from kbsync.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("KBSYNC_HOME", str(tmp_path / "workspace"))
    kb = tmp_path / "kb"
    kb.mkdir()
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "catalog:",
                f"  path: {tmp_path / 'catalog.json'}",
                "source:",
                f"  directory: {kb}",
                "embedding:",
                "  plugin_name: local",
                "  kwargs:",
                "    dim: 8",
                "vector_db:",
                "  plugin_name: memory",
                "logging:",
                "  level: WARNING",
            ]
        ),
        encoding="utf-8",
    )
    return path


def invoke(*args):
    return runner.invoke(app, list(args))


def catalog(config_file: Path) -> dict:
    return json.loads((config_file.parent / "catalog.json").read_text(encoding="utf-8"))


def test_version():
    result = invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.output


def test_sync_then_status(config_file):
    kb = config_file.parent / "kb"
    (kb / "a.txt").write_text("hello world", encoding="utf-8")

    result = invoke("sync", "--config", str(config_file))

    assert result.exit_code == 0, result.output
    assert "Processed: 1" in result.output
    records = list(catalog(config_file)["files"].values())
    assert records[0]["processingStatus"] == "success"
    assert records[0]["chunkCount"] == len(records[0]["chunkIds"]) == 1

    status = invoke("status", "--config", str(config_file))
    assert status.exit_code == 0, status.output
    assert "a.txt" in status.output


def test_errors_and_reset(config_file):
    kb = config_file.parent / "kb"
    (kb / "blank.txt").write_text("   ", encoding="utf-8")
    invoke("sync", "--config", str(config_file))

    errors = invoke("errors", "--config", str(config_file))
    assert errors.exit_code == 0, errors.output
    assert "blank.txt" in errors.output

    record_id = next(iter(catalog(config_file)["files"]))
    reset = invoke("reset", record_id, "--config", str(config_file))
    assert reset.exit_code == 0, reset.output
    assert catalog(config_file)["files"][record_id]["processingStatus"] == "pending"


def test_reset_unknown_id_fails(config_file):
    result = invoke("reset", "missing-id", "--config", str(config_file))

    assert result.exit_code == 1
    assert "not found" in result.output


def test_reset_requires_target(config_file):
    result = invoke("reset", "--config", str(config_file))

    assert result.exit_code == 2


def test_maintain_marks_missing(config_file):
    kb = config_file.parent / "kb"
    (kb / "a.txt").write_text("hello", encoding="utf-8")
    invoke("sync", "--config", str(config_file))
    (kb / "a.txt").unlink()

    result = invoke("maintain", "--remove-missing", "--config", str(config_file))

    assert result.exit_code == 0, result.output
    record = next(iter(catalog(config_file)["files"].values()))
    assert record["processingStatus"] == "error"
    assert record["errorMessage"] == "File not found in knowledgebase"


def test_broken_config_exits_1(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("vector_db:\n  plugin_nam: memory\n", encoding="utf-8")

    result = invoke("status", "--config", str(path))

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_unusable_plugin_kwargs_exit_1(tmp_path, monkeypatch):
    monkeypatch.setenv("KBSYNC_HOME", str(tmp_path / "workspace"))
    path = tmp_path / "bad.yaml"
    path.write_text(
        "embedding:\n  plugin_name: local\n  kwargs:\n    base_url: http://x\n"
        "vector_db:\n  plugin_name: memory\n",
        encoding="utf-8",
    )

    result = invoke("status", "--config", str(path))

    assert result.exit_code == 1
    assert "Could not set up sync" in result.output
