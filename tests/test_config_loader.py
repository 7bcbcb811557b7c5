# tests/test_config_loader.py
"""Tests for kbsync.core.config."""

from pathlib import Path

import pytest

from kbsync.core.config import KBSyncConfig, load_config, load_config_dict
from kbsync.core.exceptions import ConfigError, ConfigNotFoundError
from kbsync.core.paths import KBSyncPaths


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    monkeypatch.setenv("KBSYNC_HOME", str(tmp_path / "workspace"))


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_load_and_validate():
    config = load_config()

    assert isinstance(config, KBSyncConfig)
    assert config.source.kind == "local"
    assert config.chunking.chunk_size == 5000
    assert config.chunking.chunk_overlap == 500
    assert config.embedding.plugin_name == "ollama"
    assert config.vector_db.plugin_name == "qdrant"
    assert config.api.secret == "default-secret-key"


def test_user_config_merges_per_section(tmp_path):
    path = write_config(
        tmp_path,
        "chunking:\n  chunk_size: 800\nvector_db:\n  plugin_name: memory\n",
    )

    config = load_config(path)

    assert config.chunking.chunk_size == 800
    assert config.chunking.chunk_overlap == 500
    assert config.vector_db.plugin_name == "memory"


def test_switching_plugin_drops_default_kwargs(tmp_path):
    path = write_config(
        tmp_path,
        "embedding:\n  plugin_name: local\n  kwargs:\n    dim: 8\n"
        "vector_db:\n  plugin_name: memory\n",
    )

    config = load_config(path)

    assert config.embedding.kwargs == {"dim": 8}
    assert config.vector_db.kwargs == {}


def test_same_plugin_merges_kwargs(tmp_path):
    path = write_config(tmp_path, "embedding:\n  kwargs:\n    model: mxbai-embed-large\n")

    config = load_config(path)

    assert config.embedding.plugin_name == "ollama"
    assert config.embedding.kwargs == {
        "base_url": "http://localhost:11434",
        "model": "mxbai-embed-large",
    }


def test_workspace_config_is_picked_up():
    KBSyncPaths.ensure_workspace()
    KBSyncPaths.config().write_text("sync:\n  max_workers: 4\n", encoding="utf-8")

    assert load_config().sync.max_workers == 4


def test_env_vars_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("KBSYNC_TEST_SECRET", "s3cret")
    path = write_config(tmp_path, "api:\n  secret: ${KBSYNC_TEST_SECRET}\n")

    assert load_config_dict(path)["api"]["secret"] == "s3cret"


def test_unknown_keys_rejected(tmp_path):
    path = write_config(tmp_path, "chunking:\n  chunk_sise: 10\n")

    with pytest.raises(ConfigError):
        load_config(path)


def test_overlap_must_be_smaller_than_size(tmp_path):
    path = write_config(tmp_path, "chunking:\n  chunk_size: 100\n  chunk_overlap: 100\n")

    with pytest.raises(ConfigError):
        load_config(path)


def test_drive_source_requires_folder(tmp_path):
    path = write_config(tmp_path, "source:\n  kind: google_drive\n")

    with pytest.raises(ConfigError):
        load_config(path)


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(ConfigNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = write_config(tmp_path, "chunking: [unclosed\n")

    with pytest.raises(ConfigError):
        load_config(path)
