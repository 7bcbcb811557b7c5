# kbsync/core/config/loader.py
"""
Configuration loader for kbsync.

Responsibilities:
- Load default config
- Load user config (optional)
- Expand ${ENV_VAR} placeholders
- Validate via schema
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from kbsync.core.config.schema import KBSyncConfig
from kbsync.core.exceptions import ConfigError, ConfigNotFoundError
from kbsync.core.paths import KBSyncPaths
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import CLI

logger = get_logger(__name__)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(_plugin_base(merged[key], value), value)
        else:
            merged[key] = value
    return merged


def _plugin_base(base: dict, override: dict) -> dict:
    """Plugin kwargs only carry over while the plugin stays the same."""
    plugin = override.get("plugin_name")
    if plugin is None or plugin == base.get("plugin_name"):
        return base
    return {k: v for k, v in base.items() if k != "kwargs"}


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    return _expand_env(data)


def load_config_dict(user_config_path: Path | str | None = None) -> dict:
    """
    Load the merged raw config dict (defaults + user overrides).

    When no path is given, the workspace config is used if it exists.
    An explicitly given path that does not exist raises ConfigNotFoundError.
    """
    logger.debug(f"{CLI} Loading default config from {DEFAULT_CONFIG_PATH}")
    cfg = _load_yaml(DEFAULT_CONFIG_PATH)

    if user_config_path is None:
        candidate = KBSyncPaths.config()
        user_config_path = candidate if candidate.exists() else None

    if user_config_path is not None:
        logger.debug(f"{CLI} Loading user config from {user_config_path}")
        cfg = _deep_merge(cfg, _load_yaml(Path(user_config_path)))

    return cfg


def load_config(user_config_path: Path | str | None = None) -> KBSyncConfig:
    """
    Load and validate kbsync configuration.

    Precedence:
    - defaults
    - user config (overrides defaults, merged per section)
    """
    raw = load_config_dict(user_config_path)
    try:
        return KBSyncConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


__all__ = ["DEFAULT_CONFIG_PATH", "load_config", "load_config_dict"]
