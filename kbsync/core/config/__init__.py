# kbsync/core/config/__init__.py
"""
Configuration for kbsync.

Usage:
    >>> from kbsync.core.config import load_config
    >>> config = load_config(".kbsync/config.yaml")
"""

from .loader import DEFAULT_CONFIG_PATH, load_config, load_config_dict
from .schema import (
    ApiConfig,
    CacheConfig,
    CatalogConfig,
    ChunkingConfig,
    KBSyncConfig,
    LoggingConfig,
    PluginConfig,
    SourceConfig,
    SyncConfig,
)

__all__ = [
    # Main config
    "KBSyncConfig",
    "load_config",
    "load_config_dict",
    # Sub-configs
    "ApiConfig",
    "CacheConfig",
    "CatalogConfig",
    "ChunkingConfig",
    "LoggingConfig",
    "PluginConfig",
    "SourceConfig",
    "SyncConfig",
    # Constants
    "DEFAULT_CONFIG_PATH",
]
