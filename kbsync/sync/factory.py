# kbsync/sync/factory.py
"""
Build a SyncService from configuration.

Plugin names map to concrete adapters:
- embedding: ollama | local
- vector_db: qdrant | memory
- source.kind: local | google_drive
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from kbsync.cache.redis_cache import RedisCache
from kbsync.catalog.store import CatalogStore
from kbsync.chunking.overlap import OverlapSplitter
from kbsync.core.config.schema import KBSyncConfig, PluginConfig
from kbsync.core.exceptions import ConfigError
from kbsync.embedding.local import LocalEmbedder, LocalEmbedderConfig
from kbsync.embedding.ollama import OllamaEmbedder
from kbsync.loaders.factory import get_document_loader, is_supported_file_type
from kbsync.sources.drive import GoogleDriveSource
from kbsync.sources.local import LocalDirectorySource
from kbsync.sync.protocols import DocumentSource, VectorStore
from kbsync.sync.service import SyncService
from kbsync.vector_db.memory import InMemoryVectorStore
from kbsync.vector_db.qdrant import QdrantVectorStore


def _construct(kind: str, cfg: PluginConfig, factory: Callable[..., Any], **extra: Any) -> Any:
    try:
        return factory(**extra, **cfg.kwargs)
    except TypeError as e:
        raise ConfigError(f"Invalid kwargs for {kind} plugin {cfg.plugin_name!r}: {e}") from e


def build_embedder(cfg: PluginConfig) -> Any:
    if cfg.plugin_name == "ollama":
        return _construct("embedding", cfg, OllamaEmbedder)
    if cfg.plugin_name == "local":
        return LocalEmbedder(_construct("embedding", cfg, LocalEmbedderConfig))
    raise ConfigError(f"Unknown embedding plugin: {cfg.plugin_name!r}")


def build_vector_store(config: KBSyncConfig) -> VectorStore:
    cfg = config.vector_db
    if cfg.plugin_name == "qdrant":
        embedder = build_embedder(config.embedding)
        return _construct("vector_db", cfg, QdrantVectorStore, embedder=embedder)
    if cfg.plugin_name == "memory":
        return _construct(
            "vector_db", cfg, InMemoryVectorStore, embedder=build_embedder(config.embedding)
        )
    raise ConfigError(f"Unknown vector_db plugin: {cfg.plugin_name!r}")


def build_source(config: KBSyncConfig) -> Optional[DocumentSource]:
    """
    Source that provisions the watched directory, or None when files are placed
    there directly.
    """
    src = config.source
    if src.kind == "google_drive":
        return GoogleDriveSource(
            folder_id=src.drive_folder_id,
            credentials_file=src.credentials_file,
        )
    if src.import_directory is not None:
        return LocalDirectorySource(src.import_directory)
    return None


def build_store(config: KBSyncConfig, logger: Optional[logging.Logger] = None) -> CatalogStore:
    return CatalogStore(config.catalog.path, logger=logger)


def build_sync_service(
    config: KBSyncConfig,
    logger: Optional[logging.Logger] = None,
) -> SyncService:
    """
    Construct a SyncService and all of its adapters from config.

    Raises:
        ConfigError: Unknown plugin name, or kwargs the plugin does not accept.
    """
    cache = RedisCache(config.cache.url) if config.cache.enabled else None
    return SyncService(
        store=build_store(config, logger),
        directory=config.source.directory,
        loader_factory=get_document_loader,
        splitter=OverlapSplitter(
            chunk_size=config.chunking.chunk_size,
            chunk_overlap=config.chunking.chunk_overlap,
        ),
        vector_store=build_vector_store(config),
        source=build_source(config),
        cache=cache,
        supported=is_supported_file_type,
        max_workers=config.sync.max_workers,
        timeout_seconds=config.sync.timeout_seconds,
        logger=logger,
    )


__all__ = [
    "build_embedder",
    "build_vector_store",
    "build_source",
    "build_store",
    "build_sync_service",
]
