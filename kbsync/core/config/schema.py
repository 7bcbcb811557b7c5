# kbsync/core/config/schema.py
"""
Pydantic schema for kbsync configuration.

Rules:
- Strict validation
- No unknown keys
- Every section has defaults, so an empty user file is valid

Schema hierarchy:
- KBSyncConfig: the root config
- CatalogConfig: where the catalog document lives
- SourceConfig: watched directory and optional Google Drive folder
- ChunkingConfig: splitter size / overlap
- PluginConfig: embedding and vector_db blocks
- CacheConfig: answer cache flushed on full resync
- SyncConfig: worker pool and timeout
- LoggingConfig, ApiConfig
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PluginConfig(BaseModel):
    """
    Generic plugin configuration block.

    Examples:
        >>> PluginConfig(plugin_name="qdrant", kwargs={"host": "localhost", "port": 6333})
    """

    plugin_name: str = Field(..., description="Plugin name, e.g. 'qdrant' or 'ollama'")
    kwargs: dict[str, Any] = Field(default_factory=dict, description="Plugin init kwargs")

    model_config = ConfigDict(extra="forbid")


class CatalogConfig(BaseModel):
    """Location of the persisted catalog document."""

    path: Optional[Path] = Field(
        default=None,
        description="Catalog JSON path; defaults to <workspace>/file-catalog.json",
    )

    model_config = ConfigDict(extra="forbid")


class SourceConfig(BaseModel):
    """
    Where documents come from.

    kind=local: files are placed in `directory` by hand.
    kind=local with import_directory: files are copied from import_directory into
    `directory` before every sync pass.
    kind=google_drive: files are downloaded from `drive_folder_id` into `directory`
    before every sync pass.
    """

    kind: Literal["local", "google_drive"] = "local"
    directory: Path = Path("knowledgebase")
    import_directory: Optional[Path] = None
    drive_folder_id: Optional[str] = None
    credentials_file: Path = Path("service-credentials.json")

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _drive_needs_folder(self) -> "SourceConfig":
        if self.kind == "google_drive" and not self.drive_folder_id:
            raise ValueError("source.drive_folder_id is required when kind is 'google_drive'")
        return self


class ChunkingConfig(BaseModel):
    """Splitter policy."""

    chunk_size: int = Field(default=5000, ge=1)
    chunk_overlap: int = Field(default=500, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _overlap_smaller_than_size(self) -> "ChunkingConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


class CacheConfig(BaseModel):
    enabled: bool = False
    url: str = "redis://localhost:6379/0"

    model_config = ConfigDict(extra="forbid")


class SyncConfig(BaseModel):
    """Concurrency and time bounds for one sync pass."""

    max_workers: int = Field(default=1, ge=1, description="Files ingested in parallel")
    timeout_seconds: Optional[float] = Field(
        default=None, gt=0, description="Abort ingestion after this many seconds"
    )

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


class ApiConfig(BaseModel):
    """Shared secret required by the sync trigger endpoint."""

    secret: str = "default-secret-key"

    model_config = ConfigDict(extra="forbid")


class KBSyncConfig(BaseModel):
    """Complete kbsync configuration."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    embedding: PluginConfig = Field(
        default_factory=lambda: PluginConfig(plugin_name="ollama")
    )
    vector_db: PluginConfig = Field(
        default_factory=lambda: PluginConfig(plugin_name="qdrant")
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "KBSyncConfig",
    "PluginConfig",
    "CatalogConfig",
    "SourceConfig",
    "ChunkingConfig",
    "CacheConfig",
    "SyncConfig",
    "LoggingConfig",
    "ApiConfig",
]
