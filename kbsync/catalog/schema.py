# kbsync/catalog/schema.py
"""
Pydantic models for the file catalog.

The persisted document keeps camelCase keys (aliases below), so catalogs written by
earlier tooling load unchanged:

    {
      "lastUpdated": "2024-05-01T10:00:00.000Z",
      "files": {
        "<id>": {"id": "<id>", "name": "a.pdf", "mimeType": "application/pdf", ...}
      }
    }

Python code uses the snake_case field names.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class ProcessingStatus(str, Enum):
    """Ingestion state of a file."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class SourceLocation(str, Enum):
    """Provenance of a file."""

    EXTERNAL_SYNC = "google-drive"
    MANUAL = "manual-upload"


class FileRecord(BaseModel):
    """
    One catalog entry per known source document.

    Invariant: len(chunk_ids) == chunk_count. chunk_ids are the vector-store keys
    owned by this record; no other record may hold any of them.
    """

    id: str
    name: str
    mime_type: str = Field(default="application/octet-stream", alias="mimeType")
    size: int = Field(default=0, ge=0)
    last_modified: str = Field(default_factory=utc_now_iso, alias="lastModified")
    source_location: SourceLocation = Field(
        default=SourceLocation.MANUAL, alias="sourceLocation"
    )
    external_id: Optional[str] = Field(default=None, alias="driveId")
    content_hash: Optional[str] = Field(default=None, alias="contentHash")

    processing_status: ProcessingStatus = Field(
        default=ProcessingStatus.PENDING, alias="processingStatus"
    )
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    processed_at: Optional[str] = Field(default=None, alias="processedAt")

    chunk_count: int = Field(default=0, ge=0, alias="chunkCount")
    chunk_ids: list[str] = Field(default_factory=list, alias="chunkIds")

    # Unknown keys written by other tools survive a load/save round trip.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @model_validator(mode="after")
    def _chunk_count_matches_ids(self) -> "FileRecord":
        if len(self.chunk_ids) != self.chunk_count:
            raise ValueError(
                f"chunkCount ({self.chunk_count}) does not match "
                f"len(chunkIds) ({len(self.chunk_ids)}) for record {self.id}"
            )
        if len(set(self.chunk_ids)) != len(self.chunk_ids):
            raise ValueError(f"Duplicate chunk ids in record {self.id}")
        return self

    @property
    def is_error(self) -> bool:
        return self.processing_status == ProcessingStatus.ERROR

    def to_document(self) -> dict:
        """JSON-ready dict in the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Catalog(BaseModel):
    """The aggregate root: every known file keyed by record id."""

    last_updated: str = Field(default_factory=utc_now_iso, alias="lastUpdated")
    files: dict[str, FileRecord] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _keys_match_ids(self) -> "Catalog":
        for key, record in self.files.items():
            if key != record.id:
                raise ValueError(f"Catalog key {key} does not match record id {record.id}")
        return self

    def __len__(self) -> int:
        return len(self.files)

    def find_by_name(self, name: str) -> Optional[FileRecord]:
        for record in self.files.values():
            if record.name == name:
                return record
        return None

    def find_by_external_id(self, external_id: str) -> Optional[FileRecord]:
        for record in self.files.values():
            if record.external_id == external_id:
                return record
        return None

    def duplicate_chunk_ids(self) -> set[str]:
        """Chunk ids claimed by more than one record (should always be empty)."""
        counts = Counter(cid for r in self.files.values() for cid in r.chunk_ids)
        return {cid for cid, n in counts.items() if n > 1}

    def status_counts(self) -> dict[str, int]:
        counts = Counter(r.processing_status.value for r in self.files.values())
        return {status.value: counts.get(status.value, 0) for status in ProcessingStatus}

    def to_document(self) -> dict:
        return {
            "lastUpdated": self.last_updated,
            "files": {rid: record.to_document() for rid, record in self.files.items()},
        }


class LegacyCatalogEntry(BaseModel):
    """Entry of the pre-catalog array format: [{filename, type, size, documentCount}]."""

    filename: str
    type: str = ""
    size: int = 0
    document_count: int = Field(default=0, alias="documentCount")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


__all__ = [
    "utc_now_iso",
    "ProcessingStatus",
    "SourceLocation",
    "FileRecord",
    "Catalog",
    "LegacyCatalogEntry",
]
