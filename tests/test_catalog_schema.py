# tests/test_catalog_schema.py
"""Tests for kbsync.catalog.schema."""

import pytest
from pydantic import ValidationError

from kbsync.catalog.schema import (
    Catalog,
    FileRecord,
    ProcessingStatus,
    SourceLocation,
    utc_now_iso,
)


def make_record(record_id: str = "r1", **fields) -> FileRecord:
    return FileRecord(id=record_id, name=fields.pop("name", f"{record_id}.txt"), **fields)


class TestFileRecord:
    def test_defaults(self):
        record = make_record()

        assert record.processing_status == ProcessingStatus.PENDING
        assert record.source_location == SourceLocation.MANUAL
        assert record.chunk_count == 0
        assert record.chunk_ids == []

    def test_chunk_count_must_match_ids(self):
        with pytest.raises(ValidationError):
            make_record(chunk_count=2, chunk_ids=["v1"])

    def test_duplicate_chunk_ids_rejected(self):
        with pytest.raises(ValidationError):
            make_record(chunk_count=2, chunk_ids=["v1", "v1"])

    def test_document_uses_camel_case_keys(self):
        record = make_record(
            external_id="drive-1",
            content_hash="abc",
            chunk_count=1,
            chunk_ids=["v1"],
            source_location=SourceLocation.EXTERNAL_SYNC,
        )

        doc = record.to_document()

        assert doc["driveId"] == "drive-1"
        assert doc["contentHash"] == "abc"
        assert doc["chunkIds"] == ["v1"]
        assert doc["sourceLocation"] == "google-drive"
        assert doc["processingStatus"] == "pending"
        assert "errorMessage" not in doc

    def test_loads_from_persisted_shape(self):
        record = FileRecord.model_validate(
            {
                "id": "r1",
                "name": "a.pdf",
                "mimeType": "application/pdf",
                "size": 10,
                "sourceLocation": "manual-upload",
                "processingStatus": "error",
                "errorMessage": "boom",
                "chunkCount": 0,
                "chunkIds": [],
                "customField": "kept",
            }
        )

        assert record.is_error
        assert record.error_message == "boom"
        assert record.to_document()["customField"] == "kept"


class TestCatalog:
    def test_keys_must_match_record_ids(self):
        with pytest.raises(ValidationError):
            Catalog(files={"other": make_record("r1")})

    def test_lookups(self):
        catalog = Catalog(
            files={
                "r1": make_record("r1", name="a.txt"),
                "r2": make_record("r2", name="b.txt", external_id="d2"),
            }
        )

        assert catalog.find_by_name("a.txt").id == "r1"
        assert catalog.find_by_external_id("d2").id == "r2"
        assert catalog.find_by_name("missing.txt") is None
        assert len(catalog) == 2

    def test_duplicate_chunk_ids_across_records(self):
        catalog = Catalog(
            files={
                "r1": make_record("r1", chunk_count=1, chunk_ids=["v1"]),
                "r2": make_record("r2", chunk_count=2, chunk_ids=["v1", "v2"]),
            }
        )

        assert catalog.duplicate_chunk_ids() == {"v1"}

    def test_status_counts_include_every_status(self):
        catalog = Catalog(files={"r1": make_record("r1")})

        assert catalog.status_counts() == {"pending": 1, "success": 0, "error": 0}


def test_utc_now_iso_format():
    stamp = utc_now_iso()

    assert stamp.endswith("Z")
    assert "T" in stamp
