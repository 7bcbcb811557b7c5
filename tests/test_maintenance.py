# tests/test_maintenance.py
"""Tests for kbsync.catalog.maintenance."""

from kbsync.catalog.maintenance import (
    MISSING_FILE_MESSAGE,
    MaintenanceReport,
    clean_error_records,
    find_missing_records,
    is_temporary_name,
    is_unrecoverable_error,
    remove_missing_records,
    remove_temporary_records,
)
from kbsync.catalog.mime import TEMPORARY_PREFIXES
from kbsync.catalog.schema import ProcessingStatus, SourceLocation
from kbsync.loaders.factory import is_supported_file_type


def add(store, name, status=ProcessingStatus.SUCCESS, error=None, chunk_ids=()):
    record = store.upsert_by_identity(
        name=name, size=1, mime_type="text/plain", source_location=SourceLocation.MANUAL
    )
    return store.update(
        record.id,
        processing_status=status,
        error_message=error,
        chunk_count=len(chunk_ids),
        chunk_ids=list(chunk_ids),
    )


def test_name_helpers():
    assert is_temporary_name("~$report.docx")
    assert is_temporary_name("._notes.pdf")
    assert not is_temporary_name("report.docx")
    assert is_unrecoverable_error("Invalid PDF structure: bad xref")
    assert is_unrecoverable_error("No content extracted")
    assert not is_unrecoverable_error("connection reset")
    assert not is_unrecoverable_error(None)


def test_temporary_names_are_never_catalogued():
    for prefix in TEMPORARY_PREFIXES:
        name = f"{prefix}report.docx"
        assert is_temporary_name(name)
        assert not is_supported_file_type(name)


def test_remove_temporary_records(store):
    temp = add(store, "~$draft.docx", chunk_ids=["v1"])
    add(store, "draft.docx")

    report = remove_temporary_records(store)

    assert report.removed == [temp.id]
    assert report.stale_chunk_ids == ["v1"]
    assert store.find_by_name("draft.docx") is not None


def test_missing_records_marked_or_removed(store, kb_dir):
    (kb_dir / "present.txt").write_text("x", encoding="utf-8")
    add(store, "present.txt")
    gone = add(store, "gone.txt", chunk_ids=["v1"])
    broken = add(
        store, "broken.pdf", status=ProcessingStatus.ERROR, error="Invalid PDF structure"
    )

    assert {r.name for r in find_missing_records(store, kb_dir)} == {"gone.txt", "broken.pdf"}

    report = remove_missing_records(store, kb_dir)

    assert report.removed == [broken.id]
    assert report.marked_missing == [gone.id]
    kept = store.get(gone.id)
    assert kept.processing_status == ProcessingStatus.ERROR
    assert kept.error_message == MISSING_FILE_MESSAGE
    assert kept.chunk_ids == ["v1"]


def test_remove_all_missing(store, kb_dir):
    gone = add(store, "gone.txt", chunk_ids=["v1"])

    report = remove_missing_records(store, kb_dir, remove_all=True)

    assert report.removed == [gone.id]
    assert report.stale_chunk_ids == ["v1"]
    assert len(store.catalog) == 0


def test_clean_error_records_default(store, kb_dir):
    (kb_dir / "retry.txt").write_text("x", encoding="utf-8")
    (kb_dir / "empty.pdf").write_text("x", encoding="utf-8")
    retry = add(store, "retry.txt", status=ProcessingStatus.ERROR, error="timeout")
    empty = add(store, "empty.pdf", status=ProcessingStatus.ERROR, error="no content extracted")
    orphan = add(store, "orphan.txt", status=ProcessingStatus.ERROR, error="timeout")

    report = clean_error_records(store, kb_dir)

    assert sorted(report.removed) == sorted([empty.id, orphan.id])
    assert store.get(retry.id).is_error


def test_clean_error_records_reset(store, kb_dir):
    failed = add(store, "a.txt", status=ProcessingStatus.ERROR, error="timeout")

    report = clean_error_records(store, kb_dir, reset=True)

    assert report.reset == [failed.id]
    assert store.get(failed.id).processing_status == ProcessingStatus.PENDING


def test_report_merge():
    merged = MaintenanceReport(examined=3, removed=["a"]).merge(
        MaintenanceReport(examined=2, reset=["b"], stale_chunk_ids=["v1"])
    )

    assert merged.examined == 3
    assert merged.removed == ["a"]
    assert merged.reset == ["b"]
    assert merged.summary == "examined=3, removed=1, reset=1, marked_missing=0, stale_chunks=1"
