# tests/test_orchestrator.py
"""
Tests for kbsync.sync.orchestrator.

Key tests verify that:
1. Old chunks are dropped from the catalog before the vector store deletes them
2. A file with no content keeps its previous chunks and is marked as error
3. One file's failure never aborts the batch
4. Parallel ingestion stays within max_workers
"""

import asyncio
import json

import pytest

from kbsync.catalog.schema import ProcessingStatus, SourceLocation
from kbsync.core.exceptions import DocumentLoadingError
from kbsync.sync.orchestrator import NO_CONTENT_MESSAGE, IngestionOrchestrator, IngestReport

from conftest import ScriptedVectorStore, StubLoader, WordSplitter


def register(store, kb_dir, name, content, chunk_ids=()):
    (kb_dir / name).write_text(content, encoding="utf-8")
    record = store.upsert_by_identity(
        name=name, size=len(content), mime_type="text/plain", source_location=SourceLocation.MANUAL
    )
    if chunk_ids:
        record = store.update(record.id, chunk_count=len(chunk_ids), chunk_ids=list(chunk_ids))
    return record


def make_orchestrator(store, kb_dir, loader=None, vector_store=None, max_workers=1):
    return IngestionOrchestrator(
        store=store,
        loader_factory=loader or StubLoader(),
        splitter=WordSplitter(),
        vector_store=vector_store or ScriptedVectorStore(),
        directory=kb_dir,
        max_workers=max_workers,
    )


def test_success_records_new_chunk_ids(store, kb_dir):
    record = register(store, kb_dir, "a.txt", "hello")

    report = asyncio.run(make_orchestrator(store, kb_dir).ingest(["a.txt"]))

    assert report.succeeded == ["a.txt"]
    updated = store.get(record.id)
    assert updated.processing_status == ProcessingStatus.SUCCESS
    assert updated.chunk_ids == ["v1"]
    assert updated.chunk_count == 1
    assert updated.processed_at is not None


def test_catalog_releases_old_ids_before_vector_delete(store, kb_dir):
    record = register(store, kb_dir, "a.txt", "hello world", chunk_ids=["old1"])
    store.save()
    seen_on_disk = {}

    class RecordingStore(ScriptedVectorStore):
        def delete(self, ids):
            persisted = json.loads(store.path.read_text(encoding="utf-8"))
            seen_on_disk["chunkIds"] = persisted["files"][record.id]["chunkIds"]
            super().delete(ids)

    vectors = RecordingStore()
    report = asyncio.run(make_orchestrator(store, kb_dir, vector_store=vectors).ingest(["a.txt"]))

    assert seen_on_disk["chunkIds"] == []
    assert vectors.deleted == [["old1"]]
    assert store.get(record.id).chunk_ids == ["v1", "v2"]
    assert report.chunks_removed == 1
    assert report.chunks_added == 2


def test_no_content_keeps_previous_chunks(store, kb_dir):
    record = register(store, kb_dir, "d.pdf", "corrupt", chunk_ids=["v7"])
    vectors = ScriptedVectorStore()
    loader = StubLoader(empty={"d.pdf"})

    report = asyncio.run(
        make_orchestrator(store, kb_dir, loader=loader, vector_store=vectors).ingest(["d.pdf"])
    )

    assert report.failed == {"d.pdf": NO_CONTENT_MESSAGE}
    updated = store.get(record.id)
    assert updated.processing_status == ProcessingStatus.ERROR
    assert updated.error_message == "no content extracted"
    assert updated.chunk_count == 1
    assert updated.chunk_ids == ["v7"]
    assert vectors.deleted == []


def test_failure_does_not_abort_batch(store, kb_dir):
    register(store, kb_dir, "a.txt", "one")
    bad = register(store, kb_dir, "b.txt", "two")
    register(store, kb_dir, "c.txt", "three")
    loader = StubLoader(failures={"b.txt": DocumentLoadingError("Invalid PDF structure", "b.txt")})

    report = asyncio.run(
        make_orchestrator(store, kb_dir, loader=loader).ingest(["a.txt", "b.txt", "c.txt"])
    )

    assert sorted(report.succeeded) == ["a.txt", "c.txt"]
    assert report.failed == {"b.txt": "Invalid PDF structure"}
    assert store.get(bad.id).error_message == "Invalid PDF structure"


def test_vector_add_failure_marks_error(store, kb_dir):
    record = register(store, kb_dir, "a.txt", "hello")
    vectors = ScriptedVectorStore(fail_on={"a.txt"})

    report = asyncio.run(make_orchestrator(store, kb_dir, vector_store=vectors).ingest(["a.txt"]))

    assert "a.txt" in report.failed
    assert store.get(record.id).processing_status == ProcessingStatus.ERROR


def test_id_count_mismatch_is_an_error(store, kb_dir):
    record = register(store, kb_dir, "a.txt", "hello world")

    class ShortStore(ScriptedVectorStore):
        def add(self, chunks):
            return super().add(chunks)[:1]

    report = asyncio.run(
        make_orchestrator(store, kb_dir, vector_store=ShortStore()).ingest(["a.txt"])
    )

    assert "returned 1 ids for 2 chunks" in report.failed["a.txt"]
    assert store.get(record.id).chunk_ids == []


def test_missing_record_is_skipped(store, kb_dir):
    store.load()

    report = asyncio.run(make_orchestrator(store, kb_dir).ingest(["ghost.txt"]))

    assert report.missing == ["ghost.txt"]
    assert report.failed == {}


def test_parallel_ingestion_is_bounded(store, kb_dir):
    names = [f"f{i}.txt" for i in range(6)]
    for name in names:
        register(store, kb_dir, name, f"content {name}")
    vectors = ScriptedVectorStore(delay=0.05)

    report = asyncio.run(
        make_orchestrator(store, kb_dir, vector_store=vectors, max_workers=2).ingest(names)
    )

    assert sorted(report.succeeded) == names
    assert 1 <= vectors.max_active <= 2
    all_ids = [cid for r in store.catalog.files.values() for cid in r.chunk_ids]
    assert len(all_ids) == len(set(all_ids)) == 12


def test_orchestrator_can_run_on_a_new_event_loop(store, kb_dir):
    names = ["a.txt", "b.txt", "c.txt"]
    for name in names:
        register(store, kb_dir, name, f"content {name}")
    orchestrator = make_orchestrator(
        store, kb_dir, vector_store=ScriptedVectorStore(delay=0.01), max_workers=3
    )

    asyncio.run(orchestrator.ingest(names))
    report = asyncio.run(orchestrator.ingest(names))

    assert sorted(report.succeeded) == names


def test_catalog_save_outside_ingest_raises(store, kb_dir):
    orchestrator = make_orchestrator(store, kb_dir)

    with pytest.raises(RuntimeError):
        asyncio.run(orchestrator._save())


def test_duplicate_names_processed_once(store, kb_dir):
    register(store, kb_dir, "a.txt", "hello")
    loader = StubLoader()

    asyncio.run(make_orchestrator(store, kb_dir, loader=loader).ingest(["a.txt", "a.txt"]))

    assert loader.calls == ["a.txt"]


def test_invalid_worker_count():
    with pytest.raises(ValueError):
        IngestionOrchestrator(
            store=None,
            loader_factory=StubLoader(),
            splitter=WordSplitter(),
            vector_store=ScriptedVectorStore(),
            directory=".",
            max_workers=0,
        )


def test_report_summary():
    report = IngestReport(succeeded=["a"], failed={"b": "x"}, chunks_added=3)

    assert report.summary == (
        "succeeded=1, failed=1, missing=0, chunks_added=3, chunks_removed=0"
    )
