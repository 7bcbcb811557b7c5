# tests/test_chunking.py
"""Tests for kbsync.chunking.overlap."""

import pytest

from kbsync.chunking import OverlapSplitter
from kbsync.loaders.base import Segment


def test_short_text_is_one_chunk():
    assert OverlapSplitter(chunk_size=100, chunk_overlap=10).split_text("hello world") == [
        "hello world"
    ]


def test_blank_text_is_no_chunks():
    assert OverlapSplitter().split_text("   ") == []


def test_chunks_are_bounded_and_overlap():
    text = " ".join(f"word{i:03d}" for i in range(200))
    splitter = OverlapSplitter(chunk_size=100, chunk_overlap=20)

    pieces = splitter.split_text(text)

    assert len(pieces) > 1
    assert all(len(p) <= 100 for p in pieces)
    # Consecutive windows share text.
    for left, right in zip(pieces, pieces[1:]):
        assert right.split()[0] in left
    # Nothing is lost.
    assert pieces[-1].endswith("word199")


def test_windows_end_on_word_boundaries():
    text = " ".join(["alpha"] * 50)

    pieces = OverlapSplitter(chunk_size=40, chunk_overlap=5).split_text(text)

    assert len(pieces) > 1
    assert all(p.endswith("alpha") for p in pieces)


def test_high_overlap_with_early_breaks_still_advances():
    # A paragraph break early in every window must not stall the splitter.
    text = ("x" * 59 + "\n\n") * 30
    splitter = OverlapSplitter(chunk_size=100, chunk_overlap=80)

    pieces = splitter.split_text(text)

    stride = splitter.chunk_size - splitter.chunk_overlap
    assert len(pieces) <= 2 * (len(text) // stride)
    assert all(len(p) <= 100 for p in pieces)
    assert text.rstrip().endswith(pieces[-1])


def test_split_numbers_chunks_across_segments():
    segments = [
        Segment(text="first page", metadata={"fileName": "a.pdf", "pageNumber": 1}),
        Segment(text="second page", metadata={"fileName": "a.pdf", "pageNumber": 2}),
    ]

    chunks = OverlapSplitter(chunk_size=100, chunk_overlap=10).split(segments)

    assert [c.chunk_index for c in chunks] == [0, 1]
    assert [c.metadata["pageNumber"] for c in chunks] == [1, 2]
    assert all(c.doc_id == "a.pdf" for c in chunks)


@pytest.mark.parametrize("size, overlap", [(0, 0), (10, 10), (10, -1)])
def test_invalid_policy(size, overlap):
    with pytest.raises(ValueError):
        OverlapSplitter(chunk_size=size, chunk_overlap=overlap)


def test_splitter_id():
    assert OverlapSplitter(chunk_size=800, chunk_overlap=80).splitter_id == "overlap:800:80"
