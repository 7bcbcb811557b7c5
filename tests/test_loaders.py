# tests/test_loaders.py
"""Tests for kbsync.loaders."""

import pytest

from kbsync.core.exceptions import DocumentLoadingError
from kbsync.loaders import (
    DocxLoader,
    PdfLoader,
    TextLoader,
    get_document_loader,
    is_supported_file_type,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("report.pdf", True),
        ("Report.PDF", True),
        ("notes.md", True),
        ("letter.docx", True),
        ("readme.txt", True),
        ("image.png", False),
        ("~$letter.docx", False),
        ("._report.pdf", False),
        ("", False),
    ],
)
def test_is_supported_file_type(name, expected):
    assert is_supported_file_type(name) is expected


def test_loader_selection(tmp_path):
    assert isinstance(get_document_loader(tmp_path / "a.pdf"), PdfLoader)
    assert isinstance(get_document_loader(tmp_path / "a.docx"), DocxLoader)
    assert isinstance(get_document_loader(tmp_path / "a.md"), TextLoader)
    assert isinstance(get_document_loader(tmp_path / "a.csv"), TextLoader)


def test_text_loader_metadata(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("# Title\n\nBody", encoding="utf-8")

    segments = TextLoader().load(path, file_id="r1")

    assert len(segments) == 1
    assert segments[0].text == "# Title\n\nBody"
    meta = segments[0].metadata
    assert meta["fileName"] == "notes.md"
    assert meta["fileType"] == "md"
    assert meta["mimeType"] == "text/markdown"
    assert meta["fileId"] == "r1"
    assert meta["pageNumber"] == 1


def test_blank_text_yields_no_segments(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_text("  \n\n ", encoding="utf-8")

    assert TextLoader().load(path) == []


def test_text_loader_missing_file(tmp_path):
    with pytest.raises(DocumentLoadingError):
        TextLoader().load(tmp_path / "missing.txt")


def test_docx_paragraphs_and_tables(tmp_path):
    docx = pytest.importorskip("docx")
    document = docx.Document()
    document.add_paragraph("Opening hours")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Mon"
    table.rows[0].cells[1].text = "9-17"
    path = tmp_path / "hours.docx"
    document.save(str(path))

    segments = DocxLoader().load(path)

    assert len(segments) == 1
    assert "Opening hours" in segments[0].text
    assert "Mon | 9-17" in segments[0].text


def test_invalid_docx(tmp_path):
    pytest.importorskip("docx")
    path = tmp_path / "broken.docx"
    path.write_bytes(b"not a zip")

    with pytest.raises(DocumentLoadingError):
        DocxLoader().load(path)


def test_invalid_pdf(tmp_path):
    pytest.importorskip("pypdf")
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf")

    with pytest.raises(DocumentLoadingError):
        PdfLoader().load(path)
