"""
Tests for document discovery and text extraction.
"""

import io

import pytest
from docx import Document

from cv_scorer import parser
from cv_scorer.parser import (
    ReaderUnavailableError,
    check_readers,
    discover_documents,
    extract_docx_text,
    extract_pdf_text,
    extract_text,
)


@pytest.fixture
def cv_tree(tmp_path):
    root = tmp_path / "cvs"
    (root / "nested").mkdir(parents=True)
    (root / "b.txt").write_text("Python developer", encoding="utf-8")
    (root / "a.MD").write_text("# Jane", encoding="utf-8")
    (root / "nested" / "c.txt").write_text("Java", encoding="utf-8")
    (root / "notes.csv").write_text("x,y", encoding="utf-8")
    return root


class TestDiscover:
    """Recursive, sorted, extension-filtered discovery."""

    def test_finds_supported_files(self, cv_tree):
        names = [p.relative_to(cv_tree).as_posix() for p in discover_documents(cv_tree)]
        assert names == ["a.MD", "b.txt", "nested/c.txt"]

    def test_missing_directory(self, tmp_path):
        assert discover_documents(tmp_path / "absent") == []


class TestExtractText:
    """Per-format readers."""

    def test_plain_text(self, cv_tree):
        assert extract_text(cv_tree / "b.txt") == "Python developer"

    def test_unsupported_extension(self, cv_tree):
        assert extract_text(cv_tree / "notes.csv") == ""

    def test_corrupt_pdf_gives_empty_text(self):
        assert extract_pdf_text(b"this is not a pdf") == ""

    def test_docx(self, tmp_path):
        doc = Document()
        doc.add_paragraph("Backend Engineer, Full-time")
        doc.add_paragraph("Jan 2021 - Dec 2022")
        buf = io.BytesIO()
        doc.save(buf)
        assert extract_docx_text(buf.getvalue()) == "Backend Engineer, Full-time\nJan 2021 - Dec 2022"

        path = tmp_path / "cv.docx"
        path.write_bytes(buf.getvalue())
        assert "Jan 2021" in extract_text(path)

    def test_corrupt_docx(self):
        assert extract_docx_text(b"garbage") == ""


class TestCheckReaders:
    """Missing optional readers are reported before any scoring."""

    def test_all_available(self, tmp_path):
        check_readers([tmp_path / "a.pdf", tmp_path / "b.docx", tmp_path / "c.txt"])

    def test_pdf_without_any_backend(self, tmp_path, monkeypatch):
        monkeypatch.setattr(parser, "fitz", None)
        monkeypatch.setattr(parser, "pdfminer_extract_text", None)
        with pytest.raises(ReaderUnavailableError, match="PyMuPDF"):
            check_readers([tmp_path / "a.pdf"])

    def test_pdf_with_pdfminer_only(self, tmp_path, monkeypatch):
        monkeypatch.setattr(parser, "fitz", None)
        check_readers([tmp_path / "a.pdf"])

    def test_docx_without_python_docx(self, tmp_path, monkeypatch):
        monkeypatch.setattr(parser, "Document", None)
        with pytest.raises(ReaderUnavailableError, match="python-docx"):
            check_readers([tmp_path / "a.docx", tmp_path / "b.txt"])
