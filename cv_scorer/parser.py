from __future__ import annotations
import io
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List

try:
    import fitz  # PyMuPDF
except Exception:
    fitz = None

try:
    from pdfminer.high_level import extract_text as pdfminer_extract_text
except Exception:
    pdfminer_extract_text = None

try:
    from docx import Document
except Exception:
    Document = None

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md")


class ReaderUnavailableError(Exception):
    """No installed reader can handle an extension that is present in the batch."""


def extract_pdf_text(data: bytes) -> str:
    """
    Extract text from PDF bytes using PyMuPDF (fast, low-mem) with fallback to pdfminer.six.
    Corrupt input yields "".
    """
    text = ""
    if fitz is not None:
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                text = "\n".join(page.get_text("text") for page in doc)
        except Exception as e:
            logger.debug(f"PyMuPDF failed: {e}")
            text = ""
    if not text and pdfminer_extract_text is not None:
        try:
            text = pdfminer_extract_text(io.BytesIO(data)) or ""
        except Exception as e:
            logger.debug(f"pdfminer failed: {e}")
            text = ""
    return text


def extract_docx_text(data: bytes) -> str:
    if Document is None:
        return ""
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        logger.debug(f"python-docx failed: {e}")
        return ""
    return "\n".join(p.text for p in doc.paragraphs)


def decode_plain_text(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


READERS: Dict[str, Callable[[bytes], str]] = {
    ".pdf": extract_pdf_text,
    ".docx": extract_docx_text,
    ".txt": decode_plain_text,
    ".md": decode_plain_text,
}


def reader_available(ext: str) -> bool:
    ext = ext.lower()
    if ext == ".pdf":
        return fitz is not None or pdfminer_extract_text is not None
    if ext == ".docx":
        return Document is not None
    return ext in READERS


def check_readers(paths: Iterable[Path]) -> None:
    missing = sorted({p.suffix.lower() for p in paths if not reader_available(p.suffix)})
    if missing:
        hints = {".pdf": "pip install PyMuPDF (or pdfminer.six)", ".docx": "pip install python-docx"}
        raise ReaderUnavailableError(
            "No reader available for " + ", ".join(f"{ext} ({hints.get(ext, 'unsupported')})" for ext in missing)
        )


def discover_documents(root: Path) -> List[Path]:
    if not root.is_dir():
        return []
    return sorted(p for p in root.glob("**/*") if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS)


def extract_text(path: Path) -> str:
    """Plain text for one document; unreadable or unsupported files give ""."""
    reader = READERS.get(path.suffix.lower())
    if reader is None:
        logger.warning(f"Unsupported extension, skipping text: {path.name}")
        return ""
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.warning(f"Could not read {path.name}: {e}")
        return ""
    text = reader(data)
    if not text.strip():
        logger.warning(f"No text extracted from {path.name}")
    return text
