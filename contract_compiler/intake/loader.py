from __future__ import annotations

from pathlib import Path
from typing import List

import fitz  # PyMuPDF
from docx import Document
from loguru import logger

SUPPORTED_EXTENSIONS = (".txt", ".pdf", ".docx")


class UnsupportedDocumentError(ValueError):
    def __init__(self, path: str, ext: str):
        super().__init__(f"Unsupported file type: {ext or '<none>'}")
        self.path = path
        self.ext = ext


class DocumentLoadError(ValueError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Cannot read {path}: {detail}")
        self.path = path
        self.detail = detail


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _join_paragraphs(paragraphs: List[str]) -> str:
    cleaned = [p.rstrip() for p in paragraphs if isinstance(p, str)]
    return "\n".join(cleaned).strip("\n")


def load_txt_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def load_pdf_text(path: Path) -> str:
    """Page texts joined by a blank line."""
    try:
        doc = fitz.open(str(path))
    except Exception as exc:
        raise DocumentLoadError(str(path), str(exc)) from exc
    try:
        return "\n\n".join(page.get_text("text") for page in doc)
    finally:
        doc.close()


def load_docx_text(path: Path) -> str:
    """Paragraph texts joined by newlines; empty paragraphs are kept as blank lines."""
    try:
        document = Document(str(path))
    except Exception as exc:
        raise DocumentLoadError(str(path), str(exc)) from exc
    return _join_paragraphs([p.text for p in document.paragraphs])


def load_document(file_path: str | Path) -> str:
    """
    Read a contract document as plain text with ``\\n`` line endings.

    Raises:
      - UnsupportedDocumentError for extensions other than .txt/.pdf/.docx;
      - FileNotFoundError when the file does not exist;
      - DocumentLoadError when a binary document cannot be parsed.
    """
    path = Path(file_path)
    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedDocumentError(str(path), ext)
    if not path.is_file():
        raise FileNotFoundError(f"No such file: {path}")

    if ext == ".pdf":
        text = load_pdf_text(path)
    elif ext == ".docx":
        text = load_docx_text(path)
    else:
        text = load_txt_text(path)

    text = normalize_newlines(text)
    logger.debug("loaded {} ({} chars)", path, len(text))
    return text


__all__ = [
    "SUPPORTED_EXTENSIONS",
    "UnsupportedDocumentError",
    "DocumentLoadError",
    "load_document",
    "load_docx_text",
    "load_pdf_text",
    "normalize_newlines",
]
