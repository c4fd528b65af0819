"""Text extraction for supported file formats."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable

import fitz  # PyMuPDF
from docx import Document

from file_search.core.errors import ExtractionError
from file_search.core.logging import get_logger
from file_search.core.metrics import EXTRACTION_FAILURES
from file_search.ingest.scanner import SOURCE_EXTENSIONS, TEXT_EXTENSIONS

logger = get_logger(__name__)

MAX_CONTENT_CHARS = 50_000


class ExtractorKind(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    WORD = "word"


EXTRACTOR_KINDS: dict[str, ExtractorKind] = {
    **{suffix: ExtractorKind.TEXT for suffix in TEXT_EXTENSIONS | SOURCE_EXTENSIONS},
    ".pdf": ExtractorKind.PDF,
    ".doc": ExtractorKind.WORD,
    ".docx": ExtractorKind.WORD,
}


def _read_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


def _read_pdf(path: Path) -> str:
    with fitz.open(str(path)) as doc:
        pages = [page.get_text("text", sort=True) for page in doc]
    return "\n".join(pages)


def _read_word(path: Path) -> str:
    # python-docx only understands the OOXML container; legacy .doc files fail here.
    document = Document(str(path))
    return "\n".join(para.text for para in document.paragraphs if para.text.strip())


_HANDLERS: dict[ExtractorKind, Callable[[Path], str]] = {
    ExtractorKind.TEXT: _read_text,
    ExtractorKind.PDF: _read_pdf,
    ExtractorKind.WORD: _read_word,
}


def kind_for(path: Path | str) -> ExtractorKind | None:
    return EXTRACTOR_KINDS.get(Path(path).suffix.lower())


def extract(path: Path | str) -> str:
    """Return at most ``MAX_CONTENT_CHARS`` characters of text from ``path``.

    Unknown extensions yield an empty string. Any read or parse failure is
    raised as :class:`ExtractionError`.
    """
    file_path = Path(path)
    kind = kind_for(file_path)
    if kind is None:
        return ""
    try:
        text = _HANDLERS[kind](file_path)
    except UnicodeDecodeError as exc:
        raise ExtractionError(file_path, f"not valid UTF-8 ({exc.reason})") from exc
    except Exception as exc:
        raise ExtractionError(file_path, str(exc) or type(exc).__name__) from exc
    return text[:MAX_CONTENT_CHARS]


def extract_or_none(path: Path | str) -> str | None:
    """Best-effort :func:`extract`: log failures and return ``None``."""
    try:
        return extract(path)
    except ExtractionError as exc:
        kind = kind_for(path)
        EXTRACTION_FAILURES.labels(kind=kind.value if kind else "unknown").inc()
        logger.warning("%s", exc)
        return None


__all__ = [
    "MAX_CONTENT_CHARS",
    "ExtractorKind",
    "EXTRACTOR_KINDS",
    "kind_for",
    "extract",
    "extract_or_none",
]
