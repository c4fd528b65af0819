"""Recursive directory scanning."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from file_search.core.errors import ValidationError
from file_search.core.logging import get_logger
from file_search.models.entities import FileRecord

logger = get_logger(__name__)

TEXT_EXTENSIONS = frozenset({".txt", ".md", ".json"})
SOURCE_EXTENSIONS = frozenset({".js", ".ts", ".py", ".java", ".cpp", ".c", ".h"})
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx"})
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | SOURCE_EXTENSIONS | DOCUMENT_EXTENSIONS


def is_supported(path: Path | str) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def resolve_root(path: Path | str) -> Path:
    """Normalize a user-supplied directory and check that it exists."""
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise ValidationError(f"Directory not found: {root}")
    return root


def scan(root: Path | str) -> Iterator[FileRecord]:
    """Yield metadata records for supported files below ``root``.

    Hidden directories are not descended into and symlinks are skipped.
    Unreadable directories and files are logged and left out.
    """
    yield from _walk(resolve_root(root))


def _walk(directory: Path) -> Iterator[FileRecord]:
    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as exc:
        logger.warning("Error scanning directory %s: %s", directory, exc)
        return

    for entry in children:
        try:
            if entry.is_dir(follow_symlinks=False):
                if not is_hidden(entry.name):
                    yield from _walk(Path(entry.path))
                continue
            if not entry.is_file(follow_symlinks=False) or not is_supported(entry.name):
                continue
            path = Path(entry.path)
            record = FileRecord.from_path(path, entry.stat(follow_symlinks=False))
        except OSError as exc:
            logger.warning("Skipping %s: %s", entry.path, exc)
            continue
        yield record


__all__ = [
    "SUPPORTED_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "SOURCE_EXTENSIONS",
    "DOCUMENT_EXTENSIONS",
    "is_supported",
    "is_hidden",
    "resolve_root",
    "scan",
]
