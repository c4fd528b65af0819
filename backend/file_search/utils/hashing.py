"""Hashing utilities."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path


def md5_text(value: str) -> str:
    """Return hex digest for a text value."""
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


def derive_id(path: Path | str) -> str:
    """Return the document id for a path.

    Depends on the path string only, never on file contents, so a file can be
    deleted from the index by id after it has disappeared from disk.
    """
    return md5_text(os.fspath(path))
