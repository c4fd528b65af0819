"""Dataclasses passed between the scanner, watcher, pipeline and store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from file_search.utils.hashing import derive_id
from file_search.utils.time import from_timestamp, parse_iso8601, utc_now


class SearchMode(str, Enum):
    SEMANTIC = "semantic"
    LEXICAL = "lexical"
    HYBRID = "hybrid"


class WatchAction(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(slots=True)
class FileRecord:
    """One file as sent to (and read back from) the search engine."""

    id: str
    name: str
    path: str
    extension: str
    size: int
    modified_at: datetime
    content: str | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_path(cls, path: Path, stat_result: Any | None = None) -> "FileRecord":
        """Build a record from a file on disk, calling ``stat`` unless given."""
        st = stat_result if stat_result is not None else path.stat()
        return cls(
            id=derive_id(path),
            name=path.name,
            path=str(path),
            extension=path.suffix.lower(),
            size=st.st_size,
            modified_at=from_timestamp(st.st_mtime),
        )

    @classmethod
    def for_deleted_path(cls, path: Path) -> "FileRecord":
        """Placeholder record for a path that no longer exists."""
        return cls(
            id=derive_id(path),
            name=path.name,
            path=str(path),
            extension=path.suffix.lower(),
            size=0,
            modified_at=utc_now(),
        )

    def with_content(self, content: str | None) -> "FileRecord":
        return FileRecord(
            id=self.id,
            name=self.name,
            path=self.path,
            extension=self.extension,
            size=self.size,
            modified_at=self.modified_at,
            content=content,
            metadata=self.metadata,
        )

    def to_document(self) -> dict[str, Any]:
        """Engine document; field names follow the collection mapping."""
        document: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "extension": self.extension,
            "size": self.size,
            "modifiedAt": self.modified_at.isoformat(),
        }
        if self.content is not None:
            document["content"] = self.content
        if self.metadata is not None:
            document["metadata"] = self.metadata
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "FileRecord":
        modified = document.get("modifiedAt")
        if isinstance(modified, str):
            modified_at = parse_iso8601(modified)
        elif isinstance(modified, (int, float)):
            modified_at = from_timestamp(modified / 1000)
        else:
            modified_at = utc_now()
        return cls(
            id=document["id"],
            name=document.get("name", ""),
            path=document.get("path", ""),
            extension=document.get("extension", ""),
            size=int(document.get("size") or 0),
            modified_at=modified_at,
            content=document.get("content"),
            metadata=document.get("metadata"),
        )


@dataclass(slots=True)
class SearchFilters:
    extensions: list[str] | None = None
    modified_after: datetime | None = None
    modified_before: datetime | None = None


@dataclass(slots=True)
class SearchQuery:
    text: str
    mode: SearchMode = SearchMode.HYBRID
    filters: SearchFilters = field(default_factory=SearchFilters)
    limit: int = 20
    offset: int = 0


@dataclass(slots=True)
class SearchResult:
    file: FileRecord
    score: float
    highlights: list[str] | None = None


@dataclass(slots=True)
class WatchEvent:
    record: FileRecord
    action: WatchAction


@dataclass(slots=True)
class IndexStats:
    """Aggregated outcome of one directory indexing run."""

    scanned: int = 0
    indexed: int = 0
    empty_content: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "scanned": self.scanned,
            "indexed": self.indexed,
            "empty_content": self.empty_content,
        }


__all__ = [
    "SearchMode",
    "WatchAction",
    "FileRecord",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "WatchEvent",
    "IndexStats",
]
