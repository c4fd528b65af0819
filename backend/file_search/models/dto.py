"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from file_search.models.entities import FileRecord, SearchResult


class FileOut(BaseModel):
    model_config = {"populate_by_name": True}

    id: str
    name: str
    path: str
    extension: str
    size: int
    modified_at: datetime = Field(alias="modifiedAt")
    content: str | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileOut":
        return cls(
            id=record.id,
            name=record.name,
            path=record.path,
            extension=record.extension,
            size=record.size,
            modified_at=record.modified_at,
            content=record.content,
            metadata=record.metadata,
        )


class SearchResultOut(BaseModel):
    file: FileOut
    score: float
    highlights: list[str] | None = None

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultOut":
        return cls(file=FileOut.from_record(result.file), score=result.score, highlights=result.highlights)


class SearchResponse(BaseModel):
    results: list[SearchResultOut]


class FileResponse(BaseModel):
    file: FileOut


class PathRequest(BaseModel):
    path: str | None = Field(default=None, description="Directory on the server's filesystem")


class MessageResponse(BaseModel):
    message: str


class IndexResponse(MessageResponse):
    stats: dict[str, int]


class WatchStartResponse(MessageResponse):
    path: str


class WatchStatusResponse(BaseModel):
    watching: bool
    path: str | None = None


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "FileOut",
    "SearchResultOut",
    "SearchResponse",
    "FileResponse",
    "PathRequest",
    "MessageResponse",
    "IndexResponse",
    "WatchStartResponse",
    "WatchStatusResponse",
    "ErrorResponse",
]
