"""Search orchestration."""

from __future__ import annotations

from file_search.core.errors import NotFoundError
from file_search.db.store import DocumentStore
from file_search.models.entities import FileRecord, SearchQuery, SearchResult


class QueryService:
    """Read-side operations on the index."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def search(self, query: SearchQuery) -> list[SearchResult]:
        return self.store.query(query)

    def get_file(self, file_id: str) -> FileRecord:
        record = self.store.get_by_id(file_id)
        if record is None:
            raise NotFoundError("File not found")
        return record

    def delete_file(self, file_id: str) -> None:
        self.store.delete_by_id(file_id)


__all__ = ["QueryService"]
