"""Document store gateway backed by an Elasticsearch index."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from elasticsearch import ApiError, Elasticsearch, TransportError

from file_search.core.errors import BackendOperationError
from file_search.core.logging import get_logger
from file_search.core.metrics import SEARCH_LATENCY
from file_search.models.entities import FileRecord, SearchMode, SearchQuery, SearchResult
from file_search.retrieval.query_builder import build_search_body

logger = get_logger(__name__)

DEFAULT_INDEX_NAME = "local-files"

INDEX_SETTINGS: dict[str, Any] = {
    "number_of_shards": 1,
    "number_of_replicas": 0,
    "analysis": {
        "analyzer": {
            "content_analyzer": {
                "type": "standard",
                "stopwords": "_english_",
            }
        }
    },
}

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        "name": {
            "type": "text",
            "analyzer": "content_analyzer",
            "fields": {"keyword": {"type": "keyword"}},
        },
        "path": {"type": "keyword"},
        "extension": {"type": "keyword"},
        "size": {"type": "long"},
        "modifiedAt": {"type": "date"},
        "content": {"type": "text", "analyzer": "content_analyzer"},
        "metadata": {"type": "object"},
    }
}


class DocumentStore:
    """Forwards file records and queries to the search engine."""

    def __init__(self, client: Elasticsearch, index_name: str = DEFAULT_INDEX_NAME) -> None:
        self.client = client
        self.index_name = index_name

    # Collection lifecycle ---------------------------------------------

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except (ApiError, TransportError) as exc:
            logger.debug("Ping failed: %s", exc)
            return False

    def collection_exists(self) -> bool:
        with _translate_errors("exists"):
            return bool(self.client.indices.exists(index=self.index_name))

    def create_collection(self) -> None:
        with _translate_errors("create index"):
            self.client.indices.create(
                index=self.index_name,
                settings=INDEX_SETTINGS,
                mappings=INDEX_MAPPINGS,
            )
        logger.info("Created index %s", self.index_name)

    def delete_collection(self) -> None:
        with _translate_errors("delete index"):
            self.client.options(ignore_status=404).indices.delete(index=self.index_name)
        logger.info("Deleted index %s", self.index_name)

    def refresh(self) -> None:
        with _translate_errors("refresh"):
            self.client.indices.refresh(index=self.index_name)

    # Documents ----------------------------------------------------------

    def upsert(self, record: FileRecord) -> None:
        with _translate_errors("index"):
            self.client.index(index=self.index_name, id=record.id, document=record.to_document())

    def delete_by_id(self, document_id: str) -> None:
        """Remove a document; a missing document is not an error."""
        with _translate_errors("delete"):
            resp = self.client.options(ignore_status=404).delete(index=self.index_name, id=document_id)
        if _body(resp).get("result") != "deleted":
            logger.debug("Delete of %s was a no-op", document_id)

    def get_by_id(self, document_id: str) -> FileRecord | None:
        with _translate_errors("get"):
            resp = self.client.options(ignore_status=404).get(index=self.index_name, id=document_id)
        body = _body(resp)
        if not body.get("found"):
            return None
        return FileRecord.from_document(body["_source"])

    def query(self, query: SearchQuery) -> list[SearchResult]:
        body = build_search_body(query)
        mode = SearchMode(query.mode)
        with SEARCH_LATENCY.labels(mode=mode.value).time(), _translate_errors("search"):
            resp = self.client.search(
                index=self.index_name,
                size=query.limit,
                from_=query.offset,
                **body,
            )
        hits = _body(resp).get("hits", {}).get("hits", [])
        return [_hit_to_result(hit) for hit in hits]


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (ApiError, TransportError) as exc:
        raise BackendOperationError(f"Search engine {operation} failed: {exc}") from exc


def _body(resp: Any) -> Mapping[str, Any]:
    # Client responses wrap the decoded JSON; test doubles hand back plain dicts.
    body = getattr(resp, "body", resp)
    return body if isinstance(body, Mapping) else {}


def _hit_to_result(hit: Mapping[str, Any]) -> SearchResult:
    highlight = hit.get("highlight")
    fragments: list[str] | None = None
    if highlight:
        fragments = [str(fragment) for values in highlight.values() for fragment in values]
    return SearchResult(
        file=FileRecord.from_document(hit["_source"]),
        score=float(hit.get("_score") or 0.0),
        highlights=fragments,
    )


__all__ = ["DocumentStore", "DEFAULT_INDEX_NAME", "INDEX_SETTINGS", "INDEX_MAPPINGS"]
