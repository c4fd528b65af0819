"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from file_search.core.config import Settings, get_settings
from file_search.db.client import build_client
from file_search.db.store import DocumentStore
from file_search.ingest.pipeline import IndexingPipeline
from file_search.retrieval.search import QueryService

_STORE: DocumentStore | None = None
_PIPELINE: IndexingPipeline | None = None
_QUERY_SERVICE: QueryService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_store() -> DocumentStore:
    global _STORE
    if _STORE is None:
        settings = get_app_settings()
        _STORE = DocumentStore(build_client(settings), index_name=settings.index_name)
    return _STORE


def get_pipeline() -> IndexingPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = IndexingPipeline(store=get_store())
    return _PIPELINE


def get_query_service() -> QueryService:
    global _QUERY_SERVICE
    if _QUERY_SERVICE is None:
        _QUERY_SERVICE = QueryService(store=get_store())
    return _QUERY_SERVICE


def release_watcher() -> None:
    """Stop the watch subscription if a pipeline was ever created."""
    if _PIPELINE is not None:
        _PIPELINE.stop_watching()


__all__ = [
    "get_app_settings",
    "get_store",
    "get_pipeline",
    "get_query_service",
    "release_watcher",
]
