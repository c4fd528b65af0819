"""Search and file lookup routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from file_search.api.dependencies import get_query_service
from file_search.core.errors import ValidationError
from file_search.models.dto import FileOut, FileResponse, MessageResponse, SearchResponse, SearchResultOut
from file_search.models.entities import SearchFilters, SearchMode, SearchQuery
from file_search.retrieval.search import QueryService
from file_search.utils.time import parse_iso8601

router = APIRouter()

# Elasticsearch rejects from + size beyond index.max_result_window.
MAX_RESULT_WINDOW = 10_000


@router.get("/search", response_model=SearchResponse, summary="Search indexed files")
def search_files(
    q: str | None = Query(default=None, description="Free-text query"),
    type: str = Query(default=SearchMode.HYBRID.value, description="semantic, lexical or hybrid"),
    extensions: str | None = Query(default=None, description="Comma separated extensions, e.g. pdf,md"),
    modified_after: str | None = Query(default=None, alias="modifiedAfter"),
    modified_before: str | None = Query(default=None, alias="modifiedBefore"),
    limit: int = Query(default=20, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    service: QueryService = Depends(get_query_service),
) -> SearchResponse:
    if q is None or not q.strip():
        raise ValidationError('Query parameter "q" is required')
    if offset + limit > MAX_RESULT_WINDOW:
        raise ValidationError(f'Query parameters "offset" + "limit" must not exceed {MAX_RESULT_WINDOW}')
    query = SearchQuery(
        text=q,
        mode=_parse_mode(type),
        filters=SearchFilters(
            extensions=_parse_extensions(extensions),
            modified_after=_parse_date("modifiedAfter", modified_after),
            modified_before=_parse_date("modifiedBefore", modified_before),
        ),
        limit=limit,
        offset=offset,
    )
    results = service.search(query)
    return SearchResponse(results=[SearchResultOut.from_result(result) for result in results])


@router.get("/files/{file_id}", response_model=FileResponse, summary="Get an indexed file by id")
def get_file(file_id: str, service: QueryService = Depends(get_query_service)) -> FileResponse:
    return FileResponse(file=FileOut.from_record(service.get_file(file_id)))


@router.delete("/files/{file_id}", response_model=MessageResponse, summary="Remove a file from the index")
def delete_file(file_id: str, service: QueryService = Depends(get_query_service)) -> MessageResponse:
    service.delete_file(file_id)
    return MessageResponse(message="File deleted successfully")


def _parse_mode(value: str) -> SearchMode:
    try:
        return SearchMode(value.strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in SearchMode)
        raise ValidationError(f'Query parameter "type" must be one of: {allowed}') from None


def _parse_extensions(value: str | None) -> list[str] | None:
    if not value:
        return None
    extensions = []
    for part in value.split(","):
        part = part.strip().lower()
        if not part:
            continue
        extensions.append(part if part.startswith(".") else f".{part}")
    return extensions or None


def _parse_date(name: str, value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parse_iso8601(value)
    except ValueError:
        raise ValidationError(f'Query parameter "{name}" must be an ISO-8601 date') from None


__all__ = ["router"]
