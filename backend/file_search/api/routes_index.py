"""Indexing and watch routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from file_search.api.dependencies import get_pipeline
from file_search.core.errors import ValidationError
from file_search.ingest.pipeline import IndexingPipeline
from file_search.models.dto import (
    IndexResponse,
    MessageResponse,
    PathRequest,
    WatchStartResponse,
    WatchStatusResponse,
)

router = APIRouter()


@router.post("/index", response_model=IndexResponse, summary="Index a directory")
def index_directory(
    request: PathRequest | None = None,
    pipeline: IndexingPipeline = Depends(get_pipeline),
) -> IndexResponse:
    stats = pipeline.index_directory(_require_path(request))
    return IndexResponse(message="Directory indexed successfully", stats=stats.to_dict())


@router.post("/index/reset", response_model=MessageResponse, summary="Delete and recreate the index")
def reset_index(pipeline: IndexingPipeline = Depends(get_pipeline)) -> MessageResponse:
    pipeline.reset_index()
    return MessageResponse(message="Index reset successfully")


@router.post("/watch/start", response_model=WatchStartResponse, summary="Watch a directory for changes")
def start_watching(
    request: PathRequest | None = None,
    pipeline: IndexingPipeline = Depends(get_pipeline),
) -> WatchStartResponse:
    root = pipeline.start_watching(_require_path(request))
    return WatchStartResponse(message="Started watching directory", path=str(root))


@router.post("/watch/stop", response_model=MessageResponse, summary="Stop watching")
def stop_watching(pipeline: IndexingPipeline = Depends(get_pipeline)) -> MessageResponse:
    pipeline.stop_watching()
    return MessageResponse(message="Stopped watching directories")


@router.get("/watch", response_model=WatchStatusResponse, summary="Current watch subscription")
def watch_status(pipeline: IndexingPipeline = Depends(get_pipeline)) -> WatchStatusResponse:
    root = pipeline.watching_root
    return WatchStatusResponse(watching=root is not None, path=str(root) if root else None)


def _require_path(request: PathRequest | None) -> str:
    if request is None or not request.path or not request.path.strip():
        raise ValidationError("Directory path is required")
    return request.path


__all__ = ["router"]
