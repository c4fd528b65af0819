"""FastAPI application setup for Local File Search."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from file_search.api.dependencies import (
    get_app_settings,
    get_pipeline,
    get_query_service,
    get_store,
    release_watcher,
)
from file_search.api.routes_index import router as index_router
from file_search.api.routes_search import router as search_router
from file_search.core.errors import GENERIC_ERROR_MESSAGE, BackendUnavailableError, FileSearchError
from file_search.core.logging import configure_logging, get_logger
from file_search.core.metrics import metrics_response

API_VERSION = "1.0.0"

TROUBLESHOOTING = (
    "Troubleshooting:",
    "1. Ensure Elasticsearch is running: curl -fsSL https://elastic.co/start-local | sh",
    "2. Check ELASTICSEARCH_USERNAME/ELASTICSEARCH_PASSWORD or ELASTICSEARCH_API_KEY",
    "3. Verify the ELASTICSEARCH_NODE URL is correct",
)

_settings = get_app_settings()
configure_logging(_settings.log_level, use_json=_settings.log_json)
logger = get_logger(__name__)

app = FastAPI(
    title="Local File Search",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(search_router, prefix="/api", tags=["search"])
app.include_router(index_router, prefix="/api", tags=["index"])


@app.exception_handler(FileSearchError)
async def handle_file_search_error(request: Request, exc: FileSearchError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


@app.on_event("startup")
def startup() -> None:
    """Check the search engine and make sure the collection exists."""
    settings = get_app_settings()
    logger.info(
        "Connecting to Elasticsearch at %s (auth: %s)",
        settings.elasticsearch_node,
        settings.auth_mode,
    )
    if not get_store().ping():
        logger.error("Cannot connect to Elasticsearch at %s", settings.elasticsearch_node)
        for line in TROUBLESHOOTING:
            logger.error(line)
        raise BackendUnavailableError(f"Search engine unreachable at {settings.elasticsearch_node}")
    get_pipeline().ensure_collection()
    get_query_service()
    logger.info("Search index %s ready", settings.index_name)


@app.on_event("shutdown")
def shutdown() -> None:
    release_watcher()


@app.get("/api", tags=["admin"])
def api_info() -> dict[str, object]:
    return {
        "name": "Local File Search API",
        "version": API_VERSION,
        "endpoints": {
            "GET /api/search": "Search files (query params: q, type, extensions, modifiedAfter, "
            "modifiedBefore, limit, offset)",
            "GET /api/files/{id}": "Get file details by ID",
            "DELETE /api/files/{id}": "Remove file from index",
            "POST /api/index": "Index a directory (body: {path})",
            "POST /api/index/reset": "Reset the entire index",
            "POST /api/watch/start": "Start watching directory (body: {path})",
            "POST /api/watch/stop": "Stop watching directories",
            "GET /api/watch": "Current watch status",
        },
        "examples": {
            "search": "/api/search?q=medical%20documents&type=hybrid&limit=10",
            "indexDirectory": 'POST /api/index with body: {"path": "/Users/username/Documents"}',
        },
    }


@app.get("/health", tags=["admin"])
def health() -> dict[str, str]:
    """Simple liveness check."""
    return {"status": "healthy"}


@app.get("/metrics", tags=["admin"])
def get_metrics():
    return metrics_response()
