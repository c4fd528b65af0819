"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

FILES_INDEXED = Counter(
    "file_search_files_indexed_total",
    "Files sent to the search engine",
    labelnames=("status",),
    registry=REGISTRY,
)

WATCH_EVENTS = Counter(
    "file_search_watch_events_total",
    "Filesystem events delivered by the watcher",
    labelnames=("action",),
    registry=REGISTRY,
)

EXTRACTION_FAILURES = Counter(
    "file_search_extraction_failures_total",
    "Files whose content could not be extracted",
    labelnames=("kind",),
    registry=REGISTRY,
)

SEARCH_LATENCY = Histogram(
    "file_search_search_latency_seconds",
    "Latency of search engine queries",
    labelnames=("mode",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "FILES_INDEXED",
    "WATCH_EVENTS",
    "EXTRACTION_FAILURES",
    "SEARCH_LATENCY",
    "metrics_response",
]
