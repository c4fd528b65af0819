"""Indexing orchestration: scan, extract, upsert, and keep the index live."""

from __future__ import annotations

from pathlib import Path

from file_search.core.errors import BackendOperationError
from file_search.core.logging import get_logger
from file_search.core.metrics import FILES_INDEXED, WATCH_EVENTS
from file_search.db.store import DocumentStore
from file_search.ingest.extractors import extract_or_none
from file_search.ingest.scanner import resolve_root, scan
from file_search.ingest.watcher import ChangeWatcher
from file_search.models.entities import FileRecord, IndexStats, WatchAction, WatchEvent

logger = get_logger(__name__)


class IndexingPipeline:
    """Coordinate scanner, extractor, watcher and the document store."""

    def __init__(self, store: DocumentStore, watcher: ChangeWatcher | None = None) -> None:
        self.store = store
        self.watcher = watcher or ChangeWatcher()

    def ensure_collection(self) -> None:
        if not self.store.collection_exists():
            self.store.create_collection()

    def reset_index(self) -> None:
        """Drop every indexed document and recreate the empty collection."""
        self.store.delete_collection()
        self.store.create_collection()
        logger.info("Index %s reset", self.store.index_name)

    def index_directory(self, path: Path | str) -> IndexStats:
        root = resolve_root(path)
        stats = IndexStats()
        logger.info("Indexing %s", root)
        for record in scan(root):
            stats.scanned += 1
            try:
                indexed = self._index_record(record)
            except BackendOperationError:
                FILES_INDEXED.labels(status="failed").inc()
                logger.error("Indexing %s aborted at %s", root, record.path)
                raise
            stats.indexed += 1
            if indexed.content is None:
                stats.empty_content += 1
        self.store.refresh()
        logger.info(
            "Indexed %s files under %s",
            stats.indexed,
            root,
            extra={"ctx_stats": stats.to_dict()},
        )
        return stats

    def handle_event(self, event: WatchEvent) -> None:
        """Apply one watcher event to the index; never raises."""
        WATCH_EVENTS.labels(action=event.action.value).inc()
        record = event.record
        try:
            if event.action is WatchAction.DELETED:
                self.store.delete_by_id(record.id)
                logger.info("Removed %s from index", record.path)
            else:
                self._index_record(record)
                logger.info("Indexed %s (%s)", record.path, event.action.value)
        except Exception:
            logger.exception("Error handling file %s for %s", event.action.value, record.path)

    def start_watching(self, path: Path | str) -> Path:
        return self.watcher.watch(path, self.handle_event)

    def stop_watching(self) -> None:
        self.watcher.stop()

    @property
    def watching_root(self) -> Path | None:
        return self.watcher.root

    def _index_record(self, record: FileRecord) -> FileRecord:
        indexed = record.with_content(extract_or_none(record.path))
        self.store.upsert(indexed)
        FILES_INDEXED.labels(status="indexed").inc()
        return indexed


__all__ = ["IndexingPipeline"]
