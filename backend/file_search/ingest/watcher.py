"""Filesystem watcher that turns watchdog events into index events."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable, Iterable

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from file_search.core.errors import ValidationError
from file_search.core.logging import get_logger
from file_search.ingest.scanner import is_hidden, is_supported, resolve_root, scan
from file_search.models.entities import FileRecord, WatchAction, WatchEvent

logger = get_logger(__name__)

WatchCallback = Callable[[WatchEvent], None]


class IndexEventHandler(FileSystemEventHandler):
    """Translate raw filesystem events below ``root`` into :class:`WatchEvent`.

    Paths of files seen under the root are remembered so that removing or
    moving away a whole directory reports a deletion for each file in it;
    the native observers only report the directory itself in that case.
    """

    def __init__(self, root: Path, callback: WatchCallback, known: Iterable[Path] = ()) -> None:
        super().__init__()
        self.root = root
        self.callback = callback
        self._known: set[Path] = set(known)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit_current(_src(event), WatchAction.ADDED)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit_current(_src(event), WatchAction.MODIFIED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self._emit_deleted_tree(_src(event))
        else:
            self._emit_deleted(_src(event))

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        dest = Path(os.fsdecode(event.dest_path))
        if not event.is_directory:
            self._emit_deleted(_src(event))
            self._emit_current(dest, WatchAction.ADDED)
            return
        self._emit_deleted_tree(_src(event))
        if not _is_within(dest, self.root):
            return
        try:
            records = list(scan(dest))
        except ValidationError:
            logger.debug("Moved directory %s vanished before it was scanned", dest)
            return
        for record in records:
            self._emit_record(Path(record.path), record, WatchAction.ADDED)

    def accepts(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return False
        if any(is_hidden(part) for part in relative.parts):
            return False
        return is_supported(path)

    def _emit_current(self, path: Path, action: WatchAction) -> None:
        if not self.accepts(path):
            return
        try:
            record = FileRecord.from_path(path)
        except OSError as exc:
            logger.debug("Dropping %s event for %s: %s", action.value, path, exc)
            return
        self._emit_record(path, record, action)

    def _emit_record(self, path: Path, record: FileRecord, action: WatchAction) -> None:
        if not self.accepts(path):
            return
        self._known.add(path)
        self._dispatch(WatchEvent(record=record, action=action))

    def _emit_deleted(self, path: Path) -> None:
        if self.accepts(path):
            self._known.discard(path)
            self._dispatch(WatchEvent(record=FileRecord.for_deleted_path(path), action=WatchAction.DELETED))

    def _emit_deleted_tree(self, directory: Path) -> None:
        for path in sorted(known for known in self._known if directory in known.parents):
            self._emit_deleted(path)

    def _dispatch(self, event: WatchEvent) -> None:
        try:
            self.callback(event)
        except Exception:
            logger.exception("Watch callback failed for %s (%s)", event.record.path, event.action.value)


class ChangeWatcher:
    """Owns at most one recursive watchdog subscription."""

    def __init__(self, observer_factory: Callable[[], BaseObserver] = Observer) -> None:
        self._observer_factory = observer_factory
        self._lock = threading.Lock()
        self._observer: BaseObserver | None = None
        self._root: Path | None = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    @property
    def root(self) -> Path | None:
        return self._root

    def watch(self, path: Path | str, callback: WatchCallback) -> Path:
        """Start watching ``path``, replacing any active subscription."""
        root = resolve_root(path)
        handler = IndexEventHandler(root, callback, known=(Path(record.path) for record in scan(root)))
        with self._lock:
            if self._observer is not None:
                logger.info("Replacing watch on %s with %s", self._root, root)
                self._shutdown_locked()
            observer = self._observer_factory()
            observer.schedule(handler, str(root), recursive=True)
            observer.start()
            self._observer = observer
            self._root = root
        logger.info("Watching %s", root)
        return root

    def stop(self) -> None:
        with self._lock:
            if self._observer is None:
                return
            root = self._root
            self._shutdown_locked()
        logger.info("Stopped watching %s", root)

    def _shutdown_locked(self) -> None:
        observer = self._observer
        self._observer = None
        self._root = None
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)


def _src(event: FileSystemEvent) -> Path:
    return Path(os.fsdecode(event.src_path))


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


__all__ = ["ChangeWatcher", "IndexEventHandler", "WatchCallback"]
