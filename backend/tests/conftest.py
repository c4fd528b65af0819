"""Test fixtures for Local File Search."""

from __future__ import annotations

import copy
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

_ENV_VARS = (
    "LFS_CONFIG",
    "LFS_HOST_URL",
    "LFS_PORT",
    "LFS_INDEX_NAME",
    "ELASTICSEARCH_NODE",
    "ELASTICSEARCH_USERNAME",
    "ELASTICSEARCH_PASSWORD",
    "ELASTICSEARCH_API_KEY",
    "PORT",
)


class FakeIndices:
    def __init__(self, es: "FakeElasticsearch") -> None:
        self.es = es

    def exists(self, index: str) -> bool:
        return index in self.es.collections

    def create(self, index: str, settings: dict | None = None, mappings: dict | None = None) -> dict:
        self.es.collections[index] = {}
        self.es.created.append({"index": index, "settings": settings, "mappings": mappings})
        return {"acknowledged": True}

    def delete(self, index: str) -> dict:
        self.es.collections.pop(index, None)
        return {"acknowledged": True}

    def refresh(self, index: str) -> dict:
        self.es.refreshes += 1
        return {}


class FakeElasticsearch:
    """In-memory stand-in for the subset of the client API the store uses.

    Scoring is a crude term count (name weighted double), good enough to
    check ordering and filter plumbing.
    """

    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.created: list[dict[str, Any]] = []
        self.searches: list[dict[str, Any]] = []
        self.refreshes = 0
        self.fail_with: Exception | None = None
        self.indices = FakeIndices(self)

    def options(self, **_: Any) -> "FakeElasticsearch":
        return self

    def ping(self) -> bool:
        return self.reachable

    def index(self, index: str, id: str, document: dict[str, Any]) -> dict:
        self._maybe_fail()
        self.collections.setdefault(index, {})[id] = copy.deepcopy(document)
        return {"result": "created"}

    def delete(self, index: str, id: str) -> dict:
        self._maybe_fail()
        docs = self.collections.get(index, {})
        if docs.pop(id, None) is None:
            return {"result": "not_found"}
        return {"result": "deleted"}

    def get(self, index: str, id: str) -> dict:
        self._maybe_fail()
        doc = self.collections.get(index, {}).get(id)
        if doc is None:
            return {"_index": index, "_id": id, "found": False}
        return {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(doc)}

    def search(self, index: str, size: int = 10, from_: int = 0, **body: Any) -> dict:
        self._maybe_fail()
        self.searches.append({"index": index, "size": size, "from_": from_, **body})
        bool_query = body["query"]["bool"]
        terms = _query_text(bool_query["must"][0]).lower().split()
        hits = []
        for doc in self.collections.get(index, {}).values():
            if not all(_passes(doc, clause) for clause in bool_query["filter"]):
                continue
            name = doc.get("name", "").lower()
            content = (doc.get("content") or "").lower()
            score = float(sum(2 * name.count(term) + content.count(term) for term in terms))
            if score <= 0:
                continue
            hit: dict[str, Any] = {"_id": doc["id"], "_score": score, "_source": copy.deepcopy(doc)}
            fragments = [f"<em>{term}</em>" for term in terms if term in content]
            if fragments:
                hit["highlight"] = {"content": fragments}
            hits.append(hit)
        hits.sort(key=lambda hit: (hit["_score"], hit["_source"]["modifiedAt"]), reverse=True)
        return {"hits": {"hits": hits[from_ : from_ + size]}}

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


def _query_text(clause: dict[str, Any]) -> str:
    if "multi_match" in clause:
        return clause["multi_match"]["query"]
    return _query_text(clause["bool"]["should"][0])


def _passes(doc: dict[str, Any], clause: dict[str, Any]) -> bool:
    if "terms" in clause:
        return doc.get("extension") in clause["terms"]["extension"]
    bounds = clause["range"]["modifiedAt"]
    modified = datetime.fromisoformat(doc["modifiedAt"])
    if "gte" in bounds and modified < datetime.fromisoformat(bounds["gte"]):
        return False
    if "lte" in bounds and modified > datetime.fromisoformat(bounds["lte"]):
        return False
    return True


def _reset_singletons() -> None:
    from file_search.api import dependencies as deps
    from file_search.core.config import get_settings

    if deps._PIPELINE is not None:
        deps._PIPELINE.stop_watching()
    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps._STORE = None
    deps._PIPELINE = None
    deps._QUERY_SERVICE = None


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LFS_CONFIG", str(tmp_path / "no-config.yaml"))
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def store(fake_es: FakeElasticsearch):
    from file_search.db.store import DocumentStore

    document_store = DocumentStore(fake_es)
    document_store.create_collection()
    return document_store


@pytest.fixture
def installed_store(store):
    """Make the API dependencies use the in-memory store."""
    from file_search.api import dependencies as deps

    deps._STORE = store
    return store


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    root.mkdir()
    return root
