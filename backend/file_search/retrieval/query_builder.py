"""Translate a :class:`SearchQuery` into an Elasticsearch request body."""

from __future__ import annotations

import copy
from typing import Any

from file_search.models.entities import SearchFilters, SearchMode, SearchQuery

HIGHLIGHT = {
    "fields": {
        "name": {"number_of_fragments": 1},
        "content": {"number_of_fragments": 3, "fragment_size": 150},
    }
}

SORT = [
    {"_score": {"order": "desc"}},
    {"modifiedAt": {"order": "desc"}},
]


def semantic_clause(text: str) -> dict[str, Any]:
    return {
        "multi_match": {
            "query": text,
            "fields": ["name^2", "content"],
            "type": "best_fields",
            "fuzziness": "AUTO",
        }
    }


def lexical_clause(text: str) -> dict[str, Any]:
    return {
        "multi_match": {
            "query": text,
            "fields": ["name^2", "content"],
            "type": "phrase_prefix",
        }
    }


def hybrid_clause(text: str) -> dict[str, Any]:
    return {
        "bool": {
            "should": [
                {
                    "multi_match": {
                        "query": text,
                        "fields": ["name^3", "content"],
                        "type": "best_fields",
                        "fuzziness": "AUTO",
                        "boost": 1.2,
                    }
                },
                {
                    "multi_match": {
                        "query": text,
                        "fields": ["name^2", "content"],
                        "type": "phrase_prefix",
                        "boost": 0.8,
                    }
                },
            ]
        }
    }


_MODE_CLAUSES = {
    SearchMode.SEMANTIC: semantic_clause,
    SearchMode.LEXICAL: lexical_clause,
    SearchMode.HYBRID: hybrid_clause,
}


def filter_clauses(filters: SearchFilters) -> list[dict[str, Any]]:
    clauses: list[dict[str, Any]] = []
    if filters.extensions:
        clauses.append({"terms": {"extension": list(filters.extensions)}})
    if filters.modified_after is not None:
        clauses.append({"range": {"modifiedAt": {"gte": filters.modified_after.isoformat()}}})
    if filters.modified_before is not None:
        clauses.append({"range": {"modifiedAt": {"lte": filters.modified_before.isoformat()}}})
    return clauses


def build_search_body(query: SearchQuery) -> dict[str, Any]:
    """Return ``query``, ``highlight`` and ``sort`` sections for a search call."""
    mode = SearchMode(query.mode)
    return {
        "query": {
            "bool": {
                "must": [_MODE_CLAUSES[mode](query.text)],
                "filter": filter_clauses(query.filters),
            }
        },
        "highlight": copy.deepcopy(HIGHLIGHT),
        "sort": copy.deepcopy(SORT),
    }


__all__ = [
    "build_search_body",
    "filter_clauses",
    "semantic_clause",
    "lexical_clause",
    "hybrid_clause",
]
