"""Elasticsearch client construction."""

from __future__ import annotations

import ipaddress
from typing import Any
from urllib.parse import urlparse

from elasticsearch import Elasticsearch

from file_search.core.config import Settings


def is_loopback_host(host: str | None) -> bool:
    if not host:
        return False
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def accepts_self_signed(node: str) -> bool:
    """Certificate checks are relaxed only for TLS endpoints on this machine."""
    parsed = urlparse(node)
    return parsed.scheme == "https" and is_loopback_host(parsed.hostname)


def client_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {"request_timeout": settings.request_timeout}
    if settings.auth_mode == "api_key":
        options["api_key"] = settings.elasticsearch_api_key
    elif settings.auth_mode == "basic":
        options["basic_auth"] = (settings.elasticsearch_username, settings.elasticsearch_password)
    if accepts_self_signed(settings.elasticsearch_node):
        options["verify_certs"] = False
        options["ssl_show_warn"] = False
    return options


def build_client(settings: Settings) -> Elasticsearch:
    return Elasticsearch(settings.elasticsearch_node, **client_options(settings))


__all__ = ["build_client", "client_options", "accepts_self_signed", "is_loopback_host"]
