"""CLI tests against a stubbed HTTP layer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import requests
from typer.testing import CliRunner

from file_search.cli import main as cli

runner = CliRunner()


class FakeResponse:
    def __init__(self, status_code: int, payload: dict[str, Any]) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> dict[str, Any]:
        return self._payload


class FakeHttp:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: dict[str, FakeResponse] = {}
        self.error: Exception | None = None

    def request(self, method: str, url: str, timeout: float, **kwargs: Any) -> FakeResponse:
        if self.error is not None:
            raise self.error
        self.calls.append({"method": method, "url": url, **kwargs})
        return self.responses.get(url, FakeResponse(200, {"message": "ok"}))


@pytest.fixture
def http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(cli.requests, "request", fake.request)
    return fake


def test_search_sends_query_params(http: FakeHttp) -> None:
    http.responses["http://127.0.0.1:3000/api/search"] = FakeResponse(200, {"results": []})

    result = runner.invoke(cli.app, ["search", "budget", "--type", "lexical", "--extensions", "pdf,md"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"results": []}
    (call,) = http.calls
    assert call["method"] == "GET"
    assert call["params"] == {"q": "budget", "type": "lexical", "limit": 20, "offset": 0, "extensions": "pdf,md"}


def test_host_override_from_env(http: FakeHttp, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LFS_HOST_URL", "http://files.local:9000/")
    result = runner.invoke(cli.app, ["get", "abc"])
    assert result.exit_code == 0
    assert http.calls[0]["url"] == "http://files.local:9000/api/files/abc"


def test_index_posts_expanded_path(http: FakeHttp, tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["index", str(tmp_path), "--host", "http://api:3000"])
    assert result.exit_code == 0
    assert http.calls[0] == {
        "method": "POST",
        "url": "http://api:3000/api/index",
        "json": {"path": str(tmp_path.resolve())},
    }


def test_relative_paths_resolve_against_caller(http: FakeHttp, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "docs").mkdir()
    monkeypatch.chdir(tmp_path)

    assert runner.invoke(cli.app, ["index", "docs"]).exit_code == 0
    assert runner.invoke(cli.app, ["watch", "start", "docs"]).exit_code == 0

    expected = str((tmp_path / "docs").resolve())
    assert [call["json"]["path"] for call in http.calls] == [expected, expected]


def test_watch_subcommands(http: FakeHttp, tmp_path: Path) -> None:
    assert runner.invoke(cli.app, ["watch", "start", str(tmp_path)]).exit_code == 0
    assert runner.invoke(cli.app, ["watch", "status"]).exit_code == 0
    assert runner.invoke(cli.app, ["watch", "stop"]).exit_code == 0
    assert [(call["method"], call["url"].rsplit("/api", 1)[1]) for call in http.calls] == [
        ("POST", "/watch/start"),
        ("GET", "/watch"),
        ("POST", "/watch/stop"),
    ]


def test_reset_requires_confirmation(http: FakeHttp) -> None:
    declined = runner.invoke(cli.app, ["reset"], input="n\n")
    assert declined.exit_code != 0
    assert http.calls == []

    confirmed = runner.invoke(cli.app, ["reset", "--yes"])
    assert confirmed.exit_code == 0
    assert http.calls[0]["url"].endswith("/api/index/reset")


def test_error_response_exits_nonzero(http: FakeHttp) -> None:
    http.responses["http://127.0.0.1:3000/api/files/missing"] = FakeResponse(404, {"error": "File not found"})
    result = runner.invoke(cli.app, ["get", "missing"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_unreachable_server_exits_nonzero(http: FakeHttp) -> None:
    http.error = requests.ConnectionError("connection refused")
    result = runner.invoke(cli.app, ["watch", "status"])
    assert result.exit_code == 1
    assert "Cannot reach" in result.output
