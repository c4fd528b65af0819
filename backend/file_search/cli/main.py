"""CLI entrypoint for Local File Search."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer

from file_search.core.config import get_settings

app = typer.Typer(name="lfs", help="Local File Search command-line interface")
watch_app = typer.Typer(name="watch", help="Manage the directory watcher")
app.add_typer(watch_app, name="watch")


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("LFS_HOST_URL")
    if env_host:
        return env_host.rstrip("/")
    settings = get_settings()
    return f"http://{settings.host}:{settings.port}"


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    try:
        resp = requests.request(method, url, timeout=600, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Cannot reach {base}: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json().get("error", resp.text)
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _echo_json(resp: requests.Response) -> None:
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "file_search.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


@app.command()
def check() -> None:
    """Show the active configuration and test the Elasticsearch connection."""
    from file_search.db.client import build_client
    from file_search.db.store import DocumentStore

    settings = get_settings()
    auth_labels = {"api_key": "API Key", "basic": "Username/Password", "none": "None"}
    typer.echo("Configuration:")
    typer.echo(f"   Elasticsearch: {settings.elasticsearch_node}")
    typer.echo(f"   Index: {settings.index_name}")
    typer.echo(f"   App Port: {settings.port}")
    typer.echo(f"   Auth: {auth_labels[settings.auth_mode]}")
    store = DocumentStore(build_client(settings), index_name=settings.index_name)
    if not store.ping():
        typer.echo("Cannot connect to Elasticsearch", err=True)
        typer.echo("   1. Run: curl -fsSL https://elastic.co/start-local | sh", err=True)
        typer.echo("   2. Check ELASTICSEARCH_NODE and credentials", err=True)
        raise typer.Exit(code=1)
    typer.echo("Elasticsearch responding")
    state = "present" if store.collection_exists() else "missing (created on server start)"
    typer.echo(f"Index {settings.index_name}: {state}")


@app.command()
def search(
    q: str = typer.Argument(..., help="Query text"),
    mode: str = typer.Option("hybrid", "--type", help="semantic, lexical or hybrid"),
    extensions: Optional[str] = typer.Option(None, "--extensions", help="Comma separated extensions"),
    modified_after: Optional[str] = typer.Option(None, "--modified-after", help="ISO-8601 date"),
    modified_before: Optional[str] = typer.Option(None, "--modified-before", help="ISO-8601 date"),
    limit: int = typer.Option(20, "--limit", help="Number of results to return"),
    offset: int = typer.Option(0, "--offset", help="Results to skip"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Search indexed files."""
    params: dict[str, object] = {"q": q, "type": mode, "limit": limit, "offset": offset}
    if extensions:
        params["extensions"] = extensions
    if modified_after:
        params["modifiedAfter"] = modified_after
    if modified_before:
        params["modifiedBefore"] = modified_before
    _echo_json(_request("GET", "/api/search", host=host, params=params))


@app.command()
def get(
    file_id: str = typer.Argument(..., help="File identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show one indexed file."""
    _echo_json(_request("GET", f"/api/files/{file_id}", host=host))


@app.command()
def delete(
    file_id: str = typer.Argument(..., help="File identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Remove a file from the index."""
    _echo_json(_request("DELETE", f"/api/files/{file_id}", host=host))


@app.command()
def index(
    path: Path = typer.Argument(..., help="Directory to index"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Index every supported file under a directory."""
    _echo_json(_request("POST", "/api/index", host=host, json={"path": str(path.expanduser().resolve())}))


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Delete every indexed document."""
    if not yes:
        typer.confirm("This removes every indexed document. Continue?", abort=True)
    _echo_json(_request("POST", "/api/index/reset", host=host))


@watch_app.command("start")
def watch_start(
    path: Path = typer.Argument(..., help="Directory to watch"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Keep the index in sync with a directory."""
    _echo_json(_request("POST", "/api/watch/start", host=host, json={"path": str(path.expanduser().resolve())}))


@watch_app.command("stop")
def watch_stop(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Stop the directory watcher."""
    _echo_json(_request("POST", "/api/watch/stop", host=host))


@watch_app.command("status")
def watch_status(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show which directory is being watched."""
    _echo_json(_request("GET", "/api/watch", host=host))


if __name__ == "__main__":
    app()
