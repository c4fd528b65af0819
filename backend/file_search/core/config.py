"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, field_validator

ENV_PREFIX = "LFS_"
DEFAULT_CONFIG_PATH = Path("~/.config/local-file-search/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("elasticsearch", "node"): "elasticsearch_node",
    ("elasticsearch", "username"): "elasticsearch_username",
    ("elasticsearch", "password"): "elasticsearch_password",
    ("elasticsearch", "api_key"): "elasticsearch_api_key",
    ("elasticsearch", "index"): "index_name",
    ("elasticsearch", "request_timeout"): "request_timeout",
    ("server", "host"): "host",
    ("server", "port"): "port",
    ("logging", "level"): "log_level",
    ("logging", "json"): "log_json",
}

# Unprefixed variables understood for compatibility with existing .env files.
_ENV_ALIASES: Mapping[str, str] = {
    "ELASTICSEARCH_NODE": "elasticsearch_node",
    "ELASTICSEARCH_USERNAME": "elasticsearch_username",
    "ELASTICSEARCH_PASSWORD": "elasticsearch_password",
    "ELASTICSEARCH_API_KEY": "elasticsearch_api_key",
    "PORT": "port",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    elasticsearch_node: str = "http://localhost:9200"
    elasticsearch_username: str | None = None
    elasticsearch_password: str | None = None
    elasticsearch_api_key: str | None = None
    index_name: str = "local-files"
    request_timeout: float = 30.0
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("elasticsearch_node", mode="before")
    @classmethod
    def _strip_node(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("elasticsearch_node must be a non-empty URL")
        return value.strip().rstrip("/")

    @field_validator(
        "elasticsearch_username",
        "elasticsearch_password",
        "elasticsearch_api_key",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def auth_mode(self) -> str:
        if self.elasticsearch_api_key:
            return "api_key"
        if self.elasticsearch_username and self.elasticsearch_password:
            return "basic"
        return "none"

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map aliased and LFS_-prefixed environment variables into Settings fields.

    Prefixed variables win over the unprefixed aliases.
    """
    overrides: dict[str, Any] = {}
    for alias, field_name in _ENV_ALIASES.items():
        if alias in os.environ:
            overrides[field_name] = os.environ[alias]
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
