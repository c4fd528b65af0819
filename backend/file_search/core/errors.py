"""Error taxonomy shared by the ingest pipeline, the store gateway and the API."""

from __future__ import annotations

from pathlib import Path

GENERIC_ERROR_MESSAGE = "Internal server error"


class FileSearchError(Exception):
    """Base class for application errors.

    ``status_code`` is the HTTP status the API answers with. When ``expose`` is
    false the client only ever sees ``GENERIC_ERROR_MESSAGE``.
    """

    status_code: int = 500
    expose: bool = False

    @property
    def public_message(self) -> str:
        return str(self) if self.expose else GENERIC_ERROR_MESSAGE


class ValidationError(FileSearchError):
    """Missing or malformed request input."""

    status_code = 400
    expose = True


class NotFoundError(FileSearchError):
    """Requested file is not in the index."""

    status_code = 404
    expose = True


class ExtractionError(FileSearchError):
    """Content of a file could not be turned into text."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Could not extract content from {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class BackendUnavailableError(FileSearchError):
    """Search engine cannot be reached at startup."""

    status_code = 503


class BackendOperationError(FileSearchError):
    """A call to the search engine failed at runtime."""


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "FileSearchError",
    "ValidationError",
    "NotFoundError",
    "ExtractionError",
    "BackendUnavailableError",
    "BackendOperationError",
]
