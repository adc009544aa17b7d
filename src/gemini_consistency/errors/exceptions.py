"""Custom exception hierarchy for gemini-consistency."""

from __future__ import annotations

from typing import Any

from gemini_consistency.types import ErrorKind


class GeminiConsistencyError(Exception):
    """Base exception for all gemini-consistency errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class TransportError(GeminiConsistencyError):
    """A single transport invocation failed.

    Carries the classified kind, the HTTP status when one was received, and the
    response body for client errors.
    """

    def __init__(
        self,
        message: str = "",
        kind: ErrorKind = ErrorKind.UNKNOWN,
        http_status: int | None = None,
        body: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.http_status = http_status
        self.body = body
        self.original = original


class TransientError(TransportError):
    """Transient error: safe to retry with backoff.

    Examples: 429 rate limit, 503 unavailable, timeout.
    """


class TerminalError(TransportError):
    """Terminal error: retrying is unlikely to help.

    Examples: 400 bad request, 403 bad key, 404 unknown model, empty response.
    ResilientCaller still retries these.
    """


class MediaError(GeminiConsistencyError):
    """An attached file could not be read or converted."""

    def __init__(self, message: str = "", path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(GeminiConsistencyError):
    """Invalid configuration or template file."""


_TRANSIENT_KINDS = {ErrorKind.TIMEOUT, ErrorKind.RATE_LIMITED, ErrorKind.SERVER_UNAVAILABLE}


def make_transport_error(
    message: str,
    kind: ErrorKind,
    http_status: int | None = None,
    body: str | None = None,
    original: Exception | None = None,
) -> TransportError:
    """Build the TransientError/TerminalError subclass matching ``kind``."""
    cls = TransientError if kind in _TRANSIENT_KINDS else TerminalError
    return cls(message, kind=kind, http_status=http_status, body=body, original=original)
