"""Map SDK, HTTP, and timeout failures onto the transport error taxonomy."""

from __future__ import annotations

import asyncio

import httpx
from google.genai import errors as genai_errors

from gemini_consistency.errors.exceptions import TransportError, make_transport_error
from gemini_consistency.types import ErrorKind

_BODY_PREVIEW_CHARS = 500


def classify_status(status: int) -> ErrorKind:
    """Classify a non-2xx HTTP status."""
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status == 503:
        return ErrorKind.SERVER_UNAVAILABLE
    return ErrorKind.CLIENT_ERROR


def error_for_response(response: httpx.Response) -> TransportError:
    """Build the error for a non-2xx REST response."""
    kind = classify_status(response.status_code)
    if kind is not ErrorKind.CLIENT_ERROR:
        return make_transport_error(
            f"HTTP {response.status_code}", kind=kind, http_status=response.status_code
        )
    body = response.text[:_BODY_PREVIEW_CHARS]
    message = f"HTTP {response.status_code} {response.reason_phrase}"
    if body:
        message = f"{message} - {body}"
    return make_transport_error(
        message,
        kind=kind,
        http_status=response.status_code,
        body=body,
    )


def classify_http_error(exc: Exception) -> TransportError:
    """Convert an httpx (or timeout) exception raised by the REST path."""
    if isinstance(exc, TransportError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return make_transport_error("Timeout", kind=ErrorKind.TIMEOUT, original=exc)
    return make_transport_error(str(exc) or type(exc).__name__, kind=ErrorKind.UNKNOWN, original=exc)


def classify_genai_error(exc: Exception) -> TransportError:
    """Convert an exception raised by the google-genai SDK path."""
    if isinstance(exc, TransportError):
        return exc
    if isinstance(exc, asyncio.TimeoutError):
        return make_transport_error("Timeout", kind=ErrorKind.TIMEOUT, original=exc)
    if isinstance(exc, genai_errors.APIError):
        status = getattr(exc, "code", None)
        kind = classify_status(status) if isinstance(status, int) else ErrorKind.UNKNOWN
        return make_transport_error(
            str(exc),
            kind=kind,
            http_status=status if isinstance(status, int) else None,
            body=getattr(exc, "message", None) if kind is ErrorKind.CLIENT_ERROR else None,
            original=exc,
        )
    if isinstance(exc, httpx.TimeoutException):
        return make_transport_error("Timeout", kind=ErrorKind.TIMEOUT, original=exc)
    return make_transport_error(str(exc) or type(exc).__name__, kind=ErrorKind.UNKNOWN, original=exc)
