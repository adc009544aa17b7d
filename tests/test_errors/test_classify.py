"""Tests for transport error classification."""

import asyncio

import httpx
import pytest
from google.genai import errors as genai_errors

from gemini_consistency.errors.classify import (
    classify_genai_error,
    classify_http_error,
    classify_status,
    error_for_response,
)
from gemini_consistency.errors.exceptions import TerminalError, TransientError
from gemini_consistency.types import ErrorKind


def _response(status_code: int, text: str = "") -> httpx.Response:
    request = httpx.Request("POST", "https://generativelanguage.googleapis.com/v1beta/models/m")
    return httpx.Response(status_code=status_code, text=text, request=request)


def _api_error_json(code: int, message: str, status: str) -> dict:
    return {"error": {"code": code, "message": message, "status": status}}


class TestClassifyStatus:
    def test_rate_limited(self):
        assert classify_status(429) is ErrorKind.RATE_LIMITED

    def test_server_unavailable(self):
        assert classify_status(503) is ErrorKind.SERVER_UNAVAILABLE

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 500, 502])
    def test_everything_else_is_client_error(self, status):
        assert classify_status(status) is ErrorKind.CLIENT_ERROR


class TestErrorForResponse:
    def test_429_is_transient(self):
        err = error_for_response(_response(429))
        assert isinstance(err, TransientError)
        assert err.kind is ErrorKind.RATE_LIMITED
        assert err.http_status == 429
        assert str(err) == "HTTP 429"

    def test_503_is_transient(self):
        err = error_for_response(_response(503))
        assert isinstance(err, TransientError)
        assert err.kind is ErrorKind.SERVER_UNAVAILABLE

    def test_400_keeps_body(self):
        err = error_for_response(_response(400, text='{"error": "API key not valid"}'))
        assert isinstance(err, TerminalError)
        assert err.kind is ErrorKind.CLIENT_ERROR
        assert err.http_status == 400
        assert "API key not valid" in err.body
        assert str(err).startswith("HTTP 400 Bad Request - ")

    def test_empty_body_message(self):
        err = error_for_response(_response(404))
        assert str(err) == "HTTP 404 Not Found"


class TestClassifyHttpError:
    def test_timeout(self):
        err = classify_http_error(httpx.ReadTimeout("read timed out"))
        assert isinstance(err, TransientError)
        assert err.kind is ErrorKind.TIMEOUT
        assert str(err) == "Timeout"

    def test_connection_error_is_unknown(self):
        err = classify_http_error(httpx.ConnectError("name resolution failed"))
        assert isinstance(err, TerminalError)
        assert err.kind is ErrorKind.UNKNOWN
        assert "name resolution failed" in str(err)

    def test_passthrough(self):
        original = error_for_response(_response(429))
        assert classify_http_error(original) is original


class TestClassifyGenaiError:
    def test_asyncio_timeout(self):
        err = classify_genai_error(asyncio.TimeoutError())
        assert err.kind is ErrorKind.TIMEOUT
        assert isinstance(err, TransientError)

    def test_rate_limited(self):
        exc = genai_errors.ClientError(
            429, _api_error_json(429, "Resource exhausted", "RESOURCE_EXHAUSTED")
        )
        err = classify_genai_error(exc)
        assert err.kind is ErrorKind.RATE_LIMITED
        assert err.http_status == 429
        assert err.original is exc

    def test_server_unavailable(self):
        exc = genai_errors.ServerError(503, _api_error_json(503, "Overloaded", "UNAVAILABLE"))
        err = classify_genai_error(exc)
        assert err.kind is ErrorKind.SERVER_UNAVAILABLE

    def test_client_error(self):
        exc = genai_errors.ClientError(
            400, _api_error_json(400, "API key not valid", "INVALID_ARGUMENT")
        )
        err = classify_genai_error(exc)
        assert isinstance(err, TerminalError)
        assert err.kind is ErrorKind.CLIENT_ERROR
        assert err.body == "API key not valid"

    def test_other_exception_is_unknown(self):
        err = classify_genai_error(ValueError("bad part"))
        assert err.kind is ErrorKind.UNKNOWN
        assert str(err) == "bad part"
