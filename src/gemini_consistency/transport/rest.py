"""Gemini transport through a direct generateContent POST."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import httpx

from gemini_consistency.errors.classify import classify_http_error, error_for_response
from gemini_consistency.transport.base import (
    DEFAULT_BASE_URL,
    RESPONSE_MIME_TYPE,
    SAFETY_CATEGORIES,
    SAFETY_THRESHOLD,
)
from gemini_consistency.transport.parts import request_parts, to_rest_part
from gemini_consistency.types import CallSuccess, GenerationRequest

logger = logging.getLogger(__name__)


class RestTransport:
    """Posts to ``/v1beta/models/{model}:generateContent`` with the key as a query parameter."""

    name = "rest"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def invoke(self, request: GenerationRequest) -> CallSuccess:
        body = self.build_body(request)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("REST request body: %s", _redact_inline_data(body))

        start = time.perf_counter()
        # httpx timeouts are per phase; wait_for bounds the whole exchange
        try:
            response = await asyncio.wait_for(
                self._get_client().post(
                    self.endpoint(request.model),
                    params={"key": self._api_key},
                    json=body,
                    timeout=request.timeout_seconds,
                ),
                timeout=request.timeout_seconds,
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            raise classify_http_error(exc) from exc
        latency_ms = int((time.perf_counter() - start) * 1000)

        if not response.is_success:
            raise error_for_response(response)
        return CallSuccess(text=self.extract_text(response), latency_ms=latency_ms)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def endpoint(self, model: str) -> str:
        return f"{self._base_url}/v1beta/models/{model}:generateContent"

    @staticmethod
    def build_body(request: GenerationRequest) -> dict[str, Any]:
        generation_config: dict[str, Any] = {"temperature": request.temperature}
        if request.top_p:
            generation_config["topP"] = request.top_p
        generation_config["response_mime_type"] = RESPONSE_MIME_TYPE
        # Extended reasoning off: it adds latency and its own variance
        generation_config["thinkingConfig"] = {"thinkingBudget": 0}

        return {
            "contents": [
                {"role": "user", "parts": [to_rest_part(p) for p in request_parts(request)]}
            ],
            "safetySettings": [
                {"category": category, "threshold": SAFETY_THRESHOLD}
                for category in SAFETY_CATEGORIES
            ],
            "generationConfig": generation_config,
        }

    @staticmethod
    def extract_text(response: httpx.Response) -> str:
        """Concatenate the first candidate's text parts, else return the raw body."""
        try:
            data = response.json()
        except ValueError:
            return response.text

        text = ""
        if isinstance(data, dict):
            candidates = data.get("candidates") or []
            if candidates and isinstance(candidates[0], dict):
                parts = (candidates[0].get("content") or {}).get("parts") or []
                text = "".join(
                    part.get("text", "") or "" for part in parts if isinstance(part, dict)
                )
        return text or json.dumps(data)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client


def _redact_inline_data(body: dict[str, Any]) -> str:
    """Render the body for logs with base64 payloads replaced by their length."""
    redacted = json.loads(json.dumps(body))
    for content in redacted.get("contents", []):
        for part in content.get("parts", []):
            inline = part.get("inline_data")
            if inline:
                inline["data"] = f"<{len(inline['data'])} base64 chars>"
    return json.dumps(redacted, indent=2)
