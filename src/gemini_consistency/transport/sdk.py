"""Gemini transport through the google-genai SDK."""

from __future__ import annotations

import asyncio
import logging
import time

from google import genai
from google.genai import types as genai_types

from gemini_consistency.errors.classify import classify_genai_error
from gemini_consistency.errors.exceptions import make_transport_error
from gemini_consistency.transport.base import (
    RESPONSE_MIME_TYPE,
    SAFETY_CATEGORIES,
    SAFETY_THRESHOLD,
)
from gemini_consistency.transport.parts import request_parts, to_sdk_part
from gemini_consistency.types import CallSuccess, ErrorKind, GenerationRequest

logger = logging.getLogger(__name__)


class SdkTransport:
    """Calls ``client.aio.models.generate_content``, raced against the request timeout."""

    name = "sdk"

    def __init__(self, api_key: str, client: genai.Client | None = None) -> None:
        self._api_key = api_key
        self._client = client

    async def invoke(self, request: GenerationRequest) -> CallSuccess:
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._get_client().aio.models.generate_content(
                    model=request.model,
                    contents=self.build_contents(request),
                    config=self.build_config(request),
                ),
                timeout=request.timeout_seconds,
            )
        except Exception as exc:
            raise classify_genai_error(exc) from exc
        latency_ms = int((time.perf_counter() - start) * 1000)

        text = self._extract_text(response)
        if not text:
            raise make_transport_error("Empty SDK response", kind=ErrorKind.UNKNOWN)
        return CallSuccess(text=text, latency_ms=latency_ms)

    async def close(self) -> None:
        self._client = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    @staticmethod
    def build_contents(request: GenerationRequest) -> list[genai_types.Content]:
        return [
            genai_types.Content(
                role="user",
                parts=[to_sdk_part(p) for p in request_parts(request)],
            )
        ]

    @staticmethod
    def build_config(request: GenerationRequest) -> genai_types.GenerateContentConfig:
        kwargs: dict = {
            "temperature": request.temperature,
            "response_mime_type": RESPONSE_MIME_TYPE,
            "safety_settings": [
                genai_types.SafetySetting(
                    category=genai_types.HarmCategory(category),
                    threshold=genai_types.HarmBlockThreshold(SAFETY_THRESHOLD),
                )
                for category in SAFETY_CATEGORIES
            ],
        }
        if request.top_p:
            kwargs["top_p"] = request.top_p
        return genai_types.GenerateContentConfig(**kwargs)

    @staticmethod
    def _extract_text(response: genai_types.GenerateContentResponse) -> str:
        candidates = response.candidates or []
        if not candidates or candidates[0].content is None:
            return ""
        parts = candidates[0].content.parts or []
        return "".join(part.text or "" for part in parts)
