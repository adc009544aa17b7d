"""Transport interface shared by the SDK and REST paths."""

from __future__ import annotations

from typing import Protocol

from gemini_consistency.types import CallSuccess, GenerationRequest

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
RESPONSE_MIME_TYPE = "text/plain"

# Every category is set to BLOCK_NONE so refusals do not skew consistency numbers
SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_NONE"


class Transport(Protocol):
    """One way of invoking generateContent.

    ``invoke`` performs exactly one outbound call and either returns the
    generated text with its latency or raises ``TransportError``.
    """

    name: str

    async def invoke(self, request: GenerationRequest) -> CallSuccess:
        ...

    async def close(self) -> None:
        ...
