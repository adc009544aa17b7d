"""Wire encodings of prompt parts for the SDK and REST paths."""

from __future__ import annotations

import base64
from typing import Any

from google.genai import types as genai_types

from gemini_consistency.types import GenerationRequest, InlineBinaryPart, MediaPart, TextPart


def to_sdk_part(part: MediaPart) -> genai_types.Part:
    """Render a part for the google-genai SDK (``inlineData``/``mimeType``)."""
    if isinstance(part, InlineBinaryPart):
        return genai_types.Part.from_bytes(
            data=base64.b64decode(part.data),
            mime_type=part.mime_type,
        )
    return genai_types.Part(text=part.text)


def to_rest_part(part: MediaPart) -> dict[str, Any]:
    """Render a part for the REST body (``inline_data``/``mime_type``)."""
    if isinstance(part, InlineBinaryPart):
        return {"inline_data": {"mime_type": part.mime_type, "data": part.data}}
    return {"text": part.text}


def request_parts(request: GenerationRequest) -> list[MediaPart]:
    """The prompt text followed by every attached part, in order."""
    return [TextPart(text=request.prompt), *request.parts]
