"""Error handling: exception types plus transport fallback and retry."""

from gemini_consistency.errors.exceptions import (
    ConfigError,
    GeminiConsistencyError,
    MediaError,
    TerminalError,
    TransientError,
    TransportError,
)

__all__ = [
    "GeminiConsistencyError",
    "TransportError",
    "TransientError",
    "TerminalError",
    "MediaError",
    "ConfigError",
]
