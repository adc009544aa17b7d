"""Built-in settings used when no file, variable or flag overrides them."""

from __future__ import annotations

from pathlib import Path
from typing import Any

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 1.0
DEFAULT_TOP_P = 0.95  # 0 leaves topP out of the request
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"

DEFAULT_RUNS = 5
DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_DELAY_MS = 0

# Attempts per iteration, and the base of the linear backoff between them
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000

DEFAULT_SETTINGS_DB = Path.home() / ".gemini_consistency" / "settings.db"
API_KEY_SETTING = "gemini_api_key"
DEFAULT_EXPORT_NAME = "gemini-consistency-results.json"

DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Fresh dict of every default, keyed the way the settings layers are."""
    return dict(
        model=DEFAULT_MODEL,
        temperature=DEFAULT_TEMPERATURE,
        top_p=DEFAULT_TOP_P,
        base_url=DEFAULT_BASE_URL,
        runs=DEFAULT_RUNS,
        timeout_ms=DEFAULT_TIMEOUT_MS,
        delay_ms=DEFAULT_DELAY_MS,
        max_retries=DEFAULT_MAX_RETRIES,
        retry_delay_ms=DEFAULT_RETRY_DELAY_MS,
        settings_db=str(DEFAULT_SETTINGS_DB),
        log_level=DEFAULT_LOG_LEVEL,
    )
