"""Top-level entry points: run_consistency(), ConsistencyTester."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from gemini_consistency.config.defaults import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
)
from gemini_consistency.errors.exceptions import ConfigError
from gemini_consistency.errors.fallback import TransportChain
from gemini_consistency.errors.retry import ResilientCaller
from gemini_consistency.reporting import ProgressSink, RowSink, StatusLine
from gemini_consistency.runner.controller import RunController
from gemini_consistency.runner.session import RunSession
from gemini_consistency.store.credentials import CredentialStore
from gemini_consistency.transport.base import Transport
from gemini_consistency.transport.rest import RestTransport
from gemini_consistency.transport.sdk import SdkTransport
from gemini_consistency.types import RunConfig, RunReport

logger = logging.getLogger(__name__)


class ConsistencyTester:
    """Wires transports, retry policy, controller, and session together."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
        use_sdk: bool = True,
        transports: list[Transport] | None = None,
        status: StatusLine | None = None,
    ) -> None:
        self._api_key = api_key
        if transports is None:
            transports = self._default_transports(api_key, base_url, use_sdk)
        self._caller = ResilientCaller(
            TransportChain(transports),
            max_attempts=max_retries,
            retry_delay=retry_delay_ms / 1000,
        )
        self._session = RunSession(RunController(self._caller), status=status)

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs: Any) -> ConsistencyTester:
        """Build from a merged config dict (see ``load_config_hierarchy``)."""
        try:
            max_retries = int(config.get("max_retries", DEFAULT_MAX_RETRIES))
            retry_delay_ms = int(config.get("retry_delay_ms", DEFAULT_RETRY_DELAY_MS))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid retry settings: {e}") from e
        if max_retries < 1 or retry_delay_ms < 0:
            raise ConfigError("max_retries must be at least 1 and retry_delay_ms non-negative")
        return cls(
            api_key=config.get("api_key") or "",
            base_url=config.get("base_url") or DEFAULT_BASE_URL,
            max_retries=max_retries,
            retry_delay_ms=retry_delay_ms,
            **kwargs,
        )

    @property
    def session(self) -> RunSession:
        return self._session

    async def run_async(
        self,
        config: RunConfig,
        on_row: RowSink | None = None,
        on_progress: ProgressSink | None = None,
    ) -> RunReport:
        if not config.api_key:
            config = config.model_copy(update={"api_key": self._api_key})
        return await self._session.run(config, on_row=on_row, on_progress=on_progress)

    def cancel(self) -> None:
        self._session.cancel()

    def export(self, path: str | Path) -> Path:
        return self._session.export(path)

    async def close(self) -> None:
        await self._caller.close()

    @staticmethod
    def _default_transports(api_key: str, base_url: str, use_sdk: bool) -> list[Transport]:
        transports: list[Transport] = []
        if use_sdk:
            transports.append(SdkTransport(api_key))
        transports.append(RestTransport(api_key, base_url=base_url))
        return transports


def resolve_api_key(explicit: str | None, config: dict[str, Any], store: CredentialStore) -> str:
    """Explicit value, then config/environment, then the credential store."""
    for candidate in (explicit, config.get("api_key"), store.load_api_key()):
        if candidate and candidate.strip():
            return candidate.strip()
    return ""


# ── Module-level convenience function ──


def run_consistency(
    prompt: str,
    api_key: str,
    runs: int = 5,
    model: str | None = None,
    media_paths: list[str | Path] | None = None,
    **run_options: Any,
) -> RunReport:
    """Run a consistency test synchronously and return the report."""
    config = RunConfig(
        api_key=api_key,
        prompt=prompt,
        runs=runs,
        media_paths=[Path(p) for p in media_paths or []],
        **({"model": model} if model else {}),
        **run_options,
    )
    tester = ConsistencyTester(api_key=api_key)

    async def _run() -> RunReport:
        try:
            return await tester.run_async(config)
        finally:
            await tester.close()

    return asyncio.run(_run())
