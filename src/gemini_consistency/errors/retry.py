"""Retry engine: bounded, linearly backed-off attempts over the transport chain."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from gemini_consistency.config.defaults import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_MS
from gemini_consistency.errors.exceptions import TransportError
from gemini_consistency.errors.fallback import TransportChain
from gemini_consistency.reporting import StatusLine
from gemini_consistency.types import CallSuccess, GenerationRequest

logger = logging.getLogger(__name__)

_MAX_WAIT = 60.0  # seconds

Sleeper = Callable[[float], Awaitable[None]]


def retry_message(error: BaseException | None, attempt: int, max_attempts: int) -> str:
    """Human-readable notice shown while waiting before the next attempt."""
    reason = getattr(error, "message", None) or str(error) or "unknown error"
    return f"Request failed ({reason}), retrying {attempt}/{max_attempts - 1}..."


class ResilientCaller:
    """Runs the transport chain up to ``max_attempts`` times.

    Every attempt tries all transports in order. Between attempts the caller
    waits ``retry_delay * attempt_number`` seconds and shows a retry notice on
    the status line, restoring the previous text once the wait is over. Every
    transport error is retried regardless of its kind; only the error from the
    final attempt reaches the caller.
    """

    def __init__(
        self,
        chain: TransportChain,
        max_attempts: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY_MS / 1000,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._chain = chain
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def call(
        self,
        request: GenerationRequest,
        status: StatusLine | None = None,
    ) -> CallSuccess:
        saved_status: list[str] = []

        def _announce_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            message = retry_message(error, retry_state.attempt_number, self._max_attempts)
            logger.warning(
                "Attempt %d/%d failed: %s",
                retry_state.attempt_number,
                self._max_attempts,
                error,
            )
            if status is not None:
                saved_status.append(status.text)
                status.text = message

        async def _backoff(seconds: float) -> None:
            try:
                await self._sleep(seconds)
            finally:
                if status is not None and saved_status:
                    status.text = saved_status.pop()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(
                start=self._retry_delay,
                increment=self._retry_delay,
                max=_MAX_WAIT,
            ),
            retry=retry_if_exception_type(TransportError),
            before_sleep=_announce_retry,
            sleep=_backoff,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                return await self._chain.invoke(request)

    async def close(self) -> None:
        await self._chain.close()
