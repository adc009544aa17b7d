"""Transport fallback chain: try each transport in order within one attempt."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from gemini_consistency.errors.exceptions import TransportError, make_transport_error
from gemini_consistency.types import CallSuccess, ErrorKind, GenerationRequest

if TYPE_CHECKING:
    from gemini_consistency.transport.base import Transport

logger = logging.getLogger(__name__)


class TransportChain:
    """Ordered list of interchangeable transports.

    ``invoke`` returns the first success. Failures of earlier transports are
    logged and swallowed; if every transport fails the last error is raised.
    """

    def __init__(self, transports: Sequence[Transport]) -> None:
        if not transports:
            raise ValueError("TransportChain needs at least one transport")
        self._transports = list(transports)

    @property
    def names(self) -> list[str]:
        return [t.name for t in self._transports]

    async def invoke(self, request: GenerationRequest) -> CallSuccess:
        last_error: TransportError | None = None
        for transport in self._transports:
            try:
                return await transport.invoke(request)
            except TransportError as exc:
                logger.warning(
                    "Transport '%s' failed (%s): %s",
                    transport.name,
                    exc.kind.value,
                    exc.message,
                )
                last_error = exc
            except Exception as exc:
                logger.warning("Transport '%s' raised unexpectedly: %r", transport.name, exc)
                last_error = make_transport_error(
                    str(exc) or type(exc).__name__, kind=ErrorKind.UNKNOWN, original=exc
                )

        if last_error is None:
            raise make_transport_error("No transport was attempted", kind=ErrorKind.UNKNOWN)
        raise last_error

    async def close(self) -> None:
        for transport in self._transports:
            await transport.close()
