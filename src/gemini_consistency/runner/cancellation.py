"""Cooperative cancellation checked between iterations."""

from __future__ import annotations


class CancellationToken:
    """Single-writer flag; setting it never interrupts an in-flight call."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
