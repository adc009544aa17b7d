"""Plain-data reporting hooks the core calls back into."""

from __future__ import annotations

from collections.abc import Callable

from gemini_consistency.types import RowEvent

RowSink = Callable[[RowEvent], None]
ProgressSink = Callable[[int, int], None]


class StatusLine:
    """Mutable one-line status text, optionally mirrored to a listener."""

    def __init__(
        self,
        text: str = "Idle.",
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self._text = text
        self._on_change = on_change

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        if self._on_change:
            self._on_change(value)


def progress_text(done: int, total: int) -> str:
    pct = round(done / total * 100) if total else 0
    return f"Progress: {done}/{total} ({pct}%)"
