"""Display helpers for the CLI."""

from __future__ import annotations


def truncate(text: str | None, length: int = 220) -> str:
    if not text:
        return ""
    return text[:length] + "…" if len(text) > length else text


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 KB"
    value = float(size)
    for unit in ("Bytes", "KB"):
        if value < 1024:
            return f"{round(value, 1):g} {unit}"
        value /= 1024
    return f"{round(value, 1):g} MB"


def format_rate(value: float, sample_size: int) -> str:
    return f"{value * 100:.1f}%" if sample_size else "–"
