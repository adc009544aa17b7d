"""Text normalization and token-set Jaccard similarity."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"[A-Za-z0-9_]+")


def normalize_text(text: object) -> str:
    """Lower-case, collapse whitespace runs to one space, and trim.

    Anything that is not a string normalizes to ``""``.
    """
    if not isinstance(text, str):
        return ""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def tokenize(text: str) -> set[str]:
    """Set of case-folded ASCII word tokens (runs of A-Z, a-z, 0-9 and _)."""
    return set(_TOKEN.findall(text.lower()))


def jaccard_similarity(a: str, b: str) -> float:
    """Intersection-over-union of the two token sets.

    Two token-less strings are treated as identical (1.0).
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    union = tokens_a | tokens_b
    if not union:
        return 1.0
    return len(tokens_a & tokens_b) / len(union)
