"""Majority vote over a batch of texts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import NamedTuple


class Majority(NamedTuple):
    value: str
    count: int


def majority(values: Iterable[str]) -> Majority:
    """Most frequent value and its count.

    Ties go to the value seen first; an empty input gives ``Majority("", 0)``.
    """
    counts = Counter(values)
    best = Majority("", 0)
    # Counter keeps first-seen order, so a strict ">" keeps the earliest on ties
    for value, count in counts.items():
        if count > best.count:
            best = Majority(value, count)
    return best
