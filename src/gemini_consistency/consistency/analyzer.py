"""Aggregate consistency metrics for the successful outputs of a run."""

from __future__ import annotations

from collections.abc import Sequence

from gemini_consistency.consistency.text import jaccard_similarity, normalize_text
from gemini_consistency.consistency.voting import majority
from gemini_consistency.types import ConsistencyMetrics


def analyze(texts: Sequence[str]) -> ConsistencyMetrics:
    """Compute exact agreement and mean similarity against the majority text.

    Every text is normalized first. The exact-agreement rate is the share of
    texts equal to the majority; the average similarity is the mean Jaccard
    score of each text against it. Both are 0 for an empty input.
    """
    normalized = [normalize_text(t) for t in texts]
    mode, count = majority(normalized)
    if not normalized:
        return ConsistencyMetrics()

    scores = [jaccard_similarity(mode, t) for t in normalized]
    return ConsistencyMetrics(
        exact_agreement_rate=count / len(normalized),
        average_similarity=sum(scores) / len(scores),
        majority_normalized_text=mode,
        sample_size=len(normalized),
    )
