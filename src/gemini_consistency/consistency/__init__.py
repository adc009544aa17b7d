"""Consistency analysis over the successful outputs of a run."""

from gemini_consistency.consistency.analyzer import analyze
from gemini_consistency.consistency.text import jaccard_similarity, normalize_text, tokenize
from gemini_consistency.consistency.voting import Majority, majority

__all__ = [
    "analyze",
    "normalize_text",
    "tokenize",
    "jaccard_similarity",
    "majority",
    "Majority",
]
