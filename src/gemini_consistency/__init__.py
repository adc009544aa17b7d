"""gemini-consistency: repeat a Gemini prompt and measure how consistent the answers are."""

from gemini_consistency.consistency import analyze, jaccard_similarity, majority, normalize_text
from gemini_consistency.core import ConsistencyTester, run_consistency
from gemini_consistency.types import (
    ConsistencyMetrics,
    GenerationRequest,
    RunConfig,
    RunReport,
    RunResult,
)

__version__ = "0.1.0"

__all__ = [
    "ConsistencyTester",
    "run_consistency",
    "analyze",
    "normalize_text",
    "jaccard_similarity",
    "majority",
    "ConsistencyMetrics",
    "GenerationRequest",
    "RunConfig",
    "RunReport",
    "RunResult",
]
