"""Run orchestration and session state."""

from gemini_consistency.runner.cancellation import CancellationToken
from gemini_consistency.runner.controller import RunController
from gemini_consistency.runner.session import RunSession

__all__ = ["CancellationToken", "RunController", "RunSession"]
