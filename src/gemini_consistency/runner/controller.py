"""Run controller: N sequential calls with live reporting and final metrics."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from gemini_consistency.consistency.analyzer import analyze
from gemini_consistency.errors.exceptions import MediaError, TransportError
from gemini_consistency.errors.retry import ResilientCaller, Sleeper
from gemini_consistency.reporting import ProgressSink, RowSink, StatusLine, progress_text
from gemini_consistency.runner.cancellation import CancellationToken
from gemini_consistency.types import (
    CallFailure,
    MediaPart,
    RowEvent,
    RowStatus,
    RunConfig,
    RunReport,
    RunResult,
)
from gemini_consistency.utils.media import prepare_media

logger = logging.getLogger(__name__)

MediaLoader = Callable[[Sequence[Path]], Sequence[MediaPart]]

MISSING_API_KEY = "Please enter your Gemini API key."
MISSING_PROMPT = "Please enter a prompt."


class RunController:
    """Sequences one run of identical calls through the resilient caller.

    Iterations never overlap. The cancellation token is only read at
    iteration boundaries, and a failed iteration is recorded and skipped past
    rather than aborting the run.
    """

    def __init__(
        self,
        caller: ResilientCaller,
        media_loader: MediaLoader = prepare_media,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._caller = caller
        self._media_loader = media_loader
        self._sleep = sleep

    async def run(
        self,
        config: RunConfig,
        on_row: RowSink | None = None,
        on_progress: ProgressSink | None = None,
        token: CancellationToken | None = None,
        status: StatusLine | None = None,
    ) -> RunReport:
        token = token or CancellationToken()
        status = status or StatusLine()

        refusal = self._validate(config)
        if refusal:
            return RunReport(refused=refusal)

        status.text = "Preparing images…"
        try:
            parts = tuple(self._media_loader(config.media_paths))
        except (MediaError, OSError) as e:
            logger.error("Media preparation failed: %s", e)
            status.text = "Idle."
            return RunReport(refused=f"Failed to read images: {e}")

        status.text = "Running…"
        logger.info("Starting run: %d call(s) to %s", config.runs, config.model)

        results: list[RunResult] = []
        cancelled_at: int | None = None
        total = config.runs

        for index in range(1, total + 1):
            if token.cancelled:
                cancelled_at = index
                logger.info("Run cancelled before iteration %d", index)
                if on_row:
                    on_row(RowEvent(index=index, status=RowStatus.CANCELLED, text="—"))
                break

            request = config.build_request(parts)
            try:
                success = await self._caller.call(request, status)
            except TransportError as exc:
                result = RunResult(
                    index=index,
                    outcome=CallFailure(reason=exc.kind, message=str(exc)),
                )
                row = RowEvent(index=index, status=RowStatus.ERROR, text=str(exc))
                logger.warning("Iteration %d failed: %s", index, exc)
            else:
                result = RunResult(index=index, outcome=success)
                row = RowEvent(
                    index=index,
                    status=RowStatus.OK,
                    latency_ms=success.latency_ms,
                    text=success.text,
                )

            results.append(result)
            if on_row:
                on_row(row)
            status.text = progress_text(index, total)
            if on_progress:
                on_progress(index, total)

            if index < total and config.delay_ms > 0:
                await self._sleep(config.delay_ms / 1000)

        texts = [r.outcome.text for r in results if r.ok]
        metrics = analyze(texts)
        status.text = f"Done. Success {len(texts)}/{len(results)}."
        logger.info(
            "Run finished: %d/%d ok, agreement=%.3f, similarity=%.3f",
            len(texts),
            len(results),
            metrics.exact_agreement_rate,
            metrics.average_similarity,
        )
        return RunReport(results=results, metrics=metrics, cancelled_at=cancelled_at)

    @staticmethod
    def _validate(config: RunConfig) -> str | None:
        if not config.api_key.strip():
            return MISSING_API_KEY
        if not config.prompt.strip():
            return MISSING_PROMPT
        return None
