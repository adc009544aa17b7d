"""Run session: owns the in-flight run and the last results."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from gemini_consistency.reporting import ProgressSink, RowSink, StatusLine
from gemini_consistency.runner.cancellation import CancellationToken
from gemini_consistency.runner.controller import RunController
from gemini_consistency.types import CallSuccess, RunConfig, RunReport, RunResult

logger = logging.getLogger(__name__)


class RunSession:
    """Holds at most one run at a time and the outcome of the last one.

    Results are kept in memory only; ``export`` writes them out on demand.
    """

    def __init__(self, controller: RunController, status: StatusLine | None = None) -> None:
        self._controller = controller
        self._status = status or StatusLine()
        self._token: CancellationToken | None = None
        self._config: RunConfig | None = None
        self._report: RunReport | None = None

    @property
    def status(self) -> StatusLine:
        return self._status

    @property
    def running(self) -> bool:
        return self._token is not None

    @property
    def last_report(self) -> RunReport | None:
        return self._report

    @property
    def results(self) -> list[RunResult]:
        return list(self._report.results) if self._report else []

    async def run(
        self,
        config: RunConfig,
        on_row: RowSink | None = None,
        on_progress: ProgressSink | None = None,
    ) -> RunReport:
        if self.running:
            raise RuntimeError("A run is already in progress")

        self.reset()
        self._config = config
        self._token = CancellationToken()
        try:
            report = await self._controller.run(
                config,
                on_row=on_row,
                on_progress=on_progress,
                token=self._token,
                status=self._status,
            )
        finally:
            self._token = None

        if report.refused is None:
            self._report = report
        return report

    def cancel(self) -> None:
        """Request cancellation; takes effect before the next iteration starts."""
        if self._token is None:
            return
        self._token.cancel()
        self._status.text = "Cancelling…"

    def reset(self) -> None:
        self._report = None
        self._config = None

    def to_export(self) -> dict[str, Any]:
        """Project the last run into the exported JSON document."""
        if self._report is None or self._config is None:
            raise RuntimeError("No completed run to export")
        metrics = self._report.metrics
        return {
            "meta": {
                "model": self._config.model,
                "runs": self._config.runs,
                "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            },
            "prompt": self._config.prompt,
            "results": [_export_result(r) for r in self._report.results],
            "metrics": {
                "exactRate": metrics.exact_agreement_rate,
                "avgJaccard": metrics.average_similarity,
                "majorityNormalized": metrics.majority_normalized_text,
            },
        }

    def export(self, path: str | Path) -> Path:
        """Write the last run as pretty-printed JSON and return the path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_export(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Exported %d result(s) to %s", len(self._report.results), path)
        return path


def _export_result(result: RunResult) -> dict[str, Any]:
    outcome = result.outcome
    if isinstance(outcome, CallSuccess):
        return {"index": result.index, "ok": True, "latency": outcome.latency_ms, "text": outcome.text}
    return {
        "index": result.index,
        "ok": False,
        "latency": None,
        "error": outcome.message,
        "reason": outcome.reason.value,
    }
