"""Shared Pydantic models for gemini-consistency."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class ErrorKind(StrEnum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_UNAVAILABLE = "server_unavailable"
    CLIENT_ERROR = "client_error"
    UNKNOWN = "unknown"


class RowStatus(StrEnum):
    OK = "ok"
    ERROR = "error"
    CANCELLED = "cancelled"


# ── Prompt content ──


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class InlineBinaryPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["inline_binary"] = "inline_binary"
    mime_type: str = "application/octet-stream"
    data: str  # base64


MediaPart = Annotated[TextPart | InlineBinaryPart, Field(discriminator="kind")]


class GenerationRequest(BaseModel):
    """One generateContent call, built fresh for every iteration."""

    model_config = ConfigDict(frozen=True)

    model: str
    prompt: str
    parts: tuple[MediaPart, ...] = ()
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    timeout_ms: int = Field(default=15_000, gt=0)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


# ── Outcomes ──


class CallSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    text: str
    latency_ms: int = Field(default=0, ge=0)


class CallFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    reason: ErrorKind = ErrorKind.UNKNOWN
    message: str = ""


CallOutcome = CallSuccess | CallFailure


class RunResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1)
    outcome: CallOutcome

    @property
    def ok(self) -> bool:
        return self.outcome.ok


class ConsistencyMetrics(BaseModel):
    exact_agreement_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    average_similarity: float = Field(default=0.0, ge=0.0, le=1.0)
    majority_normalized_text: str = ""
    sample_size: int = 0


# ── Run configuration and reporting ──


class RunConfig(BaseModel):
    api_key: str = ""
    model: str = "gemini-2.5-flash"
    prompt: str = ""
    runs: int = Field(default=5, ge=1)
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    timeout_ms: int = Field(default=15_000, gt=0)
    delay_ms: int = Field(default=0, ge=0)
    media_paths: list[Path] = Field(default_factory=list)

    def build_request(self, parts: tuple[MediaPart, ...] = ()) -> GenerationRequest:
        """Build the per-iteration request; a top_p of 0 means unset."""
        return GenerationRequest(
            model=self.model,
            prompt=self.prompt.strip(),
            parts=parts,
            temperature=self.temperature,
            top_p=self.top_p if self.top_p > 0 else None,
            timeout_ms=self.timeout_ms,
        )


class RowEvent(BaseModel):
    index: int
    status: RowStatus
    latency_ms: int | None = None
    text: str = ""


class RunReport(BaseModel):
    results: list[RunResult] = Field(default_factory=list)
    metrics: ConsistencyMetrics = Field(default_factory=ConsistencyMetrics)
    cancelled_at: int | None = None
    refused: str | None = None

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def cancelled(self) -> bool:
        return self.cancelled_at is not None


class PromptTemplate(BaseModel):
    name: str
    prompt: str
    description: str = ""
