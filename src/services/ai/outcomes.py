"""Tagged result types passed between the caller, extractor and generators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from services.ai.exceptions import ExtractionError, UpstreamError


@dataclass(frozen=True, slots=True)
class CallSucceeded:
    body: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CallFailed:
    error: UpstreamError

    @property
    def status_code(self) -> int | None:
        return self.error.status_code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def retry_after(self) -> float | None:
        return self.error.retry_after


RemoteCallOutcome = CallSucceeded | CallFailed


@dataclass(frozen=True, slots=True)
class Extracted:
    value: dict[str, Any] | list[Any]


@dataclass(frozen=True, slots=True)
class ExtractionFailed:
    error: ExtractionError


ExtractionOutcome = Extracted | ExtractionFailed


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Value handed back to the API layer.

    `degraded` is True whenever a static fallback stood in for model output;
    `reason` then holds the error code that caused the substitution.
    """

    value: Any
    degraded: bool = False
    reason: str | None = None
