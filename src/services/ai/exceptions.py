"""Domain exceptions for calls to the generative-AI provider.

Every failure that leaves the remote caller is one of these classes, so the
layers above can branch on type instead of inspecting messages. Each exception
carries a stable `error_code` for log tagging, plus the HTTP status and the
provider's retry hint when the remote side supplied them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


THROTTLE_MESSAGE_PATTERN = re.compile(r"quota|please retry", re.IGNORECASE)


@dataclass(slots=True, eq=False)
class UpstreamError(Exception):
    """Base class for failures reaching or talking to the AI provider."""

    message: str
    error_code: str
    status_code: int | None = None
    retry_after: float | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"

    @property
    def retryable(self) -> bool:
        return False


class TransportError(UpstreamError):
    """Network-level failure: refused connection, timeout, DNS."""

    def __init__(self, message: str = "Network error reaching AI provider") -> None:
        super().__init__(message=message, error_code="transport_failed")

    @property
    def retryable(self) -> bool:
        return True


class ThrottleError(UpstreamError):
    """The provider answered 429 or reported an exhausted quota."""

    def __init__(
        self,
        message: str = "AI provider rate limit reached",
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="throttled",
            status_code=status_code,
            retry_after=retry_after,
        )

    @property
    def retryable(self) -> bool:
        return True


class UpstreamHTTPError(UpstreamError):
    """Any other non-2xx answer. Only 5xx responses are worth retrying."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="upstream_error",
            status_code=status_code,
            retry_after=retry_after,
        )

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class MalformedResponseError(UpstreamError):
    """A 2xx body that lacks the fields the endpoint promises."""

    def __init__(self, message: str = "AI provider returned an unexpected body") -> None:
        super().__init__(message=message, error_code="malformed_response")


class ExtractionError(UpstreamError):
    """Model output held no parseable JSON value of the requested kind."""

    def __init__(self, message: str = "No JSON value found in model output") -> None:
        super().__init__(message=message, error_code="extraction_failed")


def classify_http_failure(
    status_code: int, message: str, retry_after: float | None
) -> UpstreamError:
    """Map a non-2xx response onto the error taxonomy."""
    if status_code == 429 or THROTTLE_MESSAGE_PATTERN.search(message):
        return ThrottleError(
            message=message, status_code=status_code, retry_after=retry_after
        )
    return UpstreamHTTPError(
        message=message, status_code=status_code, retry_after=retry_after
    )
