"""API response schemas.

Health and unhandled errors use the `ApiResponse` envelope. The planning,
vendor and contract routes return their payloads bare and report failures
as `ErrorMessage` bodies, which the browser client reads directly.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper.

    Attributes:
        success: Whether the request was successful.
        data: The actual response data (when success is True).
        message: A human-readable message about the response.
        error: Error details (when success is False).
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"
    error: dict[str, Any] | None = None


class ErrorResponse(ApiResponse[None]):
    """Envelope returned by the global exception handler."""

    success: bool = False
    message: str = "An error occurred"
    error: dict[str, Any] | None = None


class ErrorMessage(BaseModel):
    """Route-level failure body: ``{error, retryAfter?}``."""

    error: str
    retryAfter: float | None = Field(
        default=None, description="Seconds to wait before retrying (429 only)"
    )
