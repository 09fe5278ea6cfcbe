"""Response helpers shared by the generation routes."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


DEGRADED_HEADER = "X-Result-Degraded"


def generated_response(
    content: Any, *, degraded: bool = False, reason: str | None = None
) -> JSONResponse:
    """Bare JSON payload, flagged when a fallback stood in for the model."""
    headers: dict[str, str] = {}
    if degraded:
        headers[DEGRADED_HEADER] = "true"
        if reason:
            headers[f"{DEGRADED_HEADER}-Reason"] = reason
    return JSONResponse(content=content, headers=headers)
