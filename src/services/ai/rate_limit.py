"""Turn provider throttling into a client-facing 429.

The browser locks its retry button for `retryAfter` seconds, so the hint is
passed through whenever the provider supplied one, either as a
``Retry-After`` header (captured on the error) or as a "retry in 12.5s"
phrase inside the error message.
"""

from __future__ import annotations

import math
import re
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from services.ai.exceptions import THROTTLE_MESSAGE_PATTERN, UpstreamError


_RETRY_IN_PATTERN = re.compile(r"retry in\s*([0-9.]+)s", re.IGNORECASE)


def is_rate_limited(error: UpstreamError) -> bool:
    return error.status_code == 429 or bool(
        THROTTLE_MESSAGE_PATTERN.search(error.message or "")
    )


def retry_after_seconds(error: UpstreamError) -> int | float | None:
    """Seconds the client should wait, or None when nobody said."""
    hint: float | None = error.retry_after
    if not hint:
        match = _RETRY_IN_PATTERN.search(error.message or "")
        if match:
            try:
                hint = float(match.group(1))
            except ValueError:
                hint = None
    if not hint:
        return None
    return int(hint) if float(hint).is_integer() else hint


def upstream_error_response(error: UpstreamError) -> JSONResponse:
    """429 ``{error, retryAfter?}`` for throttling, 500 ``{error}`` otherwise."""
    if not is_rate_limited(error):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": error.message},
        )

    body: dict[str, Any] = {"error": error.message}
    headers: dict[str, str] = {}
    retry_after = retry_after_seconds(error)
    if retry_after is not None:
        body["retryAfter"] = retry_after
        headers["Retry-After"] = str(math.ceil(retry_after))
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=body,
        headers=headers,
    )
