"""Resilient client for the Gemini REST API.

All outbound generative-AI traffic goes through `GeminiClient.call`, which
classifies each response and retries transient failures with exponential
backoff:

- network errors wait ``min(1s * 2**attempt, 8s)``
- 429 / 5xx / quota messages wait the server's ``Retry-After`` when given,
  otherwise ``min(1s * 2**attempt, 30s)``
- anything else fails on the first attempt

The retry loop itself is tenacity's; this module only decides *whether* and
*how long*. The API key travels in the ``x-goog-api-key`` header so it never
shows up in URLs or in httpx's request logging.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from core.config import Settings
from services.ai.exceptions import (
    MalformedResponseError,
    TransportError,
    UpstreamError,
    UpstreamHTTPError,
    classify_http_failure,
)
from services.ai.outcomes import CallFailed, CallSucceeded, RemoteCallOutcome


logger = logging.getLogger(__name__)

BACKOFF_BASE_SECONDS = 1.0
NETWORK_BACKOFF_CAP_SECONDS = 8.0
HTTP_BACKOFF_CAP_SECONDS = 30.0

_RETRY_AFTER_PATTERN = re.compile(r"^\s*(\d+)")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class GeminiClientConfig:
    """Everything the client needs, resolved once at startup."""

    api_key: str | None
    base_url: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"
    text_model: str = "gemini-2.5-flash"
    embedding_model: str = "text-embedding-004"
    embedding_dimensions: int = 768
    max_retries: int = 3
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiClientConfig:
        return cls(
            api_key=settings.GEMINI_API_KEY,
            base_url=settings.GEMINI_API_BASE_URL.rstrip("/"),
            api_version=settings.GEMINI_API_VERSION,
            text_model=settings.TEXT_MODEL,
            embedding_model=settings.EMBEDDING_MODEL,
            embedding_dimensions=settings.EMBEDDING_DIMENSIONS,
            max_retries=settings.AI_MAX_RETRIES,
            timeout_seconds=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )


def parse_retry_after(header_value: str | None) -> float | None:
    """Read a delta-seconds ``Retry-After`` header; dates are ignored."""
    if not header_value:
        return None
    match = _RETRY_AFTER_PATTERN.match(header_value)
    if not match:
        return None
    return float(match.group(1))


def compute_backoff(error: UpstreamError, attempt: int) -> float:
    """Seconds to wait after the failed attempt with 0-based index `attempt`."""
    if isinstance(error, TransportError):
        return min(BACKOFF_BASE_SECONDS * 2**attempt, NETWORK_BACKOFF_CAP_SECONDS)
    if error.retry_after:
        return float(error.retry_after)
    return min(BACKOFF_BASE_SECONDS * 2**attempt, HTTP_BACKOFF_CAP_SECONDS)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, UpstreamError) and exc.retryable


def _retry_error(retry_state: RetryCallState) -> BaseException | None:
    outcome = retry_state.outcome
    if outcome is None or not outcome.failed:
        return None
    return outcome.exception()


def _wait_for_retry(retry_state: RetryCallState) -> float:
    error = _retry_error(retry_state)
    if not isinstance(error, UpstreamError):
        return BACKOFF_BASE_SECONDS
    return compute_backoff(error, retry_state.attempt_number - 1)


def _log_retry(retry_state: RetryCallState) -> None:
    error = _retry_error(retry_state)
    if error is None:
        return
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    status = getattr(error, "status_code", None)
    logger.warning(
        "Gemini call failed (status=%s, code=%s). Retrying in %dms (attempt %d)",
        status if status is not None else "network",
        getattr(error, "error_code", type(error).__name__),
        int(wait * 1000),
        retry_state.attempt_number,
    )


def _error_message(body: dict[str, Any], status_code: int) -> str:
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"API error: {status_code}"


def _safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class GeminiClient:
    """Async Gemini REST client with bounded, classified retries."""

    def __init__(
        self,
        config: GeminiClientConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds
        )
        self._sleep = sleep

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def endpoint_url(self, model: str, method: str) -> str:
        return (
            f"{self.config.base_url}/{self.config.api_version}"
            f"/models/{model}:{method}"
        )

    async def _post_once(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.config.api_key:
            raise UpstreamHTTPError("GEMINI_API_KEY is missing")

        try:
            response = await self._http.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.config.api_key,
                },
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        body = _safe_json(response)
        if response.is_success:
            return body

        raise classify_http_failure(
            response.status_code,
            _error_message(body, response.status_code),
            parse_retry_after(response.headers.get("retry-after")),
        )

    async def call(
        self, model: str, method: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST `payload` to ``models/{model}:{method}`` and return the JSON body.

        Raises:
            UpstreamError: the classified failure of the last attempt.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_retries + 1),
            wait=_wait_for_retry,
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(self._post_once, self.endpoint_url(model, method), payload)

    async def call_outcome(
        self, model: str, method: str, payload: dict[str, Any]
    ) -> RemoteCallOutcome:
        """Same as `call`, but returns the failure instead of raising it."""
        try:
            body = await self.call(model, method, payload)
        except UpstreamError as exc:
            return CallFailed(exc)
        return CallSucceeded(body)

    async def generate_text(self, prompt: str) -> str:
        """Run a single-turn completion on the text model."""
        body = await self.call(
            self.config.text_model,
            "generateContent",
            {"contents": [{"parts": [{"text": prompt}]}]},
        )
        return first_candidate_text(body)

    async def embed_text(
        self, text: str, task_type: str = "RETRIEVAL_DOCUMENT"
    ) -> list[float]:
        """Embed `text` with the embedding model; returns the raw vector."""
        body = await self.call(
            self.config.embedding_model,
            "embedContent",
            {
                "model": f"models/{self.config.embedding_model}",
                "content": {"parts": [{"text": text}]},
                "taskType": task_type,
                "outputDimensionality": self.config.embedding_dimensions,
            },
        )
        try:
            values = body["embedding"]["values"]
        except (KeyError, TypeError) as exc:
            raise MalformedResponseError("No embedding values in response") from exc
        if not values:
            raise MalformedResponseError("Empty embedding returned")
        return [float(v) for v in values]


def first_candidate_text(body: dict[str, Any]) -> str:
    try:
        return str(body["candidates"][0]["content"]["parts"][0]["text"])
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError("No text candidates in response") from exc
