"""Tests for mapping upstream failures onto 429/500 responses."""

import json

from services.ai.exceptions import (
    ThrottleError,
    TransportError,
    UpstreamHTTPError,
)
from services.ai.rate_limit import (
    is_rate_limited,
    retry_after_seconds,
    upstream_error_response,
)


def _body(response):
    return json.loads(response.body)


def test_throttle_with_retry_after_becomes_429():
    error = ThrottleError("Quota exceeded", retry_after=30.0)

    response = upstream_error_response(error)

    assert response.status_code == 429
    assert _body(response) == {"error": "Quota exceeded", "retryAfter": 30}
    assert response.headers["Retry-After"] == "30"


def test_retry_hint_parsed_from_message():
    error = UpstreamHTTPError(
        "You exceeded your current quota. Please retry in 12.5s.", status_code=400
    )

    response = upstream_error_response(error)

    assert response.status_code == 429
    assert _body(response)["retryAfter"] == 12.5
    assert response.headers["Retry-After"] == "13"


def test_throttle_without_hint_omits_retry_after():
    response = upstream_error_response(ThrottleError("slow down"))

    assert response.status_code == 429
    assert _body(response) == {"error": "slow down"}
    assert "Retry-After" not in response.headers


def test_other_failures_become_500_with_raw_message():
    response = upstream_error_response(UpstreamHTTPError("Bad gateway", 502))

    assert response.status_code == 500
    assert _body(response) == {"error": "Bad gateway"}


def test_transport_error_is_not_rate_limited():
    assert is_rate_limited(TransportError("timed out")) is False


def test_please_retry_message_counts_as_rate_limited():
    assert is_rate_limited(UpstreamHTTPError("Please retry later", 503)) is True


def test_retry_after_prefers_error_hint_over_message():
    error = ThrottleError("retry in 99s", retry_after=5.0)
    assert retry_after_seconds(error) == 5
