from services.ai import exceptions


def test_exception_error_codes_and_retryability():
    e = exceptions.TransportError()
    assert isinstance(e, exceptions.UpstreamError)
    assert e.error_code == "transport_failed"
    assert e.retryable is True
    assert e.status_code is None

    e2 = exceptions.ThrottleError("slow down", retry_after=3.0)
    assert e2.error_code == "throttled"
    assert e2.status_code == 429
    assert e2.retry_after == 3.0
    assert e2.retryable is True

    e3 = exceptions.UpstreamHTTPError("bad", status_code=400)
    assert e3.error_code == "upstream_error"
    assert e3.retryable is False
    assert exceptions.UpstreamHTTPError("down", status_code=503).retryable is True

    e4 = exceptions.MalformedResponseError()
    assert e4.error_code == "malformed_response"
    assert e4.retryable is False

    e5 = exceptions.ExtractionError("nothing here")
    assert e5.error_code == "extraction_failed"
    assert str(e5).startswith("extraction_failed:")


def test_classify_http_failure():
    throttled = exceptions.classify_http_failure(429, "Too many requests", 10.0)
    assert isinstance(throttled, exceptions.ThrottleError)
    assert throttled.retry_after == 10.0

    quota = exceptions.classify_http_failure(403, "Quota exceeded for project", None)
    assert isinstance(quota, exceptions.ThrottleError)
    assert quota.status_code == 403

    other = exceptions.classify_http_failure(404, "Model not found", None)
    assert isinstance(other, exceptions.UpstreamHTTPError)
    assert other.status_code == 404


def test_exceptions_are_hashable():
    # tenacity and asyncio keep raised exceptions in sets
    assert len({exceptions.TransportError(), exceptions.TransportError()}) == 2
