import logging

from core.error_handler import StructuredLogger, redact, set_correlation_id


def test_redact_masks_vendor_contact_and_credentials():
    # placeholder values, not real secrets
    data = {
        "api_key": "placeholder_key",  # pragma: allowlist secret
        "contact": "vendor@example.com",
        "name": "Neon Dreams Decor",
    }
    sanitized = redact(data)

    assert sanitized["api_key"] == "[REDACTED]"
    assert sanitized["contact"] == "[REDACTED]"
    assert sanitized["name"] == "Neon Dreams Decor"


def test_redact_walks_nested_dicts_and_lists():
    data = {
        "vendors": [
            {"name": "Crimson Catering", "phone": "555-0100"},
            {"name": "Stellar Sounds", "email": "dj@example.com"},
        ],
        "request": {"headers": {"x-goog-api-key": "placeholder_token"}},
    }
    sanitized = redact(data)

    assert sanitized["vendors"][0] == {"name": "Crimson Catering", "phone": "[REDACTED]"}
    assert sanitized["vendors"][1]["email"] == "[REDACTED]"
    assert sanitized["request"]["headers"]["x-goog-api-key"] == "[REDACTED]"
    # the input is left untouched
    assert data["vendors"][0]["phone"] == "555-0100"


def test_structured_logger_prefixes_correlation_id(caplog):
    set_correlation_id("cid-123")
    logger = StructuredLogger("tests.structured")

    with caplog.at_level(logging.WARNING, logger="tests.structured"):
        logger.warning("Semantic search failed", error="timeout", password="hunter2")

    set_correlation_id(None)
    record = caplog.records[-1]
    assert record.getMessage() == "[cid-123] Semantic search failed"
    assert record.correlation_id == "cid-123"
    assert record.fields == {"error": "timeout", "password": "[REDACTED]"}
