"""
Tests for the main module.
"""

from fastapi.testclient import TestClient

from main import app, validate_cors_origins
from services.ai.remote_caller import GeminiClient


def test_read_root(client):
    """Test the root endpoint returns the expected response."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "EventMinds API"}


def test_lifespan_opens_and_closes_gemini_client(caplog):
    with TestClient(app):
        assert isinstance(app.state.gemini_client, GeminiClient)
    assert "Gemini API key NOT found" in caplog.text


def test_validate_cors_origins_drops_invalid_entries():
    origins = ["http://localhost:5173", "localhost:3000", "ftp://files.example", "*"]

    assert validate_cors_origins(origins) == ["http://localhost:5173"]


def test_cors_preflight_exposes_retry_headers(client):
    response = client.options(
        "/api/v1/contracts/analyze",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"


def test_cors_exposes_degraded_and_retry_headers(client):
    response = client.get("/api/v1/health", headers={"Origin": "http://localhost:5173"})

    exposed = response.headers["Access-Control-Expose-Headers"]
    assert "Retry-After" in exposed
    assert "X-Result-Degraded" in exposed


def test_cors_request_from_disallowed_origin(client):
    response = client.get(
        "/api/v1/health", headers={"Origin": "http://malicious-site.com"}
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") != "http://malicious-site.com"
