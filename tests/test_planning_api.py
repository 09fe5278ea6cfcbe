"""Tests for the schedule, theme and budget endpoints."""

from __future__ import annotations

import json

import pytest

from services.ai.exceptions import ThrottleError, TransportError


SCHEDULE = [
    {"time": "06:00 PM", "activity": "Welcome drinks", "duration": "45 min", "notes": "Lobby"},
    {"time": "06:45 PM", "activity": "Dinner", "duration": "90 min", "notes": ""},
]


class TestScheduleEndpoint:
    def test_generated_schedule_is_returned_bare(self, client, fake_gemini) -> None:
        fake_gemini.replies = [f"Here you go:\n```json\n{json.dumps(SCHEDULE)}\n```"]

        response = client.post(
            "/api/v1/schedule/generate",
            json={"eventType": "gala", "duration": 4, "activities": ["Dinner"]},
        )

        assert response.status_code == 200
        assert response.json() == SCHEDULE
        assert "X-Result-Degraded" not in response.headers
        assert "gala" in fake_gemini.prompts[0]
        assert "Dinner" in fake_gemini.prompts[0]

    def test_throttled_model_returns_fallback_flagged(self, client, fake_gemini) -> None:
        fake_gemini.replies = [ThrottleError("Quota exceeded", retry_after=30)]

        response = client.post("/api/v1/schedule/generate", json={})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 7
        assert data[0]["activity"] == "Arrival & Registration"
        assert response.headers["X-Result-Degraded"] == "true"
        assert response.headers["X-Result-Degraded-Reason"] == "throttled"


class TestThemeEndpoint:
    def test_unparseable_reply_degrades(self, client, fake_gemini) -> None:
        fake_gemini.replies = ["I love this idea! Think pastel colours."]

        response = client.post(
            "/api/v1/theme/generate", json={"description": "spring garden brunch"}
        )

        assert response.status_code == 200
        assert "spring garden brunch" in response.json()["visualDescription"]
        assert response.headers["X-Result-Degraded-Reason"] == "extraction_failed"

    def test_generated_theme(self, client, fake_gemini) -> None:
        theme = {
            "colorPalette": ["#fff"],
            "visualDescription": "Soft",
            "decorElements": ["Tulips"],
            "lightingStyle": "Daylight",
            "atmosphere": "Calm",
        }
        fake_gemini.replies = [json.dumps(theme)]

        response = client.post("/api/v1/theme/generate", json={"description": "calm"})

        assert response.json() == theme


class TestBudgetEndpoint:
    def test_network_failure_uses_fixed_split(self, client, fake_gemini) -> None:
        fake_gemini.replies = [TransportError()]

        response = client.post(
            "/api/v1/budget/allocate",
            json={"totalBudget": 200000, "priorities": {"Decor": "high"}, "guestCount": 80},
        )

        assert response.status_code == 200
        amounts = [a["amount"] for a in response.json()]
        assert amounts == [70000, 60000, 30000, 30000, 10000]
        assert response.headers["X-Result-Degraded-Reason"] == "transport_failed"

    def test_unparseable_total_falls_back_to_default_budget(
        self, client, fake_gemini
    ) -> None:
        fake_gemini.replies = [TransportError()]

        response = client.post(
            "/api/v1/budget/allocate", json={"totalBudget": "plenty"}
        )

        assert response.status_code == 200
        assert response.json()[0]["amount"] == 35000

    @pytest.mark.parametrize(
        "body", ['{"totalBudget": 1e400}', '{"totalBudget": "Infinity"}']
    )
    def test_infinite_total_falls_back_to_default_budget(
        self, client, fake_gemini, body
    ) -> None:
        fake_gemini.replies = [TransportError()]

        response = client.post(
            "/api/v1/budget/allocate",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert [a["amount"] for a in response.json()] == [35000, 30000, 15000, 15000, 5000]

    def test_generated_allocation_passes_through(self, client, fake_gemini) -> None:
        allocation = [
            {
                "category": "Venue",
                "amount": 40000,
                "percentage": 40,
                "justification": "Large hall",
                "items": ["Hall rental"],
            }
        ]
        fake_gemini.replies = [json.dumps(allocation)]

        response = client.post(
            "/api/v1/budget/allocate",
            json={"totalBudget": "100,000", "eventType": "wedding", "guestCount": 120},
        )

        assert response.json() == allocation
        assert "₹100000" in fake_gemini.prompts[0]
        assert "120 attendees" in fake_gemini.prompts[0]


@pytest.mark.asyncio
async def test_theme_over_async_client(async_client, fake_gemini) -> None:
    fake_gemini.replies = [TransportError("timed out")]

    response = await async_client.post(
        "/api/v1/theme/generate", json={"description": "rooftop sunset"}
    )

    assert response.status_code == 200
    assert response.headers["X-Result-Degraded"] == "true"
    assert "rooftop sunset" in response.json()["visualDescription"]
