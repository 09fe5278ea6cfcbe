"""Tests for the vendor endpoints with CRUD and search faked."""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from crud.vendors import vendor_crud
from dependencies.ai import get_vendor_search
from main import app
from models.vendors import Vendor
from services.ai.interfaces import VectorMatch
from services.vendor_search import VendorSearchService


def _vendor(name: str, **overrides) -> Vendor:
    fields = {
        "id": uuid.uuid4(),
        "name": name,
        "category": "Decoration",
        "description": "Neon installs",
        "specialties": ["Neon"],
        "style": "Bold",
        "price_range": "$$$",
        "rating": 4.7,
        "highlights": [],
        "personal_details": {"yearsExp": 8, "location": "Bangalore", "teamSize": 15},
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return Vendor(**fields)


@pytest.fixture
def search_with(fake_gemini, fake_vector_index, fake_vendor_store):
    def install() -> VendorSearchService:
        service = VendorSearchService(
            fake_gemini, fake_vector_index, fake_vendor_store, fake_gemini
        )
        app.dependency_overrides[get_vendor_search] = lambda: service
        return service

    return install


class TestSearchVendors:
    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}, None])
    def test_missing_query_is_400(self, client, fake_gemini, body) -> None:
        if body is None:
            response = client.post("/api/v1/vendors/search")
        else:
            response = client.post("/api/v1/vendors/search", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Query is required"}
        assert fake_gemini.prompts == []
        assert fake_gemini.embedded == []

    def test_semantic_results(
        self, client, search_with, fake_vector_index, fake_vendor_store
    ) -> None:
        fake_vector_index.matches = [VectorMatch(id="v1", score=0.87)]
        fake_vendor_store.vendors = [{"id": "v1", "name": "Neon Dreams Decor"}]
        search_with()

        response = client.post("/api/v1/vendors/search", json={"query": "neon"})

        assert response.status_code == 200
        assert response.json() == [
            {"id": "v1", "name": "Neon Dreams Decor", "similarityScore": 0.87}
        ]

    def test_synthetic_fallback_is_flagged(self, client, search_with, fake_gemini) -> None:
        fake_gemini.replies = ["no json here"]
        search_with()

        response = client.post("/api/v1/vendors/search", json={"query": "lunar gala"})

        assert response.status_code == 200
        assert len(response.json()) == 3
        assert all(v["isAIGenerated"] for v in response.json())
        assert response.headers["X-Result-Degraded"] == "true"
        assert response.headers["X-Result-Degraded-Reason"] == "extraction_failed"

    def test_generated_vendors(self, client, search_with, fake_gemini) -> None:
        fake_gemini.replies = [json.dumps([{"name": "Moon Co", "category": "Decor"}])]
        search_with()

        response = client.post("/api/v1/vendors/search", json={"query": "lunar gala"})

        assert response.json()[0]["name"] == "Moon Co"
        assert response.json()[0]["similarityScore"] == 0.99
        assert "X-Result-Degraded" not in response.headers

    def test_empty_generated_list_is_flagged(self, client, search_with, fake_gemini) -> None:
        fake_gemini.replies = ["[]"]
        search_with()

        response = client.post("/api/v1/vendors/search", json={"query": "lunar gala"})

        assert len(response.json()) == 3
        assert response.headers["X-Result-Degraded-Reason"] == "extraction_failed"


class TestVendorCrudEndpoints:
    def test_list_vendors_camel_case(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            vendor_crud, "list_all", AsyncMock(return_value=[_vendor("Neon Dreams Decor")])
        )

        response = client.get("/api/v1/vendors")

        assert response.status_code == 200
        vendor = response.json()[0]
        assert vendor["name"] == "Neon Dreams Decor"
        assert vendor["priceRange"] == "$$$"
        assert vendor["personalDetails"]["yearsExp"] == 8

    def test_create_vendor_indexes_embedding(
        self, client, monkeypatch, fake_vector_index
    ) -> None:
        created = _vendor("Glow Co", category="Lighting")
        create = AsyncMock(return_value=created)
        monkeypatch.setattr(vendor_crud, "create", create)

        response = client.post(
            "/api/v1/vendors",
            json={"name": "Glow Co", "category": "Lighting", "priceRange": "$$$"},
        )

        assert response.status_code == 200
        assert response.json()["id"] == str(created.id)
        vendor_in = create.call_args.args[1]
        assert vendor_in.price_range == "$$$"
        assert fake_vector_index.upserts[0][0] == str(created.id)
        assert fake_vector_index.upserts[0][2]["category"] == "Lighting"

    def test_create_vendor_requires_name(self, client) -> None:
        response = client.post("/api/v1/vendors", json={"category": "Catering"})

        assert response.status_code == 422

    def test_seed_replaces_catalogue(self, client, monkeypatch, fake_vector_index) -> None:
        monkeypatch.setattr(vendor_crud, "delete_all", AsyncMock(return_value=3))
        monkeypatch.setattr(
            vendor_crud,
            "create",
            AsyncMock(side_effect=lambda db, v: _vendor(v.name)),
        )

        response = client.post("/api/v1/vendors/seed")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 10
        assert data["message"] == "Seeded vendors and generated embeddings"
        assert all(d["pinned"] for d in data["details"])
        assert len(fake_vector_index.upserts) == 10
