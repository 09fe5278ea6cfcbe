"""Shared test fixtures for pytest.

ENVIRONMENT is pinned to ``test`` before anything imports settings so no
.env file is read and no real API key leaks into the run. Nothing here
talks to Gemini or Postgres: the AI client, DB session and vendor search
are replaced through FastAPI dependency overrides.
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ["ENVIRONMENT"] = "test"
os.environ.pop("GEMINI_API_KEY", None)

from dependencies.ai import get_gemini_client, get_vector_index, get_vendor_search
from dependencies.db import get_db
from main import app
from services.ai.interfaces import VectorMatch


class FakeGeminiClient:
    """Scripted stand-in for `GeminiClient`.

    `replies` are consumed in order by `generate_text`; an Exception in the
    list is raised instead of returned.
    """

    def __init__(
        self,
        replies: list[Any] | None = None,
        embedding: list[float] | None = None,
    ) -> None:
        self.replies = list(replies or [])
        self.embedding = embedding or [0.6, 0.8]
        self.prompts: list[str] = []
        self.embedded: list[tuple[str, str]] = []

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("FakeGeminiClient ran out of scripted replies")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def embed_text(
        self, text: str, task_type: str = "RETRIEVAL_DOCUMENT"
    ) -> list[float]:
        self.embedded.append((text, task_type))
        return list(self.embedding)

    async def aclose(self) -> None:  # pragma: no cover - no-op
        return None


class FakeVectorIndex:
    """In-memory vector index recording upserts and returning canned matches."""

    def __init__(self, matches: list[VectorMatch] | None = None) -> None:
        self.matches = matches or []
        self.upserts: list[tuple[str, list[float], dict[str, Any]]] = []
        self.queries: list[tuple[list[float], int]] = []

    async def upsert(self, vendor_id, values, metadata) -> None:
        self.upserts.append((vendor_id, list(values), dict(metadata)))

    async def query(self, vector, top_k) -> list[VectorMatch]:
        self.queries.append((list(vector), top_k))
        return self.matches[:top_k]

    async def describe_stats(self) -> dict[str, Any]:
        return {"dimension": 2, "totalRecordCount": len(self.matches)}


class FakeVendorStore:
    """Vendor store over a plain list of payload dicts."""

    def __init__(self, vendors: list[dict[str, Any]] | None = None) -> None:
        self.vendors = vendors or []
        self.keyword_calls: list[tuple[str, list[str], int]] = []
        # Set to mimic a session whose transaction a failed statement aborted
        self.aborted = False
        self.rollbacks = 0

    def _check_transaction(self) -> None:
        if self.aborted:
            raise RuntimeError("current transaction is aborted")

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.aborted = False

    async def get_by_ids(self, vendor_ids) -> list[dict[str, Any]]:
        self._check_transaction()
        by_id = {v["id"]: v for v in self.vendors}
        return [by_id[i] for i in vendor_ids if i in by_id]

    async def keyword_search(self, query, keywords, limit) -> list[dict[str, Any]]:
        self._check_transaction()
        self.keyword_calls.append((query, list(keywords), limit))
        needles = [k.lower() for k in keywords]
        hits = [
            v
            for v in self.vendors
            if any(n in str(v.get("name", "")).lower() for n in needles)
        ]
        return hits[:limit]


class _FakeSession:
    """Minimal fake async session for routes whose CRUD calls are patched."""

    async def close(self):  # pragma: no cover - no-op
        return None


async def _override_get_db_factory() -> AsyncGenerator[_FakeSession, None]:
    yield _FakeSession()


@pytest.fixture
def fake_gemini() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def fake_vector_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture
def client(
    fake_gemini: FakeGeminiClient, fake_vector_index: FakeVectorIndex
) -> Generator[TestClient, None, None]:
    """Test client with the AI client, DB session and vector index faked."""
    app.dependency_overrides[get_gemini_client] = lambda: fake_gemini
    app.dependency_overrides[get_db] = _override_get_db_factory
    app.dependency_overrides[get_vector_index] = lambda: fake_vector_index
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_gemini_client, None)
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_vector_index, None)
    app.dependency_overrides.pop(get_vendor_search, None)


@pytest_asyncio.fixture
async def async_client(
    fake_gemini: FakeGeminiClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the AI client and DB overridden (no lifespan)."""
    app.dependency_overrides[get_gemini_client] = lambda: fake_gemini
    app.dependency_overrides[get_db] = _override_get_db_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.pop(get_gemini_client, None)
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def fake_vendor_store() -> FakeVendorStore:
    return FakeVendorStore()
