"""Service interfaces for the planning and vendor-search pipelines.

These protocols keep generators and the vendor search decoupled from the
concrete Gemini client and database classes, so tests can hand in small
fakes instead of patching module globals.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


class TextGeneratorProtocol(Protocol):
    """Anything that turns a prompt into freeform model text."""

    async def generate_text(self, prompt: str) -> str:
        """Return the model's reply to `prompt`."""
        ...


class EmbedderProtocol(Protocol):
    """Anything that turns text into an embedding vector."""

    async def embed_text(
        self, text: str, task_type: str = "RETRIEVAL_DOCUMENT"
    ) -> list[float]:
        """Return the raw embedding of `text`."""
        ...


@dataclass(frozen=True, slots=True)
class VectorMatch:
    """One nearest-neighbour hit from the vector index."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorIndexProtocol(Protocol):
    """Nearest-neighbour index over vendor embeddings."""

    async def upsert(
        self, vendor_id: str, values: Sequence[float], metadata: dict[str, Any]
    ) -> None:
        ...

    async def query(self, vector: Sequence[float], top_k: int) -> list[VectorMatch]:
        ...

    async def describe_stats(self) -> dict[str, Any]:
        ...


class VendorStoreProtocol(Protocol):
    """Document store holding the vendor records themselves."""

    async def get_by_ids(self, vendor_ids: Sequence[str]) -> list[dict[str, Any]]:
        ...

    async def keyword_search(
        self, query: str, keywords: Sequence[str], limit: int
    ) -> list[dict[str, Any]]:
        ...

    async def rollback(self) -> None:
        """Discard a transaction a failed statement left aborted."""
        ...
