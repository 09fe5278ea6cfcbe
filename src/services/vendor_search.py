"""Layered vendor search: semantic, then keyword, then synthetic.

The first strategy that yields at least one vendor wins. Semantic search is
opportunistic; any failure there (embedding call, index query, id lookup)
is logged and treated as "no results" so keyword search still runs. The
synthetic tier asks the model to invent vendors and never fails, because
the recommendation generator has its own static fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from crud.vendors import keyword_tokens
from services.ai.generators import generate_vendor_recommendations
from services.ai.interfaces import (
    EmbedderProtocol,
    TextGeneratorProtocol,
    VectorIndexProtocol,
    VendorStoreProtocol,
)
from services.embedding_service import generate_query_embedding


logger = logging.getLogger(__name__)

KEYWORD_MATCH_SCORE = 0.5
SYNTHETIC_MATCH_SCORE = 0.99

SearchStrategy = Literal["semantic", "keyword", "synthetic"]


@dataclass(slots=True)
class VendorSearchResult:
    vendors: list[dict[str, Any]] = field(default_factory=list)
    strategy: SearchStrategy = "semantic"
    degraded: bool = False
    reason: str | None = None


class VendorSearchService:
    """Resolves a free-text vibe to vendor records."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_index: VectorIndexProtocol,
        vendor_store: VendorStoreProtocol,
        generator: TextGeneratorProtocol,
        *,
        top_k: int = 5,
        keyword_limit: int = 10,
    ) -> None:
        self.embedder = embedder
        self.vector_index = vector_index
        self.vendor_store = vendor_store
        self.generator = generator
        self.top_k = top_k
        self.keyword_limit = keyword_limit

    async def search(self, query: str) -> VendorSearchResult:
        vendors = await self.semantic_search(query)
        if vendors:
            return VendorSearchResult(vendors, "semantic")

        logger.info("Semantic search empty, trying keyword search")
        vendors = await self.keyword_search(query)
        if vendors:
            return VendorSearchResult(vendors, "keyword")

        logger.info("Keyword search empty, generating vendor suggestions")
        return await self.synthetic_search(query)

    async def semantic_search(self, query: str) -> list[dict[str, Any]]:
        try:
            embedding = await generate_query_embedding(self.embedder, query)
            matches = await self.vector_index.query(embedding, self.top_k)
            if not matches:
                return []

            scores = {m.id: m.score for m in matches}
            vendors = await self.vendor_store.get_by_ids([m.id for m in matches])
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Semantic search failed, falling back to keyword search: %s", e
            )
            # the index and the store share one session; a failed statement
            # aborts its transaction for the keyword query too
            await self.vendor_store.rollback()
            return []

        return [
            {**v, "similarityScore": scores.get(str(v.get("id")), 0)}
            for v in vendors
        ]

    async def keyword_search(self, query: str) -> list[dict[str, Any]]:
        keywords = keyword_tokens(query)
        vendors = await self.vendor_store.keyword_search(
            query, keywords, self.keyword_limit
        )
        logger.info("Keyword search found %d matches", len(vendors))
        return [{**v, "similarityScore": KEYWORD_MATCH_SCORE} for v in vendors]

    async def synthetic_search(self, query: str) -> VendorSearchResult:
        result = await generate_vendor_recommendations(self.generator, query)
        vendors = [
            {**v, "similarityScore": SYNTHETIC_MATCH_SCORE, "isAIGenerated": True}
            for v in result.value
            if isinstance(v, dict)
        ]
        return VendorSearchResult(
            vendors, "synthetic", degraded=result.degraded, reason=result.reason
        )
