"""pgvector-backed nearest-neighbour index over vendor embeddings."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from models.vendors import EMBEDDING_DIMENSIONS, VendorEmbedding
from services.ai.interfaces import VectorIndexProtocol, VectorMatch


logger = logging.getLogger(__name__)

# Constant query vector used to pull "representative" rows for the debug view
SAMPLE_QUERY_VALUE = 0.1
SAMPLE_SIZE = 10


class PgVectorIndex:
    """Stores one embedding per vendor and answers cosine top-k queries."""

    def __init__(
        self, db: AsyncSession, dimensions: int = EMBEDDING_DIMENSIONS
    ) -> None:
        self._db = db
        self.dimensions = dimensions

    async def upsert(
        self, vendor_id: str, values: Sequence[float], metadata: dict[str, Any]
    ) -> None:
        if len(values) != self.dimensions:
            raise ValueError(
                f"Expected {self.dimensions}-dimension embedding, got {len(values)}"
            )
        row = {
            "vendor_id": uuid.UUID(str(vendor_id)),
            "embedding": list(values),
            "name": str(metadata.get("name") or ""),
            "category": str(metadata.get("category") or ""),
            "price_range": str(metadata.get("priceRange") or ""),
            "rating": float(metadata.get("rating") or 0),
        }
        stmt = insert(VendorEmbedding).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[VendorEmbedding.vendor_id],
            set_={k: v for k, v in row.items() if k != "vendor_id"},
        )
        # A savepoint confines a failed write; a session-wide rollback would
        # expire the caller's vendor instances
        async with self._db.begin_nested():
            await self._db.execute(stmt)
        await self._db.commit()

    async def query(self, vector: Sequence[float], top_k: int) -> list[VectorMatch]:
        distance = VendorEmbedding.embedding.cosine_distance(list(vector))
        stmt = (
            select(VendorEmbedding, distance.label("distance"))
            .order_by(distance.asc())
            .limit(top_k)
        )
        rows = (await self._db.execute(stmt)).all()
        return [
            VectorMatch(
                id=str(entry.vendor_id),
                score=1.0 - float(dist),
                metadata={
                    "name": entry.name,
                    "category": entry.category,
                    "priceRange": entry.price_range,
                    "rating": entry.rating,
                },
            )
            for entry, dist in rows
        ]

    async def describe_stats(self) -> dict[str, Any]:
        count = await self._db.scalar(
            select(func.count()).select_from(VendorEmbedding)
        )
        return {"dimension": self.dimensions, "totalRecordCount": int(count or 0)}


async def index_snapshot(index: VectorIndexProtocol, dimensions: int) -> dict[str, Any]:
    """Index stats plus up to ten sample matches for the debug route.

    The index cannot be listed directly, so samples are the nearest
    neighbours of a constant query vector.
    """
    stats = await index.describe_stats()
    samples: list[dict[str, Any]] = []
    if stats.get("totalRecordCount", 0) > 0:
        sample_query = [SAMPLE_QUERY_VALUE] * dimensions
        samples = [asdict(m) for m in await index.query(sample_query, SAMPLE_SIZE)]
    return {"stats": stats, "samples": samples}
