#!/usr/bin/env python3
"""Index vendors that have no embedding yet.

Vendors created while the embedding API was unavailable are stored without
a vector and so only ever match keyword search. Run this once the API is
reachable again (from the repo root, with ``PYTHONPATH=src``).
"""

import argparse
import asyncio
import logging

from sqlalchemy import select

from core.config import get_settings
from crud.vendors import to_payload
from dependencies.db import AsyncSessionLocal
from models.vendors import Vendor, VendorEmbedding
from services.ai.remote_caller import GeminiClient, GeminiClientConfig
from services.embedding_service import store_vendor_embedding
from services.vector_index import PgVectorIndex


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

DELAY_BETWEEN_VENDORS = 0.5  # seconds


async def backfill_vendor_embeddings(
    dry_run: bool = False, limit: int | None = None
) -> dict[str, int]:
    settings = get_settings()
    stats = {"pending": 0, "succeeded": 0, "failed": 0}

    async with AsyncSessionLocal() as session:
        stmt = (
            select(Vendor)
            .outerjoin(VendorEmbedding, VendorEmbedding.vendor_id == Vendor.id)
            .where(VendorEmbedding.vendor_id.is_(None))
            .order_by(Vendor.created_at)
        )
        if limit:
            stmt = stmt.limit(limit)
        vendors = list((await session.execute(stmt)).scalars().all())
        stats["pending"] = len(vendors)
        logger.info("Found %d vendors without embeddings", len(vendors))

        if dry_run or not vendors:
            return stats

        index = PgVectorIndex(session, dimensions=settings.EMBEDDING_DIMENSIONS)
        async with GeminiClient(GeminiClientConfig.from_settings(settings)) as client:
            # snapshot first; a failed index write may expire the loaded rows
            pending = [(str(v.id), v.name, to_payload(v)) for v in vendors]
            for position, (vendor_id, name, payload) in enumerate(pending, start=1):
                ok = await store_vendor_embedding(client, index, vendor_id, payload)
                stats["succeeded" if ok else "failed"] += 1
                logger.info(
                    "[%d/%d] %s: %s",
                    position,
                    len(pending),
                    name,
                    "indexed" if ok else "failed",
                )
                await asyncio.sleep(DELAY_BETWEEN_VENDORS)

    return stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Index vendors missing embeddings")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count vendors that would be indexed",
    )
    parser.add_argument("--limit", type=int, default=None, help="Maximum vendors")
    args = parser.parse_args()

    stats = asyncio.run(backfill_vendor_embeddings(args.dry_run, args.limit))
    logger.info("Done: %s", stats)


if __name__ == "__main__":
    main()
