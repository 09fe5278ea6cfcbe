"""Vendor endpoints: layered search, listing, creation and sample seeding."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from api.v1.responses import generated_response
from core.exceptions import MissingQueryError
from crud.vendors import to_payload, vendor_crud
from dependencies.ai import GeminiClientDep, VectorIndexDep, VendorSearchDep
from dependencies.db import DbSession
from schemas.api import ErrorMessage
from schemas.vendors import SeedResponse, VendorCreate, VendorRead, VendorSearchRequest
from services.embedding_service import store_vendor_embedding
from services.vendor_seed import seed_vendors


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.post(
    "/search",
    response_model=list[dict[str, Any]],
    responses={400: {"model": ErrorMessage}},
    summary="Find vendors matching a vibe",
)
async def search_vendors(
    search: VendorSearchDep,
    payload: Annotated[VendorSearchRequest | None, Body()] = None,
) -> JSONResponse:
    """Semantic search first, then keyword search, then generated suggestions.

    Each vendor carries a ``similarityScore``; generated ones also carry
    ``isAIGenerated: true``.
    """
    query = (payload.query if payload else None) or ""
    query = query.strip()
    if not query:
        raise MissingQueryError("Query is required")

    result = await search.search(query)
    logger.info(
        "Vendor search returned %d vendors via %s", len(result.vendors), result.strategy
    )
    return generated_response(
        result.vendors, degraded=result.degraded, reason=result.reason
    )


@router.get("", response_model=list[VendorRead], summary="List all vendors")
async def list_vendors(db: DbSession) -> list[dict[str, Any]]:
    vendors = await vendor_crud.list_all(db)
    logger.info("Fetched %d vendors from DB", len(vendors))
    return [to_payload(v) for v in vendors]


@router.post("", response_model=VendorRead, summary="Create a vendor")
async def create_vendor(
    vendor_in: VendorCreate,
    db: DbSession,
    client: GeminiClientDep,
    vector_index: VectorIndexDep,
) -> dict[str, Any]:
    """Store the vendor, then index its embedding. Indexing is best effort."""
    vendor = await vendor_crud.create(db, vendor_in)
    payload = to_payload(vendor)
    await store_vendor_embedding(client, vector_index, str(vendor.id), payload)
    return payload


@router.post(
    "/seed",
    response_model=SeedResponse,
    summary="Replace all vendors with the sample catalogue",
)
async def seed(
    db: DbSession, client: GeminiClientDep, vector_index: VectorIndexDep
) -> SeedResponse:
    return await seed_vendors(db, client, vector_index)
