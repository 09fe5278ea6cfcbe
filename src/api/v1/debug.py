"""Operator endpoints for inspecting the vendor store and vector index."""

from typing import Any

from fastapi import APIRouter

from core.config import get_settings
from crud.vendors import vendor_crud
from dependencies.ai import VectorIndexDep
from dependencies.db import DbSession
from services.vector_index import index_snapshot


router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/db")
async def describe_database(db: DbSession) -> dict[str, Any]:
    counts = await vendor_crud.table_counts(db)
    return {
        "database": db.get_bind().url.database,
        "tables": list(counts),
        "counts": counts,
    }


@router.get("/vector-index")
async def describe_vector_index(vector_index: VectorIndexDep) -> dict[str, Any]:
    return await index_snapshot(vector_index, get_settings().EMBEDDING_DIMENSIONS)
