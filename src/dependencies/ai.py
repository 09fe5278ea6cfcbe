"""Dependencies that hand route handlers their AI and search collaborators."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from core.config import get_settings
from crud.vendors import VendorStore
from dependencies.db import DbSession
from services.ai.remote_caller import GeminiClient
from services.vector_index import PgVectorIndex
from services.vendor_search import VendorSearchService


def get_gemini_client(request: Request) -> GeminiClient:
    """The process-wide client opened in the application lifespan."""
    client: GeminiClient | None = getattr(request.app.state, "gemini_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI client is not initialised",
        )
    return client


GeminiClientDep = Annotated[GeminiClient, Depends(get_gemini_client)]


def get_vector_index(db: DbSession) -> PgVectorIndex:
    return PgVectorIndex(db, dimensions=get_settings().EMBEDDING_DIMENSIONS)


VectorIndexDep = Annotated[PgVectorIndex, Depends(get_vector_index)]


def get_vendor_search(
    db: DbSession, client: GeminiClientDep, vector_index: VectorIndexDep
) -> VendorSearchService:
    settings = get_settings()
    return VendorSearchService(
        embedder=client,
        vector_index=vector_index,
        vendor_store=VendorStore(db),
        generator=client,
        top_k=settings.VENDOR_SEMANTIC_TOP_K,
        keyword_limit=settings.VENDOR_KEYWORD_LIMIT,
    )


VendorSearchDep = Annotated[VendorSearchService, Depends(get_vendor_search)]
