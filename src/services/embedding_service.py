"""Generate and store vendor embeddings using the Gemini embedding API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np

from services.ai.interfaces import EmbedderProtocol, VectorIndexProtocol


logger = logging.getLogger(__name__)


def _field(vendor: Mapping[str, Any], snake: str, camel: str | None = None) -> Any:
    value = vendor.get(snake)
    if value is None and camel:
        value = vendor.get(camel)
    return value


def _specialties_text(value: Any) -> str:
    if isinstance(value, list | tuple):
        return ", ".join(str(v) for v in value)
    return str(value) if value else ""


def generate_vendor_text(vendor: Mapping[str, Any]) -> str:
    """Build the text a vendor is embedded from.

    Missing fields become empty strings so partially filled vendor
    documents still produce a stable sentence layout.
    """
    name = _field(vendor, "name") or ""
    category = _field(vendor, "category") or ""
    description = _field(vendor, "description") or ""
    specialties = _specialties_text(_field(vendor, "specialties"))
    style = _field(vendor, "style") or ""
    price_range = _field(vendor, "price_range", "priceRange") or ""
    return (
        f"{name}. {category}. {description}. Specialties: {specialties}. "
        f"Style: {style}. Price Range: {price_range}"
    )


def vendor_metadata(vendor: Mapping[str, Any]) -> dict[str, Any]:
    """Metadata stored beside the vector and returned with each match."""
    return {
        "name": _field(vendor, "name") or "",
        "category": _field(vendor, "category") or "",
        "priceRange": _field(vendor, "price_range", "priceRange") or "",
        "rating": _field(vendor, "rating") or 0,
    }


def _normalize_embedding(embedding: np.ndarray, embed_type: str) -> list[float]:
    """Normalize embedding for cosine similarity."""
    norm = np.linalg.norm(embedding)

    if norm == 0:
        raise ValueError(
            f"{embed_type.capitalize()} embedding has zero norm (all zeros). "
            "Cannot normalize. This may indicate an issue with the input text "
            "or API response."
        )

    normalized = embedding / norm
    return list(normalized.tolist())


async def generate_embedding(embedder: EmbedderProtocol, text: str) -> list[float]:
    """Embed a vendor document. Uses the RETRIEVAL_DOCUMENT task type."""
    values = await embedder.embed_text(text, task_type="RETRIEVAL_DOCUMENT")
    return _normalize_embedding(np.array(values, dtype=float), "document")


async def generate_query_embedding(
    embedder: EmbedderProtocol, query: str
) -> list[float]:
    """Embed a search query. Uses the RETRIEVAL_QUERY task type."""
    values = await embedder.embed_text(query, task_type="RETRIEVAL_QUERY")
    return _normalize_embedding(np.array(values, dtype=float), "query")


async def store_vendor_embedding(
    embedder: EmbedderProtocol,
    vector_index: VectorIndexProtocol,
    vendor_id: str,
    vendor: Mapping[str, Any],
) -> bool:
    """Embed `vendor` and upsert it into the vector index.

    Indexing is best effort: a vendor that cannot be embedded is still a
    valid vendor, so failures are logged and reported as False instead of
    raised.
    """
    try:
        embedding = await generate_embedding(embedder, generate_vendor_text(vendor))
        await vector_index.upsert(vendor_id, embedding, vendor_metadata(vendor))
    except Exception as e:  # noqa: BLE001
        logger.warning("Vector index storage failed for %s (skipping): %s", vendor_id, e)
        return False
    return True
