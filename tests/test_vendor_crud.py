"""Unit tests for vendor CRUD helpers with the session mocked."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from crud.vendors import VendorCRUD, VendorStore, _like_pattern, keyword_tokens
from models.vendors import Vendor


def _db_returning(rows: list[Vendor]) -> AsyncMock:
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    db.execute.return_value = result
    return db


def _vendor(name: str) -> Vendor:
    return Vendor(
        id=uuid.uuid4(),
        name=name,
        specialties=[],
        highlights=[],
        price_range="$$",
        rating=4.0,
    )


def test_keyword_tokens_keep_two_letter_words():
    assert keyword_tokens("a DJ for my  wedding") == ["DJ", "for", "my", "wedding"]
    assert keyword_tokens("  ") == []


def test_like_pattern_escapes_wildcards():
    assert _like_pattern("50%_off") == "%50\\%\\_off%"
    assert _like_pattern("back\\slash") == "%back\\\\slash%"


@pytest.mark.asyncio
async def test_get_by_ids_keeps_requested_order_and_skips_bad_ids():
    first, second = _vendor("First"), _vendor("Second")
    db = _db_returning([first, second])

    vendors = await VendorCRUD().get_by_ids(
        db, [str(second.id), "not-a-uuid", str(first.id)]
    )

    assert vendors == [second, first]


@pytest.mark.asyncio
async def test_get_by_ids_without_valid_ids_skips_query():
    db = _db_returning([])

    assert await VendorCRUD().get_by_ids(db, ["nope"]) == []
    db.execute.assert_not_called()


@pytest.mark.asyncio
async def test_keyword_search_builds_case_insensitive_filters():
    db = _db_returning([])

    await VendorCRUD().keyword_search(db, "neon party", ["neon", "party"], 10)

    stmt = db.execute.call_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "ILIKE" in sql.upper()
    assert "array_to_string" in sql
    assert "LIMIT" in sql.upper()


@pytest.mark.asyncio
async def test_keyword_search_without_keywords_returns_nothing():
    db = _db_returning([])

    assert await VendorCRUD().keyword_search(db, "a", [], 10) == []
    db.execute.assert_not_called()


@pytest.mark.asyncio
async def test_vendor_store_returns_camel_case_payloads():
    vendor = _vendor("Royal Catering Co.")
    db = _db_returning([vendor])

    payloads = await VendorStore(db).keyword_search("royal", ["royal"], 5)

    assert payloads[0]["id"] == str(vendor.id)
    assert payloads[0]["priceRange"] == "$$"
    assert payloads[0]["name"] == "Royal Catering Co."


@pytest.mark.asyncio
async def test_vendor_store_rollback_resets_the_session():
    db = _db_returning([])

    await VendorStore(db).rollback()

    db.rollback.assert_awaited_once()
