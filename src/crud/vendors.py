"""CRUD operations for vendors."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.vendors import Vendor, VendorEmbedding
from schemas.vendors import VendorCreate, VendorRead


_LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def keyword_tokens(query: str) -> list[str]:
    """Whitespace-split words of two or more characters ('DJ' and 'MC' count)."""
    return [word for word in query.split() if len(word) >= 2]


def to_payload(vendor: Vendor) -> dict[str, Any]:
    """Serialize a vendor row to its camelCase JSON shape."""
    return VendorRead.model_validate(vendor).model_dump(mode="json", by_alias=True)


class VendorCRUD:
    """CRUD operations for vendors."""

    async def list_all(self, db: AsyncSession) -> list[Vendor]:
        result = await db.execute(select(Vendor).order_by(Vendor.created_at))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, vendor_in: VendorCreate) -> Vendor:
        data = vendor_in.model_dump()
        if vendor_in.personal_details is not None:
            data["personal_details"] = vendor_in.personal_details.model_dump(
                by_alias=True, exclude_none=True
            )
        vendor = Vendor(**data)
        db.add(vendor)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(vendor)
        return vendor

    async def get_by_ids(
        self, db: AsyncSession, vendor_ids: Sequence[str]
    ) -> list[Vendor]:
        """Fetch vendors in the order of `vendor_ids`, skipping unknown or
        malformed ids."""
        parsed: list[uuid.UUID] = []
        for raw in vendor_ids:
            try:
                parsed.append(uuid.UUID(str(raw)))
            except ValueError:
                continue
        if not parsed:
            return []

        result = await db.execute(select(Vendor).where(Vendor.id.in_(parsed)))
        by_id = {v.id: v for v in result.scalars().all()}
        return [by_id[i] for i in parsed if i in by_id]

    async def keyword_search(
        self, db: AsyncSession, query: str, keywords: Sequence[str], limit: int
    ) -> list[Vendor]:
        """Vendors where any keyword appears in name, category, description,
        style or specialties, or the whole query appears in name or
        description."""
        if not keywords:
            return []

        phrase = _like_pattern(query)
        predicates = [
            Vendor.name.ilike(phrase, escape=_LIKE_ESCAPE),
            Vendor.description.ilike(phrase, escape=_LIKE_ESCAPE),
        ]
        specialties_text = func.array_to_string(Vendor.specialties, " ")
        for kw in keywords:
            pattern = _like_pattern(kw)
            predicates.extend(
                column.ilike(pattern, escape=_LIKE_ESCAPE)
                for column in (
                    Vendor.name,
                    Vendor.category,
                    Vendor.description,
                    Vendor.style,
                    specialties_text,
                )
            )

        stmt = (
            select(Vendor)
            .where(or_(*predicates))
            .order_by(Vendor.created_at)
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def delete_all(self, db: AsyncSession) -> None:
        """Remove every vendor. Their embeddings cascade."""
        try:
            await db.execute(delete(Vendor))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def table_counts(self, db: AsyncSession) -> dict[str, int]:
        counts: dict[str, int] = {}
        for model in (Vendor, VendorEmbedding):
            count = await db.scalar(select(func.count()).select_from(model))
            counts[model.__tablename__] = int(count or 0)
        return counts


vendor_crud = VendorCRUD()


class VendorStore:
    """Session-bound view of the vendor table used by the vendor search."""

    def __init__(self, db: AsyncSession, crud: VendorCRUD = vendor_crud) -> None:
        self._db = db
        self._crud = crud

    async def get_by_ids(self, vendor_ids: Sequence[str]) -> list[dict[str, Any]]:
        return [to_payload(v) for v in await self._crud.get_by_ids(self._db, vendor_ids)]

    async def keyword_search(
        self, query: str, keywords: Sequence[str], limit: int
    ) -> list[dict[str, Any]]:
        vendors = await self._crud.keyword_search(self._db, query, keywords, limit)
        return [to_payload(v) for v in vendors]

    async def rollback(self) -> None:
        await self._db.rollback()
