"""Vendor schemas shared by the vendor routes, CRUD layer and search."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PersonalDetails(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    years_exp: int | None = None
    location: str | None = None
    team_size: int | None = None


class VendorBase(BaseModel):
    """Fields a vendor document may carry. Everything but the name is optional."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    name: str = Field(min_length=1, max_length=255)
    category: str | None = None
    description: str | None = None
    specialties: list[str] = Field(default_factory=list)
    style: str | None = None
    price_range: str = ""
    rating: float = 0.0
    contact: str | None = None
    phone_number: str | None = None
    highlights: list[str] = Field(default_factory=list)
    team_info: str | None = None
    personal_details: PersonalDetails | None = None

    @field_validator("specialties", "highlights", mode="before")
    @classmethod
    def listify(cls, v: object) -> list[str]:
        if v is None:
            return []
        if isinstance(v, list | tuple):
            return [str(i) for i in v]
        return [str(v)]

    @field_validator("rating", mode="before")
    @classmethod
    def numeric_rating(cls, v: object) -> float:
        if v is None or v == "":
            return 0.0
        try:
            return float(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.0

    @field_validator("price_range", mode="before")
    @classmethod
    def default_price_range(cls, v: object) -> str:
        return "" if v is None else str(v)


class VendorCreate(VendorBase):
    pass


class VendorRead(VendorBase):
    id: UUID
    created_at: datetime | None = None


class VendorSearchRequest(BaseModel):
    query: str | None = Field(
        default=None, description="Free-text vibe or keywords to match vendors on"
    )


class SeedResult(BaseModel):
    name: str
    pinned: bool
    error: str | None = None


class SeedResponse(BaseModel):
    message: str
    count: int
    details: list[SeedResult]
