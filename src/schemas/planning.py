"""Request and response schemas for the planning generators."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase from the browser and snake_case from Python callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScheduleRequest(CamelModel):
    event_type: str = Field(default="event", description="Kind of event, e.g. 'wedding'")
    duration: int = Field(default=8, ge=0, description="Event length in hours")
    activities: list[str] = Field(
        default_factory=list, description="Named activities in the desired order"
    )


class ThemeRequest(CamelModel):
    description: str = Field(default="", description="Free-text vision for the event")


class BudgetRequest(CamelModel):
    total_budget: float | None = Field(default=None, description="Total spend")
    priorities: dict[str, str] = Field(
        default_factory=dict,
        description="Category to priority level (low | medium | high)",
    )
    event_type: str = Field(default="event")
    guest_count: int = Field(default=0, ge=0)

    @field_validator("total_budget", mode="before")
    @classmethod
    def lenient_budget(cls, v: object) -> object:
        """Budgets that are not finite numbers become None; the fallback defaults them."""
        if isinstance(v, str):
            try:
                v = float(v.replace(",", "").strip())
            except ValueError:
                return None
        if not isinstance(v, int | float):
            return None
        try:
            return v if math.isfinite(v) else None
        except OverflowError:  # integers too large for a float
            return None

    @field_validator("priorities", mode="before")
    @classmethod
    def stringify_priorities(cls, v: object) -> object:
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return {}


class ScheduleItem(BaseModel):
    """Documented shape of one schedule entry. Model output is not validated."""

    time: str
    activity: str
    duration: str
    notes: str | None = None


class ThemeResponse(BaseModel):
    colorPalette: list[str]
    visualDescription: str
    decorElements: list[str]
    lightingStyle: str
    atmosphere: str


class BudgetAllocation(BaseModel):
    category: str
    amount: float
    percentage: float
    justification: str
    items: list[str] = Field(default_factory=list)

