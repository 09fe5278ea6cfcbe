"""Planning endpoints: run-of-show schedule, theme and budget split.

These never fail because of the model. When generation is unavailable the
static fallback is returned with ``X-Result-Degraded: true``.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.v1.responses import generated_response
from dependencies.ai import GeminiClientDep
from schemas.planning import (
    BudgetAllocation,
    BudgetRequest,
    ScheduleItem,
    ScheduleRequest,
    ThemeRequest,
    ThemeResponse,
)
from services.ai.generators import (
    generate_budget_allocation,
    generate_schedule,
    generate_theme,
)


router = APIRouter(tags=["planning"])


@router.post(
    "/schedule/generate",
    response_model=list[ScheduleItem],
    summary="Generate a run-of-show schedule",
)
async def create_schedule(payload: ScheduleRequest, client: GeminiClientDep) -> JSONResponse:
    result = await generate_schedule(
        client, payload.event_type, payload.duration, payload.activities
    )
    return generated_response(
        result.value, degraded=result.degraded, reason=result.reason
    )


@router.post(
    "/theme/generate",
    response_model=ThemeResponse,
    summary="Generate a visual theme for the event",
)
async def create_theme(payload: ThemeRequest, client: GeminiClientDep) -> JSONResponse:
    result = await generate_theme(client, payload.description)
    return generated_response(
        result.value, degraded=result.degraded, reason=result.reason
    )


@router.post(
    "/budget/allocate",
    response_model=list[BudgetAllocation],
    summary="Split a total budget across spending categories",
)
async def allocate_budget(payload: BudgetRequest, client: GeminiClientDep) -> JSONResponse:
    result = await generate_budget_allocation(
        client,
        payload.total_budget,
        payload.priorities,
        payload.event_type,
        payload.guest_count,
    )
    return generated_response(
        result.value, degraded=result.degraded, reason=result.reason
    )
