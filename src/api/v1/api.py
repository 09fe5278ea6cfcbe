from fastapi import APIRouter

from .contracts import router as contracts_router
from .debug import router as debug_router
from .health import router as health_router
from .planning import router as planning_router
from .vendors import router as vendors_router


api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(vendors_router)
api_router.include_router(contracts_router)
api_router.include_router(planning_router)
api_router.include_router(debug_router)
