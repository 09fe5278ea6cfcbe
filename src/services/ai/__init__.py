"""Init file for AI services."""

from .contract_analysis import analyze_contract
from .generators import (
    generate_budget_allocation,
    generate_schedule,
    generate_theme,
    generate_vendor_recommendations,
)
from .remote_caller import GeminiClient, GeminiClientConfig


__all__ = [
    "GeminiClient",
    "GeminiClientConfig",
    "analyze_contract",
    "generate_budget_allocation",
    "generate_schedule",
    "generate_theme",
    "generate_vendor_recommendations",
]
