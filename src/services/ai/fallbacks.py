"""Static results served when the generation pipeline cannot produce one.

Each builder returns a fresh structure on every call so callers may annotate
the result without leaking changes into later requests.
"""

from __future__ import annotations

import math
from typing import Any


DEFAULT_FALLBACK_BUDGET = 100000

# (category, percentage, justification, items)
_BUDGET_SPLIT: tuple[tuple[str, int, str, tuple[str, ...]], ...] = (
    ("Venue & Facilities", 35, "Standard allocation (Fallback)", ("Rentals", "Basic Setup")),
    ("Catering & Food", 30, "Standard allocation (Fallback)", ("Buffet", "Beverages")),
    ("Decoration & Vibe", 15, "Standard allocation (Fallback)", ("Layout", "Props")),
    ("Entertainment & AV", 15, "Standard allocation (Fallback)", ("Music", "Sound System")),
    ("Contingency", 5, "Emergency fund", ("Miscellaneous",)),
)


def fallback_schedule() -> list[dict[str, str]]:
    return [
        {"time": "09:00 AM", "activity": "Arrival & Registration", "duration": "60 min", "notes": "Welcome guests"},
        {"time": "10:00 AM", "activity": "Opening Ceremony", "duration": "30 min", "notes": "Kickoff"},
        {"time": "10:30 AM", "activity": "Main Activity Block 1", "duration": "120 min", "notes": "Core event activities"},
        {"time": "12:30 PM", "activity": "Lunch Break", "duration": "60 min", "notes": "Buffet service"},
        {"time": "01:30 PM", "activity": "Main Activity Block 2", "duration": "90 min", "notes": "Continued activities"},
        {"time": "03:00 PM", "activity": "Networking / Tea Break", "duration": "45 min", "notes": "Casual interaction"},
        {"time": "03:45 PM", "activity": "Closing Remarks", "duration": "30 min", "notes": "Thank you note"},
    ]


def fallback_theme(description: str) -> dict[str, Any]:
    return {
        "colorPalette": ["#1a1a2e", "#16213e", "#0f3460", "#e94560", "#fcdab7"],
        "visualDescription": (
            f'(AI Service Unavailable) A reliable fallback theme based on: "{description}". '
            "High contrast and professional."
        ),
        "decorElements": [
            "Geometric centerpieces",
            "Metallic accents",
            "Smart lighting fixtures",
        ],
        "lightingStyle": "Ambient warm paired with focused spotlights",
        "atmosphere": "Professional, energetic, and polished",
    }


def coerce_budget(total_budget: object) -> float:
    """Numeric budget for the fallback split; unusable input means the default."""
    if isinstance(total_budget, bool):
        return DEFAULT_FALLBACK_BUDGET
    try:
        budget = float(total_budget)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_FALLBACK_BUDGET
    # NaN and infinity cannot be rendered as JSON amounts
    if not math.isfinite(budget) or budget == 0:
        return DEFAULT_FALLBACK_BUDGET
    return budget


def fallback_budget(total_budget: object) -> list[dict[str, Any]]:
    """Fixed 35/30/15/15/5 split. Priorities are not consulted."""
    budget = coerce_budget(total_budget)
    allocations = []
    for category, percentage, justification, items in _BUDGET_SPLIT:
        amount = budget * percentage / 100
        allocations.append(
            {
                "category": category,
                "amount": int(amount) if amount.is_integer() else amount,
                "percentage": percentage,
                "justification": justification,
                "items": list(items),
            }
        )
    return allocations


def fallback_vendors(vibe: str) -> list[dict[str, Any]]:
    return [
        {
            "name": "Lumina Events (AI Fallback)",
            "category": "Decoration",
            "description": f"Creative decor matching: {vibe}",
            "specialties": ["Custom Themes", "Lighting"],
            "style": "Modern & Adaptive",
            "priceRange": "$$$",
            "rating": 4.5,
            "isAIGenerated": True,
        },
        {
            "name": "Sonic Waves (AI Fallback)",
            "category": "DJ/Music",
            "description": f"High energy entertainment tuned to: {vibe}",
            "specialties": ["Live Mixing", "Genre Blending"],
            "style": "Energetic",
            "priceRange": "$$",
            "rating": 4.7,
            "isAIGenerated": True,
        },
        {
            "name": "Taste Fusion (AI Fallback)",
            "category": "Catering",
            "description": f"Exquisite flavors to complement: {vibe}",
            "specialties": ["Fusion Cuisine", "Live Stations"],
            "style": "Elegant",
            "priceRange": "$$$",
            "rating": 4.8,
            "isAIGenerated": True,
        },
    ]


def fallback_contract_analysis(raw_text: str) -> dict[str, Any]:
    """Soft degrade when the model answered but not in parseable JSON."""
    return {"riskLevel": "medium", "warnings": [], "summary": raw_text}
