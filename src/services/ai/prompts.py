"""Prompt templates for the planning generators and contract analysis."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence


def schedule_prompt(event_type: str, duration_hours: int, activities: Sequence[str]) -> str:
    return f"""Create a detailed "Run of Show" schedule for a {event_type} event.

Duration: {duration_hours} hours
Key Activities: {", ".join(activities)}

Generate a time-stamped schedule ensuring:
- Logical flow of activities
- Appropriate buffer times
- Meal times at reasonable hours
- Setup and breakdown time
- Breaks between intensive activities

Return a JSON array with this structure:
[
  {{
    "time": "HH:MM AM/PM",
    "activity": "Activity name",
    "duration": "X minutes",
    "notes": "Any special notes"
  }}
]

IMPORTANT: Return ONLY the JSON array. No other text."""


def theme_prompt(description: str) -> str:
    return f"""Create a detailed visual theme and moodboard for an event with the following description:
"{description}"

Provide a JSON response with:
{{
  "colorPalette": ["#hex1", "#hex2", "#hex3", "#hex4", "#hex5"],
  "visualDescription": "Detailed description of the visual aesthetic",
  "decorElements": ["element1", "element2", ...],
  "lightingStyle": "Description of lighting",
  "atmosphere": "Overall mood and feeling"
}}

IMPORTANT: Return ONLY the JSON object. No other text."""


def _format_amount(amount: float | None) -> str:
    if amount is None:
        return "unspecified"
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def budget_prompt(
    total_budget: float | None,
    priorities: Mapping[str, str],
    event_type: str,
    guest_count: int,
) -> str:
    return f"""Create a smart budget allocation for a {event_type} event with {guest_count} attendees.

Total Budget: ₹{_format_amount(total_budget)}
Guest Count: {guest_count} people
Priorities: {json.dumps(dict(priorities))}

Based on industry standards and the scale of {guest_count} people, allocate the budget across these categories:
- Venue
- Catering/Food (Consider per-head cost for {guest_count} people)
- Entertainment (DJ/Music)
- Decoration
- Photography/Videography
- Sound & Lighting
- Miscellaneous/Contingency

Return a JSON array:
[
  {{
    "category": "Category name",
    "amount": number,
    "percentage": number,
    "justification": "Why this allocation based on {guest_count} people and priorities",
    "items": ["Specific item 1", "Specific item 2", "Specific item 3"]
  }}
]

Ensure the total adds up to the budget and respects the stated priorities.

IMPORTANT: Return ONLY the JSON array. No other text."""


def vendor_recommendation_prompt(vibe: str) -> str:
    return f"""Based on the following event "vibe" or description, generate 3 sample vendors that would be perfect for this event.
Description: "{vibe}"

Return a JSON array of 3 vendor objects with this structure:
[
  {{
    "name": "Creative Vendor Name",
    "category": "Catering|DJ/Music|Photography|Decoration|Sound & Lighting",
    "description": "Short catchy description matching the vibe",
    "specialties": ["Specialty 1", "Specialty 2"],
    "style": "Brief style description",
    "priceRange": "$|$$|$$$|$$$$",
    "rating": number (4.0-5.0),
    "phoneNumber": "+91 9xxx-xxxxx",
    "highlights": ["Highlight 1", "Highlight 2"],
    "teamInfo": "Brief background about the team or owner",
    "personalDetails": {{ "yearsExp": number, "location": "City, Service Area", "teamSize": number }},
    "isAIGenerated": true
  }}
]

IMPORTANT: Return ONLY the JSON array. No other text."""


def contract_prompt(contract_text: str) -> str:
    return f"""You are a legal contract analyzer. Analyze the following contract and identify any risky, unfair, or non-standard clauses. Focus on:
- Cancellation policies
- Hidden fees or overtime charges
- Refund policies
- Liability clauses
- Payment terms

Contract:
{contract_text}

Provide a JSON response with the following structure:
{{
  "riskLevel": "low|medium|high",
  "warnings": [
    {{
      "clause": "Clause reference",
      "issue": "Description of the issue",
      "severity": "low|medium|high"
    }}
  ],
  "summary": "Overall assessment"
}}

IMPORTANT: Return ONLY the JSON object. No other text."""
