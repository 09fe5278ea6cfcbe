"""Planning generators with deterministic fallbacks.

Every generator walks the same path: build the prompt, call the model, extract
JSON of the expected bracket kind. When the call fails (after the client's own
retries) or the reply holds no usable JSON, the generator logs a warning and
returns its static fallback marked as degraded. Callers never see an error
from here, rate limits included.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from services.ai.exceptions import ExtractionError, UpstreamError
from services.ai.fallbacks import (
    fallback_budget,
    fallback_schedule,
    fallback_theme,
    fallback_vendors,
)
from services.ai.interfaces import TextGeneratorProtocol
from services.ai.outcomes import Extracted, ExtractionFailed, GenerationResult
from services.ai.prompts import (
    budget_prompt,
    schedule_prompt,
    theme_prompt,
    vendor_recommendation_prompt,
)
from services.ai.response_extractor import BracketKind, extract_json_outcome


logger = logging.getLogger(__name__)


async def _generate_with_fallback(
    client: TextGeneratorProtocol,
    *,
    use_case: str,
    prompt: str,
    kind: BracketKind,
    fallback: Callable[[], Any],
    accept: Callable[[Any], bool] | None = None,
) -> GenerationResult:
    try:
        raw = await client.generate_text(prompt)
    except UpstreamError as exc:
        logger.warning(
            "Error generating %s (using fallback): %s", use_case, exc.message
        )
        return GenerationResult(fallback(), degraded=True, reason=exc.error_code)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error generating %s (using fallback): %s", use_case, exc)
        return GenerationResult(fallback(), degraded=True, reason="unexpected_error")

    outcome = extract_json_outcome(raw, kind)
    if isinstance(outcome, Extracted) and accept and not accept(outcome.value):
        outcome = ExtractionFailed(
            ExtractionError(f"No usable {use_case} in model output")
        )

    match outcome:
        case Extracted(value):
            return GenerationResult(value)
        case ExtractionFailed(error):
            logger.warning(
                "Error generating %s (using fallback): %s", use_case, error.message
            )
            return GenerationResult(
                fallback(), degraded=True, reason=error.error_code
            )
    raise AssertionError("unreachable")  # pragma: no cover


async def generate_schedule(
    client: TextGeneratorProtocol,
    event_type: str,
    duration_hours: int,
    activities: Sequence[str],
) -> GenerationResult:
    """Run-of-show for the event as a list of ``{time, activity, duration, notes}``."""
    return await _generate_with_fallback(
        client,
        use_case="schedule",
        prompt=schedule_prompt(event_type, duration_hours, activities),
        kind="array",
        fallback=fallback_schedule,
    )


async def generate_theme(
    client: TextGeneratorProtocol, description: str
) -> GenerationResult:
    return await _generate_with_fallback(
        client,
        use_case="theme",
        prompt=theme_prompt(description),
        kind="object",
        fallback=lambda: fallback_theme(description),
    )


async def generate_budget_allocation(
    client: TextGeneratorProtocol,
    total_budget: float | None,
    priorities: Mapping[str, str],
    event_type: str,
    guest_count: int,
) -> GenerationResult:
    """Split `total_budget` across spending categories.

    The fallback split ignores `priorities`; only the model honours them.
    """
    return await _generate_with_fallback(
        client,
        use_case="budget",
        prompt=budget_prompt(total_budget, priorities, event_type, guest_count),
        kind="array",
        fallback=lambda: fallback_budget(total_budget),
    )


def _has_vendor_objects(value: Any) -> bool:
    # An empty list, or one without any object, would leave the search with nothing
    return any(isinstance(item, dict) for item in value)


async def generate_vendor_recommendations(
    client: TextGeneratorProtocol, vibe: str
) -> GenerationResult:
    logger.info("Generating vendor recommendations for vibe (%d chars)", len(vibe))
    result = await _generate_with_fallback(
        client,
        use_case="vendor recommendations",
        prompt=vendor_recommendation_prompt(vibe),
        kind="array",
        fallback=lambda: fallback_vendors(vibe),
        accept=_has_vendor_objects,
    )
    if not result.degraded:
        logger.info("Generated %d vendors", len(result.value))
    return result
