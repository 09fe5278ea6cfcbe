"""Contract risk analysis.

Unlike the planning generators this path never invents a result when the
provider fails: upstream errors propagate so the API can answer 429/500.
Only a reply that arrived but held no parseable JSON degrades, to a
"medium" risk summary carrying the model's raw text.
"""

from __future__ import annotations

import logging

from services.ai.fallbacks import fallback_contract_analysis
from services.ai.interfaces import TextGeneratorProtocol
from services.ai.outcomes import Extracted, ExtractionFailed, GenerationResult
from services.ai.prompts import contract_prompt
from services.ai.response_extractor import extract_json_outcome


logger = logging.getLogger(__name__)


async def analyze_contract(
    client: TextGeneratorProtocol, contract_text: str
) -> GenerationResult:
    """Return ``{riskLevel, warnings, summary}`` for `contract_text`.

    Raises:
        UpstreamError: when the provider call fails after retries.
    """
    raw = await client.generate_text(contract_prompt(contract_text))

    match extract_json_outcome(raw, "object"):
        case Extracted(value):
            return GenerationResult(value)
        case ExtractionFailed(error):
            logger.warning(
                "Contract analysis reply was not JSON; reporting raw summary: %s",
                error.message,
            )
            return GenerationResult(
                fallback_contract_analysis(raw),
                degraded=True,
                reason=error.error_code,
            )
    raise AssertionError("unreachable")  # pragma: no cover
