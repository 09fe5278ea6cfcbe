"""Contract analysis endpoint.

Unlike the planning routes, provider failures surface here: throttling
becomes 429 ``{error, retryAfter?}`` so the browser can lock its retry
button, and any other upstream failure becomes 500 ``{error}``.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.v1.responses import generated_response
from core.exceptions import EmptyDocumentError
from dependencies.ai import GeminiClientDep
from schemas.api import ErrorMessage
from services.ai.contract_analysis import analyze_contract
from services.ai.exceptions import UpstreamError
from services.ai.rate_limit import upstream_error_response
from services.document_text import NO_FILE_MESSAGE, extract_contract_text


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.post(
    "/analyze",
    responses={
        400: {"model": ErrorMessage},
        429: {"model": ErrorMessage},
        500: {"model": ErrorMessage},
    },
    summary="Flag risky clauses in an uploaded contract",
)
async def analyze_uploaded_contract(
    client: GeminiClientDep,
    contract: Annotated[UploadFile | None, File(description="PDF or plain-text contract")] = None,
) -> JSONResponse:
    if contract is None:
        raise EmptyDocumentError(NO_FILE_MESSAGE)

    data = await contract.read()
    logger.info(
        "Analyzing contract: %s (%s, %d bytes)",
        contract.filename,
        contract.content_type,
        len(data),
    )
    # pypdf is synchronous
    text = await run_in_threadpool(
        extract_contract_text, contract.filename, contract.content_type, data
    )

    try:
        result = await analyze_contract(client, text)
    except UpstreamError as e:
        logger.error("Contract analysis failed: %s", e)
        return upstream_error_response(e)

    logger.info("Contract analysis complete")
    return generated_response(
        result.value, degraded=result.degraded, reason=result.reason
    )
