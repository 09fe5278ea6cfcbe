"""Error bodies, correlation ids and log setup for the EventMinds API.

Routes answer their own ``{error}`` bodies. What reaches this module is a
`DomainError` raised before any model call (a bare 400 ``{error}``) or
something no route caught, which becomes an `ErrorResponse` envelope tagged
with the request's correlation id. Diagnostics in that envelope are
filtered per environment by `core.security_config`.
"""

import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from core.config import get_settings
from core.exceptions import DocumentValidationError, DomainError, MissingQueryError
from core.security_config import get_allowed_error_fields, is_sensitive_key
from schemas.api import ErrorMessage, ErrorResponse


_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

REDACTED = "[REDACTED]"

# Used when a domain error is raised without its own message
DOMAIN_DEFAULT_MESSAGES: dict[type[DomainError], str] = {
    MissingQueryError: "Query is required",
    DocumentValidationError: "The uploaded document could not be used",
}

# exception type -> (status, envelope type, message)
DATABASE_ERRORS: dict[type[Exception], tuple[int, str, str]] = {
    IntegrityError: (409, "integrity_error", "The vendor record conflicts with an existing one"),
    OperationalError: (503, "database_unavailable", "The vendor store is unavailable"),
}


def get_correlation_id() -> str:
    """Correlation id of the current request, minted on first use outside one."""
    correlation_id = _correlation_id_var.get()
    if not correlation_id:
        correlation_id = str(uuid.uuid4())
        _correlation_id_var.set(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id_var.set(correlation_id)


def redact(value: Any) -> Any:
    """Copy `value`, replacing what sits under a sensitive key at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if is_sensitive_key(str(key)) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [redact(item) for item in value]
    return value


class StructuredLogger:
    """Prefixes the correlation id and attaches redacted keyword fields.

    The fields travel as ``extra`` so the production `JsonFormatter` emits
    them as JSON keys next to the message.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _log(
        self, level: int, message: str, fields: dict[str, Any], exc_info: bool = False
    ) -> None:
        correlation_id = get_correlation_id()
        self.logger.log(
            level,
            f"[{correlation_id}] {message}",
            extra={"correlation_id": correlation_id, "fields": redact(fields)},
            exc_info=exc_info,
        )

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields, exc_info=True)


structured_logger = StructuredLogger(__name__)


class ExceptionNormalizationMiddleware(BaseHTTPMiddleware):
    """Catch any uncaught Exception and delegate to global_exception_handler."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001
            return await global_exception_handler(request, exc)


def error_envelope(
    status_code: int,
    error_type: str,
    message: str,
    *,
    environment: str,
    **diagnostics: Any,
) -> JSONResponse:
    """Render an `ErrorResponse`, keeping only the diagnostics `environment` allows."""
    allowed = get_allowed_error_fields(environment)
    error_body: dict[str, Any] = {
        "correlation_id": get_correlation_id(),
        "type": error_type,
    }
    for name, value in diagnostics.items():
        if name in allowed and value is not None:
            error_body[name] = value

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, error=error_body).model_dump(),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer anything the routes did not catch with an `ErrorResponse` envelope.

    A dropped database connection is a 503 and a conflicting vendor row a
    409; everything else is a 500 whose traceback only leaves the server
    outside production.
    """
    environment = get_settings().ENVIRONMENT

    if isinstance(exc, StarletteHTTPException):
        return error_envelope(
            exc.status_code,
            "http_error",
            "An HTTP error occurred",
            environment=environment,
            details={"detail": exc.detail},
            exception_type=exc.__class__.__name__,
        )

    if isinstance(exc, ValidationError | RequestValidationError):
        errors = exc.errors()
        structured_logger.warning("Validation error", validation_errors=errors)
        return error_envelope(
            422,
            "validation_error",
            "Invalid request data provided",
            environment=environment,
            validation_errors=errors,
        )

    for exc_type, (status_code, error_type, message) in DATABASE_ERRORS.items():
        if isinstance(exc, exc_type):
            structured_logger.error(message, error=str(getattr(exc, "orig", exc)))
            return error_envelope(
                status_code, error_type, message, environment=environment
            )

    structured_logger.exception(
        "Unhandled exception", exception_type=exc.__class__.__name__
    )
    return error_envelope(
        500,
        "internal_server_error",
        "An internal error occurred",
        environment=environment,
        exception_type=exc.__class__.__name__,
        traceback="".join(traceback.format_exception(exc)).strip(),
    )


def _domain_message(exc: DomainError) -> str:
    if str(exc):
        return str(exc)
    for exc_type, message in DOMAIN_DEFAULT_MESSAGES.items():
        if isinstance(exc, exc_type):
            return message
    return "Invalid request"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Reject a request the domain refused with a 400 ``{error}`` body.

    Covers a vendor search without a query and contract uploads that are
    empty, unreadable or of the wrong type. These never reach the model.
    """
    structured_logger.warning("Domain error", error_type=exc.__class__.__name__)
    return JSONResponse(
        status_code=400,
        content=ErrorMessage(error=_domain_message(exc)).model_dump(exclude_none=True),
    )


def setup_logging() -> None:
    """Configure root logging once: JSON lines in production, plain text elsewhere."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter: logging.Formatter
    if settings.ENVIRONMENT == "production":
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    # httpx logs every request line at INFO; retries are logged by the caller
    logging.getLogger("httpx").setLevel(logging.WARNING)
    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
