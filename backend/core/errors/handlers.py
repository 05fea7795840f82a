"""FastAPI Exception Handlers

Every failure leaves the service in the same envelope shape as a success.
Constraint violations are translated by a pure function, ``to_error_envelope``;
the handlers only add logging and the HTTP status.
"""
from __future__ import annotations

from datetime import date, datetime, time
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.envelope import Envelope
from core.logging import get_logger
from .types import Invalid

if TYPE_CHECKING:
    from core.validation.errors import ValidationFailure, Violation

log = get_logger("errors.handlers")

# Location prefixes FastAPI adds in front of the payload's own field names
_BODY_PREFIXES = ("body", "data")


def render_value(value: Any) -> str:
    """Render a rejected value the way it appears in error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def format_violation(field: str, rejected_value: Any, message: str) -> str:
    """``<field> : { <rejectedValue> } <message>``"""
    return f"{field} : {{ {render_value(rejected_value)} }} {message}"


def violations_to_messages(violations: Iterable[Violation]) -> list[str]:
    return [format_violation(v.field, v.rejected_value, v.message) for v in violations]


def to_error_envelope(result: Invalid) -> Envelope:
    """Translate an Invalid result into a 400 error envelope, preserving order."""
    return Envelope.failure(violations_to_messages(result.violations), status=HTTPStatus.BAD_REQUEST)


def envelope_response(envelope: Envelope, status: HTTPStatus, *,
                      headers: dict[str, str] | None = None) -> JSONResponse:
    """Convert an error envelope to a JSONResponse, logging it on the way out."""
    log_method = log.warning if status < 500 else log.error
    log_method(
        "error_response",
        status=status.value,
        messages=envelope.error.error_message if envelope.error else [],
    )
    return JSONResponse(status_code=status.value, content=envelope.to_wire(), headers=headers)


def _field_from_location(loc: Sequence[str | int]) -> str:
    parts = list(loc)
    for prefix in _BODY_PREFIXES:
        if len(parts) > 1 and parts[0] == prefix:
            parts = parts[1:]
    if len(parts) == 1 and isinstance(parts[0], int):
        # JSON decode errors report a character offset, not a field
        return "body"
    return ".".join(str(p) for p in parts) or "body"


def request_errors_to_messages(errors: Iterable[dict[str, Any]]) -> list[str]:
    """Format pydantic error dicts in the violation message shape."""
    return [
        format_violation(_field_from_location(err.get("loc", ())), err.get("input"), err.get("msg", "Invalid value"))
        for err in errors
    ]


async def validation_failure_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    """Translate constraint violations into a 400 error envelope."""
    log.info("validation_failed", error=str(exc), violation_count=len(exc.violations))
    return envelope_response(to_error_envelope(exc.result), HTTPStatus.BAD_REQUEST)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle bodies that could not be parsed into the request model."""
    log.info("request_parse_failed", error=str(exc), error_count=len(exc.errors()))
    envelope = Envelope.failure(request_errors_to_messages(exc.errors()), status=HTTPStatus.BAD_REQUEST)
    return envelope_response(envelope, HTTPStatus.BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTP exceptions (404, 405, ...) with an error envelope."""
    try:
        status = HTTPStatus(exc.status_code)
    except ValueError:
        status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = str(exc.detail) if exc.detail else status.phrase
    return envelope_response(Envelope.failure([message], status=status), status,
                             headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Converts to a 500 envelope and logs full traceback.
    """
    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
    )
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    return envelope_response(Envelope.failure(["An unexpected error occurred"], status=status), status)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on FastAPI app.

    Usage in main.py:
        from core.errors import register_error_handlers

        app = FastAPI(...)
        register_error_handlers(app)
    """
    from core.validation.errors import ValidationFailure

    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
