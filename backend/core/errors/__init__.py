"""Error Handling System

Validation outcomes are values, not exceptions: ``Ok`` carries the
validated object, ``Invalid`` carries every violation. At the HTTP edge an
``Invalid`` becomes a ``ValidationFailure`` and the registered handlers turn
it, and every other failure, into the standard error envelope.

Usage:
    from core.errors import Ok, Invalid, to_error_envelope

    match validate_model(payload):
        case Ok(value):
            return Envelope.success(value)
        case Invalid() as result:
            return to_error_envelope(result)
"""
from .types import (
    Result,
    Ok,
    Invalid,
)

from .handlers import (
    render_value,
    format_violation,
    violations_to_messages,
    to_error_envelope,
    envelope_response,
    request_errors_to_messages,
    validation_failure_handler,
    request_validation_handler,
    http_exception_handler,
    unhandled_exception_handler,
    register_error_handlers,
)

__all__ = [
    "Result",
    "Ok",
    "Invalid",
    "render_value",
    "format_violation",
    "violations_to_messages",
    "to_error_envelope",
    "envelope_response",
    "request_errors_to_messages",
    "validation_failure_handler",
    "request_validation_handler",
    "http_exception_handler",
    "unhandled_exception_handler",
    "register_error_handlers",
]
