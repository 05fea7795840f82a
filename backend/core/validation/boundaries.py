"""Validation at the Request Boundary

Converts a validation ``Result`` into exception-based flow at the edge of
the HTTP layer. Route handlers only ever see payloads that passed every
constraint; failures short-circuit into ``ValidationFailure`` and are
translated by the registered exception handler.
"""
from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel

from core.errors.types import Invalid, Ok, Result
from core.logging import get_logger
from .errors import ValidationFailure, ValidationMode, Violation
from .schema import validate_model

M = TypeVar("M", bound=BaseModel)

log = get_logger("validation.boundaries")


def parse_ingress(payload: M | None, *, field: str = "data",
                  mode: ValidationMode = ValidationMode.COLLECT_ALL) -> M:
    """Validate a parsed request payload and return it unchanged.

    A missing payload is reported as a single ``must not be null``
    violation under ``field``.
    """
    if payload is None:
        result: Result = Invalid((Violation(field=field, rejected_value=None,
                                            message="must not be null", constraint="not_null"),))
    else:
        result = validate_model(payload, mode=mode)

    match result:
        case Ok(value):
            log.debug("ingress_valid", schema=type(value).__name__)
            return value
        case Invalid():
            raise ValidationFailure(result)
