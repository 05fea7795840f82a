"""Declarative Validation System

Constraints are declared on request models and evaluated at the API
boundary. Every violated field is reported, never just the first.

Key Features:
- Atomic validators attached through ``Annotated`` metadata
- Cross-field rules via ``@object_constraint``
- Collect-all or fail-fast accumulation
- ``Ok`` / ``Invalid`` results instead of exceptions inside the engine

Usage:
    from typing import Annotated
    from core.validation import RequestSchema, NotBlank, Size, validate_model

    class Signup(RequestSchema):
        password: Annotated[str | None, NotBlank(), Size(1, 12)] = None

    match validate_model(Signup(password="")):
        case Ok(signup):
            ...
        case Invalid(violations):
            ...
"""

from .validators import (
    ValidationResult,
    AtomicValidator,
    And,
    all_of,
    # Presence
    NotNull,
    NotBlank,
    # Size / numeric
    Size,
    Min,
    Max,
    # Format
    Pattern,
    Email,
    PhoneNumber,
    YearMonth,
    # Temporal
    FutureOrPresent,
    EMAIL_PATTERN,
    PHONE_NUMBER_PATTERN,
)

from .errors import (
    ValidationMode,
    Violation,
    ValidationFailure,
    ViolationCollector,
)

from .schema import (
    RequestSchema,
    FieldConstraint,
    ObjectConstraint,
    ConstraintRegistry,
    object_constraint,
    registry_for,
    validate_model,
)

from .boundaries import (
    parse_ingress,
)

__all__ = [
    "ValidationResult",
    "AtomicValidator",
    "And",
    "all_of",
    "NotNull",
    "NotBlank",
    "Size",
    "Min",
    "Max",
    "Pattern",
    "Email",
    "PhoneNumber",
    "YearMonth",
    "FutureOrPresent",
    "EMAIL_PATTERN",
    "PHONE_NUMBER_PATTERN",
    "ValidationMode",
    "Violation",
    "ValidationFailure",
    "ViolationCollector",
    "RequestSchema",
    "FieldConstraint",
    "ObjectConstraint",
    "ConstraintRegistry",
    "object_constraint",
    "registry_for",
    "validate_model",
    "parse_ingress",
]
