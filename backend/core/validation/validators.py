"""Compositional Validator System

Atomic validators are small frozen dataclasses attached to model fields via
``typing.Annotated`` metadata. Each one checks a single constraint and
returns a ``ValidationResult``; validators combine with ``&`` into an
``And`` chain that stops at the first failing link.

Null handling follows the bean-validation convention: ``None`` satisfies
every constraint except ``NotNull`` and ``NotBlank``, so optional fields are
only checked when a value is present.

Features:
- Fixed, deterministic default messages
- Per-instance message overrides
- Compiled regex caching
- Injectable clock for temporal constraints
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from collections.abc import Sized
from typing import Any, Callable

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PHONE_NUMBER_PATTERN = r"^\d{2,3}-\d{3,4}-\d{4}$"

# Java-style date pattern tokens -> (strptime directive, regex)
_DATE_TOKENS: dict[str, tuple[str, str]] = {
    "yyyy": ("%Y", r"\d{4}"),
    "MM": ("%m", r"\d{2}"),
    "dd": ("%d", r"\d{2}"),
}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a single constraint check."""
    is_valid: bool
    error_message: str | None = None
    constraint: str | None = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, *, constraint: str | None = None) -> ValidationResult:
        return cls(is_valid=False, error_message=message, constraint=constraint)


class AtomicValidator(ABC):
    """Base class for atomic validators.

    Validators are immutable and composable:
    - & (AND): both must pass, evaluation stops at the first failure
    """

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Short constraint identifier, e.g. ``size[1,12]``."""

    def __call__(self, value: Any) -> ValidationResult: return self.validate(value)

    def __and__(self, other: AtomicValidator) -> And: return And(self, other)

    def _fail(self, message: str) -> ValidationResult:
        return ValidationResult.invalid(message, constraint=self.constraint_name)

    def _wrong_type(self, value: Any, expected: str) -> ValidationResult:
        return ValidationResult.invalid(
            f"expected {expected}, got {type(value).__name__}",
            constraint=self.constraint_name,
        )


# ============================================================================
# Presence Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NotNull(AtomicValidator):
    """Value must be present."""
    message: str = "must not be null"

    @property
    def constraint_name(self) -> str:
        return "not_null"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return self._fail(self.message)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class NotBlank(AtomicValidator):
    """String must be present and contain at least one non-whitespace character."""
    message: str = "must not be blank"

    @property
    def constraint_name(self) -> str:
        return "not_blank"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return self._fail(self.message)
        if not isinstance(value, str):
            return self._wrong_type(value, "string")
        if not value.strip():
            return self._fail(self.message)
        return ValidationResult.valid()


# ============================================================================
# Size / Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Size(AtomicValidator):
    """Length of a string or collection must fall within [min, max]."""
    min: int = 0
    max: int | None = None
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"size[{self.min},{self.max if self.max is not None else ''}]"

    @property
    def default_message(self) -> str:
        if self.max is None:
            return f"size must be at least {self.min}"
        return f"size must be between {self.min} and {self.max}"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()
        if not isinstance(value, Sized):
            return self._wrong_type(value, "string or collection")

        length = len(value)
        if length < self.min or (self.max is not None and length > self.max):
            return self._fail(self.message or self.default_message)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class Min(AtomicValidator):
    """Number must be greater than or equal to ``value``."""
    value: int | float
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"min[{self.value}]"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return self._wrong_type(value, "number")
        if value < self.value:
            return self._fail(self.message or f"must be greater than or equal to {self.value}")
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class Max(AtomicValidator):
    """Number must be less than or equal to ``value``."""
    value: int | float
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"max[{self.value}]"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return self._wrong_type(value, "number")
        if value > self.value:
            return self._fail(self.message or f"must be less than or equal to {self.value}")
        return ValidationResult.valid()


# ============================================================================
# Format Validators
# ============================================================================

@dataclass(frozen=True)
class Pattern(AtomicValidator):
    """Whole string must match a regular expression."""
    regexp: str
    message: str | None = None
    flags: int = 0
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.regexp, self.flags))

    @property
    def constraint_name(self) -> str:
        return "pattern"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()
        if not isinstance(value, str):
            return self._wrong_type(value, "string")
        if not self._compiled.fullmatch(value):
            return self._fail(self.message or f'must match "{self.regexp}"')
        return ValidationResult.valid()


@dataclass(frozen=True)
class Email(Pattern):
    """Well-formed email address. Empty strings are accepted."""
    regexp: str = EMAIL_PATTERN
    message: str | None = "must be a well-formed email address"

    @property
    def constraint_name(self) -> str:
        return "email"

    def validate(self, value: Any) -> ValidationResult:
        if value == "":
            return ValidationResult.valid()
        return Pattern.validate(self, value)


@dataclass(frozen=True)
class PhoneNumber(Pattern):
    """Dash-separated phone number, e.g. ``010-1234-5678``."""
    regexp: str = PHONE_NUMBER_PATTERN
    message: str | None = "must be a valid phone number (e.g. 010-1234-5678)"

    @property
    def constraint_name(self) -> str:
        return "phone_number"


@dataclass(frozen=True)
class YearMonth(AtomicValidator):
    """String must be a real calendar month in the given pattern (default ``yyyy-MM``)."""
    pattern: str = "yyyy-MM"
    message: str | None = None
    _regex: re.Pattern = field(init=False, repr=False, compare=False)
    _strptime: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        regex, directive = re.escape(self.pattern), self.pattern
        for token, (strp, rx) in _DATE_TOKENS.items():
            regex = regex.replace(token, rx)
            directive = directive.replace(token, strp)
        if "%d" not in directive:
            directive += "|%d"
        object.__setattr__(self, "_regex", re.compile(regex))
        object.__setattr__(self, "_strptime", directive)

    @property
    def constraint_name(self) -> str:
        return f"year_month[{self.pattern}]"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()
        if not isinstance(value, str):
            return self._wrong_type(value, "string")

        message = self.message or f"must match the year-month pattern {self.pattern}"
        if not self._regex.fullmatch(value):
            return self._fail(message)
        candidate = value if "|" not in self._strptime else f"{value}|01"
        try:
            datetime.strptime(candidate, self._strptime)
        except ValueError:
            return self._fail(message)
        return ValidationResult.valid()


# ============================================================================
# Temporal Validators
# ============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FutureOrPresent(AtomicValidator):
    """Date or datetime must not lie in the past.

    Naive datetimes are compared against local wall-clock time, aware ones
    against the current instant.
    """
    message: str = "must be a date in the present or in the future"
    clock: Callable[[], datetime] = _utcnow

    @property
    def constraint_name(self) -> str:
        return "future_or_present"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.valid()

        now = self.clock()
        if isinstance(value, datetime):
            reference = now.astimezone().replace(tzinfo=None) if value.tzinfo is None else now
            # Truncate to whole seconds so a value of "now" sent by the client still passes
            if value < reference.replace(microsecond=0):
                return self._fail(self.message)
            return ValidationResult.valid()
        if isinstance(value, date):
            if value < now.astimezone().date():
                return self._fail(self.message)
            return ValidationResult.valid()
        return self._wrong_type(value, "date or datetime")


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class And(AtomicValidator):
    """Both validators must pass. Short-circuits on first failure."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"({self.left.constraint_name} & {self.right.constraint_name})"

    def validate(self, value: Any) -> ValidationResult:
        if not (result := self.left.validate(value)).is_valid:
            return result
        return self.right.validate(value)


def all_of(*validators: AtomicValidator) -> AtomicValidator:
    """Combine validators with AND, evaluated in the order given."""
    if not validators:
        raise ValueError("all_of requires at least one validator")
    result = validators[0]
    for v in validators[1:]:
        result = result & v
    return result
