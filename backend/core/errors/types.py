"""Result Types for Validation Outcomes

A validation run produces exactly one of two values: ``Ok`` wrapping the
validated object, or ``Invalid`` wrapping every violation that was found.
Callers branch on the variant instead of catching exceptions, which keeps
the failure translator a pure function.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, NoReturn, TypeVar, Union, final

if TYPE_CHECKING:
    from core.validation.errors import Violation

T = TypeVar("T")


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant: the value passed every constraint."""
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@final
@dataclass(frozen=True, slots=True)
class Invalid:
    """Failure variant: the ordered violations of a rejected value."""
    violations: tuple[Violation, ...]

    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Invalid: {self}")

    def __len__(self) -> int:
        return len(self.violations)

    def __str__(self) -> str:
        if len(self.violations) == 1:
            v = self.violations[0]
            return f"Validation failed for field '{v.field}': {v.message}"
        details = "; ".join(f"[{v.field}] {v.message}" for v in self.violations)
        return f"Validation failed with {len(self.violations)} errors: {details}"


# Type alias for validation outcomes
Result = Union[Ok[T], Invalid]
