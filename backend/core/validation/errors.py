"""Violation and Failure Types

A ``Violation`` names one failed constraint: the field, the value that was
rejected, and a human-readable message. Violations are accumulated by a
``ViolationCollector`` in either fail-fast or collect-all mode, and surface to
the HTTP layer as a ``ValidationFailure`` exception.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.errors.types import Invalid, Ok, Result


class ValidationMode(str, Enum):
    """Violation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True, slots=True)
class Violation:
    """A single failed constraint."""
    field: str
    rejected_value: Any
    message: str
    constraint: str = "custom"


class ValidationFailure(Exception):
    """Raised at the request boundary when a payload fails its constraints.

    Wraps the ``Invalid`` result so the registered exception handler can
    translate it without re-running validation.
    """

    def __init__(self, result: Invalid):
        self.result = result
        super().__init__(str(result))

    @property
    def violations(self) -> tuple[Violation, ...]:
        return self.result.violations


@dataclass
class ViolationCollector:
    """Accumulates violations for one validation run.

    In FAIL_FAST mode the collector stops accepting violations after the
    first one; ``add`` returns False once the run should stop.
    """
    mode: ValidationMode = ValidationMode.COLLECT_ALL
    _violations: list[Violation] = field(default_factory=list)

    def add(self, violation: Violation) -> bool:
        if self.mode == ValidationMode.FAIL_FAST and self._violations:
            return False
        self._violations.append(violation)
        return self.mode == ValidationMode.COLLECT_ALL

    @property
    def has_violations(self) -> bool:
        return bool(self._violations)

    @property
    def violations(self) -> tuple[Violation, ...]:
        return tuple(self._violations)

    def result(self, value: Any) -> Result:
        """Close the run: ``Ok(value)`` if clean, ``Invalid`` otherwise."""
        if self._violations:
            return Invalid(self.violations)
        return Ok(value)
