"""Declarative Constraint Registry

Models declare their constraints next to their fields with ``Annotated``
metadata, and their cross-field rules as decorated methods:

    class Signup(RequestSchema):
        password: Annotated[str | None, NotBlank(), Size(1, 12)] = None
        age: Annotated[int | None, NotNull(), Min(1), Max(100)] = None

        @object_constraint(field="password_check", message="...")
        def password_check(self) -> bool:
            ...

Pydantic only parses shape and types; ``validate_model`` reads the registry
and runs the constraints:

1. Field phase: every field is checked in declaration order. The validators
   of one field form an AND chain, so a field reports at most one violation.
2. Object phase: runs only when the field phase is clean, and reports every
   failing object constraint in declaration order.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ConfigDict

from core.errors.types import Result
from .errors import ValidationMode, Violation, ViolationCollector
from .validators import AtomicValidator, all_of

M = TypeVar("M", bound=BaseModel)

_OBJECT_CONSTRAINT_ATTR = "__object_constraint__"


@dataclass(frozen=True, slots=True)
class FieldConstraint:
    """Validators registered for one model field."""
    field: str
    validator: AtomicValidator


@dataclass(frozen=True, slots=True)
class ObjectConstraint:
    """A cross-field rule: a predicate over the whole model."""
    field: str
    message: str
    predicate: Callable[[Any], bool]

    def check(self, instance: Any) -> Violation | None:
        if passed := bool(self.predicate(instance)):
            return None
        return Violation(field=self.field, rejected_value=passed, message=self.message, constraint="assert_true")


@dataclass(frozen=True, slots=True)
class ConstraintRegistry:
    """Ordered field and object constraints of one model class."""
    fields: tuple[FieldConstraint, ...]
    objects: tuple[ObjectConstraint, ...]

    def __len__(self) -> int:
        return len(self.fields) + len(self.objects)


def object_constraint(*, field: str, message: str) -> Callable[[Callable[[Any], bool]], Callable[[Any], bool]]:
    """Mark a model method as a cross-field rule.

    The method takes no arguments and returns True when the rule holds.
    ``field`` is the name the violation is reported under.
    """
    def decorator(func: Callable[[Any], bool]) -> Callable[[Any], bool]:
        setattr(func, _OBJECT_CONSTRAINT_ATTR, (field, message))
        return func
    return decorator


@lru_cache(maxsize=None)
def registry_for(model: type[BaseModel]) -> ConstraintRegistry:
    """Collect constraints from a model class in declaration order.

    Built once per class.
    """
    fields = []
    for name, info in model.model_fields.items():
        validators = [m for m in info.metadata if isinstance(m, AtomicValidator)]
        if validators:
            fields.append(FieldConstraint(field=name, validator=all_of(*validators)))

    # Base classes first; an override keeps the position of the rule it replaces
    rules: dict[str, ObjectConstraint] = {}
    for klass in reversed(model.__mro__):
        if not issubclass(klass, BaseModel) or klass is BaseModel:
            continue
        for attr, member in vars(klass).items():
            if (meta := getattr(member, _OBJECT_CONSTRAINT_ATTR, None)) is not None:
                field, message = meta
                rules[attr] = ObjectConstraint(field=field, message=message, predicate=member)

    return ConstraintRegistry(fields=tuple(fields), objects=tuple(rules.values()))


def validate_model(instance: M, *, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Result:
    """Run the registered constraints of ``instance``.

    Returns ``Ok(instance)`` when every constraint holds, ``Invalid`` with
    the ordered violations otherwise.
    """
    registry = registry_for(type(instance))
    collector = ViolationCollector(mode=mode)

    for constraint in registry.fields:
        value = getattr(instance, constraint.field)
        result = constraint.validator.validate(value)
        if result.is_valid:
            continue
        violation = Violation(
            field=constraint.field,
            rejected_value=value,
            message=result.error_message or "Validation failed",
            constraint=result.constraint or constraint.validator.constraint_name,
        )
        if not collector.add(violation):
            return collector.result(instance)

    if collector.has_violations:
        return collector.result(instance)

    for constraint in registry.objects:
        if (violation := constraint.check(instance)) is not None and not collector.add(violation):
            break

    return collector.result(instance)


class RequestSchema(BaseModel):
    """Base schema for API request bodies.

    Lax type parsing (JSON strings become datetimes), unknown keys ignored,
    immutable once parsed. Constraint checking is left to ``validate_model``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    @classmethod
    def constraints(cls) -> ConstraintRegistry:
        return registry_for(cls)
