from datetime import datetime
from typing import Annotated

from pydantic import StrictInt

from core.validation import (
    Email,
    FutureOrPresent,
    Max,
    Min,
    NotBlank,
    NotNull,
    PhoneNumber,
    RequestSchema,
    Size,
    YearMonth,
    object_constraint,
)


def _present(value: str | None) -> bool:
    return value is not None and bool(value.strip())


class RegisterRequest(RequestSchema):
    """User registration payload.

    Constraints run in declaration order; ``name_check`` runs once every
    field constraint holds.
    """

    name: str | None = None
    nickname: str | None = None
    password: Annotated[str | None, NotBlank(), Size(min=1, max=12)] = None
    age: Annotated[StrictInt | None, NotNull(), Min(1), Max(100)] = None
    email: Annotated[str | None, Email()] = None
    phone_number: Annotated[str | None, PhoneNumber()] = None
    register_at: Annotated[datetime | None, FutureOrPresent()] = None
    birth_month: Annotated[str | None, YearMonth(pattern="yyyy-MM")] = None

    @object_constraint(field="name_check", message="name or nickname must be present")
    def name_check(self) -> bool:
        return _present(self.name) or _present(self.nickname)
