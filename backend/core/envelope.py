"""Response Envelope

Every endpoint answers with the same wrapper:

    {"result_code": "200", "result_message": "OK", "data": {...}}
    {"result_code": "400", "result_message": "Bad Request",
     "error": {"error_message": ["age : { 150 } must be less than or equal to 100"]}}

An envelope carries either ``data`` or ``error``, never both. Build one with
``Envelope.success`` or ``Envelope.failure``; fields that were not set are
left out of the wire form.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Generic, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """Ordered, human-readable failure messages."""

    model_config = ConfigDict(frozen=True)

    error_message: list[str] = Field(default_factory=list)


class Envelope(BaseModel, Generic[T]):
    """Uniform success/error wrapper."""

    model_config = ConfigDict(frozen=True)

    result_code: str | None = None
    result_message: str | None = None
    data: T | None = None
    error: ErrorDetail | None = None

    @model_validator(mode="after")
    def check_data_or_error(self) -> Envelope[T]:
        if self.data is not None and self.error is not None:
            raise ValueError("an envelope carries either data or error, not both")
        return self

    @classmethod
    def success(cls, data: T, status: HTTPStatus = HTTPStatus.OK) -> Envelope[T]:
        return cls(result_code=str(status.value), result_message=status.phrase, data=data)

    @classmethod
    def failure(cls, messages: Iterable[str], status: HTTPStatus = HTTPStatus.BAD_REQUEST) -> Envelope[T]:
        return cls(
            result_code=str(status.value),
            result_message=status.phrase,
            error=ErrorDetail(error_message=list(messages)),
        )

    @property
    def is_success(self) -> bool:
        return self.error is None

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with unset fields omitted."""
        return self.model_dump(mode="json", exclude_unset=True)
