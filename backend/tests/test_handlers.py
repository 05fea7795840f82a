from datetime import datetime

import pytest

from core.errors import (
    Invalid,
    format_violation,
    render_value,
    request_errors_to_messages,
    to_error_envelope,
)
from core.validation import Violation


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (150, "150"),
        ("ab", "ab"),
        ("", ""),
        (datetime(2000, 1, 1, 9, 30), "2000-01-01T09:30:00"),
    ],
)
def test_render_value(value, expected):
    assert render_value(value) == expected


def test_format_violation():
    assert format_violation("password", "ab", "size must be between 1 and 12") == (
        "password : { ab } size must be between 1 and 12"
    )


def test_to_error_envelope_preserves_order():
    result = Invalid((
        Violation("password", "", "must not be blank"),
        Violation("age", 150, "must be less than or equal to 100"),
        Violation("email", "bad", "must be a well-formed email address"),
    ))
    assert to_error_envelope(result).to_wire() == {
        "result_code": "400",
        "result_message": "Bad Request",
        "error": {
            "error_message": [
                "password : {  } must not be blank",
                "age : { 150 } must be less than or equal to 100",
                "email : { bad } must be a well-formed email address",
            ]
        },
    }


def test_request_errors_strip_body_and_data_prefix():
    errors = [
        {"loc": ("body", "data", "age"), "input": "abc", "msg": "Input should be a valid integer"},
        {"loc": ("body", "data"), "input": 5, "msg": "Input should be a valid dictionary"},
        {"loc": ("body", 7), "input": {}, "msg": "JSON decode error"},
        {"loc": ("body",), "input": None, "msg": "Field required"},
    ]
    assert request_errors_to_messages(errors) == [
        "age : { abc } Input should be a valid integer",
        "data : { 5 } Input should be a valid dictionary",
        "body : { {} } JSON decode error",
        "body : { null } Field required",
    ]
