import pytest
from fastapi.testclient import TestClient

from main import create_app


def error_messages(response):
    return response.json()["error"]["error_message"]


def test_valid_request_is_echoed(post_user, valid_payload):
    response = post_user(valid_payload)

    assert response.status_code == 200
    assert response.json() == {
        "result_code": "200",
        "result_message": "OK",
        "data": valid_payload,
    }


def test_partial_valid_request_echoes_only_submitted_fields(post_user):
    payload = {"nickname": "gildong", "password": "pw", "age": 1}
    response = post_user(payload)

    assert response.status_code == 200
    assert response.json()["data"] == payload


@pytest.mark.parametrize(
    "field, expected",
    [
        ("password", "password : { null } must not be blank"),
        ("age", "age : { null } must not be null"),
    ],
)
def test_missing_required_field_reports_exactly_one_violation(post_user, valid_payload, field, expected):
    del valid_payload[field]
    response = post_user(valid_payload)

    assert response.status_code == 400
    assert error_messages(response) == [expected]


def test_blank_password_reports_first_failure_only(post_user, valid_payload):
    valid_payload["password"] = ""
    response = post_user(valid_payload)

    assert error_messages(response) == ["password : {  } must not be blank"]


def test_long_password(post_user, valid_payload):
    valid_payload["password"] = "abcdefghijklm"
    response = post_user(valid_payload)

    assert error_messages(response) == ["password : { abcdefghijklm } size must be between 1 and 12"]


@pytest.mark.parametrize(
    "age, message",
    [
        (0, "age : { 0 } must be greater than or equal to 1"),
        (-5, "age : { -5 } must be greater than or equal to 1"),
        (101, "age : { 101 } must be less than or equal to 100"),
        (150, "age : { 150 } must be less than or equal to 100"),
    ],
)
def test_age_out_of_range(post_user, valid_payload, age, message):
    valid_payload["age"] = age
    response = post_user(valid_payload)

    assert response.status_code == 400
    assert error_messages(response) == [message]


@pytest.mark.parametrize("age", [1, 100])
def test_age_bounds_are_inclusive(post_user, valid_payload, age):
    valid_payload["age"] = age
    assert post_user(valid_payload).status_code == 200


@pytest.mark.parametrize("email", ["bad", "user@", "user@example"])
def test_invalid_email(post_user, valid_payload, email):
    valid_payload["email"] = email
    response = post_user(valid_payload)

    assert error_messages(response) == [f"email : {{ {email} }} must be a well-formed email address"]


def test_invalid_phone_number(post_user, valid_payload):
    valid_payload["phone_number"] = "01012345678"
    response = post_user(valid_payload)

    assert error_messages(response) == [
        "phone_number : { 01012345678 } must be a valid phone number (e.g. 010-1234-5678)"
    ]


def test_past_register_at(post_user, valid_payload):
    valid_payload["register_at"] = "2000-01-01T00:00:00"
    response = post_user(valid_payload)

    assert error_messages(response) == [
        "register_at : { 2000-01-01T00:00:00 } must be a date in the present or in the future"
    ]


@pytest.mark.parametrize("birth_month", ["1995-13", "1995-4", "1995/04"])
def test_invalid_birth_month(post_user, valid_payload, birth_month):
    valid_payload["birth_month"] = birth_month
    response = post_user(valid_payload)

    assert error_messages(response) == [
        f"birth_month : {{ {birth_month} }} must match the year-month pattern yyyy-MM"
    ]


@pytest.mark.parametrize(
    "names",
    [
        {},
        {"name": "", "nickname": ""},
        {"name": "   ", "nickname": None},
    ],
)
def test_name_and_nickname_both_blank(post_user, valid_payload, names):
    del valid_payload["name"], valid_payload["nickname"]
    valid_payload.update(names)
    response = post_user(valid_payload)

    assert response.status_code == 400
    assert error_messages(response) == ["name_check : { false } name or nickname must be present"]


@pytest.mark.parametrize(
    "names",
    [
        {"name": "kim"},
        {"nickname": "kim"},
        {"name": "kim", "nickname": " "},
        {"name": None, "nickname": "kim"},
    ],
)
def test_either_name_satisfies_cross_field_rule(post_user, valid_payload, names):
    del valid_payload["name"], valid_payload["nickname"]
    valid_payload.update(names)

    assert post_user(valid_payload).status_code == 200


def test_every_violated_field_is_reported_in_declaration_order(client):
    response = client.post("/api/user", json={"data": {"password": "", "age": 150, "email": "bad"}})

    assert response.status_code == 400
    body = response.json()
    assert body["result_code"] == "400"
    assert body["result_message"] == "Bad Request"
    assert "data" not in body
    assert body["error"]["error_message"] == [
        "password : {  } must not be blank",
        "age : { 150 } must be less than or equal to 100",
        "email : { bad } must be a well-formed email address",
    ]


def test_error_messages_are_deterministic(post_user):
    payload = {"password": "", "age": 0, "email": "x", "phone_number": "1", "birth_month": "99"}
    first = post_user(payload)
    second = post_user(payload)

    assert first.content == second.content
    assert len(error_messages(first)) == 5


def test_missing_data_is_a_violation(client):
    response = client.post("/api/user", json={})

    assert response.status_code == 400
    assert error_messages(response) == ["data : { null } must not be null"]


def test_wrong_type_is_reported_in_envelope(post_user, valid_payload):
    valid_payload["age"] = "abc"
    response = post_user(valid_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["result_code"] == "400"
    [message] = body["error"]["error_message"]
    assert message.startswith("age : { abc } ")


def test_boolean_age_is_rejected_not_coerced(post_user, valid_payload):
    valid_payload["age"] = True
    response = post_user(valid_payload)

    assert response.status_code == 400
    assert error_messages(response) == ["age : { true } Input should be a valid integer"]


@pytest.mark.parametrize("age", ["30", 30.0])
def test_age_must_be_a_json_integer(post_user, valid_payload, age):
    valid_payload["age"] = age
    response = post_user(valid_payload)

    assert response.status_code == 400
    [message] = error_messages(response)
    assert message.startswith("age : { ")


def test_register_at_is_echoed_in_iso_form(post_user, valid_payload):
    valid_payload["register_at"] = "2099-01-01 09:00:00"
    response = post_user(valid_payload)

    assert response.status_code == 200
    assert response.json()["data"]["register_at"] == "2099-01-01T09:00:00"


def test_malformed_json_is_reported_in_envelope(client):
    response = client.post(
        "/api/user",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    [message] = error_messages(response)
    assert message.startswith("body : ")


def test_envelope_with_data_and_error_is_rejected(client, valid_payload):
    response = client.post(
        "/api/user",
        json={"data": valid_payload, "error": {"error_message": ["x"]}},
    )

    assert response.status_code == 400
    assert response.json()["result_code"] == "400"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {
        "result_code": "404",
        "result_message": "Not Found",
        "error": {"error_message": ["Not Found"]},
    }


def test_wrong_method_uses_envelope(client):
    response = client.get("/api/user")

    assert response.status_code == 405
    assert response.json()["result_message"] == "Method Not Allowed"


def test_unhandled_exception_uses_envelope():
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "result_code": "500",
        "result_message": "Internal Server Error",
        "error": {"error_message": ["An unexpected error occurred"]},
    }


def test_correlation_id_is_echoed(client, valid_payload):
    response = client.post(
        "/api/user",
        json={"data": valid_payload},
        headers={"X-Correlation-ID": "abc12345"},
    )

    assert response.headers["X-Correlation-ID"] == "abc12345"


def test_correlation_id_is_generated(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "0.1.0"}
    assert len(response.headers["X-Correlation-ID"]) == 8
