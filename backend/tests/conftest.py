import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from main import create_app  # noqa: E402


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def valid_payload():
    return {
        "name": "Hong Gildong",
        "nickname": "gildong",
        "password": "s3cret",
        "age": 30,
        "email": "gildong@example.com",
        "phone_number": "010-1234-5678",
        "register_at": "2099-01-01T09:00:00",
        "birth_month": "1995-04",
    }


@pytest.fixture
def post_user(client):
    def _post(data):
        return client.post("/api/user", json={"data": data})
    return _post
