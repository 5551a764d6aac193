from __future__ import annotations

from typing import Any, Dict

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from rapitapir import schema
from rapitapir import types as t
from rapitapir.api import add_exception_handlers, validated_body

pytestmark = [pytest.mark.integration]

USER = t.hash_({"id": t.integer(minimum=1), "email": t.email()}, title="User")
TAGS = t.array(t.string(min_length=1), unique_items=True)


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal app wired with the type-system error handlers."""
    app = FastAPI()
    add_exception_handlers(app)

    @app.post("/users")
    async def create_user(user: Dict[str, Any] = Depends(validated_body(USER))):
        return user

    @app.post("/tags")
    async def create_tags(tags: Any = Depends(validated_body(TAGS))):
        return {"tags": tags}

    @app.get("/check")
    async def check():
        schema.validate_or_raise({"id": 0, "email": "a@b.io"}, USER)

    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    return TestClient(test_app, raise_server_exceptions=False)


def test_valid_body_is_coerced(client: TestClient) -> None:
    response = client.post("/users", json={"id": "5", "email": "a@b.io"})

    assert response.status_code == 200
    assert response.json() == {"id": 5, "email": "a@b.io"}


def test_coercion_error_response(client: TestClient) -> None:
    response = client.post(
        "/users",
        json={"id": "abc", "email": "a@b.io"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Type Coercion Error"
    assert body["code"] == 400
    assert body["field"] == "id"
    assert body["type"] == "Integer"
    assert body["value"] == "abc"
    assert body["message"].startswith("Field 'id': Cannot coerce 'abc' to Integer")
    assert body["request_id"] == "req-123"


def test_strict_object_unexpected_field_response(client: TestClient) -> None:
    response = client.post("/users", json={"id": 1, "email": "a@b.io", "admin": True})

    assert response.status_code == 400
    body = response.json()
    assert body["reason"] == "Unexpected fields: admin. Allowed fields: id, email"
    assert body["field"] is None
    assert body["request_id"] is None


def test_validation_error_response(client: TestClient) -> None:
    response = client.post("/users", json={"id": 0, "email": "invalid"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    assert body["errors"] == [
        "Field 'id': Value 0 is below minimum 1",
        "Field 'email': Invalid email format",
    ]
    assert body["code"] == 400


def test_malformed_json_body(client: TestClient) -> None:
    response = client.post(
        "/users", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["reason"].startswith("Invalid JSON")


def test_empty_body_is_a_missing_value(client: TestClient) -> None:
    response = client.post("/users")

    assert response.status_code == 400
    assert response.json()["reason"] == "Required value cannot be None"


def test_deeply_nested_json_body(client: TestClient) -> None:
    body = ("[" * 100_000 + "]" * 100_000).encode()

    response = client.post(
        "/tags", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Type Coercion Error"
    assert response.json()["reason"] == "Maximum nesting depth exceeded"


def test_array_body(client: TestClient) -> None:
    assert client.post("/tags", json=["a", "b"]).json() == {"tags": ["a", "b"]}

    response = client.post("/tags", json=["a", "a", ""])
    assert response.status_code == 400
    assert response.json()["errors"] == [
        "Array contains duplicate items but must be unique",
        "Item at index 2: String length 0 is below minimum 1",
    ]


def test_handler_covers_errors_raised_in_endpoints(client: TestClient) -> None:
    response = client.get("/check")

    assert response.status_code == 400
    assert response.json()["errors"] == ["Field 'id': Value 0 is below minimum 1"]
