from __future__ import annotations

import uuid

import pytest

from rapitapir.types import UUID, Email, String


def test_uuid_accepts_canonical_strings() -> None:
    assert UUID().validate("123e4567-e89b-12d3-a456-426614174000").valid
    assert UUID().validate(str(uuid.uuid4())).valid
    assert UUID().validate("123E4567-E89B-12D3-A456-426614174000").valid


@pytest.mark.parametrize(
    "raw",
    [
        "not-a-uuid",
        "123e4567e89b12d3a456426614174000",
        "123e4567-e89b-62d3-a456-426614174000",  # version 6 outside 1-5
        "123e4567-e89b-12d3-c456-426614174000",  # bad variant
    ],
)
def test_uuid_rejects_malformed_strings(raw: str) -> None:
    assert UUID().validate(raw).errors == ["Invalid UUID format"]


def test_uuid_type_error() -> None:
    assert UUID().validate(5).errors == ["Expected string, got int"]


def test_uuid_coerces_uuid_objects() -> None:
    value = uuid.UUID("123e4567-e89b-12d3-a456-426614174000")

    assert UUID().coerce(value) == "123e4567-e89b-12d3-a456-426614174000"


def test_uuid_json_schema() -> None:
    schema = UUID().to_json_schema()

    assert schema["type"] == "string"
    assert schema["format"] == "uuid"
    assert schema["pattern"].startswith("^")


@pytest.mark.parametrize(
    "raw", ["user@example.com", "first.last+tag@sub.example.co", "A_B@host-name.org"]
)
def test_email_accepts_addresses(raw: str) -> None:
    assert Email().validate(raw).valid


@pytest.mark.parametrize("raw", ["user@", "@example.com", "user@example", "us er@example.com"])
def test_email_reports_single_error(raw: str) -> None:
    assert Email().validate(raw).errors == ["Invalid email format"]


def test_email_is_a_string_subtype() -> None:
    email = Email()

    assert isinstance(email, String)
    assert email.coerce(b"a@b.io") == "a@b.io"
    assert email.to_json_schema()["format"] == "email"
