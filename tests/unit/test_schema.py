from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from rapitapir import schema
from rapitapir.core.exceptions import CoercionError, DefinitionError, SchemaValidationError
from rapitapir.types import (
    UUID,
    Array,
    Boolean,
    Date,
    DateTime,
    Email,
    Float,
    Integer,
    Object,
    String,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("string", String),
        ("integer", Integer),
        ("float", Float),
        ("boolean", Boolean),
        ("date", Date),
        ("datetime", DateTime),
        ("uuid", UUID),
        ("email", Email),
    ],
)
def test_from_definition_primitives(name: str, expected: type) -> None:
    assert type(schema.from_definition(name)) is expected
    assert type(schema.from_definition({"type": name})) is expected


def test_from_definition_nested_shorthand() -> None:
    result = schema.from_definition({"name": "string", "tags": ["string"], "home": {"city": "string"}})

    assert isinstance(result, Object)
    assert result.strict is True
    assert isinstance(result.field_types["tags"], Array)
    assert isinstance(result.field_types["tags"].item_type, String)
    assert list(result.field_types["home"].field_types) == ["city"]


def test_from_definition_passes_types_through() -> None:
    integer = Integer(minimum=1)

    assert schema.from_definition(integer) is integer
    assert type(schema.from_definition(Boolean)) is Boolean


@pytest.mark.parametrize(
    "definition",
    ["nope", {"type": "nope"}, ["string", "integer"], [], 5, None, Array],
)
def test_from_definition_rejects_unknown_definitions(definition: object) -> None:
    with pytest.raises(DefinitionError):
        schema.from_definition(definition)


def test_define_as_context_manager() -> None:
    with schema.define(title="User") as user:
        user.field("id", "integer")
        user.field("profile", {"bio": "string"})
        user.optional_field("tags", ["string"], description="Free-form labels")

    assert isinstance(user.schema, Object)
    assert user.schema.title == "User"
    assert user.schema.required_fields == ("id", "profile")
    assert user.schema.coerce({"id": "7", "profile": {"bio": "hi"}}) == {
        "id": 7,
        "profile": {"bio": "hi"},
    }
    assert user.schema.to_json_schema()["properties"]["tags"]["description"] == "Free-form labels"


def test_define_leaves_schema_unset_on_error() -> None:
    builder = schema.define()

    with pytest.raises(DefinitionError):
        with builder:
            builder.field("a", "unknown")

    assert builder.schema is None


def test_define_open_schema() -> None:
    built = schema.define(strict=False).required_field("a", "integer").build()

    assert built.coerce({"a": "1", "b": 2}) == {"a": 1, "b": 2}


def test_validate_and_coerce_delegate(user_schema: Object) -> None:
    assert schema.validate({"id": 1, "email": "a@b.io"}, user_schema).valid
    assert schema.coerce({"id": "1", "email": "a@b.io"}, user_schema) == {"id": 1, "email": "a@b.io"}


def test_coerce_logs_and_reraises(user_schema: Object) -> None:
    with capture_logs() as logs, pytest.raises(CoercionError):
        schema.coerce({"id": "x", "email": "a@b.io"}, user_schema)

    assert logs[0]["event"] == "coercion_failed"
    assert logs[0]["schema"] == "User"
    assert logs[0]["field"] == "id"


def test_validate_or_raise(user_schema: Object) -> None:
    value = {"id": 1, "email": "a@b.io"}
    assert schema.validate_or_raise(value, user_schema) is value

    with capture_logs() as logs, pytest.raises(SchemaValidationError) as exc_info:
        schema.validate_or_raise({"id": 0, "email": "invalid"}, user_schema)

    assert exc_info.value.errors == [
        "Field 'id': Value 0 is below minimum 1",
        "Field 'email': Invalid email format",
    ]
    assert logs[0]["event"] == "schema_validation_failed"
    assert logs[0]["error_count"] == 2


def test_parse_coerces_then_validates(user_schema: Object) -> None:
    assert schema.parse({"id": "2", "email": "a@b.io"}, user_schema) == {"id": 2, "email": "a@b.io"}

    with pytest.raises(SchemaValidationError):
        schema.parse({"id": "0", "email": "a@b.io"}, user_schema)
    with pytest.raises(CoercionError):
        schema.parse({"email": "a@b.io"}, user_schema)


def test_type_key_mapping_is_read_as_primitive() -> None:
    assert type(schema.from_definition({"type": "string"})) is String

    with_type_field = schema.from_definition({"type": String()})

    assert isinstance(with_type_field, Object)
    assert list(with_type_field.field_types) == ["type"]
