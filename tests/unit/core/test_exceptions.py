from __future__ import annotations

import pytest

from rapitapir.core.exceptions import (
    CoercionError,
    DefinitionError,
    RapiTapirError,
    SchemaValidationError,
    TypeValidationError,
    format_path,
    qualify,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ((), ""),
        (("name",), "name"),
        (("profile", "bio"), "profile.bio"),
        (("profile", "links", 2), "profile.links[2]"),
        ((0, "id"), "[0].id"),
    ],
)
def test_format_path(path: tuple, expected: str) -> None:
    assert format_path(path) == expected


def test_qualify_variants() -> None:
    assert qualify((), "boom") == "boom"
    assert qualify((3,), "boom") == "Item at index 3: boom"
    assert qualify(("profile", "bio"), "boom") == "Field 'profile.bio': boom"


def test_coercion_error_message_and_attributes() -> None:
    exc = CoercionError("abc", "Integer", "invalid literal")

    assert str(exc) == "Cannot coerce 'abc' to Integer: invalid literal"
    assert exc.value == "abc"
    assert exc.type == "Integer"
    assert exc.reason == "invalid literal"
    assert exc.path == ()
    assert exc.field is None
    assert isinstance(exc, RapiTapirError)


def test_coercion_error_without_reason() -> None:
    assert str(CoercionError(1, "Date")) == "Cannot coerce 1 to Date"


def test_prefixed_builds_outermost_first_path() -> None:
    inner = CoercionError("x", "Integer", "bad", path=(2,))

    outer = inner.prefixed("profile", "links")

    assert outer.path == ("profile", "links", 2)
    assert outer.field == "profile.links[2]"
    assert str(outer).startswith("Field 'profile.links[2]': Cannot coerce 'x'")
    assert inner.path == (2,)  # original untouched


def test_coercion_error_payload() -> None:
    exc = CoercionError("abc", "Integer", "not a number", path=("id",))

    payload = exc.to_payload()

    assert payload == {
        "error": "Type Coercion Error",
        "message": str(exc),
        "type": "Integer",
        "value": "abc",
        "reason": "not a number",
        "field": "id",
        "code": 400,
    }


def test_coercion_error_payload_repr_for_unserialisable_value() -> None:
    payload = CoercionError(object, "String", "nope").to_payload()

    assert payload["value"] == repr(object)


def test_long_values_are_truncated_in_message() -> None:
    exc = CoercionError("x" * 500, "Integer", "bad")

    assert len(str(exc)) < 200


def test_type_validation_error_lists_errors() -> None:
    exc = TypeValidationError(0, "Integer(minimum=1)", ["Value 0 is below minimum 1"])

    assert str(exc) == (
        "Validation failed for value 0 against type Integer(minimum=1):\n"
        "  - Value 0 is below minimum 1"
    )
    assert exc.errors == ["Value 0 is below minimum 1"]


def test_schema_validation_error_payload() -> None:
    exc = SchemaValidationError(["Field 'id': bad", "Field 'email': worse"])

    payload = exc.to_payload()

    assert payload["error"] == "Validation Error"
    assert payload["errors"] == ["Field 'id': bad", "Field 'email': worse"]
    assert payload["code"] == 400
    assert payload["message"].startswith("Schema validation failed:\n  - Field 'id'")


def test_definition_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        raise DefinitionError("bad shorthand")


def test_qualify_leading_index_with_deeper_path() -> None:
    assert qualify((0, "name"), "boom") == "Item at index 0: Field 'name': boom"
    assert qualify((0, 1), "boom") == "Item at index 0: Item at index 1: boom"
    assert qualify((2, "profile", "links", 0), "boom") == (
        "Item at index 2: Field 'profile.links[0]': boom"
    )


def test_coercion_error_inside_array_of_objects() -> None:
    exc = CoercionError("x", "Integer", "bad", path=(3, "id"))

    assert str(exc) == "Item at index 3: Field 'id': Cannot coerce 'x' to Integer: bad"
    assert exc.field == "[3].id"
