from __future__ import annotations

from rapitapir import types as t
from rapitapir.types import Object
from rapitapir.types.json_schema import DIALECT, components, to_json_schema


def test_projection_of_nested_tree(profile_schema: Object) -> None:
    schema = to_json_schema(profile_schema)

    assert schema == {
        "type": "object",
        "title": "Account",
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "profile": {
                "type": "object",
                "properties": {
                    "bio": {"type": "string", "maxLength": 10},
                    "links": {
                        "type": "array",
                        "items": {"type": "string", "format": "uri"},
                    },
                },
                "required": ["bio"],
                "additionalProperties": False,
            },
        },
        "required": ["name", "profile"],
        "additionalProperties": False,
    }


def test_standalone_projection_adds_dialect(user_schema: Object) -> None:
    schema = to_json_schema(user_schema, standalone=True)

    assert schema["$schema"] == DIALECT
    assert schema["title"] == "User"
    assert "$schema" not in to_json_schema(user_schema)


def test_projection_returns_fresh_dicts(user_schema: Object) -> None:
    first = to_json_schema(user_schema)
    first["properties"]["id"]["minimum"] = 99

    assert to_json_schema(user_schema)["properties"]["id"]["minimum"] == 1


def test_components_section(user_schema: Object) -> None:
    tag = t.hash_({"label": t.string()}, title="Tag")

    section = components({"User": user_schema, "Tag": tag})

    assert list(section["schemas"]) == ["User", "Tag"]
    assert section["schemas"]["Tag"]["properties"] == {"label": {"type": "string"}}


def test_optional_is_expressed_only_by_required_list() -> None:
    schema = to_json_schema(
        t.hash_({"a": t.optional(t.integer(minimum=0)), "b": t.integer()})
    )

    assert schema["properties"]["a"] == {"type": "integer", "minimum": 0}
    assert schema["required"] == ["b"]
