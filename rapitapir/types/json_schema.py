"""
JSON-Schema projector

Functional entry points over ``Type.to_json_schema``.  The projection is pure
and loss-tolerant: constraints without a JSON-Schema counterpart are dropped,
and optionality is carried only by the parent object's ``required`` list.
"""

from __future__ import annotations

from typing import Any, Dict, Final, Mapping

from .base import Type

__all__: list[str] = ["DIALECT", "to_json_schema", "components"]

DIALECT: Final[str] = "https://json-schema.org/draft/2020-12/schema"


def to_json_schema(type_: Type, *, standalone: bool = False) -> Dict[str, Any]:
    """
    Project *type_* into a JSON-Schema descriptor.

    Args:
        type_: Root of the type tree
        standalone: Add the ``$schema`` dialect key so the result can be
            published as its own document

    Returns:
        A fresh dict; callers may mutate it freely
    """
    schema = type_.to_json_schema()
    if standalone:
        return {"$schema": DIALECT, **schema}
    return schema


def components(schemas: Mapping[str, Type]) -> Dict[str, Any]:
    """Render an OpenAPI ``components`` section for named schemas."""

    return {
        "schemas": {name: type_.to_json_schema() for name, type_ in schemas.items()}
    }
