"""rapitapir.types
###############################################################################
Type system: primitive, semantic and composite schema nodes.
###############################################################################
Each node validates, coerces and projects itself to JSON Schema (see
:mod:`rapitapir.types.base` for the contract).  The lowercase helpers below
are the ergonomic construction surface::

    from rapitapir import types as t

    user = (
        t.object_()
        .field("id", t.integer(minimum=1))
        .field("email", t.email())
        .optional_field("tags", t.array(t.string(), unique_items=True))
        .build()
    )

Helpers whose natural name collides with a builtin carry a trailing
underscore (``float_``, ``hash_``, ``object_``).
"""

from __future__ import annotations

from typing import Any, Optional as _Opt

from .base import Type, ValidationIssue, ValidationResult
from .composite import Array, Optional
from .objects import FieldSpec, Object, ObjectBuilder
from .primitives import Boolean, Float, Integer, String
from .semantic import UUID, Email
from .temporal import Date, DateTime

__all__: list[str] = [
    # node classes
    "Type",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Date",
    "DateTime",
    "UUID",
    "Email",
    "Array",
    "Optional",
    "Object",
    "ObjectBuilder",
    "ValidationIssue",
    "ValidationResult",
    # construction helpers
    "string",
    "integer",
    "float_",
    "boolean",
    "date",
    "datetime",
    "uuid",
    "email",
    "array",
    "optional",
    "hash_",
    "object_",
]


def string(**constraints: Any) -> String:
    return String(**constraints)


def integer(**constraints: Any) -> Integer:
    return Integer(**constraints)


def float_(**constraints: Any) -> Float:
    return Float(**constraints)


def boolean() -> Boolean:
    return Boolean()


def date(format: _Opt[str] = None) -> Date:
    return Date(format=format)


def datetime(format: _Opt[str] = None) -> DateTime:
    return DateTime(format=format)


def uuid() -> UUID:
    return UUID()


def email() -> Email:
    return Email()


def array(item_type: Type, **constraints: Any) -> Array:
    return Array(item_type, **constraints)


def optional(type_: Type) -> Optional:
    return Optional(type_)


def hash_(field_types: FieldSpec = (), strict: bool = True, title: _Opt[str] = None) -> Object:
    """Build an object directly from an ordered ``name → Type`` mapping."""
    return Object(field_types, strict=strict, title=title)


def object_() -> ObjectBuilder:
    """Start a fluent object declaration; finish with ``.build()``."""
    return ObjectBuilder()
