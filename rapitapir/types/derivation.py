"""
Auto-derivation

Builds :class:`~rapitapir.types.objects.Object` schemas from existing
descriptions of a shape instead of declaring every field by hand:

- ``from_sample``      – a mapping of sample values
- ``from_namespace``   – a :class:`types.SimpleNamespace` instance
- ``from_json_schema`` – a JSON-Schema ``object`` document
- ``from_pydantic``    – a Pydantic model class
- ``from_dataclass``   – a dataclass

Every helper accepts ``only`` / ``exclude`` field filters.  Free-form nested
mappings become *open* objects so derived schemas never reject data their
source would have accepted.
"""

from __future__ import annotations

import dataclasses
import types as _pytypes
import uuid as _uuid
from datetime import date, datetime
from enum import Enum
from typing import (
    Annotated,
    Any,
    Collection,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional as _Opt,
    Sequence,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

import structlog
from pydantic import BaseModel

from rapitapir.core.exceptions import DefinitionError

from .base import Type
from .composite import Array, Optional
from .objects import Object
from .primitives import Boolean, Float, Integer, String
from .semantic import UUID, Email
from .temporal import Date, DateTime

__all__: list[str] = [
    "from_sample",
    "from_namespace",
    "from_json_schema",
    "from_pydantic",
    "from_dataclass",
    "infer_type",
]

logger = structlog.get_logger(__name__)

_STRING_FORMATS: Dict[str, type] = {
    "email": Email,
    "uuid": UUID,
    "date": Date,
    "date-time": DateTime,
}


def _selected(
    names: Iterable[str],
    only: _Opt[Collection[str]],
    exclude: _Opt[Collection[str]],
) -> List[str]:
    keep = [str(name) for name in names]
    if only is not None:
        wanted = {str(name) for name in only}
        keep = [name for name in keep if name in wanted]
    if exclude is not None:
        dropped = {str(name) for name in exclude}
        keep = [name for name in keep if name not in dropped]
    return keep


def _open_object() -> Object:
    return Object({}, strict=False)


# ---------------------------------------------------------------------------
# Sample values
# ---------------------------------------------------------------------------


def infer_type(value: Any) -> Type:
    """Infer a type from a single sample value (strings are the fallback)."""

    if isinstance(value, bool):
        return Boolean()
    if isinstance(value, int):
        return Integer()
    if isinstance(value, float):
        return Float()
    if isinstance(value, datetime):
        return DateTime()
    if isinstance(value, date):
        return Date()
    if isinstance(value, (list, tuple)):
        return Array(infer_type(value[0]) if value else String())
    if isinstance(value, Mapping):
        return _open_object()
    return String()


def from_sample(
    sample: Mapping[str, Any],
    only: _Opt[Collection[str]] = None,
    exclude: _Opt[Collection[str]] = None,
) -> Object:
    if not isinstance(sample, Mapping):
        raise DefinitionError(f"Expected a mapping, got {type(sample).__name__}")

    values = {str(key): value for key, value in sample.items()}
    names = _selected(values, only, exclude)
    logger.debug("schema_derived", source="sample", fields=names)
    return Object({name: infer_type(values[name]) for name in names})


def from_namespace(
    namespace: _pytypes.SimpleNamespace,
    only: _Opt[Collection[str]] = None,
    exclude: _Opt[Collection[str]] = None,
) -> Object:
    if not isinstance(namespace, _pytypes.SimpleNamespace):
        raise DefinitionError(
            f"Expected SimpleNamespace, got {type(namespace).__name__}"
        )
    return from_sample(vars(namespace), only=only, exclude=exclude)


# ---------------------------------------------------------------------------
# JSON Schema documents
# ---------------------------------------------------------------------------


def _constraint_kwargs(document: Mapping[str, Any], mapping: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
    return {kwarg: document[key] for key, kwarg in mapping if key in document}


def _convert_json_schema(document: Mapping[str, Any]) -> Type:
    kind = document.get("type")

    if kind == "string":
        format_name = document.get("format")
        semantic = _STRING_FORMATS.get(format_name) if format_name else None
        if semantic is not None:
            return semantic()
        return String(
            format=format_name,
            **_constraint_kwargs(
                document,
                (
                    ("minLength", "min_length"),
                    ("maxLength", "max_length"),
                    ("pattern", "pattern"),
                    ("enum", "enum"),
                ),
            ),
        )

    if kind in ("integer", "number"):
        numeric = Integer if kind == "integer" else Float
        return numeric(
            **_constraint_kwargs(
                document,
                (
                    ("minimum", "minimum"),
                    ("maximum", "maximum"),
                    ("exclusiveMinimum", "exclusive_minimum"),
                    ("exclusiveMaximum", "exclusive_maximum"),
                    ("multipleOf", "multiple_of"),
                    ("enum", "enum"),
                ),
            )
        )

    if kind == "boolean":
        return Boolean()

    if kind == "array":
        items = document.get("items")
        item_type = _convert_json_schema(items) if isinstance(items, Mapping) else String()
        return Array(
            item_type,
            **_constraint_kwargs(
                document,
                (
                    ("minItems", "min_items"),
                    ("maxItems", "max_items"),
                    ("uniqueItems", "unique_items"),
                ),
            ),
        )

    if kind == "object":
        if document.get("properties"):
            return _convert_json_object(document, None, None)
        return _open_object()

    return String()


def _convert_json_object(
    document: Mapping[str, Any],
    only: _Opt[Collection[str]],
    exclude: _Opt[Collection[str]],
) -> Object:
    properties: Mapping[str, Any] = document.get("properties") or {}
    required = set(document.get("required") or ())

    fields: Dict[str, Type] = {}
    for name in _selected(properties, only, exclude):
        field_type = _convert_json_schema(properties[name])
        fields[name] = field_type if name in required else Optional(field_type)

    return Object(
        fields,
        strict=document.get("additionalProperties") is False,
        title=document.get("title"),
    )


def from_json_schema(
    document: Mapping[str, Any],
    only: _Opt[Collection[str]] = None,
    exclude: _Opt[Collection[str]] = None,
) -> Object:
    if not isinstance(document, Mapping) or document.get("type") != "object":
        raise DefinitionError("JSON Schema must be an object type")

    schema = _convert_json_object(document, only, exclude)
    logger.debug("schema_derived", source="json_schema", fields=list(schema.field_types))
    return schema


# ---------------------------------------------------------------------------
# Annotated classes (Pydantic models, dataclasses)
# ---------------------------------------------------------------------------


def _enum_type(values: Sequence[Any]) -> Type:
    if values and all(isinstance(v, str) for v in values):
        return String(enum=values)
    if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return Integer(enum=values)
    return String()


def _type_from_annotation(annotation: Any) -> Type:
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _type_from_annotation(args[0])

    if origin is Union or origin is _pytypes.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        inner = _type_from_annotation(members[0]) if len(members) == 1 else String()
        return Optional(inner) if len(members) < len(args) else inner

    if origin is Literal:
        return _enum_type(list(args))

    if origin in (list, tuple, set, frozenset) or (
        origin is not None and isinstance(origin, type) and issubclass(origin, Sequence)
    ):
        item = args[0] if args and args[0] is not Ellipsis else str
        return Array(_type_from_annotation(item), unique_items=origin in (set, frozenset))

    if origin is not None and isinstance(origin, type) and issubclass(origin, Mapping):
        return _open_object()

    if not isinstance(annotation, type):
        return String()

    # Order matters: bool < int and datetime < date in the class hierarchy.
    if issubclass(annotation, bool):
        return Boolean()
    if issubclass(annotation, Enum):
        return _enum_type([member.value for member in annotation])
    if issubclass(annotation, int):
        return Integer()
    if issubclass(annotation, float):
        return Float()
    if issubclass(annotation, datetime):
        return DateTime()
    if issubclass(annotation, date):
        return Date()
    if issubclass(annotation, _uuid.UUID):
        return UUID()
    if annotation.__name__ == "EmailStr":
        return Email()
    if issubclass(annotation, BaseModel):
        return from_pydantic(annotation)
    if dataclasses.is_dataclass(annotation):
        return from_dataclass(annotation)
    if issubclass(annotation, (list, tuple)):
        return Array(String())
    if issubclass(annotation, dict):
        return _open_object()
    return String()


def _field_type(annotation: Any, required: bool) -> Type:
    field_type = _type_from_annotation(annotation)
    if not required and field_type.required:
        return Optional(field_type)
    return field_type


def from_pydantic(
    model: type[BaseModel],
    only: _Opt[Collection[str]] = None,
    exclude: _Opt[Collection[str]] = None,
) -> Object:
    """Derive a strict object from a Pydantic model's declared fields."""

    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise DefinitionError(f"Expected a Pydantic model class, got {model!r}")

    model_fields = model.model_fields
    fields = {
        name: _field_type(model_fields[name].annotation, model_fields[name].is_required())
        for name in _selected(model_fields, only, exclude)
    }
    logger.debug("schema_derived", source="pydantic", model=model.__name__, fields=list(fields))
    return Object(fields, title=model.__name__)


def from_dataclass(
    cls: type,
    only: _Opt[Collection[str]] = None,
    exclude: _Opt[Collection[str]] = None,
) -> Object:
    """Derive a strict object from a dataclass; fields without defaults are required."""

    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise DefinitionError(f"Expected a dataclass, got {cls!r}")

    hints = get_type_hints(cls, include_extras=True)
    declared = {f.name: f for f in dataclasses.fields(cls)}
    fields: Dict[str, Type] = {}
    for name in _selected(declared, only, exclude):
        spec = declared[name]
        required = (
            spec.default is dataclasses.MISSING
            and spec.default_factory is dataclasses.MISSING
        )
        fields[name] = _field_type(hints.get(name, Any), required)

    logger.debug("schema_derived", source="dataclass", model=cls.__name__, fields=list(fields))
    return Object(fields, title=cls.__name__)
