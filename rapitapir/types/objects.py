"""
Object (hash) types

An :class:`Object` is an ordered mapping of field name → :class:`Type`.
A field is required unless its type is :class:`Optional`; the same
``Type.required`` predicate drives coercion (missing-field errors), validation
and the JSON-Schema ``required`` list, so the three can never disagree.

``strict`` objects (the default) reject undeclared keys; open objects
(``strict=False``) copy them through unchanged.

Objects are usually assembled with :class:`ObjectBuilder`::

    user = (
        ObjectBuilder()
        .field("id", Integer(minimum=1))
        .optional_field("nickname", String(max_length=20))
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional as _Opt, Tuple, Union

from rapitapir.core.exceptions import CoercionError, DefinitionError

from .base import Path, Type, ValidationIssue, nesting
from .composite import Optional, parse_json

__all__: list[str] = ["Object", "ObjectBuilder"]

FieldSpec = Union[Mapping[str, Type], Iterable[Tuple[str, Type]]]


class Object(Type):
    """
    Ordered object shape.

    Attributes:
        field_types: Read-only ordered mapping of field name → Type
        strict: Whether undeclared keys are rejected
        title: Optional schema name (projected as JSON Schema ``title``)
    """

    json_type = "object"

    field_types: Mapping[str, Type]
    strict: bool
    title: _Opt[str]

    def __init__(
        self,
        field_types: FieldSpec = (),
        strict: bool = True,
        title: _Opt[str] = None,
    ) -> None:
        items = field_types.items() if isinstance(field_types, Mapping) else field_types
        fields: Dict[str, Type] = {}
        for name, field_type in items:
            if not isinstance(field_type, Type):
                raise DefinitionError(
                    f"Field '{name}' must be declared with a Type, got {field_type!r}"
                )
            fields[str(name)] = field_type
        super().__init__()
        self._set("field_types", MappingProxyType(fields))
        self._set("strict", bool(strict))
        self._set("title", title)

    @property
    def type_name(self) -> str:
        return self.title or "Object"

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(name for name, t in self.field_types.items() if t.required)

    def _unexpected_keys(self, value: Mapping[Any, Any]) -> List[Any]:
        return [key for key in value if key not in self.field_types]

    # -- validation ---------------------------------------------------------

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, Mapping):
            return [f"Expected object, got {type(value).__name__}"]
        return []

    def _validate_constraints(self, value: Mapping[Any, Any]) -> List[str]:
        if not self.strict:
            return []
        unexpected = self._unexpected_keys(value)
        if not unexpected:
            return []
        return [f"Unexpected fields: {', '.join(map(str, unexpected))}"]

    def _nested_issues(self, value: Mapping[Any, Any], path: Path) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for name, field_type in self.field_types.items():
            issues.extend(field_type.collect_issues(value.get(name), (*path, name)))
        return issues

    # -- coercion -----------------------------------------------------------

    def _coerce_value(self, value: Any) -> Dict[Any, Any]:
        if isinstance(value, (str, bytes, bytearray)):
            value = parse_json(value, self.type_name, dict, "object")
        elif not isinstance(value, Mapping):
            raise CoercionError(value, self.type_name, "Value cannot be converted to object")

        coerced: Dict[Any, Any] = {}
        with nesting(self.type_name, value):
            for name, field_type in self.field_types.items():
                if name not in value:
                    if field_type.required:
                        raise CoercionError(
                            value, self.type_name, f"Missing required field '{name}'"
                        )
                    continue
                try:
                    coerced[name] = field_type.coerce(value[name])
                except CoercionError as exc:
                    raise exc.prefixed(name) from exc.__cause__

        unexpected = self._unexpected_keys(value)
        if unexpected and self.strict:
            allowed = ", ".join(self.field_types) or "(none)"
            raise CoercionError(
                value,
                self.type_name,
                f"Unexpected fields: {', '.join(map(str, unexpected))}. "
                f"Allowed fields: {allowed}",
            )
        for key in unexpected:
            coerced[key] = value[key]
        return coerced

    # -- JSON Schema --------------------------------------------------------

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        if self.title:
            schema["title"] = self.title
        if self.field_types:
            schema["properties"] = {
                name: field_type.to_json_schema()
                for name, field_type in self.field_types.items()
            }
            required = list(self.required_fields)
            if required:
                schema["required"] = required
        schema["additionalProperties"] = not self.strict

    def __str__(self) -> str:
        label = self.title or "Object"
        if not self.field_types:
            return label
        fields = ", ".join(f"{name}: {t}" for name, t in self.field_types.items())
        return f"{label}{{{fields}}}"


class ObjectBuilder:
    """Accumulates ordered field declarations and freezes them into an Object."""

    def __init__(self) -> None:
        self._fields: Dict[str, Type] = {}

    def field(
        self,
        name: str,
        type: Type,
        required: bool = True,
        description: _Opt[str] = None,
        example: Any = None,
    ) -> "ObjectBuilder":
        name = str(name)
        if name in self._fields:
            raise DefinitionError(f"Field '{name}' is already defined")
        if not isinstance(type, Type):
            raise DefinitionError(f"Field '{name}' must be declared with a Type, got {type!r}")

        field_type = type if required or type.optional else Optional(type)
        meta = {
            key: value
            for key, value in (("description", description), ("example", example))
            if value is not None
        }
        if meta:
            field_type = field_type.with_metadata(**meta)
        self._fields[name] = field_type
        return self

    def required_field(self, name: str, type: Type, **options: Any) -> "ObjectBuilder":
        return self.field(name, type, required=True, **options)

    def optional_field(self, name: str, type: Type, **options: Any) -> "ObjectBuilder":
        return self.field(name, type, required=False, **options)

    def build(self, strict: bool = True, title: _Opt[str] = None) -> Object:
        return Object(self._fields, strict=strict, title=title)
