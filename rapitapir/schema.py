"""
Schema facade

Module-level helpers over the type system for callers that work with whole
schemas rather than individual nodes:

- ``define()`` – builder accepting shorthand field definitions
- ``from_definition()`` – shorthand → Type (``"string"``, ``{"name": "string"}``,
  ``["integer"]``)
- ``coerce()`` / ``validate()`` / ``validate_or_raise()`` / ``parse()`` – the
  coerce-then-validate request pipeline

Shorthand example::

    with schema.define(title="User") as user:
        user.field("id", "integer")
        user.field("profile", {"bio": "string"})
        user.optional_field("tags", ["string"])

    user.schema.coerce({"id": "7", "profile": {"bio": "hi"}})
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Final, Mapping, Optional as _Opt

import structlog

from rapitapir.core.exceptions import (
    CoercionError,
    DefinitionError,
    SchemaValidationError,
)
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
    ObjectBuilder,
    String,
    Type,
    ValidationResult,
)

__all__: list[str] = [
    "PRIMITIVES",
    "SchemaBuilder",
    "define",
    "from_definition",
    "coerce",
    "validate",
    "validate_or_raise",
    "parse",
]

logger = structlog.get_logger(__name__)

# Dispatch table – shorthand primitive name → type factory.
PRIMITIVES: Final[Dict[str, Callable[[], Type]]] = {
    "string": String,
    "integer": Integer,
    "float": Float,
    "boolean": Boolean,
    "date": Date,
    "datetime": DateTime,
    "uuid": UUID,
    "email": Email,
}


def _primitive(name: str) -> Type:
    factory = PRIMITIVES.get(name)
    if factory is None:
        raise DefinitionError(f"Unknown primitive type: {name}")
    return factory()


def from_definition(definition: Any) -> Type:
    """Resolve a shorthand *definition* into a Type tree.

    A mapping whose only key is ``"type"`` with a string value is read as a
    primitive (``{"type": "string"}`` is ``String()``), not as an object with a
    field called ``type``.  Declare such an object with an explicit Type
    instead, e.g. ``types.hash_({"type": types.string()})``.
    """

    if isinstance(definition, Type):
        return definition
    if isinstance(definition, type) and issubclass(definition, Type):
        try:
            return definition()
        except TypeError as exc:
            raise DefinitionError(
                f"{definition.__name__} cannot be built without arguments"
            ) from exc
    if isinstance(definition, str):
        return _primitive(definition)
    if isinstance(definition, Mapping):
        if list(definition) == ["type"] and isinstance(definition["type"], str):
            return _primitive(definition["type"])
        return Object(
            {str(name): from_definition(value) for name, value in definition.items()}
        )
    if isinstance(definition, list):
        if len(definition) != 1:
            raise DefinitionError("Array definition must have exactly one element type")
        return Array(from_definition(definition[0]))
    raise DefinitionError(f"Unknown definition type: {type(definition).__name__}")


class SchemaBuilder:
    """
    Collects shorthand field definitions into an :class:`Object`.

    Used as a context manager the finished object is available as
    ``builder.schema`` after the block exits cleanly.
    """

    def __init__(self, title: _Opt[str] = None, strict: bool = True) -> None:
        self._fields = ObjectBuilder()
        self._title = title
        self._strict = strict
        self.schema: _Opt[Object] = None

    def field(
        self, name: str, definition: Any, required: bool = True, **options: Any
    ) -> "SchemaBuilder":
        self._fields.field(name, from_definition(definition), required=required, **options)
        return self

    def required_field(self, name: str, definition: Any, **options: Any) -> "SchemaBuilder":
        return self.field(name, definition, required=True, **options)

    def optional_field(self, name: str, definition: Any, **options: Any) -> "SchemaBuilder":
        return self.field(name, definition, required=False, **options)

    def build(self) -> Object:
        return self._fields.build(strict=self._strict, title=self._title)

    def __enter__(self) -> "SchemaBuilder":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.schema = self.build()


def define(title: _Opt[str] = None, strict: bool = True) -> SchemaBuilder:
    return SchemaBuilder(title=title, strict=strict)


def validate(value: Any, type_: Type) -> ValidationResult:
    return type_.validate(value)


def coerce(value: Any, type_: Type) -> Any:
    try:
        return type_.coerce(value)
    except CoercionError as exc:
        logger.debug(
            "coercion_failed",
            schema=type_.type_name,
            field=exc.field,
            reason=exc.reason,
        )
        raise


def validate_or_raise(value: Any, type_: Type) -> Any:
    """Return *value* when valid, else raise with every violation listed."""

    result = type_.validate(value)
    if not result.valid:
        logger.debug(
            "schema_validation_failed",
            schema=type_.type_name,
            error_count=len(result.errors),
        )
        raise SchemaValidationError(result.errors)
    return value


def parse(value: Any, type_: Type) -> Any:
    """Coerce *value* then validate the result – the request-input pipeline."""

    return validate_or_raise(coerce(value, type_), type_)
