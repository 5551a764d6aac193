"""
Core Custom Exceptions

Every error raised by the type system derives from :class:`RapiTapirError`
so host applications can catch the whole family in one clause, while the two
failure categories stay distinct:

- `CoercionError`: structural, fail-fast.  Raised by ``Type.coerce`` when a
  raw value cannot be converted (wrong shape, missing required field,
  unexpected field in strict mode, unparseable scalar).  Carries the target
  type, the offending value, a reason and the field path.
- `TypeValidationError` / `SchemaValidationError`: constraint failures turned
  into exceptions by callers that prefer raising over inspecting a
  ``ValidationResult`` (``schema.validate_or_raise``).
- `DefinitionError`: a schema could not be *built* (unknown shorthand,
  malformed JSON Schema document, duplicate registry name).

Both request-facing errors expose ``to_payload()`` producing the JSON body an
HTTP adapter returns with status 400.
"""

from __future__ import annotations

import json
import reprlib
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

__all__: list[str] = [
    "RapiTapirError",
    "CoercionError",
    "TypeValidationError",
    "SchemaValidationError",
    "DefinitionError",
    "PathSegment",
    "format_path",
    "qualify",
]

PathSegment = Union[str, int]

_repr = reprlib.Repr()
_repr.maxstring = 60
_repr.maxother = 60


def format_path(path: Sequence[PathSegment]) -> str:
    """Render ``("profile", "links", 2)`` as ``profile.links[2]``."""

    rendered = ""
    for segment in path:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = str(segment)
    return rendered


def qualify(path: Sequence[PathSegment], message: str) -> str:
    """Prefix *message* with its field path, if any.

    A leading array index is rendered as ``Item at index N: `` and the rest of
    the path is qualified after it, so ``(0, "name")`` gives
    ``Item at index 0: Field 'name': ...``.
    """

    if not path:
        return message
    if isinstance(path[0], int):
        return f"Item at index {path[0]}: {qualify(path[1:], message)}"
    return f"Field '{format_path(path)}': {message}"


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


class RapiTapirError(Exception):
    """Base class for every error raised by the package."""

    pass


class CoercionError(RapiTapirError):
    """Raised when a raw value cannot be converted to the target type."""

    kind = "Type Coercion Error"

    def __init__(
        self,
        value: Any,
        type: Any,
        reason: str | None = None,
        path: Iterable[PathSegment] = (),
    ) -> None:
        self.value = value
        self.type = type
        self.reason = reason
        self.path: Tuple[PathSegment, ...] = tuple(path)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = f"Cannot coerce {_repr.repr(self.value)} to {self.type}"
        message = f"{base}: {self.reason}" if self.reason else base
        return qualify(self.path, message)

    @property
    def field(self) -> str | None:
        """Dotted path of the offending field, ``None`` at the top level."""

        return format_path(self.path) or None

    def prefixed(self, *segments: PathSegment) -> "CoercionError":
        """Return a copy located under *segments* (outermost first)."""

        return CoercionError(
            self.value, self.type, self.reason, path=(*segments, *self.path)
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": str(self),
            "type": str(self.type),
            "value": _json_safe(self.value),
            "reason": self.reason,
            "field": self.field,
            "code": 400,
        }


class TypeValidationError(RapiTapirError):
    """A value failed validation against a single type."""

    def __init__(self, value: Any, type: Any, errors: List[str] | None = None) -> None:
        self.value = value
        self.type = type
        self.errors: List[str] = list(errors or [])
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = (
            f"Validation failed for value {_repr.repr(self.value)} "
            f"against type {self.type}"
        )
        if not self.errors:
            return base
        return base + ":\n" + "\n".join(f"  - {error}" for error in self.errors)


class SchemaValidationError(RapiTapirError):
    """Raised by ``schema.validate_or_raise`` with the complete error list."""

    kind = "Validation Error"

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__(
            "Schema validation failed:\n"
            + "\n".join(f"  - {error}" for error in self.errors)
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": str(self),
            "errors": list(self.errors),
            "code": 400,
        }


class DefinitionError(RapiTapirError, ValueError):
    """A schema definition is malformed and no type can be built from it."""

    pass
