"""
Type node contract

Every node of a schema tree derives from :class:`Type` and provides three
capabilities:

``validate(value)``
    Walks an *already coerced* value and returns a :class:`ValidationResult`
    holding **every** violation found.  Never raises.
``coerce(raw)``
    Converts loosely typed wire input into the canonical Python value, raising
    :class:`~rapitapir.core.exceptions.CoercionError` on the first structural
    failure.
``to_json_schema()``
    Sparse JSON-Schema descriptor of the node.

Nodes are immutable once built: constraints live in a read-only mapping and
attribute assignment raises.  Trees can therefore be shared between threads
without locking.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Sequence, Tuple

from rapitapir.core.config import get_settings
from rapitapir.core.exceptions import (
    CoercionError,
    PathSegment,
    TypeValidationError,
    qualify,
)

__all__: list[str] = [
    "Type",
    "ValidationIssue",
    "ValidationResult",
    "nesting",
]

Path = Tuple[PathSegment, ...]


@dataclass(frozen=True)
class ValidationIssue:
    """A single constraint violation located at *path*."""

    path: Path
    message: str

    def __str__(self) -> str:
        return qualify(self.path, self.message)


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of ``Type.validate``.

    Attributes:
        valid: True when no issue was found
        errors: Human-readable, path-qualified messages (one per issue)
        issues: Structured issues for callers that need the raw path
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: Sequence[ValidationIssue]) -> "ValidationResult":
        return cls(
            valid=not issues,
            errors=[str(issue) for issue in issues],
            issues=list(issues),
        )

    def dict(self) -> dict[str, Any]:
        """Return the ``{"valid": ..., "errors": [...]}`` wire shape."""
        return {"valid": self.valid, "errors": list(self.errors)}


_DEPTH: ContextVar[int] = ContextVar("rapitapir_coercion_depth", default=0)


@contextmanager
def nesting(type_name: str, value: Any) -> Iterator[None]:
    """Track container depth during coercion and enforce ``max_depth``."""

    depth = _DEPTH.get() + 1
    limit = get_settings().max_depth
    if limit is not None and depth > limit:
        raise CoercionError(value, type_name, f"Maximum nesting depth {limit} exceeded")
    token = _DEPTH.set(depth)
    try:
        yield
    finally:
        _DEPTH.reset(token)


class Type:
    """Abstract schema node."""

    json_type: ClassVar[str] = "object"

    def __init__(self, **constraints: Any) -> None:
        self._set(
            "constraints",
            MappingProxyType({k: v for k, v in constraints.items() if v is not None}),
        )
        self._set("metadata", MappingProxyType({}))

    # -- immutability -------------------------------------------------------

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # -- introspection ------------------------------------------------------

    constraints: Mapping[str, Any]
    metadata: Mapping[str, Any]

    @property
    def type_name(self) -> str:
        """Name reported in coercion errors."""
        return type(self).__name__

    @property
    def required(self) -> bool:
        return True

    @property
    def optional(self) -> bool:
        return not self.required

    # -- validation ---------------------------------------------------------

    def validate(self, value: Any) -> ValidationResult:
        return ValidationResult.from_issues(self.collect_issues(value))

    def validate_or_raise(self, value: Any) -> Any:
        """Return *value* unchanged or raise :class:`TypeValidationError`."""
        result = self.validate(value)
        if not result.valid:
            raise TypeValidationError(value, self, result.errors)
        return value

    def collect_issues(self, value: Any, path: Path = ()) -> List[ValidationIssue]:
        """Return every issue for *value*, located under *path*."""

        if value is None:
            if self.required:
                return [ValidationIssue(path, "Value is required but got None")]
            return []

        type_errors = self._validate_type(value)
        if type_errors:
            return [ValidationIssue(path, message) for message in type_errors]

        issues = [
            ValidationIssue(path, message)
            for message in self._validate_constraints(value)
        ]
        issues.extend(self._nested_issues(value, path))
        return issues

    def _validate_type(self, value: Any) -> List[str]:
        return []

    def _validate_constraints(self, value: Any) -> List[str]:
        return []

    def _nested_issues(self, value: Any, path: Path) -> List[ValidationIssue]:
        return []

    # -- coercion -----------------------------------------------------------

    def coerce(self, value: Any) -> Any:
        if value is None:
            if self.required:
                raise CoercionError(value, self.type_name, "Required value cannot be None")
            return None
        return self._coerce_value(value)

    def _coerce_value(self, value: Any) -> Any:
        return value

    # -- JSON Schema --------------------------------------------------------

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.json_type}
        self._apply_constraints_to_schema(schema)
        if "description" in self.metadata:
            schema["description"] = self.metadata["description"]
        if "example" in self.metadata:
            schema["example"] = self.metadata["example"]
        return schema

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        pass

    # -- metadata -----------------------------------------------------------

    def with_metadata(self, **meta: Any) -> "Type":
        """Return a copy carrying *meta* merged over the current metadata."""
        clone = copy.copy(self)
        clone._set("metadata", MappingProxyType({**self.metadata, **meta}))
        return clone

    def describe(self, text: str) -> "Type":
        return self.with_metadata(description=text)

    def example(self, value: Any) -> "Type":
        return self.with_metadata(example=value)

    def __str__(self) -> str:
        if not self.constraints:
            return self.type_name
        parts = ", ".join(f"{k}={_show(v)}" for k, v in self.constraints.items())
        return f"{self.type_name}({parts})"

    def __repr__(self) -> str:
        return f"<{self}>"


def _show(value: Any) -> str:
    pattern = getattr(value, "pattern", None)
    if isinstance(pattern, str):
        return repr(pattern)
    return repr(value) if isinstance(value, str) else str(value)
