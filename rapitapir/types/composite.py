from __future__ import annotations

import json
from collections.abc import Mapping, Sequence, Set
from typing import Any, Dict, List, Optional as _Opt

from rapitapir.core.exceptions import CoercionError, DefinitionError

from .base import Path, Type, ValidationIssue, nesting
from .constraints import check_item_count, check_unique

__all__: list[str] = ["Array", "Optional", "parse_json"]


def parse_json(value: Any, type_name: str, expected: type, noun: str) -> Any:
    """Decode a JSON string (query-string convenience) into *expected*."""

    try:
        parsed = json.loads(value)
    except ValueError as exc:
        raise CoercionError(value, type_name, f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise CoercionError(value, type_name, "Maximum nesting depth exceeded") from exc
    if not isinstance(parsed, expected):
        raise CoercionError(value, type_name, f"JSON string did not parse to {noun}")
    return parsed


class Array(Type):
    """
    Homogeneous ordered sequence.

    Attributes:
        item_type: Type every element is coerced/validated against
    """

    json_type = "array"

    item_type: Type

    def __init__(
        self,
        item_type: Type,
        min_items: _Opt[int] = None,
        max_items: _Opt[int] = None,
        unique_items: bool = False,
    ) -> None:
        if not isinstance(item_type, Type):
            raise DefinitionError(f"Array item type must be a Type, got {item_type!r}")
        super().__init__(
            min_items=min_items,
            max_items=max_items,
            unique_items=True if unique_items else None,
        )
        self._set("item_type", item_type)

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return [f"Expected array, got {type(value).__name__}"]
        return []

    def _validate_constraints(self, value: Sequence[Any]) -> List[str]:
        errors = check_item_count(len(value), self.constraints)
        if self.constraints.get("unique_items"):
            errors.extend(check_unique(value))
        return errors

    def _nested_issues(self, value: Sequence[Any], path: Path) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for index, item in enumerate(value):
            issues.extend(self.item_type.collect_issues(item, (*path, index)))
        return issues

    def _coerce_value(self, value: Any) -> List[Any]:
        if isinstance(value, str):
            value = parse_json(value, self.type_name, list, "array")
        elif (
            isinstance(value, (bytes, bytearray, Mapping, Set))
            or not isinstance(value, Sequence)
        ):
            raise CoercionError(
                value,
                self.type_name,
                f"Expected an ordered sequence, got {type(value).__name__}",
            )

        coerced: List[Any] = []
        with nesting(self.type_name, value):
            for index, item in enumerate(value):
                try:
                    coerced.append(self.item_type.coerce(item))
                except CoercionError as exc:
                    raise exc.prefixed(index) from exc.__cause__
        return coerced

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        schema["items"] = self.item_type.to_json_schema()
        c = self.constraints
        if "min_items" in c:
            schema["minItems"] = c["min_items"]
        if "max_items" in c:
            schema["maxItems"] = c["max_items"]
        if c.get("unique_items"):
            schema["uniqueItems"] = True

    def __str__(self) -> str:
        constraints = ", ".join(f"{k}={v}" for k, v in self.constraints.items())
        suffix = f"({constraints})" if constraints else ""
        return f"Array[{self.item_type}]{suffix}"


class Optional(Type):
    """Wraps a type so that ``None`` (or an absent field) is accepted."""

    wrapped_type: Type

    def __init__(self, wrapped_type: Type) -> None:
        if not isinstance(wrapped_type, Type):
            raise DefinitionError(f"Optional expects a Type, got {wrapped_type!r}")
        super().__init__()
        self._set("wrapped_type", wrapped_type)

    @property
    def required(self) -> bool:
        return False

    @property
    def json_type(self) -> str:  # type: ignore[override]
        return self.wrapped_type.json_type

    def collect_issues(self, value: Any, path: Path = ()) -> List[ValidationIssue]:
        if value is None:
            return []
        return self.wrapped_type.collect_issues(value, path)

    def coerce(self, value: Any) -> Any:
        if value is None:
            return None
        return self.wrapped_type.coerce(value)

    def to_json_schema(self) -> Dict[str, Any]:
        # Optionality is expressed by the parent's ``required`` list only.
        return self.wrapped_type.to_json_schema()

    def with_metadata(self, **meta: Any) -> "Optional":
        return Optional(self.wrapped_type.with_metadata(**meta))

    def __str__(self) -> str:
        return f"Optional[{self.wrapped_type}]"
