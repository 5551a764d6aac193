"""
Scalar leaf types: String, Integer, Float, Boolean.

Coercion rules are deliberately narrow for numbers and booleans – wire input
either converts losslessly under the documented rule or raises
:class:`~rapitapir.core.exceptions.CoercionError`.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from rapitapir.core.config import get_settings
from rapitapir.core.exceptions import CoercionError, DefinitionError

from .base import Type
from .constraints import (
    check_enum,
    check_length,
    check_pattern,
    check_range,
    compile_pattern,
    freeze_enum,
)
from .formats import check_format

__all__: list[str] = ["String", "Integer", "Float", "Boolean"]

_TRUE_STRINGS = frozenset({"true", "1"})
_FALSE_STRINGS = frozenset({"false", "0"})


class String(Type):
    """
    String type with length, pattern, enum and format constraints.

    ``pattern`` may be a string or a compiled regex and is matched with
    :func:`re.search`; anchor it explicitly for full-match semantics.
    """

    json_type = "string"

    def __init__(
        self,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        pattern: Union[str, "re.Pattern[str]", None] = None,
        format: Optional[str] = None,
        enum: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(
            min_length=min_length,
            max_length=max_length,
            pattern=compile_pattern(pattern),
            format=format.value if isinstance(format, Enum) else format,
            enum=freeze_enum(enum),
        )

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, str):
            return [f"Expected string, got {type(value).__name__}"]
        return []

    def _validate_constraints(self, value: str) -> List[str]:
        errors = check_length(len(value), self.constraints)
        errors.extend(check_pattern(value, self.constraints.get("pattern")))
        format_name = self.constraints.get("format")
        if format_name is not None:
            message = check_format(value, str(format_name))
            if message:
                errors.append(message)
        errors.extend(check_enum(value, self.constraints.get("enum")))
        return errors

    def _coerce_value(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, (bytes, bytearray)):
            try:
                return bytes(value).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise CoercionError(value, self.type_name, "Bytes are not valid UTF-8") from exc
        return str(value)

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        c = self.constraints
        if "min_length" in c:
            schema["minLength"] = c["min_length"]
        if "max_length" in c:
            schema["maxLength"] = c["max_length"]
        if "pattern" in c:
            schema["pattern"] = c["pattern"].pattern
        if "format" in c:
            schema["format"] = str(c["format"])
        if "enum" in c:
            schema["enum"] = list(c["enum"])


class _Number(Type):
    """Shared range constraints for Integer and Float."""

    def __init__(
        self,
        minimum: Optional[Union[int, float]] = None,
        maximum: Optional[Union[int, float]] = None,
        exclusive_minimum: Optional[Union[int, float]] = None,
        exclusive_maximum: Optional[Union[int, float]] = None,
        multiple_of: Optional[Union[int, float]] = None,
        enum: Optional[Sequence[Union[int, float]]] = None,
    ) -> None:
        if multiple_of is not None and multiple_of <= 0:
            raise DefinitionError("multiple_of must be greater than 0")
        super().__init__(
            minimum=minimum,
            maximum=maximum,
            exclusive_minimum=exclusive_minimum,
            exclusive_maximum=exclusive_maximum,
            multiple_of=multiple_of,
            enum=freeze_enum(enum),
        )

    def _validate_constraints(self, value: Union[int, float]) -> List[str]:
        errors = check_range(value, self.constraints)
        errors.extend(check_enum(value, self.constraints.get("enum")))
        return errors

    def _coerce_boolean(self, value: bool) -> int:
        if not get_settings().coerce_booleans_to_numbers:
            raise CoercionError(value, self.type_name, "Boolean values are not accepted")
        return 1 if value else 0

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        c = self.constraints
        for key, json_key in (
            ("minimum", "minimum"),
            ("maximum", "maximum"),
            ("exclusive_minimum", "exclusiveMinimum"),
            ("exclusive_maximum", "exclusiveMaximum"),
            ("multiple_of", "multipleOf"),
        ):
            if key in c:
                schema[json_key] = c[key]
        if "enum" in c:
            schema["enum"] = list(c["enum"])


class Integer(_Number):
    json_type = "integer"

    def _validate_type(self, value: Any) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return [f"Expected integer, got {type(value).__name__}"]
        return []

    def _coerce_value(self, value: Any) -> int:
        if isinstance(value, bool):
            return self._coerce_boolean(value)
        if isinstance(value, int):
            return value
        if isinstance(value, (float, Decimal)):
            if not math.isfinite(value):
                raise CoercionError(value, self.type_name, "Value is not a finite number")
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as exc:
                raise CoercionError(value, self.type_name, str(exc)) from exc
        raise CoercionError(value, self.type_name, "Value cannot be converted to integer")


class Float(_Number):
    json_type = "number"

    def _validate_type(self, value: Any) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [f"Expected number (float or integer), got {type(value).__name__}"]
        return []

    def _coerce_value(self, value: Any) -> float:
        if isinstance(value, bool):
            return float(self._coerce_boolean(value))
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError as exc:
                raise CoercionError(value, self.type_name, str(exc)) from exc
        elif isinstance(value, (int, float, Decimal)):
            try:
                number = float(value)
            except OverflowError as exc:
                raise CoercionError(
                    value, self.type_name, "Value is out of range for float"
                ) from exc
        else:
            raise CoercionError(value, self.type_name, "Value cannot be converted to float")
        # Non-finite values are rejected whatever the input type.
        if not math.isfinite(number):
            raise CoercionError(value, self.type_name, "Value is not a finite number")
        return number


class Boolean(Type):
    json_type = "boolean"

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, bool):
            return [f"Expected boolean (true or false), got {type(value).__name__}"]
        return []

    def _coerce_value(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return value == 1
        if isinstance(value, str):
            token = value.strip().lower()
            if token in _TRUE_STRINGS:
                return True
            if token in _FALSE_STRINGS:
                return False
        raise CoercionError(value, self.type_name, f"Cannot convert {value!r} to boolean")
