"""
Constraint evaluator

Pure helpers shared by the primitive and composite types.  Each helper
checks one family of constraints against an already type-checked value and
returns the list of violation messages (empty when satisfied), so callers can
concatenate results and report every failure at once.
"""

from __future__ import annotations

import math
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

__all__: list[str] = [
    "compile_pattern",
    "freeze_enum",
    "check_length",
    "check_pattern",
    "check_enum",
    "check_range",
    "check_item_count",
    "check_unique",
]

Number = Union[int, float]


def compile_pattern(pattern: Union[str, "re.Pattern[str]", None]) -> Optional["re.Pattern[str]"]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def freeze_enum(values: Optional[Sequence[Any]]) -> Optional[tuple[Any, ...]]:
    return None if values is None else tuple(values)


def check_length(
    length: int,
    constraints: Mapping[str, Any],
    noun: str = "String",
    min_key: str = "min_length",
    max_key: str = "max_length",
) -> List[str]:
    errors: List[str] = []
    minimum = constraints.get(min_key)
    maximum = constraints.get(max_key)
    if minimum is not None and length < minimum:
        errors.append(f"{noun} length {length} is below minimum {minimum}")
    if maximum is not None and length > maximum:
        errors.append(f"{noun} length {length} exceeds maximum {maximum}")
    return errors


def check_item_count(length: int, constraints: Mapping[str, Any]) -> List[str]:
    return check_length(length, constraints, "Array", "min_items", "max_items")


def check_pattern(value: str, pattern: Optional["re.Pattern[str]"]) -> List[str]:
    if pattern is None or pattern.search(value):
        return []
    return [f"String '{value}' does not match pattern {pattern.pattern!r}"]


def check_enum(value: Any, allowed: Optional[Sequence[Any]]) -> List[str]:
    if allowed is None or value in allowed:
        return []
    return [f"Value {value!r} is not one of {list(allowed)!r}"]


def _is_multiple(value: Number, factor: Number) -> bool:
    if isinstance(value, int) and isinstance(factor, int):
        return value % factor == 0
    remainder = math.fmod(value, factor)
    return math.isclose(remainder, 0.0, abs_tol=1e-9) or math.isclose(
        abs(remainder), abs(factor), abs_tol=1e-9
    )


def check_range(value: Number, constraints: Mapping[str, Any]) -> List[str]:
    """Inclusive and exclusive bounds plus ``multiple_of``."""

    errors: List[str] = []

    minimum = constraints.get("minimum")
    if minimum is not None and value < minimum:
        errors.append(f"Value {value} is below minimum {minimum}")

    maximum = constraints.get("maximum")
    if maximum is not None and value > maximum:
        errors.append(f"Value {value} exceeds maximum {maximum}")

    exclusive_minimum = constraints.get("exclusive_minimum")
    if exclusive_minimum is not None and value <= exclusive_minimum:
        errors.append(f"Value {value} must be greater than {exclusive_minimum}")

    exclusive_maximum = constraints.get("exclusive_maximum")
    if exclusive_maximum is not None and value >= exclusive_maximum:
        errors.append(f"Value {value} must be less than {exclusive_maximum}")

    factor = constraints.get("multiple_of")
    if factor is not None and not _is_multiple(value, factor):
        errors.append(f"Value {value} is not a multiple of {factor}")

    return errors


def check_unique(items: Sequence[Any]) -> List[str]:
    seen: List[Any] = []
    hashed: set[Any] = set()
    for item in items:
        try:
            key = (type(item), item)
            if key in hashed:
                return ["Array contains duplicate items but must be unique"]
            hashed.add(key)
        except TypeError:
            # Unhashable (dict/list) items fall back to equality scans.
            if item in seen:
                return ["Array contains duplicate items but must be unique"]
            seen.append(item)
    return []
