"""String subtypes whose format is part of type conformance: UUID and Email."""

from __future__ import annotations

import uuid as _uuid
from typing import Any, Dict, Final, List

from .formats import EMAIL_PATTERN, UUID_PATTERN
from .primitives import String

__all__: list[str] = ["UUID", "Email"]

# ECMA-262 flavoured equivalents of the Python patterns, for JSON Schema consumers.
_UUID_JSON_PATTERN: Final[str] = (
    "^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"
)
_EMAIL_JSON_PATTERN: Final[str] = (
    "^[A-Za-z0-9_+\\-.]+@[A-Za-z0-9\\-]+(\\.[A-Za-z0-9\\-]+)*\\.[A-Za-z]+$"
)


class UUID(String):
    """RFC 4122 UUID (versions 1–5) carried as a string."""

    def __init__(self) -> None:
        super().__init__()

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, str):
            return [f"Expected string, got {type(value).__name__}"]
        if not UUID_PATTERN.match(value):
            return ["Invalid UUID format"]
        return []

    def _coerce_value(self, value: Any) -> str:
        if isinstance(value, _uuid.UUID):
            return str(value)
        return super()._coerce_value(value)

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        schema["format"] = "uuid"
        schema["pattern"] = _UUID_JSON_PATTERN


class Email(String):
    """E-mail address; a malformed address yields exactly one error."""

    def __init__(self) -> None:
        super().__init__()

    def _validate_type(self, value: Any) -> List[str]:
        if not isinstance(value, str):
            return [f"Expected string, got {type(value).__name__}"]
        if not EMAIL_PATTERN.match(value):
            return ["Invalid email format"]
        return []

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        schema["format"] = "email"
        schema["pattern"] = _EMAIL_JSON_PATTERN
