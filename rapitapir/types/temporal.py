from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, Final, List, Optional

from rapitapir.core.exceptions import CoercionError

from .base import Type
from .formats import from_timestamp, parse_date, parse_datetime

__all__: list[str] = ["Date", "DateTime"]

_ISO_DATE: Final[re.Pattern[str]] = re.compile(r"\A\d{4}-\d{2}-\d{2}\Z")
_ISO_DATETIME: Final[re.Pattern[str]] = re.compile(
    r"\A\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})\Z"
)

# Named formats; any other ``format`` value is a strptime pattern.
_NAMED_FORMATS: Final[frozenset[str]] = frozenset({"iso8601", "rfc3339"})


def _matches_strptime(value: str, pattern: str) -> bool:
    try:
        datetime.strptime(value, pattern)
    except ValueError:
        return False
    return True


class _Temporal(Type):
    json_type = "string"

    def __init__(self, format: Optional[str] = None) -> None:
        super().__init__(format=format)

    @property
    def _strptime_format(self) -> Optional[str]:
        format_name = self.constraints.get("format")
        if format_name is None or format_name in _NAMED_FORMATS:
            return None
        return str(format_name)

    def _parse(self, value: str) -> Any:
        raise NotImplementedError

    def _parseable(self, value: str) -> bool:
        pattern = self._strptime_format
        if pattern is not None and _matches_strptime(value, pattern):
            return True
        try:
            self._parse(value)
        except ValueError:
            return False
        return True


class Date(_Temporal):
    """
    Calendar date.

    Coerces ``date`` values, ``datetime`` values (date part), ISO-8601 strings
    and integer Unix timestamps (UTC).  The optional ``format`` constraint
    applies to string values: ``"iso8601"`` requires ``YYYY-MM-DD``, anything
    else is used as a :func:`~datetime.datetime.strptime` pattern.
    """

    def _parse(self, value: str) -> date:
        pattern = self._strptime_format
        if pattern is not None:
            try:
                return datetime.strptime(value, pattern).date()
            except ValueError:
                pass
        return parse_date(value)

    def _validate_type(self, value: Any) -> List[str]:
        if isinstance(value, date):
            return []
        if isinstance(value, str) and self._parseable(value):
            return []
        return [f"Expected date or date string, got {type(value).__name__}"]

    def _validate_constraints(self, value: Any) -> List[str]:
        format_name = self.constraints.get("format")
        if format_name is None or not isinstance(value, str):
            return []
        if format_name in _NAMED_FORMATS:
            if _ISO_DATE.match(value):
                return []
            return ["Date must be in ISO8601 format (YYYY-MM-DD)"]
        if _matches_strptime(value, format_name):
            return []
        return [f"Date does not match format {format_name}"]

    def _coerce_value(self, value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            if isinstance(value, str):
                return self._parse(value)
            if isinstance(value, int) and not isinstance(value, bool):
                return from_timestamp(value).date()
        except (ValueError, OverflowError, OSError) as exc:
            raise CoercionError(value, self.type_name, str(exc)) from exc
        raise CoercionError(value, self.type_name, "Value cannot be converted to Date")

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        schema["format"] = str(self.constraints.get("format", "date"))


class DateTime(_Temporal):
    """
    Timestamp.

    Coerces ``datetime`` values, ``date`` values (midnight), ISO-8601 strings
    (``Z`` accepted) and numeric Unix timestamps (UTC).  ``format`` may be
    ``"iso8601"``, ``"rfc3339"`` or a strptime pattern.
    """

    def _parse(self, value: str) -> datetime:
        pattern = self._strptime_format
        if pattern is not None:
            try:
                return datetime.strptime(value, pattern)
            except ValueError:
                pass
        return parse_datetime(value)

    def _validate_type(self, value: Any) -> List[str]:
        if isinstance(value, datetime):
            return []
        if isinstance(value, str) and self._parseable(value):
            return []
        return [f"Expected datetime or datetime string, got {type(value).__name__}"]

    def _validate_constraints(self, value: Any) -> List[str]:
        format_name = self.constraints.get("format")
        if format_name is None or not isinstance(value, str):
            return []
        if format_name in _NAMED_FORMATS:
            if _ISO_DATETIME.match(value):
                return []
            label = "ISO8601" if format_name == "iso8601" else "RFC3339"
            return [f"DateTime must be in {label} format"]
        if _matches_strptime(value, format_name):
            return []
        return [f"DateTime does not match format {format_name}"]

    def _coerce_value(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        try:
            if isinstance(value, str):
                return self._parse(value)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return from_timestamp(value)
        except (ValueError, OverflowError, OSError) as exc:
            raise CoercionError(value, self.type_name, str(exc)) from exc
        raise CoercionError(value, self.type_name, "Value cannot be converted to DateTime")

    def _apply_constraints_to_schema(self, schema: Dict[str, Any]) -> None:
        schema["format"] = str(self.constraints.get("format", "date-time"))
