"""
Semantic string formats

Predicates behind the ``format=`` constraint of string types, plus the date
and datetime parsers shared with :mod:`rapitapir.types.temporal`.

Each entry in :data:`FORMAT_CHECKS` maps a format name to a predicate and the
message reported when the predicate fails.  Unknown format names are accepted
and never checked, so schemas can carry documentation-only formats
(``"password"``, ``"binary"``) through to JSON Schema.
"""

from __future__ import annotations

import ipaddress
import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Final, Optional, Tuple
from urllib.parse import urlsplit

__all__: list[str] = [
    "EMAIL_PATTERN",
    "UUID_PATTERN",
    "FORMAT_CHECKS",
    "check_format",
    "parse_date",
    "parse_datetime",
    "from_timestamp",
]

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\A[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+\Z", re.IGNORECASE
)
UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\A[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\Z",
    re.IGNORECASE,
)

_WHITESPACE = re.compile(r"\s")


def parse_datetime(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC."""

    candidate = text.strip()
    if candidate[-1:] in ("Z", "z"):
        candidate = candidate[:-1] + "+00:00"
    return datetime.fromisoformat(candidate)


def parse_date(text: str) -> date:
    """Parse an ISO-8601 date, falling back to the date part of a timestamp."""

    candidate = text.strip()
    try:
        return date.fromisoformat(candidate)
    except ValueError:
        return parse_datetime(candidate).date()


def from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _is_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def _is_uuid(value: str) -> bool:
    return UUID_PATTERN.match(value) is not None


def _is_uri(value: str) -> bool:
    if not value or _WHITESPACE.search(value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc or parts.path)


def _parses(parser: Callable[[str], Any]) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        try:
            parser(value)
        except ValueError:
            return False
        return True

    return check


# Dispatch table – format name → (predicate, failure message).
FORMAT_CHECKS: Final[Dict[str, Tuple[Callable[[str], bool], str]]] = {
    "email": (_is_email, "Invalid email format"),
    "uri": (_is_uri, "Invalid URI format"),
    "url": (_is_uri, "Invalid URI format"),
    "uuid": (_is_uuid, "Invalid UUID format"),
    "date": (_parses(parse_date), "Invalid date format"),
    "datetime": (_parses(parse_datetime), "Invalid datetime format"),
    "date-time": (_parses(parse_datetime), "Invalid datetime format"),
    "ipv4": (_parses(ipaddress.IPv4Address), "Invalid IPv4 format"),
    "ipv6": (_parses(ipaddress.IPv6Address), "Invalid IPv6 format"),
}


def check_format(value: str, format_name: str) -> Optional[str]:
    """Return the failure message for *value*, or ``None`` when it conforms."""

    entry = FORMAT_CHECKS.get(format_name)
    if entry is None:
        return None
    predicate, message = entry
    return None if predicate(value) else message
