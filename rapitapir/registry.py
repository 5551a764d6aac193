"""
Schema Registry

Explicit, caller-populated catalogue of named schemas.  Endpoint modules
register the object shapes they expose at import time; documentation and
tooling read the registry back (e.g. to render OpenAPI
``components.schemas``) instead of discovering schemas by reflection.

Registration is expected to happen once at start-up; reads afterwards are
lock-free.  A lock still guards writes so concurrent imports cannot lose an
entry.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping

import structlog

from rapitapir.core.exceptions import DefinitionError
from rapitapir.types import Type
from rapitapir.types.json_schema import components

__all__: list[str] = ["SchemaRegistry"]

logger = structlog.get_logger(__name__)


class SchemaRegistry:
    """Name → Type catalogue preserving registration order."""

    def __init__(self) -> None:
        self._schemas: Dict[str, Type] = {}
        self._lock = threading.Lock()

    def register(self, name: str, type_: Type) -> Type:
        """Add *type_* under *name* and return it (handy for module constants)."""

        if not isinstance(type_, Type):
            raise DefinitionError(f"Schema '{name}' must be a Type, got {type_!r}")
        with self._lock:
            if name in self._schemas:
                raise DefinitionError(f"Schema '{name}' is already registered")
            self._schemas[name] = type_
        logger.debug("schema_registered", schema=name, type=str(type_))
        return type_

    def get(self, name: str) -> Type:
        try:
            return self._schemas[name]
        except KeyError:
            raise KeyError(f"Unknown schema: {name}") from None

    def names(self) -> List[str]:
        return list(self._schemas)

    def as_mapping(self) -> Mapping[str, Type]:
        return MappingProxyType(dict(self._schemas))

    def to_json_schema(self) -> Dict[str, Any]:
        """OpenAPI ``components`` section covering every registered schema."""
        return components(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._schemas))

    def __len__(self) -> int:
        return len(self._schemas)
