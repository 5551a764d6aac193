"""RapiTapir type system.

Declarative schema types with type-directed coercion of wire input,
aggregated validation and JSON-Schema projection.
"""

from __future__ import annotations

from . import schema, types
from .core.exceptions import (
    CoercionError,
    DefinitionError,
    RapiTapirError,
    SchemaValidationError,
    TypeValidationError,
)
from .registry import SchemaRegistry
from .types import Type, ValidationResult

__version__ = "0.1.0"

__all__: list[str] = [
    "schema",
    "types",
    "Type",
    "ValidationResult",
    "SchemaRegistry",
    "RapiTapirError",
    "CoercionError",
    "TypeValidationError",
    "SchemaValidationError",
    "DefinitionError",
    "__version__",
]
