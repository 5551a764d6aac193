"""FastAPI glue for services built on the type system.

Only error mapping and a request-body dependency live here; routing and
transport remain the host application's concern.
"""

from __future__ import annotations

from .dependencies import validated_body
from .errors import add_exception_handlers

__all__: list[str] = [
    "add_exception_handlers",
    "validated_body",
]
