from __future__ import annotations

from typing import Any, Dict

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rapitapir.core.exceptions import CoercionError, SchemaValidationError

__all__: list[str] = ["add_exception_handlers"]

logger = structlog.get_logger("errors")


def _build_error_payload(payload: Dict[str, Any], request: Request) -> Dict[str, Any]:
    """Attach the correlation ID (if the client sent one) to an error body.

    Parameters
    ----------
    payload:
        The ``to_payload()`` dict of a type-system error.
    request:
        Incoming request; ``X-Request-ID`` is echoed back as ``request_id``.
    """

    return {**payload, "request_id": request.headers.get("x-request-id")}


async def _coercion_error_handler(
    request: Request,
    exc: CoercionError,
) -> JSONResponse:
    """Structural input failures (wrong shape, missing/unexpected fields) → 400."""

    logger.warning(
        "coercion_error",
        path=request.url.path,
        field=exc.field,
        reason=exc.reason,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_build_error_payload(exc.to_payload(), request),
    )


async def _validation_error_handler(
    request: Request,
    exc: SchemaValidationError,
) -> JSONResponse:
    """Constraint violations → 400 with the complete error list."""

    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_build_error_payload(exc.to_payload(), request),
    )


def add_exception_handlers(app: FastAPI) -> None:  # noqa: D401 – imperative
    """Register the type-system exception handlers on **app**."""

    app.add_exception_handler(CoercionError, _coercion_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SchemaValidationError, _validation_error_handler)  # type: ignore[arg-type]
