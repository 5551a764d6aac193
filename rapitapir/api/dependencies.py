from __future__ import annotations

import json
from typing import Any, Awaitable, Callable

from fastapi import Request

from rapitapir.core.exceptions import CoercionError
from rapitapir.schema import parse
from rapitapir.types import Type

__all__: list[str] = ["validated_body"]


def validated_body(type_: Type) -> Callable[[Request], Awaitable[Any]]:
    """
    Build a FastAPI dependency yielding the coerced, validated JSON body.

    Usage::

        @app.post("/users")
        async def create_user(user: dict = Depends(validated_body(User))): ...

    Failures surface as :class:`CoercionError` / ``SchemaValidationError``;
    pair with :func:`rapitapir.api.errors.add_exception_handlers` to turn them
    into 400 responses.
    """

    async def dependency(request: Request) -> Any:
        body = await request.body()
        try:
            raw = json.loads(body) if body else None
        except ValueError as exc:
            raise CoercionError(
                body.decode("utf-8", "replace"), type_.type_name, f"Invalid JSON: {exc}"
            ) from exc
        except RecursionError as exc:
            raise CoercionError(
                body.decode("utf-8", "replace"),
                type_.type_name,
                "Maximum nesting depth exceeded",
            ) from exc
        return parse(raw, type_)

    return dependency
