from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from rapitapir.core.config import get_settings

__all__: list[str] = ["configure_logging"]


def _ensure_schema_context(
    logger: Any,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Guarantee a *schema* key exists in *event_dict*."""

    event_dict.setdefault("schema", None)
    return event_dict


def _build_processors(json: bool) -> list[Processor]:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        _ensure_schema_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        renderer,
    ]


def _configure_stdlib_logging(level: int) -> None:
    """Route the built-in *logging* module to stderr at *level*.

    Host frameworks (Uvicorn, Starlette) still emit through stdlib logging, so
    the root logger gets a plain formatter and structlog output stays uniform.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))  # structlog formats

    root_logger.handlers.clear()
    root_logger.addHandler(handler)


_LOGGING_CONFIGURED: bool = False


def configure_logging(debug: Optional[bool] = None, json: Optional[bool] = None) -> None:
    """Initialise `structlog` for the entire process.

    Idempotent – the first call wins and later calls are no-ops.  Libraries
    embedding *rapitapir* may skip this entirely and configure structlog
    themselves.

    Parameters
    ----------
    debug:
        When *True* lowers the log level to ``DEBUG``; otherwise ``INFO``.
        Defaults to ``Settings.debug``.
    json:
        Render events as JSON lines or human-readable console output.
        Defaults to ``Settings.log_json``.
    """

    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    if debug is None:
        debug = settings.debug
    if json is None:
        json = settings.log_json

    level: int = logging.DEBUG if debug else logging.INFO

    _configure_stdlib_logging(level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=_build_processors(json),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True
