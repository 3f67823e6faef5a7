from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


_CONFIGURED = False

# Loggers owned by the uvicorn runner; they get our handler and stop propagating.
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error")
# Per-request access lines duplicate what the metadata sinks already report.
_MUTED_LOGGERS = ("uvicorn.access",)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _event_processors() -> list[Any]:
    """Processors applied to structlog events and foreign stdlib records alike."""

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def _make_handler(stream: TextIO, *, json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(json_output),
            foreign_pre_chain=_event_processors(),
        )
    )
    return handler


def _attach(name: str | None, handler: logging.Handler, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.handlers = [handler]
    logger.setLevel(level)
    if name is not None:
        logger.propagate = False
    return logger


def configure_logging(
    level: int | str = logging.INFO,
    *,
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging (uvicorn included) to one handler.

    ``level`` accepts a number or a level name as found in ``LOG_LEVEL``;
    unknown names fall back to INFO. Output is JSON lines on stdout unless
    ``json_output=False`` (console renderer) or another ``stream`` is given.
    No-op after the first call.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric_level = _resolve_level(level)
    structlog.configure(
        processors=[*_event_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = _make_handler(stream or sys.stdout, json_output=json_output)
    _attach(None, handler, numeric_level)
    for name in _SERVER_LOGGERS + _MUTED_LOGGERS:
        _attach(name, handler, numeric_level)
    for name in _MUTED_LOGGERS:
        logging.getLogger(name).disabled = True

    _CONFIGURED = True
