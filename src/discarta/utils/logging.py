"""Structured logging configuration using structlog.

Tile batches render on worker threads and drain concurrently on the event
loop, so every log event is stamped with the map, batch generation and
zoom level it belongs to. Output is JSON for production or colored console
for development.
"""

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, cast

import structlog
from structlog.types import Processor

from discarta.config import settings

# Correlation fields, in the order they are added to events
_CORRELATION_VARS: dict[str, ContextVar[Any]] = {
    "map_id": ContextVar("map_id", default=None),
    "generation": ContextVar("generation", default=None),
    "zoom_level": ContextVar("zoom_level", default=None),
}


def _bind(
    map_id: str | None,
    generation: int | None,
    zoom_level: int | None,
) -> list[tuple[ContextVar[Any], Token[Any]]]:
    values = {"map_id": map_id, "generation": generation, "zoom_level": zoom_level}
    return [
        (_CORRELATION_VARS[name], _CORRELATION_VARS[name].set(value))
        for name, value in values.items()
        if value is not None
    ]


def set_correlation_context(
    map_id: str | None = None,
    generation: int | None = None,
    zoom_level: int | None = None,
) -> None:
    """Set correlation IDs for the current async context.

    Fields passed as None keep their current value.

    Args:
        map_id: Identifier of the map viewport emitting the events
        generation: Tile batch generation currently being drained
        zoom_level: Zoom level of the tiles being produced
    """
    _bind(map_id, generation, zoom_level)


@contextmanager
def correlation_scope(
    map_id: str | None = None,
    generation: int | None = None,
    zoom_level: int | None = None,
) -> Iterator[None]:
    """Bind correlation IDs for the duration of a block.

    A tile pass awaited directly by its caller shares the caller's context,
    so the previous values are restored on exit instead of leaking the
    pass's generation into later events.

    Example:
        >>> with correlation_scope(map_id="a1b2", generation=3):
        ...     logger.debug("Tile pass started")
    """
    tokens = _bind(map_id, generation, zoom_level)
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def clear_correlation_context() -> None:
    """Clear all correlation context variables."""
    for var in _CORRELATION_VARS.values():
        var.set(None)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor adding the bound map, generation and zoom IDs."""
    _ = logger, method_name  # Required by structlog processor signature
    for name, var in _CORRELATION_VARS.items():
        value = var.get()
        if value is not None:
            event_dict.setdefault(name, value)
    return event_dict


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the specified settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to match
    numeric_level = getattr(logging, level.upper())
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )

    # Pillow logs every PNG chunk it reads at DEBUG
    logging.getLogger("PIL").setLevel(max(numeric_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
