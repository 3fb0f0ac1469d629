"""Structured logging for the object store.

Library code only ever calls :func:`get_logger`; embedding applications
decide once, at startup, how events are rendered by calling
:func:`setup_logging`. Without that call structlog falls back to its own
development defaults.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from sosdb.infrastructure.config import ObservabilityConfig, get_config


def _build_processors(log_format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
    observability: ObservabilityConfig | None = None,
) -> None:
    """
    Set up structured logging with structlog.

    Explicit arguments win over the observability section of the config.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
        observability: Config section to read defaults from
    """
    observability = observability or get_config().observability
    level = (level or observability.log_level).upper()
    log_format = log_format or observability.log_format
    numeric_level = getattr(logging, level)

    # Events go to stderr so they never mix with data a caller prints.
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    structlog.configure(
        processors=_build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
