"""Structured logging infrastructure.

This module provides logging that works for:
- Local development (rich console output)
- Worker processes under a distributed runtime (JSON structured logs)

Usage:
    from rowfold.core.logging import get_logger, configure_logging

    # Configure at startup
    configure_logging(log_level="INFO", log_format="console")

    # Get logger in any module
    logger = get_logger(__name__)

    # Log with structured context
    logger.info("window_function_configured", time_column="timestamp")

    # Use context managers for automatic context propagation
    with log_context(partition=3, key="customer-17"):
        logger.info("analysis_completed", rows=1000)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

# Context variables for correlation
_run_context: ContextVar[dict[str, Any] | None] = ContextVar("run_context", default=None)


def _add_run_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor to add run context to log events."""
    context = _run_context.get()
    if context:
        event_dict.update(context)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    show_timestamps: bool = True,
    color: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ("console" for development, "json" for workers)
        show_timestamps: Whether to show timestamps in console mode
        color: Whether to use colors in console mode
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_run_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Also configure stdlib logging for libraries
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager for adding context to logs within a scope."""

    def __init__(self, **context: Any):
        self.context = context
        self.token: Any = None

    def __enter__(self) -> LogContext:
        current = _run_context.get() or {}
        new_context = {**current, **self.context}
        self.token = _run_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token:
            _run_context.reset(self.token)


def log_context(**context: Any) -> LogContext:
    """Create a context manager for scoped logging context.

    Usage:
        with log_context(key="abc", partition=2):
            logger.info("processing")  # Will include key and partition
    """
    return LogContext(**context)


def current_log_context() -> dict[str, Any]:
    """Return a copy of the active scoped logging context."""
    return dict(_run_context.get() or {})


def configure_from_settings() -> None:
    """Configure logging from the environment-backed settings."""
    from rowfold.core.config import get_settings

    settings = get_settings()
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)


# Initialize with default configuration
configure_logging()
