"""Structured logging configuration using Python's standard logging.

This module configures logging with:
- JSON output for production (machine-readable)
- Console output for development (human-readable)
- Current job ID support for tracing work across log lines
- Structlog integration for structured log entries

Usage:
    from jobqueue.core.logging import configure_logging, get_logger

    # Configure at startup
    configure_logging()

    # Get a logger in any module
    logger = get_logger(__name__)
    logger.info("Job added", job_id="abc-123", queue="emails")
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from jobqueue.config import Settings

# Context variable for the job currently being processed
job_id_ctx: ContextVar[str | None] = ContextVar("job_id", default=None)


def get_job_context() -> str | None:
    """Get the ID of the job being processed in this context."""
    return job_id_ctx.get()


def set_job_context(job_id: str) -> None:
    """Set the ID of the job being processed in this context."""
    job_id_ctx.set(job_id)


def clear_job_context() -> None:
    """Clear the current job ID from context."""
    job_id_ctx.set(None)


def add_job_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Structlog processor to add the current job ID to log entries."""
    job_id = get_job_context()
    if job_id and "job_id" not in event_dict:
        event_dict["job_id"] = job_id
    return event_dict


def _app_context(service: str) -> Processor:
    def add_app_context(
        logger: logging.Logger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict["service"] = service
        return event_dict

    return add_app_context


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the job queue.

    Args:
        settings: Settings to read level and format from. If None, uses
            the cached default settings.
    """
    if settings is None:
        from jobqueue.config import get_settings

        settings = get_settings()

    log_level = getattr(logging, settings.log_level.value, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_job_id,
        _app_context(settings.app_name),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Processor
    if settings.use_json_logs:
        renderer = structlog.processors.JSONRenderer()
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        processors = [
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A bound structlog logger that outputs structured logs.

    Example:
        logger = get_logger(__name__)
        logger.info("Job started", job_id="123", attempt=1)
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """Context manager to bind values to all logs within the context.

    Example:
        with log_context(queue="emails"):
            logger.info("Processing")  # Includes queue
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
