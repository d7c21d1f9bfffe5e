"""Column Profiler — Structured Logging System.

Provides structured JSON logging for production and colored text output for
local development. Every entry emitted during a profiling run carries the
run_id bound by the orchestrator.

Column values are never logged: only field names, counts and timings.

Usage:
    from logger import get_logger, configure_logging

    # Initialize at startup
    configure_logging(environment="production")

    # Get a logger
    logger = get_logger(__name__)
    logger.info("Profiling started", fields=["amount"])
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# =============================================================================
# Context Variables for Run Tracking
# =============================================================================
# Set by the orchestrator for the duration of a run

run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)

SERVICE_NAME = "column-profiler"
SERVICE_VERSION = "1.0.0"


# =============================================================================
# Structlog Processors
# =============================================================================

def add_run_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Inject the current profiling run_id into log entries."""
    run_id = run_id_var.get()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def add_service_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add service metadata for log aggregation."""
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = SERVICE_VERSION
    return event_dict


def drop_color_message_key(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Remove color_message key added by structlog (not needed in JSON)."""
    event_dict.pop("color_message", None)
    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================

def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
    json_format: bool | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        environment: Deployment environment (development, staging, production).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Force JSON output. If None, auto-detect based on environment.

    Example:
        >>> configure_logging(environment="production", log_level="INFO")
    """
    use_json = json_format if json_format is not None else (environment != "development")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
        add_run_context,
    ]

    if use_json:
        shared_processors.extend([
            drop_color_message_key,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        shared_processors.extend([
            structlog.dev.ConsoleRenderer(colors=True),
        ])

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )


def configure_from_settings() -> None:
    """Configure logging from the LOG_* section of the application settings."""
    from config import get_settings

    settings = get_settings()
    configure_logging(
        environment=settings.environment,
        log_level=settings.log.level,
        json_format=settings.log.format == "json",
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured structlog logger with automatic run context injection.
    """
    return structlog.stdlib.get_logger(name)
