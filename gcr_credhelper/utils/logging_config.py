"""
Logging configuration using structlog for structured, JSON-based logging.

Logs are written to stderr: stdout is reserved for command output such as
tokens and credential listings.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(log_level: str = "WARNING") -> None:
    """Configure structured logging with JSON output on stderr.

    Also routes the standard library loggers used by the credential
    modules to stderr at the same level.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = log_level.upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger instance.

    Args:
        name: Optional logger name (typically __name__ from calling module)

    Returns:
        A structlog logger instance

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("token_resolved", registry="gcr.io", source="gcloud_sdk")
    """
    return structlog.get_logger(name)
