"""
Structured logging configuration using structlog.

This module sets up structlog for JSON-based structured logging with context binding.
"""

import logging
from typing import Optional, TextIO
import structlog

from .config import settings


def setup_logging(
    log_level: Optional[str] = None,
    log_json: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog for structured JSON logging.

    Sets up processors for:
    - Context variable merging
    - Log level addition
    - Exception info rendering
    - Timestamp addition
    - JSON or console rendering based on settings

    Args:
        log_level: Override for settings.log_level
        log_json: Override for settings.log_json
        stream: Output stream (default: stdout at logger creation)
    """
    level = log_level or settings.log_level
    use_json = settings.log_json if log_json is None else log_json

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if use_json
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        # Loggers bound to an explicit stream are rebuilt on each use
        cache_logger_on_first_use=stream is None,
    )
