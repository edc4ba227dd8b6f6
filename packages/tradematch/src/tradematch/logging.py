"""Logging configuration for tradematch."""

import logging
import os

import structlog


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog for the CLI and the API server.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). If None, reads from
               LOG_LEVEL env var, defaulting to INFO.
        json_output: Render one JSON object per line instead of the colored
               console format. If None, reads LOG_FORMAT ("json" or "console").
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)
    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "console").lower() == "json"

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
