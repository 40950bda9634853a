"""structlog setup for scan and fetch timing events.

Services that report timings (candle fetches, detector runs) log through
``get_logger`` with keyword fields; JSON lines in deployed environments,
a console renderer when ``json_format`` is off.
"""
import logging
import sys

import structlog


def configure_structured_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """Route stdlib logging and structlog to stdout at ``log_level``.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_format: JSON lines when True, colored console output otherwise
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Structured logger named after the calling module."""
    return structlog.get_logger(name)
