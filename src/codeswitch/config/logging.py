"""Logging configuration using structlog.

Log lines go to stderr: stdout carries the resolved path for the shell.
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structlog for the process."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
