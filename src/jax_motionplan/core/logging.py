"""
Structured logging for jax_motionplan.

Library modules only call ``get_logger`` and never configure anything on
import. An application that wants planner output picks a level and format once::

    from jax_motionplan.core.logging import configure_logging

    configure_logging(level="DEBUG", json_output=True)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Set the level, renderer and destination of structlog output.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Emit JSON lines instead of the console renderer.
        log_file: Append to this file instead of writing to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_file:
        logger_factory = structlog.WriteLoggerFactory(file=Path(log_file).open("a"))
    else:
        logger_factory = structlog.PrintLoggerFactory(sys.stderr)

    if json_output:
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=not log_file)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger tagged with ``name`` (usually ``__name__``)."""
    return structlog.get_logger(logger_name=name)
