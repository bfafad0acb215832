"""Structured logging configuration using structlog.

Log events go to standard error so they never mix with report lines written
to standard output.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # Resolve the stream per logger; sys.stderr may be swapped after setup.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog for JSON output on standard error.

    Parameters
    ----------
    level:
        Logging level applied to all loggers. Level names such as
        ``"DEBUG"`` are accepted as well.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
    )
