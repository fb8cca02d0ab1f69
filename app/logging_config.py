"""Process-wide structlog configuration writing every log line to stderr."""

from __future__ import annotations

import logging
import sys

import structlog

_configured = False


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog once so every module logs to stderr.

    Stdout is reserved for command output such as the `convert` outcomes JSON.

    Args:
        log_level: Minimum level name, e.g. `INFO` or `DEBUG`.

    Returns:
        None: Configures structlog as a side effect.
    """

    global _configured
    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_logging_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
    _configured = True


def _logging_stderr_logger_factory(*args: object) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams are honored.
    _ = args
    return structlog.PrintLogger(file=sys.stderr)
