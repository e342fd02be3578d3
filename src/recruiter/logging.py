"""Structured logging setup for the recruiter package."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog


def configure_logging(level: str = "INFO", *, stream: IO[str] | None = None) -> None:
    """Route JSON log lines to ``stream`` (stderr by default).

    stdout stays reserved for command output so CLI results remain
    parseable. Values bound with ``bind_context`` are merged into every
    event until ``clear_context`` is called.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    target = stream or sys.stderr

    logging.basicConfig(level=log_level, format="%(message)s", stream=target)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )


def bind_context(**values: Any) -> None:
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
