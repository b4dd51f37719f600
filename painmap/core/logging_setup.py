"""
Structured logging configuration.

Log records go to stderr so command-line output on stdout stays limited to
the summary text itself.
"""

from __future__ import annotations

import logging
import sys

import structlog

from painmap.core.config import settings


def _resolve_level(level_name: str | None) -> int:
    candidate = (level_name or settings.effective_log_level).strip().upper()
    level_value = logging.getLevelName(candidate)
    if isinstance(level_value, int):
        return level_value
    return logging.INFO


def configure_logging(*, level: str | None = None, log_format: str | None = None) -> None:
    """Configure stdlib and structlog processors, optionally overriding settings."""
    level_value = _resolve_level(level)
    logging.basicConfig(
        level=level_value,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    renderer: structlog.types.Processor
    if (log_format or settings.LOG_FORMAT) == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
