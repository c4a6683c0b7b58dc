"""
OCEAN Engine — Structured logging configuration

The engine only ever calls ``structlog.get_logger``; applications embedding it
decide how events are rendered.  ``configure_logging`` installs the JSON
processor chain used by the batch script.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

import structlog

from ocean_engine.config import get_settings


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Configure structlog to emit JSON lines filtered at ``level``.

    ``level`` defaults to ``LOG_LEVEL`` from settings; ``stream`` defaults to
    stdout.
    """
    level_name = (level or get_settings().LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
