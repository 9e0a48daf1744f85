"""
LRID — Structured logging configuration.

Library modules only ever call ``structlog.get_logger(...)``; entry points
(scripts, host services) call ``configure_logging()`` once at start-up.
"""

from __future__ import annotations

import logging
import sys

import structlog

from lrid.config import get_settings


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog's processor chain for the current process.

    Parameters
    ----------
    level:
        Minimum level name (``"DEBUG"``, ``"INFO"`` ...).  Defaults to
        ``Settings.LOG_LEVEL``.
    json_output:
        Render JSON lines when True, a human-readable console format when
        False.  Defaults to ``Settings.LOG_JSON``.
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_output is None else json_output

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
