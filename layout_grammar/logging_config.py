"""Structured logging setup for applications embedding the layout grammar.

The library only calls ``structlog.get_logger()``; host applications call
``configure_logging()`` once at startup.
"""

import logging
from typing import Optional

import structlog

from layout_grammar.config import LayoutSettings, get_settings


def configure_logging(settings: Optional[LayoutSettings] = None) -> None:
    """Install the structlog processor chain.

    Args:
        settings: Policy settings; ``DEBUG`` picks the console renderer and
            ``LOG_LEVEL`` sets the minimum level emitted.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
