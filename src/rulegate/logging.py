"""Structured logging configuration.

rulegate is silent until the host configures logging. Loggers are backed by
stdlib logging and filtered by level, and the ``rulegate`` stdlib logger has
a ``NullHandler``, so an embedding application decides where events go.
``configure_logging`` is the switch the CLI uses to turn output on.
"""

import logging
import sys

import structlog

from rulegate.config import EngineSettings


def _processors(renderer) -> list:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def _configure_defaults() -> None:
    if structlog.is_configured():
        return

    structlog.configure(
        processors=_processors(structlog.dev.ConsoleRenderer(colors=False)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    logging.getLogger("rulegate").addHandler(logging.NullHandler())


def configure_logging(settings: EngineSettings) -> None:
    """Configure structlog and stdlib logging from engine settings."""
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_renderer == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=_processors(renderer),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    _configure_defaults()
    return structlog.stdlib.get_logger(name)
