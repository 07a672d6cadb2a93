"""Structured logging configuration for poolsim."""

from __future__ import annotations

import logging
import sys
from typing import Literal, Optional

import structlog

from .config import AppSettings

__all__ = ["configure_logging"]


def configure_logging(
    level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None,
    format: Optional[Literal["json", "console"]] = None,
    settings: Optional[AppSettings] = None,
) -> None:
    """Configure structured logging for the application.

    Logs go to stderr so that reports printed on stdout stay clean.

    Parameters
    ----------
    level : str, optional
        Log level. Defaults to `AppSettings.log_level`.
    format : {"json", "console"}, optional
        Renderer. Defaults to `AppSettings.log_format`.
    settings : AppSettings, optional
        Settings to read defaults from (loaded from the environment if None).
    """
    settings = settings or AppSettings()
    log_level = level or settings.log_level
    log_format = format or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
