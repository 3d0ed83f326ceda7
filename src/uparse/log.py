"""
Logging configuration.

Single entry point for structured logging via structlog. Level and output
format come from the arguments or, failing that, from settings
(``UPARSE_LOG_LEVEL``, ``UPARSE_LOG_FORMAT``).

Usage:
    from uparse import configure_logging
    configure_logging(level="DEBUG")
"""

import logging
import sys
from functools import lru_cache
from typing import Literal, Optional

import structlog

from uparse.config import get_settings

_configured = False


def configure_logging(
    level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None,
    format: Optional[Literal["json", "console"]] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Subsequent calls are no-ops unless force=True.
    """
    global _configured

    if _configured and not force:
        return

    settings = get_settings()
    log_level = (level or settings.log_level).upper()
    log_format = (format or settings.log_format).lower()

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )
    logging.getLogger("uparse").setLevel(getattr(logging, log_level))

    _configured = True


@lru_cache(maxsize=32)
def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
