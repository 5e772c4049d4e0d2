"""Logging setup shared by the web app and the CLI."""

import logging
import sys
from typing import Any

import structlog

from gmail_summarizer.config import Settings


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger so a replaced sys.stderr is honored.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(settings: Settings) -> None:
    """Configure structlog to drop events below `settings.log_level`.

    Events go to stderr; stdout carries only command output.
    """

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
    )
