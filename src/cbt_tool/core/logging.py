"""Logging configuration using structlog.

Everything is logged to stderr; stdout carries only formatted values and
rows so the output can be piped.

The level is WARNING by default, DEBUG with ``--verbose``. Setting
CBT_LOG_LEVEL (debug, info, warning, error) overrides both.
"""

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL_ENV = "CBT_LOG_LEVEL"


class _LazyStderrFactory:
    """Look up sys.stderr each time a logger is created.

    CliRunner swaps and closes stderr between invocations, so a handle
    captured at configure() time goes stale.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def resolve_log_level(verbose: bool = False) -> int:
    """Pick the numeric log level from CBT_LOG_LEVEL or the verbose flag."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if name:
        level = logging.getLevelNamesMapping().get(name)
        if level is not None:
            return level
    return logging.DEBUG if verbose else logging.WARNING


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog for cbt."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(verbose)),
        context_class=dict,
        logger_factory=_LazyStderrFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger bound to ``name``.

    Only call from inside functions, after setup_logging() has run.
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger
