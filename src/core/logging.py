"""Structured logging for the probes.

stdout carries the single plugin line, so structlog output is routed
through the stdlib root logger to stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

from src.core.config import LoggingConfig, get_settings

_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}

# Request lines from these only show up at DEBUG.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def level_for_verbosity(verbose: int) -> str | None:
    """Map a ``-v`` count to a log level name, or None to keep the config."""
    if verbose <= 0:
        return None
    return _VERBOSITY_LEVELS.get(verbose, "DEBUG")


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(config: LoggingConfig | None = None, level: str | None = None) -> None:
    """Route structlog through a single stderr handler.

    Args:
        config: Logging section of the settings. Uses the cached settings if None.
        level: Level override from the command line (e.g. "DEBUG").
    """
    config = config or get_settings().logging
    log_level = getattr(logging, (level or config.level).upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config.format),
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    transport_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
