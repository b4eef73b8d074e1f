"""Logging utilities for repoview.

This module provides standalone structlog logger factories. Each logger is
self-contained and does not modify global structlog configuration, so
repoview can be embedded in a host application without touching its logging.
"""

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks REPOVIEW_DEBUG first (sets DEBUG if present), then
    REPOVIEW_LOG_LEVEL. Defaults to INFO if neither is set.
    """
    if getenv("REPOVIEW_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("REPOVIEW_LOG_LEVEL", "info").upper(), logging.INFO)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, REPOVIEW_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("REPOVIEW_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_logger(
    log_file: str | Path,
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    **context: object,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to a file.

    The log level is determined by (in order of precedence):
    1. REPOVIEW_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. REPOVIEW_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        log_file: Path to the log file (opened in append mode, parent
            directories are created).
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        **context: Key/value pairs bound to every entry.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    effective_level = (
        _log_level_from_string(level, respect_env=True)
        if level is not None
        else _get_log_level()
    )

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.WriteLoggerFactory(file=log_path.open("a"))(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
    if context:
        return logger.bind(**context)
    return logger


def create_null_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger that discards every entry.

    Used as the default when a service is constructed without a logger.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            context_class=dict,
        ),
    )
