# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

- Standardized exit codes
- JSON output formatting
- Error reporting
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Any, Never

import orjson
from rich.console import Console
from rich.markup import escape

from repoview.exceptions import (
    ConfigError,
    NotFoundError,
    RepoviewError,
    UpstreamError,
    ValidationError,
)
from repoview.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]


class ExitCode(IntEnum):
    """Standard exit codes for repoview CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    UPSTREAM_ERROR = 5


class OutputFormat(StrEnum):
    """Supported output formats for commands."""

    TEXT = "text"
    JSON = "json"


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON (datetimes are serialized as ISO-8601)."""
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.UPSTREAM_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = Console(stderr=True)

    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(code)


def exit_code_for(error: RepoviewError) -> ExitCode:
    """Map an exception to the exit code reported for it."""
    match error:
        case NotFoundError():
            return ExitCode.NOT_FOUND
        case ValidationError():
            return ExitCode.VALIDATION_ERROR
        case ConfigError():
            return ExitCode.LOAD_ERROR
        case UpstreamError(operation="open"):
            return ExitCode.LOAD_ERROR
        case _:
            return ExitCode.UPSTREAM_ERROR


@contextmanager
def handle_errors(
    console: Console,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> Iterator[None]:
    """Turn repoview errors raised by a command into an error exit.

    The console gets the sanitized ``user_message``; the detailed message
    and traceback go to the log.
    """
    try:
        yield
    except RepoviewError as e:
        code = exit_code_for(e)
        (logger or create_null_logger()).exception(
            "command_failed",
            error=str(e),
            error_type=type(e).__name__,
            exit_code=int(code),
        )
        exit_with_error(e.user_message, code, console=console)
