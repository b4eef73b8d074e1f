"""Configuration section models.

This module defines the Pydantic models for each configuration section and
the shared enums they use.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from pathlib import Path


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names in precedence order (highest first)."""

    ENV = "env"
    FILE = "file"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """A source that contributed configuration values.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        values: Configuration values from this source.
    """

    name: ConfigSourceName
    path: "Path | None"  # noqa: UP037
    values: dict[str, Any]  # pyright: ignore[reportExplicitAny]


class BrowserConfig(BaseModel):
    """Repository browser settings.

    Attributes:
        page_size: Commits per history page.
        max_diff_lines: Line budget for a single diff.
        mail_enabled: Whether comment notifications are mailed.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    page_size: int = Field(default=50, ge=1)
    max_diff_lines: int = Field(default=10000, ge=1)
    mail_enabled: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty disables logging).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class StorageConfig(BaseModel):
    """Storage locations. Empty strings select in-memory backends.

    Attributes:
        comments_db: SQLite database holding commit comments.
        activity_log: JSONL file receiving activity events.
        outbox: JSONL file receiving outgoing mail envelopes.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    comments_db: str = ""
    activity_log: str = ""
    outbox: str = ""
