# pyright: reportExplicitAny=false, reportAny=false
"""Configuration container with typed access.

This module provides the main Config class: defaults, a TOML file and
``REPOVIEW_*`` environment variables merged into one immutable object.
"""

from pathlib import Path
from typing import Any, ClassVar, Final, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from repoview.config._loader import deep_merge, parse_env_vars, read_toml_file
from repoview.config._models import (
    BrowserConfig,
    ConfigSource,
    ConfigSourceName,
    LoggingConfig,
    StorageConfig,
)
from repoview.exceptions import ConfigValidationError

# File looked up in the working directory when no path is given
DEFAULT_CONFIG_FILENAME: Final = "repoview.toml"


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods rather than the constructor so that validation
    failures surface as ConfigValidationError.

    Example:
        >>> config = Config.from_dict({"browser": {"page_size": 20}})
        >>> config.browser.page_size
        20
        >>> config.get("browser.max_diff_lines")
        10000
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        source: str | None = None,
    ) -> Self:
        """Create configuration from a dictionary.

        Raises:
            ConfigValidationError: If a value is rejected. The error names the
                first offending dotted key.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            issue = e.errors()[0]
            key = ".".join(str(part) for part in issue["loc"])
            msg = f"Invalid configuration value for '{key}'"
            raise ConfigValidationError(
                msg,
                key=key,
                value=issue.get("input"),
                expected=issue["msg"],
                source=source,
            ) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        config = cls.from_dict(data, source=str(path))
        config._sources = (ConfigSource(ConfigSourceName.FILE, path, data),)
        return config

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        *,
        include_env: bool = True,
        cwd: Path | None = None,
    ) -> Self:
        """Load configuration from all sources.

        Precedence (highest first): environment variables, the config file,
        defaults. When config_path is None, ``repoview.toml`` in cwd (default:
        the current directory) is used if it exists.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        sources: list[ConfigSource] = []
        merged: dict[str, Any] = {}

        path = config_path
        if path is None:
            candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
            path = candidate if candidate.is_file() else None

        if path is not None:
            file_values = read_toml_file(path)
            sources.append(ConfigSource(ConfigSourceName.FILE, path, file_values))
            merged = deep_merge(merged, file_values)

        if include_env:
            env_values = parse_env_vars(cls.model_fields.keys())
            if env_values:
                sources.append(ConfigSource(ConfigSourceName.ENV, None, env_values))
                merged = deep_merge(merged, env_values)

        config = cls.from_dict(merged, source=str(path) if path else None)
        config._sources = tuple(reversed(sources))
        return config

    @property
    def sources(self) -> list[ConfigSource]:
        """Sources that contributed values, highest precedence first."""
        return list(self._sources)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key path.

        Example:
            >>> Config().get("logging.level")
            <LogLevel.INFO: 'info'>
            >>> Config().get("browser.unknown", 5)
            5
        """
        current: Any = self
        for part in key.split("."):
            if not isinstance(current, BaseModel) or part not in type(current).model_fields:
                return default
            current = getattr(current, part)
        return current
