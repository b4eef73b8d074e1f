"""repoview configuration.

Classes:
    Config: Immutable configuration merged from defaults, TOML and env vars.
    BrowserConfig: Paging, diff budget and mail switches.
    LoggingConfig: Log level, format and file.
    StorageConfig: Comment database and JSONL sink locations.

Functions:
    safe_load_config: Load configuration for the CLI, honouring strict mode.
"""

from repoview.config._config import DEFAULT_CONFIG_FILENAME, Config
from repoview.config._load import safe_load_config
from repoview.config._loader import ENV_PREFIX, deep_merge, parse_env_vars, read_toml_file
from repoview.config._models import (
    BrowserConfig,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StorageConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "ENV_PREFIX",
    "BrowserConfig",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StorageConfig",
    "deep_merge",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
]
