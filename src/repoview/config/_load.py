"""Safe configuration loading for the CLI."""

import os
from pathlib import Path

from repoview.config._config import Config
from repoview.exceptions import ConfigError, ConfigLoadError


def safe_load_config(
    *,
    config_path: Path | None = None,
    cwd: Path | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Handles errors based on the REPOVIEW_STRICT_CONFIG environment variable:
    - If unset or "0": return the default config together with the error
    - If "1": re-raise

    When config_path is provided, the file must exist (explicit user request)
    regardless of strict mode.

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.

    Raises:
        ConfigLoadError: If an explicit config file is missing, or any
            failure occurs in strict mode.
        ConfigValidationError: If validation fails in strict mode.
    """
    strict_mode = os.environ.get("REPOVIEW_STRICT_CONFIG", "0") == "1"

    if config_path is not None and not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise ConfigLoadError(msg, path=config_path)

    try:
        return Config.load(config_path, cwd=cwd), None
    except ConfigError as e:
        if strict_mode:
            raise
        return Config(), str(e)
