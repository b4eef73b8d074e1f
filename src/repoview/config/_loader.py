# pyright: reportAny=false
"""Reading the raw configuration sources: the TOML file and the environment."""

import copy
import os
import tomllib
from collections.abc import Collection, Mapping
from pathlib import Path
from typing import Any, Final

from repoview.exceptions import ConfigLoadError

ENV_PREFIX: Final = "REPOVIEW_"

type RawConfig = dict[str, Any]  # pyright: ignore[reportExplicitAny]


def read_toml_file(path: Path) -> RawConfig:
    """Read and parse a TOML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> RawConfig:  # pyright: ignore[reportExplicitAny]
    """Merge override into a copy of base.

    Tables merge key by key; any other value in override replaces the one in
    base outright. Neither argument is modified.
    """
    merged: RawConfig = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)  # pyright: ignore[reportUnknownArgumentType]
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_vars(
    sections: Collection[str],
    prefix: str = ENV_PREFIX,
) -> dict[str, dict[str, str]]:
    """Collect ``{prefix}{SECTION}__{KEY}`` variables by section.

    ``REPOVIEW_BROWSER__PAGE_SIZE=20`` becomes ``{"browser": {"page_size": "20"}}``.
    Values stay strings for the models to coerce. Variables naming a section
    not in sections, or without the double underscore (``REPOVIEW_STRICT_CONFIG``),
    are left alone.
    """
    result: dict[str, dict[str, str]] = {}
    for name, value in os.environ.items():
        if not name.startswith(prefix):
            continue
        section, sep, key = name[len(prefix) :].lower().partition("__")
        if not sep or not key or section not in sections:
            continue
        result.setdefault(section, {})[key] = value
    return result
