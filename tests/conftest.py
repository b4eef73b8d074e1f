import io
import os

import pytest
from rich.console import Console


@pytest.fixture(autouse=True)
def clean_repoview_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep REPOVIEW_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("REPOVIEW_"):
            monkeypatch.delenv(key)


@pytest.fixture
def console() -> Console:
    return Console(
        file=io.StringIO(),
        width=200,
        force_terminal=False,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def error_console() -> Console:
    return Console(
        file=io.StringIO(),
        width=200,
        force_terminal=False,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
