import os
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

# Template rendering compiles on first use, so per-example timing is noisy.
settings.register_profile("repoview", deadline=None)
settings.register_profile(
    "repoview-ci",
    parent=settings.get_profile("repoview"),
    max_examples=500,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "repoview"))


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.property)
