from pathlib import Path

import pytest

from repoview.accounts import Account, MemoryAccountDirectory
from repoview.comments import MemoryCommentStore
from repoview.config import BrowserConfig
from repoview.notifications import MemoryNotificationSink
from repoview.repository import FakeRepositoryReader


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def reader() -> FakeRepositoryReader:
    return FakeRepositoryReader()


@pytest.fixture
def alice() -> Account:
    return Account(id=1, handle="alice", email="alice@example.com", display_name="Alice")


@pytest.fixture
def bob() -> Account:
    return Account(id=2, handle="bob", email="bob@example.com")


@pytest.fixture
def carol() -> Account:
    return Account(id=3, handle="Carol", email="carol@example.com")


@pytest.fixture
def directory(alice: Account, bob: Account, carol: Account) -> MemoryAccountDirectory:
    return MemoryAccountDirectory(accounts=[alice, bob, carol])


@pytest.fixture
def store() -> MemoryCommentStore:
    return MemoryCommentStore()


@pytest.fixture
def sink() -> MemoryNotificationSink:
    return MemoryNotificationSink()


@pytest.fixture
def browser_config() -> BrowserConfig:
    return BrowserConfig()
