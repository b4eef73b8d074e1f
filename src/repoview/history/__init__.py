"""Paginated commit history.

Classes:
    HistoryNavigator: Builds history pages from a repository reader.
    HistoryPage: One page of commits with previous/next page numbers.
    ModeSwitch: Returned when the caller must use a different mode.

Modes:
    ByBranchOrCommit, ByFilePath, ByKeyword, ByRange

Example:
    >>> from repoview.history import ByFilePath, HistoryNavigator
    >>> page = navigator.get_history_page(ByFilePath("main", "docs/"), page=1)
"""

from repoview.history._models import (
    ByBranchOrCommit,
    ByFilePath,
    ByKeyword,
    ByRange,
    HistoryPage,
    ModeSwitch,
    RetrievalMode,
)
from repoview.history._navigator import HistoryNavigator
from repoview.history._pagination import (
    next_page,
    next_page_lookahead,
    normalize_page,
    page_offset,
    previous_page,
)

__all__ = [
    "ByBranchOrCommit",
    "ByFilePath",
    "ByKeyword",
    "ByRange",
    "HistoryNavigator",
    "HistoryPage",
    "ModeSwitch",
    "RetrievalMode",
    "next_page",
    "next_page_lookahead",
    "normalize_page",
    "page_offset",
    "previous_page",
]
