"""History navigation models.

Retrieval modes are a closed union of frozen dataclasses; the navigator
dispatches on them with ``match``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repoview.repository._models import Commit


@dataclass(frozen=True, slots=True)
class ByBranchOrCommit:
    """Full history reachable from a branch, tag or commit."""

    ref: str = "HEAD"


@dataclass(frozen=True, slots=True)
class ByFilePath:
    """History of commits touching a path, starting from ref."""

    ref: str
    path: str


@dataclass(frozen=True, slots=True)
class ByKeyword:
    """Commits whose message contains query. Not paginated."""

    query: str
    ref: str = "HEAD"


@dataclass(frozen=True, slots=True)
class ByRange:
    """Commits reachable from after but not from before. Not paginated."""

    before: str
    after: str


type RetrievalMode = ByBranchOrCommit | ByFilePath | ByKeyword | ByRange


@dataclass(frozen=True, slots=True)
class ModeSwitch:
    """Returned instead of a page when the caller must use another mode.

    An empty keyword search is not a search: the caller is sent back to the
    plain branch history.
    """

    mode: ByBranchOrCommit


@dataclass(frozen=True, slots=True)
class HistoryPage:
    """One page of commit history.

    Attributes:
        commits: Commits on this page, newest first.
        total: Number of commits across all pages.
        page: 1-based page number.
        previous: Previous page number, 0 when there is none.
        next: Next page number, 0 when there is none.
        mode: The mode that produced this page.
    """

    commits: "tuple[Commit, ...]"  # noqa: UP037
    total: int
    page: int
    previous: int
    next: int
    mode: RetrievalMode

    @property
    def has_previous(self) -> bool:
        return self.previous > 0

    @property
    def has_next(self) -> bool:
        return self.next > 0
