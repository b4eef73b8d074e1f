"""Paginated commit history over four retrieval modes."""

from typing import TYPE_CHECKING

from repoview.accounts import AccountDirectory, resolve_commit_authors
from repoview.exceptions import NoBranchesError, PathHistoryNotFoundError, UpstreamError
from repoview.history._models import (
    ByBranchOrCommit,
    ByFilePath,
    ByKeyword,
    ByRange,
    HistoryPage,
    ModeSwitch,
    RetrievalMode,
)
from repoview.history._pagination import (
    next_page,
    next_page_lookahead,
    normalize_page,
    page_offset,
    previous_page,
)
from repoview.repository import RepositoryReader
from repoview.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from repoview.config import BrowserConfig
    from repoview.repository import Commit


class HistoryNavigator:
    """Builds history pages from a repository reader.

    The navigator holds no per-request state; every call derives its window
    from the page argument alone.

    Example:
        >>> navigator = HistoryNavigator(reader, directory, BrowserConfig())
        >>> page = navigator.get_history_page(ByBranchOrCommit("main"), page=2)
        >>> page.previous, page.next
        (1, 3)
    """

    def __init__(
        self,
        reader: RepositoryReader,
        accounts: AccountDirectory,
        config: "BrowserConfig",  # noqa: UP037
        *,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self._reader: RepositoryReader = reader
        self._accounts: AccountDirectory = accounts
        self._config: BrowserConfig = config
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    def get_history_page(
        self,
        mode: RetrievalMode,
        page: int = 1,
    ) -> HistoryPage | ModeSwitch:
        """Get one page of history for mode.

        Args:
            mode: What to list.
            page: 1-based page number; values below 1 are treated as 1.
                Ignored by the keyword and range modes, which are not paginated.

        Returns:
            The page, or a ModeSwitch when an empty keyword search must be
            served as branch history instead.

        Raises:
            NoBranchesError: If the repository has no branches.
            PathHistoryNotFoundError: If no commit touched the requested path.
            CommitNotFoundError: If a ref cannot be resolved.
            UpstreamError: If the reader fails.
        """
        if isinstance(mode, ByKeyword) and not mode.query:
            self._logger.debug("history_mode_switch", ref=mode.ref)
            return ModeSwitch(ByBranchOrCommit(mode.ref))

        try:
            if not self._reader.list_branches():
                msg = "Repository has no branches"
                raise NoBranchesError(msg)

            result = self._load(mode, normalize_page(page))
        except UpstreamError as e:
            self._logger.exception(
                "history_load_failed",
                mode=type(mode).__name__,
                operation=e.operation,
            )
            raise

        self._logger.info(
            "history_page_loaded",
            mode=type(mode).__name__,
            page=result.page,
            total=result.total,
            count=len(result.commits),
        )
        return result

    def _load(self, mode: RetrievalMode, page: int) -> HistoryPage:
        size = self._config.page_size

        match mode:
            case ByBranchOrCommit(ref=ref):
                total = self._reader.count_commits(ref)
                commits = self._reader.commits_in_range(
                    ref, page_offset(page, size), size
                )
                return self._page(mode, commits, total, page, next_page(page, size, total))

            case ByFilePath(ref=ref, path=path):
                total = self._reader.count_commits_for_path(ref, path)
                if total == 0:
                    msg = f"No history for path {path!r} from {ref!r}"
                    raise PathHistoryNotFoundError(msg, ref=ref, path=path)
                commits = self._reader.commits_for_path(
                    ref, path, page_offset(page, size), size
                )
                return self._page(
                    mode, commits, total, page, next_page_lookahead(page, size, total)
                )

            case ByKeyword(query=query, ref=ref):
                commits = self._reader.search_commits(ref, query)
                return self._flat(mode, commits)

            case ByRange(before=before, after=after):
                commits = self._reader.commits_between(before, after)
                return self._flat(mode, commits)

    def _page(  # noqa: PLR0913
        self,
        mode: RetrievalMode,
        commits: "list[Commit]",  # noqa: UP037
        total: int,
        page: int,
        next_number: int,
    ) -> HistoryPage:
        return HistoryPage(
            commits=tuple(resolve_commit_authors(commits, self._accounts)),
            total=total,
            page=page,
            previous=previous_page(page),
            next=next_number,
            mode=mode,
        )

    def _flat(self, mode: RetrievalMode, commits: "list[Commit]") -> HistoryPage:  # noqa: UP037
        return HistoryPage(
            commits=tuple(resolve_commit_authors(commits, self._accounts)),
            total=len(commits),
            page=1,
            previous=0,
            next=0,
            mode=mode,
        )
