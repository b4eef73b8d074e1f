"""Commit and range diffs with image classification and comments."""

from dataclasses import replace
from typing import TYPE_CHECKING

from repoview.accounts import AccountDirectory, resolve_commit_authors
from repoview.comments import CommentStore, render_comment
from repoview.diff._models import CommentView, CommitDiffView, RangeDiffView
from repoview.enums import CommentType
from repoview.exceptions import UpstreamError
from repoview.repository import DiffResult, RepositoryReader
from repoview.utils import SNIFF_LENGTH, create_null_logger, is_image

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from repoview.config import BrowserConfig


class DiffEngine:
    """Builds diff views from a repository reader and a comment store.

    Example:
        >>> engine = DiffEngine(reader, directory, store, BrowserConfig())
        >>> view = engine.get_commit_diff("4f2a9c1")
        >>> view.diff.num_files, view.diff.truncated
        (3, False)
    """

    def __init__(  # noqa: PLR0913
        self,
        reader: RepositoryReader,
        accounts: AccountDirectory,
        comments: CommentStore,
        config: "BrowserConfig",  # noqa: UP037
        *,
        user_link: str = "",
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self._reader: RepositoryReader = reader
        self._accounts: AccountDirectory = accounts
        self._comments: CommentStore = comments
        self._config: BrowserConfig = config
        self._user_link: str = user_link
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    # =========================================================================
    # Views
    # =========================================================================

    def get_commit_diff(self, sha: str) -> CommitDiffView:
        """Diff a commit against its first parent.

        Raises:
            CommitNotFoundError: If sha cannot be resolved.
            UpstreamError: If the reader or the comment store fails.
        """
        try:
            commit = self._reader.get_commit(sha)
            diff = self._reader.diff_for_commit(commit.sha, self._config.max_diff_lines)
        except UpstreamError as e:
            self._logger.exception("diff_load_failed", sha=sha, operation=e.operation)
            raise

        diff = self._classify(commit.sha, diff)
        [commit] = resolve_commit_authors([commit], self._accounts)
        comments = self._load_comments(commit.sha)

        self._logger.info(
            "diff_loaded",
            sha=commit.sha,
            files=diff.num_files,
            lines=diff.line_count,
            truncated=diff.truncated,
            comments=sum(len(v) for v in comments.values()),
        )
        return CommitDiffView(
            commit=commit,
            diff=diff,
            parents=commit.parent_shas,
            before_sha=commit.parent_shas[0] if commit.parent_shas else None,
            comments=comments,
        )

    def get_range_diff(self, before: str, after: str) -> RangeDiffView:
        """Diff two commits and list the commits between them.

        The diff is required: a missing commit raises before the commit list
        is requested. Failure to list the commits in between is recorded on
        the view instead of raised.

        Raises:
            CommitNotFoundError: If before or after cannot be resolved.
            UpstreamError: If the diff cannot be computed.
        """
        try:
            after_commit = self._reader.get_commit(after)
            diff = self._reader.diff_for_range(
                before, after, self._config.max_diff_lines
            )
        except UpstreamError as e:
            self._logger.exception(
                "range_diff_load_failed",
                before=before,
                after=after,
                operation=e.operation,
            )
            raise

        diff = self._classify(after_commit.sha, diff)
        [after_commit] = resolve_commit_authors([after_commit], self._accounts)

        commits = None
        commits_error = None
        try:
            between = self._reader.commits_between(before, after)
            commits = tuple(resolve_commit_authors(between, self._accounts))
        except Exception as e:  # noqa: BLE001
            self._logger.warning(
                "range_commits_failed", before=before, after=after, error=str(e)
            )
            commits_error = str(e)

        self._logger.info(
            "range_diff_loaded",
            before=before,
            after=after_commit.sha,
            files=diff.num_files,
            commits=len(commits) if commits is not None else None,
        )
        return RangeDiffView(
            before=before,
            after=after_commit,
            diff=diff,
            commits=commits,
            commits_error=commits_error,
        )

    # =========================================================================
    # Classification
    # =========================================================================

    def is_image_file(self, sha: str, path: str) -> bool:
        """True if the file at path in commit sha sniffs as an image.

        Any failure, including a missing file, counts as "not an image".
        """
        try:
            prefix = self._reader.blob_prefix(sha, path, SNIFF_LENGTH)
        except Exception as e:  # noqa: BLE001
            self._logger.debug("image_sniff_failed", sha=sha, path=path, error=str(e))
            return False
        return is_image(prefix)

    def _classify(self, sha: str, diff: DiffResult) -> DiffResult:
        if not any(f.is_binary for f in diff.files):
            return diff
        files = tuple(
            replace(f, is_image=self.is_image_file(sha, f.path)) if f.is_binary else f
            for f in diff.files
        )
        return replace(diff, files=files)

    # =========================================================================
    # Comments
    # =========================================================================

    def _load_comments(self, sha: str) -> dict[str, list[CommentView]]:
        try:
            stored = self._comments.list_by_commit(sha)
        except Exception as e:  # noqa: BLE001
            self._logger.exception("comments_load_failed", sha=sha)
            msg = f"Failed to load comments for {sha}: {e}"
            raise UpstreamError(msg, operation="list_by_commit", cause=e) from e

        if not stored:
            return {}

        try:
            posters = self._accounts.get_accounts_by_ids({c.poster_id for c in stored})
        except Exception as e:  # noqa: BLE001
            self._logger.exception("comment_posters_load_failed", sha=sha)
            msg = f"Failed to resolve comment posters for {sha}: {e}"
            raise UpstreamError(msg, operation="get_accounts_by_ids", cause=e) from e

        grouped: dict[str, list[CommentView]] = {}
        for comment in stored:
            content = (
                str(render_comment(comment.content, user_link=self._user_link))
                if comment.type == CommentType.COMMENT
                else comment.content
            )
            grouped.setdefault(comment.line, []).append(
                CommentView(
                    comment=comment,
                    poster=posters.get(comment.poster_id),
                    content=content,
                )
            )
        return grouped
