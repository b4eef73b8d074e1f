"""Diff view models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repoview.accounts import Account
    from repoview.comments import Comment
    from repoview.repository import Commit, DiffResult


@dataclass(frozen=True, slots=True)
class CommentView:
    """A comment prepared for display.

    Attributes:
        comment: The stored comment.
        poster: Account of the poster, None if it no longer exists.
        content: Rendered HTML for plain comments, raw content for system
            comments.
    """

    comment: "Comment"  # noqa: UP037
    poster: "Account | None"  # noqa: UP037
    content: str


@dataclass(frozen=True, slots=True)
class CommitDiffView:
    """Everything needed to show one commit's diff.

    Attributes:
        commit: The commit, with its author account resolved.
        diff: Diff against the first parent (or the empty tree).
        parents: Parent SHAs, first parent first; empty for a root commit.
        before_sha: First parent SHA, None for a root commit.
        comments: Comment views keyed by anchor line, in posting order.
    """

    commit: "Commit"  # noqa: UP037
    diff: "DiffResult"  # noqa: UP037
    parents: tuple[str, ...]
    before_sha: str | None
    comments: dict[str, list[CommentView]] = field(default_factory=dict)

    @property
    def diff_not_available(self) -> bool:
        """True when the commit changed nothing that can be shown."""
        return self.diff.is_empty

    @property
    def comment_count(self) -> int:
        return sum(len(views) for views in self.comments.values())


@dataclass(frozen=True, slots=True)
class RangeDiffView:
    """Diff between two commits plus the commits in between.

    Attributes:
        before: The ``before`` ref as requested.
        after: The resolved ``after`` commit.
        diff: Diff from the tree of before to the tree of after.
        commits: Commits reachable from after but not from before, newest
            first, or None if they could not be listed.
        commits_error: Why commits is None.
    """

    before: str
    after: "Commit"  # noqa: UP037
    diff: "DiffResult"  # noqa: UP037
    commits: "tuple[Commit, ...] | None"  # noqa: UP037
    commits_error: str | None = None

    @property
    def diff_not_available(self) -> bool:
        return self.diff.is_empty
