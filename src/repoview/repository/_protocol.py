"""Repository reader protocol.

This module defines the runtime-checkable Protocol through which the history
navigator and the diff engine read commits, diffs and blobs. Both the dulwich
backed GitRepositoryReader and the in-memory FakeRepositoryReader satisfy it.

Implementations raise ``NotFoundError`` subclasses for refs, commits and
blobs that do not exist, and ``UpstreamError`` for every other failure.
"""

from typing import Protocol, runtime_checkable

from repoview.repository._models import Commit, DiffResult


@runtime_checkable
class RepositoryReader(Protocol):
    """Read-only access to a repository's commit graph.

    A *ref* is a branch name, ``HEAD``, a tag, or a full or abbreviated
    commit SHA usable as a traversal starting point.

    Example:
        >>> def latest_summary(reader: RepositoryReader, ref: str) -> str:
        ...     commits = reader.commits_in_range(ref, 0, 1)
        ...     return commits[0].summary if commits else ""
    """

    def list_branches(self) -> list[str]:
        """List branch names.

        Returns:
            Branch names in sorted order; empty if the repository has none.
        """
        ...

    def count_commits(self, ref: str) -> int:
        """Count commits reachable from ref.

        Raises:
            CommitNotFoundError: If ref cannot be resolved.
        """
        ...

    def commits_in_range(self, ref: str, offset: int, limit: int) -> list[Commit]:
        """Get a window of the history reachable from ref.

        Args:
            ref: Starting point of the walk.
            offset: Number of commits to skip (newest first).
            limit: Maximum number of commits to return.

        Returns:
            Commits in reverse chronological order.

        Raises:
            CommitNotFoundError: If ref cannot be resolved.
        """
        ...

    def count_commits_for_path(self, ref: str, path: str) -> int:
        """Count commits reachable from ref that touched path."""
        ...

    def commits_for_path(
        self,
        ref: str,
        path: str,
        offset: int,
        limit: int,
    ) -> list[Commit]:
        """Get a window of the commits reachable from ref that touched path."""
        ...

    def search_commits(self, ref: str, query: str) -> list[Commit]:
        """Find commits reachable from ref whose message contains query.

        Matching is case-insensitive.
        """
        ...

    def get_commit(self, sha: str) -> Commit:
        """Get a single commit.

        Raises:
            CommitNotFoundError: If sha cannot be resolved.
        """
        ...

    def diff_for_commit(self, sha: str, max_lines: int) -> DiffResult:
        """Diff a commit against its first parent (or the empty tree).

        Args:
            sha: Commit to diff.
            max_lines: Line budget; content beyond it is cut upstream.

        Raises:
            CommitNotFoundError: If sha cannot be resolved.
        """
        ...

    def diff_for_range(self, before: str, after: str, max_lines: int) -> DiffResult:
        """Diff the tree of ``before`` against the tree of ``after``.

        Raises:
            CommitNotFoundError: If either side cannot be resolved.
        """
        ...

    def commits_between(self, before: str, after: str) -> list[Commit]:
        """Commits reachable from ``after`` but not from ``before``.

        Returns:
            Commits newest first; ``after`` included, ``before`` excluded.
        """
        ...

    def blob_prefix(self, sha: str, path: str, max_bytes: int) -> bytes:
        """Read at most max_bytes from the start of a file at a commit.

        Raises:
            CommitNotFoundError: If sha cannot be resolved.
            BlobNotFoundError: If path is not a file at that commit.
        """
        ...
