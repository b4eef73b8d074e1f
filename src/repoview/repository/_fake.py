# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""Fake repository reader for testing.

This module provides FakeRepositoryReader, an in-memory RepositoryReader that
records every call and can be told to fail, so navigator and engine behaviour
can be tested without a Git repository.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from types import TracebackType
from typing import Self

from repoview.exceptions import BlobNotFoundError, CommitNotFoundError
from repoview.repository._diff import apply_line_budget
from repoview.repository._models import Commit, DiffFile, DiffResult

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


@dataclass(slots=True)
class FakeRepositoryReader:
    """In-memory RepositoryReader.

    Branches hold commits newest first. A commit SHA used as a ref yields the
    branch history from that commit downwards. Tests can inject failures per
    operation name and inspect ``calls`` afterwards.

    Example:
        >>> reader = FakeRepositoryReader()
        >>> first = reader.add_commit("Initial commit")
        >>> second = reader.add_commit("Add README", files=[DiffFile("README", 1, 0)])
        >>> [c.summary for c in reader.commits_in_range("main", 0, 10)]
        ['Add README', 'Initial commit']
        >>> reader.fail("get_commit", RuntimeError("boom"))
    """

    head: str = "main"
    branches: dict[str, list[Commit]] = field(default_factory=dict)
    commits: dict[str, Commit] = field(default_factory=dict)
    diffs: dict[str, list[DiffFile]] = field(default_factory=dict)
    range_diffs: dict[tuple[str, str], list[DiffFile]] = field(default_factory=dict)
    blobs: dict[tuple[str, str], bytes] = field(default_factory=dict)
    count_overrides: dict[str, int] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)
    _counter: int = 0

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the reader (no-op for fake)."""

    # =========================================================================
    # Test Helpers
    # =========================================================================

    def add_commit(  # noqa: PLR0913
        self,
        message: str,
        *,
        branch: str = "main",
        author_name: str = "Test User",
        author_email: str = "test@example.com",
        files: Iterable[DiffFile] = (),
        timestamp: datetime | None = None,
        sha: str | None = None,
    ) -> Commit:
        """Append a commit on top of a branch and return it."""
        self._counter += 1
        history = self.branches.setdefault(branch, [])
        commit = Commit(
            sha=sha or f"{self._counter:040x}",
            author_name=author_name,
            author_email=author_email,
            committer_email=author_email,
            message=message,
            parent_shas=(history[0].sha,) if history else (),
            timestamp=timestamp or _EPOCH + timedelta(minutes=self._counter),
        )
        history.insert(0, commit)
        self.commits[commit.sha] = commit
        self.diffs[commit.sha] = list(files)
        return commit

    def set_blob(self, sha: str, path: str, data: bytes) -> None:
        """Store file content for blob_prefix."""
        self.blobs[sha, path] = data

    def set_range_diff(self, before: str, after: str, files: Iterable[DiffFile]) -> None:
        """Store the diff returned for a before/after pair."""
        self.range_diffs[before, after] = list(files)

    def fail(self, operation: str, error: Exception) -> None:
        """Make every later call to operation raise error."""
        self.failures[operation] = error

    def called(self, operation: str) -> bool:
        """True if operation was invoked at least once."""
        return any(name == operation for name, _ in self.calls)

    # =========================================================================
    # Internals
    # =========================================================================

    def _record(self, operation: str, *args: object) -> None:
        self.calls.append((operation, args))
        error = self.failures.get(operation)
        if error is not None:
            raise error

    def _history(self, ref: str) -> list[Commit]:
        name = self.head if ref == "HEAD" else ref
        if name in self.branches:
            return self.branches[name]

        commit = self._lookup(ref)
        for history in self.branches.values():
            for index, candidate in enumerate(history):
                if candidate.sha == commit.sha:
                    return history[index:]
        return [commit]

    def _lookup(self, sha: str) -> Commit:
        if sha in self.commits:
            return self.commits[sha]
        if len(sha) >= 4:  # noqa: PLR2004
            matches = [c for key, c in self.commits.items() if key.startswith(sha)]
            if len(matches) == 1:
                return matches[0]
        msg = f"Commit not found: {sha}"
        raise CommitNotFoundError(msg, ref=sha)

    def _touches(self, commit: Commit, path: str) -> bool:
        prefix = path.strip("/")
        for diff_file in self.diffs.get(commit.sha, []):
            for candidate in (diff_file.path, diff_file.old_path):
                if candidate and (
                    candidate == prefix or candidate.startswith(prefix + "/")
                ):
                    return True
        return False

    # =========================================================================
    # RepositoryReader Methods
    # =========================================================================

    def list_branches(self) -> list[str]:
        self._record("list_branches")
        return sorted(self.branches)

    def count_commits(self, ref: str) -> int:
        self._record("count_commits", ref)
        if ref in self.count_overrides:
            return self.count_overrides[ref]
        return len(self._history(ref))

    def commits_in_range(self, ref: str, offset: int, limit: int) -> list[Commit]:
        self._record("commits_in_range", ref, offset, limit)
        return self._history(ref)[offset : offset + limit]

    def count_commits_for_path(self, ref: str, path: str) -> int:
        self._record("count_commits_for_path", ref, path)
        return sum(1 for c in self._history(ref) if self._touches(c, path))

    def commits_for_path(
        self,
        ref: str,
        path: str,
        offset: int,
        limit: int,
    ) -> list[Commit]:
        self._record("commits_for_path", ref, path, offset, limit)
        touching = [c for c in self._history(ref) if self._touches(c, path)]
        return touching[offset : offset + limit]

    def search_commits(self, ref: str, query: str) -> list[Commit]:
        self._record("search_commits", ref, query)
        needle = query.lower()
        return [c for c in self._history(ref) if needle in c.message.lower()]

    def get_commit(self, sha: str) -> Commit:
        self._record("get_commit", sha)
        return self._lookup(sha)

    def diff_for_commit(self, sha: str, max_lines: int) -> DiffResult:
        self._record("diff_for_commit", sha, max_lines)
        commit = self._lookup(sha)
        return apply_line_budget(self.diffs.get(commit.sha, []), max_lines)

    def diff_for_range(self, before: str, after: str, max_lines: int) -> DiffResult:
        self._record("diff_for_range", before, after, max_lines)
        before_commit = self._lookup(before)
        after_commit = self._lookup(after)
        files = self.range_diffs.get((before_commit.sha, after_commit.sha), [])
        return apply_line_budget(files, max_lines)

    def commits_between(self, before: str, after: str) -> list[Commit]:
        self._record("commits_between", before, after)
        excluded = {c.sha for c in self._history(before)}
        return [c for c in self._history(after) if c.sha not in excluded]

    def blob_prefix(self, sha: str, path: str, max_bytes: int) -> bytes:
        self._record("blob_prefix", sha, path, max_bytes)
        commit = self._lookup(sha)
        data = self.blobs.get((commit.sha, path))
        if data is None:
            msg = f"File not found at {sha}: {path}"
            raise BlobNotFoundError(msg, sha=sha, path=path)
        return data[:max_bytes]
