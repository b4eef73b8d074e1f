"""Read access to Git repositories.

This package provides the reader protocol through which repoview reads
commits, diffs and file content, together with a dulwich-backed reader and
an in-memory fake for tests.

Classes:
    RepositoryReader: Runtime-checkable protocol for dependency injection.
    GitRepositoryReader: Reader for on-disk repositories (dulwich).
    FakeRepositoryReader: In-memory reader that records calls.

Models:
    Commit: A single commit.
    DiffFile: One changed file in a diff.
    DiffResult: A bounded diff between two trees.

Example:
    >>> from repoview.repository import GitRepositoryReader
    >>> with GitRepositoryReader(Path(".")) as reader:
    ...     commits = reader.commits_in_range("HEAD", 0, 20)
"""

from repoview.repository._diff import (
    apply_line_budget,
    build_diff_file,
    compute_line_stats,
    generate_hunks,
)
from repoview.repository._fake import FakeRepositoryReader
from repoview.repository._git import GitRepositoryReader
from repoview.repository._models import SHORT_SHA_LENGTH, Commit, DiffFile, DiffResult
from repoview.repository._protocol import RepositoryReader

__all__ = [
    "SHORT_SHA_LENGTH",
    "Commit",
    "DiffFile",
    "DiffResult",
    "FakeRepositoryReader",
    "GitRepositoryReader",
    "RepositoryReader",
    "apply_line_budget",
    "build_diff_file",
    "compute_line_stats",
    "generate_hunks",
]
