# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""Repository reader models.

This module defines the immutable data structures exchanged with a
repository reader: commits and diffs.
"""

from dataclasses import dataclass
from datetime import datetime

from repoview.accounts._models import Account

# Length of the abbreviated SHA shown in listings
SHORT_SHA_LENGTH: int = 10


@dataclass(frozen=True, slots=True)
class Commit:
    """A single commit as read from the version-control system.

    Attributes:
        sha: Full 40-character commit SHA hex string.
        author_name: Author name from commit.
        author_email: Author email from commit.
        committer_email: Committer email from commit.
        message: Complete commit message (subject + body).
        parent_shas: SHA hex strings of parent commits, first parent first
            (empty tuple for a root commit).
        timestamp: Author timestamp as an aware datetime.
        account: Account matched by author email, for display only.
    """

    sha: str
    author_name: str
    author_email: str
    committer_email: str
    message: str
    parent_shas: tuple[str, ...]
    timestamp: datetime
    account: Account | None = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()

    @property
    def short_sha(self) -> str:
        """Abbreviated SHA for display."""
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def parent_count(self) -> int:
        """Number of parents (0 for a root commit, 2+ for merges)."""
        return len(self.parent_shas)


@dataclass(frozen=True, slots=True)
class DiffFile:
    """One changed file in a diff.

    Attributes:
        path: Repository-relative path (new path for renames).
        additions: Lines added, counted on the complete change.
        deletions: Lines removed, counted on the complete change.
        content: Unified diff hunks (from the first ``@@`` header on). May be
            cut short when the diff exceeds its line budget.
        is_binary: True if either side is binary (content is empty).
        is_new: True if the file was added.
        is_deleted: True if the file was removed.
        is_renamed: True if the file was renamed.
        old_path: Previous path if renamed, None otherwise.
        is_incomplete: True if content was cut by the line budget.
        is_image: True if the new content sniffs as an image.
    """

    path: str
    additions: int
    deletions: int
    content: str = ""
    is_binary: bool = False
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False
    old_path: str | None = None
    is_incomplete: bool = False
    is_image: bool = False

    @property
    def line_count(self) -> int:
        """Number of diff lines materialized in ``content``."""
        return len(self.content.splitlines())


@dataclass(frozen=True, slots=True)
class DiffResult:
    """A diff between two trees, bounded by a line budget.

    Attributes:
        files: Changed files in path order.
        max_lines: Line budget applied when the diff was built.
        truncated: True if some content was dropped to honour the budget.
    """

    files: tuple[DiffFile, ...]
    max_lines: int
    truncated: bool = False

    @property
    def is_empty(self) -> bool:
        """True when nothing changed. Not a failure."""
        return not self.files

    @property
    def num_files(self) -> int:
        """Number of changed files."""
        return len(self.files)

    @property
    def line_count(self) -> int:
        """Diff lines materialized across all files."""
        return sum(f.line_count for f in self.files)

    @property
    def total_additions(self) -> int:
        """Sum of all additions."""
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        """Sum of all deletions."""
        return sum(f.deletions for f in self.files)
