"""Comment persistence.

This module provides the CommentStore protocol with an in-memory and an
SQLite implementation. Stores assign identifiers on insert and list comments
in insertion order.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from repoview.comments._models import Comment
from repoview.utils.database import connect, create_database, delete, fetch_all, insert

_TABLE: Final = "comments"

_SCHEMA: Final = f"""
CREATE TABLE IF NOT EXISTS {_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    poster_id INTEGER NOT NULL,
    repo_id INTEGER NOT NULL,
    issue_id INTEGER NOT NULL DEFAULT 0,
    commit_sha TEXT NOT NULL,
    line TEXT NOT NULL,
    type INTEGER NOT NULL DEFAULT 0,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_{_TABLE}_commit_sha ON {_TABLE} (commit_sha);
"""


@runtime_checkable
class CommentStore(Protocol):
    """Durable storage for commit comments."""

    def insert(self, comment: Comment) -> Comment:
        """Persist a comment.

        Returns:
            The stored comment, with its identifier assigned.
        """
        ...

    def delete(self, comment_id: int, requester_id: int | None) -> bool:
        """Remove a comment.

        Args:
            comment_id: Comment to remove.
            requester_id: Only remove the comment if it was posted by this
                account. None removes regardless of the poster.

        Returns:
            True if a comment was removed.
        """
        ...

    def list_by_commit(self, commit_sha: str) -> list[Comment]:
        """List the comments on a commit in insertion order."""
        ...


@dataclass(slots=True)
class MemoryCommentStore:
    """In-memory CommentStore."""

    comments: list[Comment] = field(default_factory=list)
    _next_id: int = 1

    def insert(self, comment: Comment) -> Comment:
        stored = comment.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self.comments.append(stored)
        return stored

    def delete(self, comment_id: int, requester_id: int | None) -> bool:
        for index, comment in enumerate(self.comments):
            if comment.id == comment_id and (
                requester_id is None or comment.poster_id == requester_id
            ):
                del self.comments[index]
                return True
        return False

    def list_by_commit(self, commit_sha: str) -> list[Comment]:
        return [c for c in self.comments if c.commit_sha == commit_sha]


class SQLiteCommentStore:
    """CommentStore backed by an SQLite database.

    Each operation opens its own connection, so the store is safe to share
    between threads.

    Example:
        >>> store = SQLiteCommentStore(Path("/var/lib/repoview/comments.db"))
        >>> stored = store.insert(comment)
        >>> store.list_by_commit(stored.commit_sha)
    """

    __slots__: Final = ("_path",)

    def __init__(self, path: Path) -> None:
        """Open the store, creating the database and schema if needed."""
        self._path: Path = path
        create_database(path, schema=_SCHEMA)

    @property
    def path(self) -> Path:
        return self._path

    def insert(self, comment: Comment) -> Comment:
        with connect(self._path) as conn:
            row_id = insert(conn, _TABLE, comment, exclude={"id"})
        return comment.model_copy(update={"id": row_id})

    def delete(self, comment_id: int, requester_id: int | None) -> bool:
        where: dict[str, int] = {"id": comment_id}
        if requester_id is not None:
            where["poster_id"] = requester_id
        with connect(self._path) as conn:
            removed = delete(conn, _TABLE, where)
        return removed > 0

    def list_by_commit(self, commit_sha: str) -> list[Comment]:
        with connect(self._path) as conn:
            return fetch_all(
                conn,
                Comment,
                f"SELECT * FROM {_TABLE} WHERE commit_sha = ? ORDER BY id",  # noqa: S608
                (commit_sha,),
            )
