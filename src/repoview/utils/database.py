"""Small SQLite helpers for storing Pydantic models.

Rows map to models by column name. Statements run inside the transaction
opened by ``connect``, which commits when the block exits cleanly.
"""

import re
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Final, cast

from pydantic import BaseModel

_IDENTIFIER_RE: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MEMORY: Final = ":memory:"

type SQLValue = str | int | float | bytes | None


@contextmanager
def connect(path: Path | str, *, timeout: float = 30.0) -> Iterator[sqlite3.Connection]:
    """Open a connection and run the block in one immediate transaction.

    The transaction is committed on success and rolled back on any exception.
    File databases use WAL journaling. The connection is closed on exit.

    Examples:
        >>> with connect(":memory:") as conn:
        ...     conn.execute("CREATE TABLE comments (id INTEGER PRIMARY KEY)")
    """
    conn = sqlite3.connect(path, timeout=timeout, isolation_level="IMMEDIATE")
    conn.row_factory = sqlite3.Row
    if str(path) != _MEMORY:
        with suppress(sqlite3.OperationalError):
            _ = conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
        conn.commit()
    except BaseException:
        with suppress(sqlite3.Error):
            conn.rollback()
        raise
    finally:
        conn.close()


def create_database(path: Path, schema: str) -> None:
    """Create the database file and its parent directories, then apply schema.

    The schema must use ``IF NOT EXISTS`` so reopening an existing database
    is harmless.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with connect(path) as conn:
        _ = conn.executescript(schema)


def _quote(name: str) -> str:
    if not _IDENTIFIER_RE.match(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return f'"{name}"'


def fetch_all[T: BaseModel](
    conn: sqlite3.Connection,
    model: type[T],
    sql: str,
    params: tuple[SQLValue, ...] = (),
) -> list[T]:
    """Run a query and validate every row into model."""
    rows = cast("list[sqlite3.Row]", conn.execute(sql, params).fetchall())
    return [model.model_validate(dict(row)) for row in rows]


def insert(
    conn: sqlite3.Connection,
    table: str,
    obj: BaseModel,
    *,
    exclude: set[str] | None = None,
) -> int:
    """Insert obj as a row of table and return the new row id.

    Fields holding None are left to the column defaults.

    Raises:
        ValueError: If the table or a field name is not a plain identifier.
    """
    data = obj.model_dump(mode="json", exclude=exclude, exclude_none=True)
    columns = ", ".join(_quote(k) for k in data)
    placeholders = ", ".join(f":{k}" for k in data)
    cursor = conn.execute(
        f"INSERT INTO {_quote(table)} ({columns}) VALUES ({placeholders})",  # noqa: S608
        data,
    )
    return cursor.lastrowid or 0


def delete(
    conn: sqlite3.Connection,
    table: str,
    where: Mapping[str, SQLValue],
) -> int:
    """Delete the rows of table matching every column in where.

    Returns:
        Number of rows removed.

    Raises:
        ValueError: If where is empty, or a name is not a plain identifier.

    Examples:
        >>> delete(conn, "comments", {"id": 2, "poster_id": 7})
        0
    """
    if not where:
        msg = "Refusing to delete without conditions"
        raise ValueError(msg)
    conditions = " AND ".join(f"{_quote(column)} = ?" for column in where)
    cursor = conn.execute(
        f"DELETE FROM {_quote(table)} WHERE {conditions}",  # noqa: S608
        tuple(where.values()),
    )
    return cursor.rowcount
