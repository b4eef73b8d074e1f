"""Diff construction helpers shared by repository readers."""

from collections.abc import Iterable
from dataclasses import replace
from difflib import SequenceMatcher

from dulwich.patch import is_binary, unified_diff

from repoview.repository._models import DiffFile, DiffResult


# Number of context lines around each hunk
DEFAULT_CONTEXT_LINES: int = 3


def compute_line_stats(old_content: bytes, new_content: bytes) -> tuple[int, int]:
    """Compute additions and deletions between two content blobs.

    Args:
        old_content: Original content.
        new_content: New content.

    Returns:
        Tuple of (additions, deletions).
    """
    matcher = SequenceMatcher(None, old_content.splitlines(), new_content.splitlines())

    additions = 0
    deletions = 0
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("delete", "replace"):
            deletions += i2 - i1
        if tag in ("insert", "replace"):
            additions += j2 - j1

    return additions, deletions


def generate_hunks(
    old_content: bytes,
    new_content: bytes,
    *,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Generate unified diff hunks between two content blobs.

    The ``---``/``+++`` file header lines are dropped; the result starts at
    the first ``@@`` hunk header.

    Args:
        old_content: Original content as bytes.
        new_content: New content as bytes.
        context_lines: Number of context lines.

    Returns:
        Hunk text, or an empty string when the contents are equal.
    """
    diff_lines = unified_diff(
        old_content.splitlines(keepends=True),
        new_content.splitlines(keepends=True),
        fromfile=b"a",
        tofile=b"b",
        n=context_lines,
    )

    parts: list[str] = []
    for line in diff_lines:
        if not parts and not line.startswith(b"@@"):
            continue
        text = line.decode("utf-8", errors="replace")
        if not text.endswith("\n"):
            text += "\n"
        parts.append(text)
    return "".join(parts)


def build_diff_file(  # noqa: PLR0913
    path: str,
    old_content: bytes,
    new_content: bytes,
    *,
    is_new: bool = False,
    is_deleted: bool = False,
    old_path: str | None = None,
) -> DiffFile:
    """Build a complete (untruncated) DiffFile from both sides of a change.

    Args:
        path: Display path (new path, or old path for deletions).
        old_content: Content before the change (empty for additions).
        new_content: Content after the change (empty for deletions).
        is_new: True if the file was added.
        is_deleted: True if the file was removed.
        old_path: Previous path when renamed.

    Returns:
        DiffFile with statistics and hunks.
    """
    is_renamed = old_path is not None and old_path != path
    if is_binary(old_content) or is_binary(new_content):
        return DiffFile(
            path=path,
            additions=0,
            deletions=0,
            is_binary=True,
            is_new=is_new,
            is_deleted=is_deleted,
            is_renamed=is_renamed,
            old_path=old_path if is_renamed else None,
        )

    additions, deletions = compute_line_stats(old_content, new_content)
    return DiffFile(
        path=path,
        additions=additions,
        deletions=deletions,
        content=generate_hunks(old_content, new_content),
        is_new=is_new,
        is_deleted=is_deleted,
        is_renamed=is_renamed,
        old_path=old_path if is_renamed else None,
    )


def apply_line_budget(files: Iterable[DiffFile], max_lines: int) -> DiffResult:
    """Cut diff content so that no more than ``max_lines`` lines are kept.

    Files are consumed in order. The file that crosses the budget keeps the
    lines that still fit and is marked incomplete; every later file keeps its
    statistics but loses its content. Files are never dropped, so the caller
    can still list everything that changed.

    Args:
        files: Complete diff files in display order.
        max_lines: Maximum number of diff lines to keep (must be >= 1).

    Returns:
        DiffResult whose ``line_count`` is at most ``max_lines``.

    Raises:
        ValueError: If max_lines is less than 1.
    """
    if max_lines < 1:
        msg = f"max_lines must be at least 1, got {max_lines}"
        raise ValueError(msg)

    remaining = max_lines
    truncated = False
    kept: list[DiffFile] = []

    for diff_file in files:
        lines = diff_file.content.splitlines(keepends=True)
        if len(lines) <= remaining:
            kept.append(diff_file)
            remaining -= len(lines)
            continue

        truncated = True
        kept.append(
            replace(
                diff_file,
                content="".join(lines[:remaining]),
                is_incomplete=True,
            )
        )
        remaining = 0

    return DiffResult(files=tuple(kept), max_lines=max_lines, truncated=truncated)
