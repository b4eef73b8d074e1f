"""Rendering of history pages and diff views for the terminal."""

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from repoview.cli._shared import FormattableData

if TYPE_CHECKING:
    from repoview.comments import Comment
    from repoview.diff import CommitDiffView, RangeDiffView
    from repoview.history import HistoryPage
    from repoview.repository import Commit, DiffFile, DiffResult


# =============================================================================
# JSON
# =============================================================================


def commit_to_dict(commit: "Commit") -> FormattableData:  # noqa: UP037
    return {
        "sha": commit.sha,
        "short_sha": commit.short_sha,
        "summary": commit.summary,
        "message": commit.message,
        "author_name": commit.author_name,
        "author_email": commit.author_email,
        "account": commit.account.handle if commit.account else None,
        "timestamp": commit.timestamp,
        "parents": list(commit.parent_shas),
    }


def comment_to_dict(comment: "Comment") -> FormattableData:  # noqa: UP037
    return comment.model_dump(mode="json")


def page_to_dict(page: "HistoryPage") -> FormattableData:  # noqa: UP037
    return {
        "mode": type(page.mode).__name__,
        "page": page.page,
        "previous": page.previous,
        "next": page.next,
        "total": page.total,
        "commits": [commit_to_dict(c) for c in page.commits],
    }


def _file_to_dict(diff_file: "DiffFile") -> FormattableData:  # noqa: UP037
    return {
        "path": diff_file.path,
        "old_path": diff_file.old_path,
        "additions": diff_file.additions,
        "deletions": diff_file.deletions,
        "is_binary": diff_file.is_binary,
        "is_image": diff_file.is_image,
        "is_new": diff_file.is_new,
        "is_deleted": diff_file.is_deleted,
        "is_renamed": diff_file.is_renamed,
        "is_incomplete": diff_file.is_incomplete,
        "content": diff_file.content,
    }


def diff_to_dict(diff: "DiffResult") -> FormattableData:  # noqa: UP037
    return {
        "num_files": diff.num_files,
        "total_additions": diff.total_additions,
        "total_deletions": diff.total_deletions,
        "max_lines": diff.max_lines,
        "truncated": diff.truncated,
        "files": [_file_to_dict(f) for f in diff.files],
    }


def commit_view_to_dict(view: "CommitDiffView") -> FormattableData:  # noqa: UP037
    return {
        "commit": commit_to_dict(view.commit),
        "parents": list(view.parents),
        "before_sha": view.before_sha,
        "diff_not_available": view.diff_not_available,
        "diff": diff_to_dict(view.diff),
        "comments": {
            line: [
                {
                    "id": v.comment.id,
                    "poster": v.poster.handle if v.poster else None,
                    "created_at": v.comment.created_at,
                    "content": v.content,
                }
                for v in views
            ]
            for line, views in view.comments.items()
        },
    }


def range_view_to_dict(view: "RangeDiffView") -> FormattableData:  # noqa: UP037
    return {
        "before": view.before,
        "after": commit_to_dict(view.after),
        "diff_not_available": view.diff_not_available,
        "diff": diff_to_dict(view.diff),
        "commits": (
            [commit_to_dict(c) for c in view.commits]
            if view.commits is not None
            else None
        ),
        "commits_error": view.commits_error,
    }


# =============================================================================
# Text
# =============================================================================


def _commit_line(commit: "Commit") -> str:  # noqa: UP037
    author = commit.account.handle if commit.account else commit.author_name
    return (
        f"[yellow]{commit.short_sha}[/yellow] "
        f"[dim]{commit.timestamp:%Y-%m-%d}[/dim] "
        f"{escape(author)}  {escape(commit.summary)}"
    )


def print_page(console: Console, page: "HistoryPage") -> None:  # noqa: UP037
    if not page.commits:
        console.print("[dim]No commits on this page[/dim]")
    for commit in page.commits:
        console.print(_commit_line(commit))

    footer = f"page {page.page}, {page.total} commit(s)"
    if page.previous:
        footer += f", previous: {page.previous}"
    if page.next:
        footer += f", next: {page.next}"
    console.print(f"\n[dim]{footer}[/dim]")


def _file_flags(diff_file: "DiffFile") -> str:  # noqa: UP037
    flags = [
        name
        for name, on in (
            ("new", diff_file.is_new),
            ("deleted", diff_file.is_deleted),
            ("renamed", diff_file.is_renamed),
            ("image" if diff_file.is_image else "binary", diff_file.is_binary),
            ("incomplete", diff_file.is_incomplete),
        )
        if on
    ]
    return ", ".join(flags)


def print_diff(console: Console, diff: "DiffResult") -> None:  # noqa: UP037
    if diff.is_empty:
        console.print("[dim]No changes to show[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Notes", style="dim")
    for diff_file in diff.files:
        name = diff_file.path
        if diff_file.is_renamed and diff_file.old_path:
            name = f"{diff_file.old_path} -> {diff_file.path}"
        table.add_row(
            escape(name),
            str(diff_file.additions),
            str(diff_file.deletions),
            _file_flags(diff_file),
        )
    console.print(table)
    console.print(
        f"{diff.num_files} file(s) changed, "
        f"{diff.total_additions} insertion(s), {diff.total_deletions} deletion(s)"
    )
    if diff.truncated:
        console.print(
            f"[yellow]Diff truncated to {diff.max_lines} lines[/yellow]"
        )


def print_commit_view(console: Console, view: "CommitDiffView") -> None:  # noqa: UP037
    commit = view.commit
    console.print(f"[bold yellow]commit {commit.sha}[/bold yellow]")
    if view.parents:
        console.print(f"Parents: {' '.join(p[:10] for p in view.parents)}")
    console.print(f"Author: {escape(commit.author_name)} <{escape(commit.author_email)}>")
    console.print(f"Date:   {commit.timestamp.isoformat()}")
    console.print()
    for line in commit.message.rstrip("\n").splitlines():
        console.print(f"    {escape(line)}")
    console.print()
    print_diff(console, view.diff)

    if view.comments:
        console.print(f"\n[bold]Comments ({view.comment_count})[/bold]")
        for line, views in view.comments.items():
            for comment_view in views:
                poster = (
                    comment_view.poster.handle
                    if comment_view.poster
                    else f"user {comment_view.comment.poster_id}"
                )
                console.print(
                    f"[cyan]{escape(line)}[/cyan] {escape(poster)}: "
                    f"{escape(comment_view.comment.content)}"
                )


def print_range_view(console: Console, view: "RangeDiffView") -> None:  # noqa: UP037
    console.print(
        f"[bold]Comparing {escape(view.before)}...{view.after.short_sha}[/bold]"
    )
    if view.commits is None:
        console.print(
            f"[yellow]Commits could not be listed: {escape(view.commits_error or '')}"
            "[/yellow]"
        )
    else:
        console.print(f"{len(view.commits)} commit(s)")
        for commit in view.commits:
            console.print(_commit_line(commit))
    console.print()
    print_diff(console, view.diff)


def print_comment(console: Console, comment: "Comment") -> None:  # noqa: UP037
    console.print(
        f"Comment [bold]{comment.id}[/bold] added to "
        f"[yellow]{comment.commit_sha[:10]}[/yellow] at "
        f"[cyan]{escape(comment.line)}[/cyan]"
    )
