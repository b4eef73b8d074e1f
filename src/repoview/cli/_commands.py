# pyright: reportUnusedCallResult=false
# ruff: noqa: FBT002
"""repoview commands: log, show, compare and comment.

The CLI has no account directory, so commit authors appear as recorded in Git
(``account`` is null in JSON output) and comment posters appear by id.
"""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from repoview.accounts import MemoryAccountDirectory
from repoview.cli._context import CLIContext
from repoview.cli._output import (
    comment_to_dict,
    commit_view_to_dict,
    page_to_dict,
    print_comment,
    print_commit_view,
    print_page,
    print_range_view,
    range_view_to_dict,
)
from repoview.cli._shared import (
    ExitCode,
    OutputFormat,
    exit_with_error,
    format_json,
    handle_errors,
)
from repoview.comments import (
    CommentService,
    CommentStore,
    MemoryCommentStore,
    SQLiteCommentStore,
)
from repoview.config import Config
from repoview.diff import DiffEngine
from repoview.history import (
    ByBranchOrCommit,
    ByFilePath,
    ByKeyword,
    HistoryNavigator,
    ModeSwitch,
    RetrievalMode,
)
from repoview.notifications import create_notification_sink
from repoview.repository import GitRepositoryReader

__all__ = ["register_commands"]


def _comment_store(config: Config) -> CommentStore:
    if config.storage.comments_db:
        return SQLiteCommentStore(Path(config.storage.comments_db))
    return MemoryCommentStore()


def _print_json(ctx: CLIContext, data: dict[str, object]) -> None:
    ctx.console.print(format_json(data), markup=False, highlight=False, soft_wrap=True)


def log(
    ref: str = "HEAD",
    *,
    path: Annotated[
        str | None, Parameter(help="Only list commits touching this path")
    ] = None,
    search: Annotated[
        str | None, Parameter(help="Only list commits whose message contains this")
    ] = None,
    page: Annotated[int, Parameter(help="Page number, starting at 1")] = 1,
    output_format: Annotated[
        OutputFormat, Parameter(name="--format", help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """List commits, newest first.

    Authors are shown as recorded in Git; accounts are not resolved.

    Args:
        ref: Branch, tag or commit to start from.
        path: Only list commits touching this path.
        search: Only list commits whose message contains this text.
        page: Page number, starting at 1.
        output_format: Output format.
    """
    ctx = CLIContext.get_current()

    mode: RetrievalMode
    if search is not None:
        mode = ByKeyword(search, ref)
    elif path:
        mode = ByFilePath(ref, path)
    else:
        mode = ByBranchOrCommit(ref)

    with (
        handle_errors(ctx.error_console, ctx.logger),
        GitRepositoryReader(ctx.repo) as reader,
    ):
        navigator = HistoryNavigator(
            reader, MemoryAccountDirectory(), ctx.config.browser, logger=ctx.logger
        )
        result = navigator.get_history_page(mode, page)
        while isinstance(result, ModeSwitch):
            result = navigator.get_history_page(result.mode, page)

    if output_format is OutputFormat.JSON:
        _print_json(ctx, page_to_dict(result))
    else:
        print_page(ctx.console, result)


def show(
    sha: str,
    *,
    output_format: Annotated[
        OutputFormat, Parameter(name="--format", help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Show a commit's diff and its line comments.

    Comments are read from ``storage.comments_db``. Authors and comment
    posters are not resolved to accounts.

    Args:
        sha: Commit to show.
        output_format: Output format.
    """
    ctx = CLIContext.get_current()

    with (
        handle_errors(ctx.error_console, ctx.logger),
        GitRepositoryReader(ctx.repo) as reader,
    ):
        engine = DiffEngine(
            reader,
            MemoryAccountDirectory(),
            _comment_store(ctx.config),
            ctx.config.browser,
            logger=ctx.logger,
        )
        view = engine.get_commit_diff(sha)

    if output_format is OutputFormat.JSON:
        _print_json(ctx, commit_view_to_dict(view))
    else:
        print_commit_view(ctx.console, view)


def compare(
    before: str,
    after: str,
    *,
    output_format: Annotated[
        OutputFormat, Parameter(name="--format", help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Compare two commits.

    Authors are shown as recorded in Git; accounts are not resolved.

    Args:
        before: Base commit (excluded from the commit list).
        after: Target commit.
        output_format: Output format.
    """
    ctx = CLIContext.get_current()

    with (
        handle_errors(ctx.error_console, ctx.logger),
        GitRepositoryReader(ctx.repo) as reader,
    ):
        engine = DiffEngine(
            reader,
            MemoryAccountDirectory(),
            MemoryCommentStore(),
            ctx.config.browser,
            logger=ctx.logger,
        )
        view = engine.get_range_diff(before, after)

    if output_format is OutputFormat.JSON:
        _print_json(ctx, range_view_to_dict(view))
    else:
        print_range_view(ctx.console, view)


def comment(  # noqa: PLR0913
    sha: str,
    anchor: str,
    content: str,
    *,
    author_id: Annotated[int, Parameter(help="Account id of the poster")],
    repo_id: Annotated[
        int, Parameter(help="Repository id recorded on the comment")
    ] = 1,
    repo_link: Annotated[
        str, Parameter(help="Base URL of the repository, used in mail links")
    ] = "",
    output_format: Annotated[
        OutputFormat, Parameter(name="--format", help="Output format")
    ] = OutputFormat.TEXT,
) -> None:
    """Add a line comment to a commit.

    The comment is stored in ``storage.comments_db``. Its activity event is
    appended to ``storage.activity_log``; with ``browser.mail_enabled``, mails
    go to ``storage.outbox``. Without an account directory no watcher or
    mention mail has a recipient.

    Args:
        sha: Commit to comment on.
        anchor: Line anchor in ``{side}L{line}`` form, e.g. ``1L12``.
        content: Comment text.
        author_id: Account id of the poster.
        repo_id: Repository id recorded on the comment.
        repo_link: Base URL of the repository, used in mail links.
        output_format: Output format.
    """
    ctx = CLIContext.get_current()
    storage = ctx.config.storage
    if not storage.comments_db:
        exit_with_error(
            "storage.comments_db must be set to store comments",
            ExitCode.LOAD_ERROR,
            console=ctx.error_console,
        )

    with (
        handle_errors(ctx.error_console, ctx.logger),
        GitRepositoryReader(ctx.repo) as reader,
    ):
        commit = reader.get_commit(sha)
        service = CommentService(
            SQLiteCommentStore(Path(storage.comments_db)),
            MemoryAccountDirectory(),
            create_notification_sink(storage),
            ctx.config.browser,
            logger=ctx.logger,
        )
        stored = service.create_commit_comment(
            author_id, repo_id, commit.sha, anchor, content, repo_link=repo_link
        )

    if output_format is OutputFormat.JSON:
        _print_json(ctx, comment_to_dict(stored))
    else:
        print_comment(ctx.console, stored)


def register_commands(app: App) -> None:
    """Register all repoview commands on app."""
    app.command(log, name="log")
    app.command(show, name="show")
    app.command(compare, name="compare")
    app.command(comment, name="comment")
