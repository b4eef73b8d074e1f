"""Decorate commits with the accounts of their authors."""

from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from repoview.accounts._directory import AccountDirectory
    from repoview.repository._models import Commit


def resolve_commit_authors(
    commits: "Iterable[Commit]",  # noqa: UP037
    directory: "AccountDirectory",  # noqa: UP037
) -> "list[Commit]":  # noqa: UP037
    """Attach the matching account to each commit by author email.

    A single directory lookup is issued for the whole batch. Commits whose
    author email matches no account are returned unchanged (``account`` stays
    None); a miss is never an error.

    Args:
        commits: Commits in display order.
        directory: Account lookup capability.

    Returns:
        New list of commits in the same order.
    """
    commit_list = list(commits)
    if not commit_list:
        return commit_list

    accounts = directory.resolve_accounts_by_email(
        {commit.author_email for commit in commit_list}
    )
    return [
        replace(commit, account=accounts.get(commit.author_email.lower()))
        for commit in commit_list
    ]
