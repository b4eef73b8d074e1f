"""Account directory protocol and in-memory implementation.

The directory is the seam between repoview and the hosting service's user
database. repoview only ever reads from it.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from repoview.accounts._models import Account


@runtime_checkable
class AccountDirectory(Protocol):
    """Read-only lookups of accounts and repository watchers."""

    def resolve_accounts_by_email(self, emails: Iterable[str]) -> Mapping[str, Account]:
        """Map email addresses to accounts.

        Args:
            emails: Email addresses to look up. Matching is case-insensitive.

        Returns:
            Mapping from the lowercased email to its account. Unknown emails
            are absent from the mapping.
        """
        ...

    def get_accounts_by_ids(self, ids: Iterable[int]) -> Mapping[int, Account]:
        """Map account ids to accounts, omitting unknown ids."""
        ...

    def get_accounts_by_handles(self, handles: Iterable[str]) -> Mapping[str, Account]:
        """Map lowercased handles to accounts, omitting unknown handles."""
        ...

    def list_watchers(self, repo_id: int) -> Sequence[Account]:
        """List accounts watching a repository."""
        ...


@dataclass(slots=True)
class MemoryAccountDirectory:
    """In-memory AccountDirectory.

    Example:
        >>> alice = Account(id=1, handle="alice", email="alice@example.com")
        >>> directory = MemoryAccountDirectory(accounts=[alice])
        >>> directory.watch(repo_id=7, account=alice)
        >>> directory.resolve_accounts_by_email(["ALICE@example.com"])
        {'alice@example.com': Account(id=1, handle='alice', ...)}
    """

    accounts: list[Account] = field(default_factory=list)
    watchers: dict[int, list[int]] = field(default_factory=dict)

    def add(self, account: Account) -> Account:
        """Register an account and return it."""
        self.accounts.append(account)
        return account

    def watch(self, repo_id: int, account: Account) -> None:
        """Subscribe an account to a repository."""
        watching = self.watchers.setdefault(repo_id, [])
        if account.id not in watching:
            watching.append(account.id)

    def resolve_accounts_by_email(self, emails: Iterable[str]) -> dict[str, Account]:
        wanted = {email.lower() for email in emails if email}
        return {
            account.email.lower(): account
            for account in self.accounts
            if account.email.lower() in wanted
        }

    def get_accounts_by_ids(self, ids: Iterable[int]) -> dict[int, Account]:
        wanted = set(ids)
        return {account.id: account for account in self.accounts if account.id in wanted}

    def get_accounts_by_handles(self, handles: Iterable[str]) -> dict[str, Account]:
        wanted = {handle.lower() for handle in handles}
        return {
            account.lower_handle: account
            for account in self.accounts
            if account.lower_handle in wanted
        }

    def list_watchers(self, repo_id: int) -> list[Account]:
        watching = self.watchers.get(repo_id, [])
        by_id = self.get_accounts_by_ids(watching)
        return [by_id[account_id] for account_id in watching if account_id in by_id]
