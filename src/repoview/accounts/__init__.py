"""Accounts as seen by repoview.

Classes:
    Account: A user account.
    AccountDirectory: Runtime-checkable protocol for account lookups.
    MemoryAccountDirectory: In-memory directory for tests and embedding.

Functions:
    resolve_commit_authors: Link commits to their authors' accounts.
"""

from repoview.accounts._directory import AccountDirectory, MemoryAccountDirectory
from repoview.accounts._models import Account
from repoview.accounts._resolve import resolve_commit_authors

__all__ = [
    "Account",
    "AccountDirectory",
    "MemoryAccountDirectory",
    "resolve_commit_authors",
]
