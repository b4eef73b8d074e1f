from datetime import UTC, datetime

from pytest_mock import MockerFixture

from repoview.accounts import Account, MemoryAccountDirectory, resolve_commit_authors
from repoview.repository import Commit


def _commit(sha: str, email: str) -> Commit:
    return Commit(
        sha=sha * 40,
        author_name="Someone",
        author_email=email,
        committer_email=email,
        message="msg",
        parent_shas=(),
        timestamp=datetime(2024, 5, 1, tzinfo=UTC),
    )


class TestResolveCommitAuthors:
    def test_matches_and_misses(
        self, directory: MemoryAccountDirectory, alice: Account
    ) -> None:
        commits = [_commit("a", "Alice@Example.com"), _commit("b", "ghost@example.com")]

        resolved = resolve_commit_authors(commits, directory)

        assert [c.account for c in resolved] == [alice, None]
        assert [c.sha for c in resolved] == [c.sha for c in commits]

    def test_single_lookup_for_batch(
        self, directory: MemoryAccountDirectory, mocker: MockerFixture
    ) -> None:
        spy = mocker.spy(MemoryAccountDirectory, "resolve_accounts_by_email")

        _ = resolve_commit_authors(
            [_commit(c, f"{c}@example.com") for c in "abcdef"], directory
        )

        assert spy.call_count == 1

    def test_empty_batch_skips_lookup(
        self, directory: MemoryAccountDirectory, mocker: MockerFixture
    ) -> None:
        spy = mocker.spy(MemoryAccountDirectory, "resolve_accounts_by_email")

        assert resolve_commit_authors([], directory) == []
        assert spy.call_count == 0
