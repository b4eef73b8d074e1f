"""GitRepositoryReader against real repositories built with dulwich."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import pytest

from repoview.exceptions import BlobNotFoundError, CommitNotFoundError, UpstreamError
from repoview.repository import GitRepositoryReader, RepositoryReader
from tests.integration.conftest import GitRepoBuilder

PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"


@dataclass(frozen=True, slots=True)
class History:
    """SHAs of the standard test history, oldest first."""

    init: str
    docs: str
    readme: str
    rename: str
    logo: str
    remove: str


@pytest.fixture
def history(git_repo: GitRepoBuilder) -> History:
    return History(
        init=git_repo.commit("Initial commit", {"README.md": b"hello\n"}),
        docs=git_repo.commit(
            "Add guide", {"docs/guide.md": b"# Guide\n\nStep one\nStep two\n"}
        ),
        readme=git_repo.commit(
            "Expand README\n\nMore words.", {"README.md": b"hello\nworld\n"}
        ),
        rename=git_repo.commit(
            "Rename guide",
            {
                "docs/guide.md": None,
                "docs/manual.md": b"# Guide\n\nStep one\nStep two\n",
            },
        ),
        logo=git_repo.commit("Add logo", {"assets/logo.png": PNG}),
        remove=git_repo.commit("Remove README", {"README.md": None}),
    )


@pytest.fixture
def reader(git_repo: GitRepoBuilder, history: History) -> Iterator[GitRepositoryReader]:
    _ = history
    with GitRepositoryReader(git_repo.path) as git_reader:
        yield git_reader


# =============================================================================
# Opening
# =============================================================================


class TestOpen:
    def test_satisfies_protocol(self, reader: GitRepositoryReader) -> None:
        assert isinstance(reader, RepositoryReader)

    def test_root_is_resolved(
        self, reader: GitRepositoryReader, git_repo: GitRepoBuilder
    ) -> None:
        assert reader.root == git_repo.path.resolve()

    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(UpstreamError) as exc_info:
            _ = GitRepositoryReader(tmp_path)

        assert exc_info.value.operation == "open"

    def test_empty_repository(self, git_repo: GitRepoBuilder) -> None:
        with GitRepositoryReader(git_repo.path) as empty:
            assert empty.list_branches() == []
            with pytest.raises(CommitNotFoundError):
                _ = empty.count_commits("HEAD")


# =============================================================================
# History
# =============================================================================


class TestHistory:
    def test_branches_are_sorted(
        self, git_repo: GitRepoBuilder, history: History, reader: GitRepositoryReader
    ) -> None:
        git_repo.branch("feature", history.docs)
        assert reader.list_branches() == ["feature", "main"]

    def test_count_from_branch_and_head(self, reader: GitRepositoryReader) -> None:
        assert reader.count_commits("main") == 6
        assert reader.count_commits("HEAD") == 6

    def test_count_from_commit(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        assert reader.count_commits(history.readme) == 3

    def test_commits_newest_first(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        commits = reader.commits_in_range("main", 0, 3)
        assert [c.sha for c in commits] == [history.remove, history.logo, history.rename]

    def test_offset_and_limit(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        commits = reader.commits_in_range("main", 4, 10)
        assert [c.sha for c in commits] == [history.docs, history.init]

    def test_commit_fields(self, reader: GitRepositoryReader, history: History) -> None:
        commit = reader.get_commit(history.readme)

        assert commit.author_name == "Test User"
        assert commit.author_email == "test@example.com"
        assert commit.summary == "Expand README"
        assert commit.parent_shas == (history.docs,)
        assert commit.timestamp.utcoffset() == timedelta(0)

    def test_author_timezone_is_kept(self, git_repo: GitRepoBuilder) -> None:
        sha = git_repo.commit(
            "Late night", {"a.txt": b"a\n"}, author="Jo <jo@example.org>", timezone=7200
        )

        with GitRepositoryReader(git_repo.path) as git_reader:
            commit = git_reader.get_commit(sha)

        assert commit.timestamp.utcoffset() == timedelta(hours=2)
        assert commit.author_email == "jo@example.org"

    def test_path_history(self, reader: GitRepositoryReader, history: History) -> None:
        assert reader.count_commits_for_path("main", "README.md") == 3
        assert reader.count_commits_for_path("main", "docs") == 2
        assert reader.count_commits_for_path("main", "missing.txt") == 0

        commits = reader.commits_for_path("main", "README.md", 1, 5)
        assert [c.sha for c in commits] == [history.readme, history.init]

    def test_search_is_case_insensitive(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        found = reader.search_commits("main", "readme")
        assert [c.sha for c in found] == [history.remove, history.readme]

    def test_commits_between(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        between = reader.commits_between(history.docs, history.logo)
        assert [c.sha for c in between] == [history.logo, history.rename, history.readme]

    def test_merge_commit_parents(
        self, git_repo: GitRepoBuilder, history: History
    ) -> None:
        git_repo.branch("feature", history.remove)
        side = git_repo.commit("Side work", {"side.txt": b"x\n"}, branch="feature")
        main = git_repo.commit("Main work", {"main.txt": b"y\n"})
        merge = git_repo.commit("Merge feature", {"side.txt": b"x\n"}, parents=[main, side])

        with GitRepositoryReader(git_repo.path) as git_reader:
            commit = git_reader.get_commit(merge)
            diff = git_reader.diff_for_commit(merge, 100)

        assert commit.parent_shas == (main, side)
        assert [f.path for f in diff.files] == ["side.txt"]


# =============================================================================
# Ref Resolution
# =============================================================================


class TestResolve:
    def test_abbreviated_sha(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        assert reader.get_commit(history.docs[:10]).sha == history.docs

    def test_uppercase_sha(self, reader: GitRepositoryReader, history: History) -> None:
        assert reader.get_commit(history.docs.upper()).sha == history.docs

    def test_lightweight_and_annotated_tags(
        self, git_repo: GitRepoBuilder, history: History, reader: GitRepositoryReader
    ) -> None:
        git_repo.tag("v1", history.readme)
        git_repo.tag("v2", history.logo, annotated=True)

        assert reader.get_commit("v1").sha == history.readme
        assert reader.get_commit("v2").sha == history.logo
        assert reader.get_commit("refs/tags/v2").sha == history.logo

    @pytest.mark.parametrize("ref", ["", "abc", "nope", "zzzzzzzz", "0" * 40])
    def test_unknown_refs(self, reader: GitRepositoryReader, ref: str) -> None:
        with pytest.raises(CommitNotFoundError):
            _ = reader.get_commit(ref)


# =============================================================================
# Diffs
# =============================================================================


class TestDiffForCommit:
    def test_root_commit_against_empty_tree(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        [readme] = reader.diff_for_commit(history.init, 100).files

        assert readme.path == "README.md"
        assert readme.is_new is True
        assert readme.additions == 1
        assert readme.content.startswith("@@")

    def test_modification(self, reader: GitRepositoryReader, history: History) -> None:
        [readme] = reader.diff_for_commit(history.readme, 100).files

        assert (readme.additions, readme.deletions) == (1, 0)
        assert "+world\n" in readme.content

    def test_rename_is_detected(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        [manual] = reader.diff_for_commit(history.rename, 100).files

        assert manual.is_renamed is True
        assert manual.old_path == "docs/guide.md"
        assert manual.path == "docs/manual.md"

    def test_binary_file(self, reader: GitRepositoryReader, history: History) -> None:
        [logo] = reader.diff_for_commit(history.logo, 100).files

        assert logo.is_binary is True
        assert logo.content == ""

    def test_deletion(self, reader: GitRepositoryReader, history: History) -> None:
        [readme] = reader.diff_for_commit(history.remove, 100).files

        assert readme.is_deleted is True
        assert readme.path == "README.md"
        assert readme.deletions == 2

    def test_line_budget(self, reader: GitRepositoryReader, history: History) -> None:
        diff = reader.diff_for_range(history.init, history.rename, 2)

        assert diff.truncated is True
        assert diff.line_count <= 2
        assert diff.num_files == 2


class TestDiffForRange:
    def test_spans_several_commits(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        diff = reader.diff_for_range(history.init, history.readme, 100)
        assert sorted(f.path for f in diff.files) == ["README.md", "docs/guide.md"]

    def test_same_commit_is_empty(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        assert reader.diff_for_range(history.docs, history.docs, 100).is_empty

    def test_unknown_before(self, reader: GitRepositoryReader, history: History) -> None:
        with pytest.raises(CommitNotFoundError):
            _ = reader.diff_for_range("deadbeef", history.docs, 100)


# =============================================================================
# Blobs
# =============================================================================


class TestBlobPrefix:
    def test_reads_leading_bytes(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        assert reader.blob_prefix(history.logo, "assets/logo.png", 8) == PNG[:8]

    def test_short_file_is_returned_whole(
        self, reader: GitRepositoryReader, history: History
    ) -> None:
        assert reader.blob_prefix(history.init, "README.md", 1024) == b"hello\n"

    @pytest.mark.parametrize("path", ["missing.png", "docs", "README.md/inner"])
    def test_not_a_file(
        self, reader: GitRepositoryReader, history: History, path: str
    ) -> None:
        with pytest.raises(BlobNotFoundError):
            _ = reader.blob_prefix(history.docs, path, 8)
