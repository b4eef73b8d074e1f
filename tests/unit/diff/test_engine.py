"""Tests for DiffEngine."""

import pytest
from pytest_mock import MockerFixture

from repoview.accounts import Account, MemoryAccountDirectory
from repoview.comments import Comment, MemoryCommentStore
from repoview.config import BrowserConfig
from repoview.diff import DiffEngine
from repoview.enums import CommentType
from repoview.exceptions import CommitNotFoundError, UpstreamError
from repoview.repository import DiffFile, FakeRepositoryReader

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


@pytest.fixture
def engine(
    reader: FakeRepositoryReader,
    directory: MemoryAccountDirectory,
    store: MemoryCommentStore,
    browser_config: BrowserConfig,
) -> DiffEngine:
    return DiffEngine(
        reader, directory, store, browser_config, user_link="https://git.example.com"
    )


def _text_file(path: str, lines: int = 1) -> DiffFile:
    return DiffFile(path, lines, 0, content="".join(f"+{i}\n" for i in range(lines)))


def _binary_file(path: str) -> DiffFile:
    return DiffFile(path, 0, 0, is_binary=True, is_new=True)


# =============================================================================
# Commit Diffs
# =============================================================================


class TestGetCommitDiff:
    def test_root_commit_has_no_parent(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("init", files=[_text_file("README.md")])

        view = engine.get_commit_diff(commit.sha)

        assert view.commit.sha == commit.sha
        assert view.parents == ()
        assert view.before_sha is None
        assert view.diff.num_files == 1
        assert view.diff_not_available is False

    def test_before_sha_is_first_parent(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        first = reader.add_commit("init")
        second = reader.add_commit("change", files=[_text_file("a.py")])

        view = engine.get_commit_diff(second.sha)

        assert view.before_sha == first.sha
        assert view.parents == (first.sha,)

    def test_abbreviated_sha(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("init", sha="abcdef" + "1" * 34)
        assert engine.get_commit_diff("abcdef").commit.sha == commit.sha

    def test_empty_commit_has_no_diff(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("empty")
        assert engine.get_commit_diff(commit.sha).diff_not_available is True

    def test_unknown_commit_raises_not_found(self, engine: DiffEngine) -> None:
        with pytest.raises(CommitNotFoundError):
            _ = engine.get_commit_diff("0123456789")

    def test_line_budget_comes_from_config(
        self,
        reader: FakeRepositoryReader,
        directory: MemoryAccountDirectory,
        store: MemoryCommentStore,
    ) -> None:
        commit = reader.add_commit("big", files=[_text_file("a", 5), _text_file("b", 5)])
        engine = DiffEngine(reader, directory, store, BrowserConfig(max_diff_lines=7))

        view = engine.get_commit_diff(commit.sha)

        assert ("diff_for_commit", (commit.sha, 7)) in reader.calls
        assert view.diff.truncated is True
        assert view.diff.line_count == 7

    def test_author_account_is_resolved(
        self, reader: FakeRepositoryReader, engine: DiffEngine, bob: Account
    ) -> None:
        commit = reader.add_commit("by bob", author_email="bob@example.com")
        assert engine.get_commit_diff(commit.sha).commit.account == bob

    def test_upstream_failure_propagates(
        self,
        reader: FakeRepositoryReader,
        directory: MemoryAccountDirectory,
        store: MemoryCommentStore,
        mocker: MockerFixture,
    ) -> None:
        commit = reader.add_commit("init")
        reader.fail(
            "diff_for_commit", UpstreamError("corrupt tree", operation="diff_for_commit")
        )
        logger = mocker.Mock()
        engine = DiffEngine(reader, directory, store, BrowserConfig(), logger=logger)

        with pytest.raises(UpstreamError):
            _ = engine.get_commit_diff(commit.sha)

        logger.exception.assert_called_once()


# =============================================================================
# Image Classification
# =============================================================================


class TestImageClassification:
    def test_binary_files_are_sniffed(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit(
            "assets", files=[_binary_file("logo.png"), _binary_file("data.bin")]
        )
        reader.set_blob(commit.sha, "logo.png", PNG_HEADER)
        reader.set_blob(commit.sha, "data.bin", b"\x00\x01\x02\x03")

        logo, data = engine.get_commit_diff(commit.sha).diff.files

        assert logo.is_image is True
        assert data.is_image is False

    def test_text_files_are_not_sniffed(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("docs", files=[_text_file("README.md")])

        _ = engine.get_commit_diff(commit.sha)

        assert reader.called("blob_prefix") is False

    def test_missing_blob_is_not_an_image(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("delete", files=[_binary_file("gone.png")])

        [diff_file] = engine.get_commit_diff(commit.sha).diff.files

        assert diff_file.is_image is False

    def test_sniff_failure_is_swallowed(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("assets", files=[_binary_file("logo.png")])
        reader.fail("blob_prefix", UpstreamError("pack error", operation="blob_prefix"))

        view = engine.get_commit_diff(commit.sha)

        assert view.diff.files[0].is_image is False

    def test_is_image_file_reads_sniff_length(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        commit = reader.add_commit("gif")
        reader.set_blob(commit.sha, "anim.gif", b"GIF89a" + b"\x00" * 4096)

        assert engine.is_image_file(commit.sha, "anim.gif") is True
        assert reader.calls[-1] == ("blob_prefix", (commit.sha, "anim.gif", 1024))


# =============================================================================
# Comments
# =============================================================================


class TestCommitComments:
    def _add(
        self,
        store: MemoryCommentStore,
        sha: str,
        line: str,
        content: str,
        *,
        poster_id: int = 1,
        comment_type: CommentType = CommentType.COMMENT,
    ) -> Comment:
        return store.insert(
            Comment(
                poster_id=poster_id,
                repo_id=7,
                commit_sha=sha,
                line=line,
                content=content,
                type=comment_type,
            )
        )

    def test_grouped_by_line_in_posting_order(
        self,
        reader: FakeRepositoryReader,
        store: MemoryCommentStore,
        engine: DiffEngine,
    ) -> None:
        commit = reader.add_commit("init")
        _ = self._add(store, commit.sha, "0L1", "first")
        _ = self._add(store, commit.sha, "1L5", "elsewhere")
        _ = self._add(store, commit.sha, "0L1", "second")
        _ = self._add(store, "f" * 40, "0L1", "other commit")

        view = engine.get_commit_diff(commit.sha)

        assert list(view.comments) == ["0L1", "1L5"]
        assert [v.comment.content for v in view.comments["0L1"]] == ["first", "second"]
        assert view.comment_count == 3

    def test_plain_comments_are_rendered(
        self,
        reader: FakeRepositoryReader,
        store: MemoryCommentStore,
        engine: DiffEngine,
    ) -> None:
        commit = reader.add_commit("init")
        _ = self._add(store, commit.sha, "0L1", "<i>hey</i> @bob")

        [comment_view] = engine.get_commit_diff(commit.sha).comments["0L1"]

        assert "&lt;i&gt;hey&lt;/i&gt;" in comment_view.content
        assert 'href="https://git.example.com/bob"' in comment_view.content

    def test_system_comments_are_raw(
        self,
        reader: FakeRepositoryReader,
        store: MemoryCommentStore,
        engine: DiffEngine,
    ) -> None:
        commit = reader.add_commit("init")
        _ = self._add(
            store,
            commit.sha,
            "0L1",
            "<em>line moved</em>",
            comment_type=CommentType.SYSTEM,
        )

        [comment_view] = engine.get_commit_diff(commit.sha).comments["0L1"]

        assert comment_view.content == "<em>line moved</em>"

    def test_posters_are_resolved(
        self,
        reader: FakeRepositoryReader,
        store: MemoryCommentStore,
        engine: DiffEngine,
        alice: Account,
    ) -> None:
        commit = reader.add_commit("init")
        _ = self._add(store, commit.sha, "0L1", "known", poster_id=alice.id)
        _ = self._add(store, commit.sha, "0L1", "deleted user", poster_id=99)

        known, unknown = engine.get_commit_diff(commit.sha).comments["0L1"]

        assert known.poster == alice
        assert unknown.poster is None

    def test_store_failure_is_upstream_error(
        self,
        reader: FakeRepositoryReader,
        engine: DiffEngine,
        mocker: MockerFixture,
    ) -> None:
        commit = reader.add_commit("init")
        _ = mocker.patch.object(
            MemoryCommentStore, "list_by_commit", side_effect=OSError("gone")
        )

        with pytest.raises(UpstreamError) as exc_info:
            _ = engine.get_commit_diff(commit.sha)

        assert exc_info.value.operation == "list_by_commit"

    def test_poster_lookup_failure_is_upstream_error(
        self,
        reader: FakeRepositoryReader,
        store: MemoryCommentStore,
        engine: DiffEngine,
        mocker: MockerFixture,
    ) -> None:
        commit = reader.add_commit("init")
        _ = self._add(store, commit.sha, "0L1", "hello")
        _ = mocker.patch.object(
            MemoryAccountDirectory,
            "get_accounts_by_ids",
            side_effect=ConnectionError("directory down"),
        )

        with pytest.raises(UpstreamError) as exc_info:
            _ = engine.get_commit_diff(commit.sha)

        assert exc_info.value.operation == "get_accounts_by_ids"
        assert isinstance(exc_info.value.cause, ConnectionError)


# =============================================================================
# Range Diffs
# =============================================================================


class TestGetRangeDiff:
    def test_diff_and_commits_between(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        base = reader.add_commit("base")
        middle = reader.add_commit("middle")
        tip = reader.add_commit("tip")
        reader.set_range_diff(base.sha, tip.sha, [_text_file("a.py", 2)])

        view = engine.get_range_diff(base.sha, tip.sha)

        assert view.before == base.sha
        assert view.after.sha == tip.sha
        assert view.diff.num_files == 1
        assert view.commits is not None
        assert [c.sha for c in view.commits] == [tip.sha, middle.sha]
        assert view.commits_error is None

    def test_missing_before_raises_without_listing_commits(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        tip = reader.add_commit("tip")

        with pytest.raises(CommitNotFoundError):
            _ = engine.get_range_diff("ffffffff", tip.sha)

        assert reader.called("commits_between") is False

    def test_missing_after_raises(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        base = reader.add_commit("base")

        with pytest.raises(CommitNotFoundError):
            _ = engine.get_range_diff(base.sha, "ffffffff")

        assert reader.called("diff_for_range") is False

    def test_commit_listing_failure_is_recorded(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        base = reader.add_commit("base")
        tip = reader.add_commit("tip")
        reader.set_range_diff(base.sha, tip.sha, [_text_file("a.py")])
        reader.fail("commits_between", RuntimeError("walker exploded"))

        view = engine.get_range_diff(base.sha, tip.sha)

        assert view.commits is None
        assert view.commits_error == "walker exploded"
        assert view.diff.num_files == 1

    def test_identical_commits_have_empty_diff(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        tip = reader.add_commit("tip")

        view = engine.get_range_diff(tip.sha, tip.sha)

        assert view.diff_not_available is True
        assert view.commits == ()

    def test_binary_files_in_range_are_classified(
        self, reader: FakeRepositoryReader, engine: DiffEngine
    ) -> None:
        base = reader.add_commit("base")
        tip = reader.add_commit("tip")
        reader.set_range_diff(base.sha, tip.sha, [_binary_file("icon.png")])
        reader.set_blob(tip.sha, "icon.png", PNG_HEADER)

        view = engine.get_range_diff(base.sha, tip.sha)

        assert view.diff.files[0].is_image is True
