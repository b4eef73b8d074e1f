# ruff: noqa: TC003  # Path needed at runtime for method bodies
"""Git repository reader backed by dulwich.

This module provides GitRepositoryReader, the RepositoryReader used against
on-disk repositories. All dulwich failures are translated into the repoview
exception hierarchy so callers never see dulwich exceptions.
"""

import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from itertools import islice
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from dulwich.diff_tree import (
    CHANGE_ADD,
    CHANGE_DELETE,
    RenameDetector,
    tree_changes,
)
from dulwich.errors import NotGitRepository, NotTreeError
from dulwich.object_store import tree_lookup_path
from dulwich.objects import S_ISGITLINK, Blob, Commit as GitCommit, Tag
from dulwich.repo import Repo

from repoview.exceptions import (
    BlobNotFoundError,
    CommitNotFoundError,
    RepoviewError,
    UpstreamError,
)
from repoview.repository._diff import apply_line_budget, build_diff_file
from repoview.repository._models import Commit, DiffFile, DiffResult

# Similarity threshold for rename detection (0-100 scale for dulwich)
_RENAME_THRESHOLD: Final = 60

# Git SHA length in hexadecimal characters
_SHA_HEX_LENGTH: Final = 40

# Minimum length for abbreviated SHA resolution
_MIN_SHA_ABBREV_LENGTH: Final = 4

# Upper bound on keyword search results
_SEARCH_MAX_RESULTS: Final = 1000

_HEX_RE: Final = re.compile(r"^[0-9a-fA-F]+$")


@contextmanager
def _upstream(operation: str) -> Iterator[None]:
    """Translate unexpected failures into UpstreamError.

    repoview errors raised inside the block pass through unchanged.
    """
    try:
        yield
    except RepoviewError:
        raise
    except Exception as e:  # noqa: BLE001
        msg = f"{operation} failed: {e}"
        raise UpstreamError(msg, operation=operation, cause=e) from e


def _split_identity(identity: bytes) -> tuple[str, str]:
    """Split a ``Name <email>`` identity line."""
    text = identity.decode("utf-8", errors="replace")
    if "<" in text and text.endswith(">"):
        name, email = text.rsplit("<", 1)
        return name.strip(), email.rstrip(">").strip()
    return text.strip(), ""


def _decode_path(path: bytes | None) -> str | None:
    return path.decode("utf-8", errors="replace") if path is not None else None


class GitRepositoryReader:
    """Reads commits, diffs and blobs from an on-disk Git repository.

    The reader implements the context manager protocol; the underlying
    dulwich Repo is closed when the context exits.

    Example:
        >>> with GitRepositoryReader(Path("/srv/git/project.git")) as reader:
        ...     total = reader.count_commits("main")
        ...     first_page = reader.commits_in_range("main", 0, 50)
    """

    __slots__: Final = ("_repo", "_root")
    _root: Path
    _repo: Repo

    def __init__(self, path: Path) -> None:
        """Open the repository.

        Args:
            path: Path to a working tree or a bare repository.

        Raises:
            UpstreamError: If no Git repository exists at path.
        """
        self._root = path.resolve()
        try:
            self._repo = Repo(str(self._root))
        except NotGitRepository as e:
            msg = f"Not a Git repository: {path}"
            raise UpstreamError(msg, operation="open", cause=e) from e

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying dulwich Repo and release file handles."""
        self._repo.close()

    @property
    def root(self) -> Path:
        """Resolved path of the repository."""
        return self._root

    # =========================================================================
    # Ref Resolution
    # =========================================================================

    def _resolve(self, ref: str) -> GitCommit:
        """Resolve a ref to a commit object.

        Tries, in order: ``HEAD``, ``refs/heads/<ref>``, ``refs/tags/<ref>``,
        a fully qualified ``refs/...`` name, and finally a full or abbreviated
        commit SHA. Annotated tags are peeled.

        Raises:
            CommitNotFoundError: If nothing matches or the target is not a commit.
        """
        if not ref:
            msg = "Empty ref"
            raise CommitNotFoundError(msg, ref=ref)

        if ref == "HEAD":
            candidates = [b"HEAD"]
        else:
            candidates = [f"refs/heads/{ref}".encode(), f"refs/tags/{ref}".encode()]
            if ref.startswith("refs/"):
                candidates.append(ref.encode())

        sha: bytes | None = None
        for name in candidates:
            try:
                sha = self._repo.refs[name]
            except KeyError:
                continue
            break

        if sha is None:
            sha = self._resolve_sha(ref)

        obj = self._repo[sha]
        while isinstance(obj, Tag):
            obj = self._repo[obj.object[1]]

        if not isinstance(obj, GitCommit):
            msg = f"Ref does not point to a commit: {ref}"
            raise CommitNotFoundError(msg, ref=ref)
        return obj

    def _resolve_sha(self, sha: str) -> bytes:
        """Resolve a full or abbreviated SHA to a commit id.

        Raises:
            CommitNotFoundError: If the SHA is malformed, too short, unknown,
                or an ambiguous prefix.
        """
        if len(sha) < _MIN_SHA_ABBREV_LENGTH or not _HEX_RE.match(sha):
            msg = f"Unknown ref: {sha}"
            raise CommitNotFoundError(msg, ref=sha)

        sha_lower = sha.lower().encode("ascii")
        if len(sha) == _SHA_HEX_LENGTH:
            if sha_lower not in self._repo.object_store:
                msg = f"Commit not found: {sha}"
                raise CommitNotFoundError(msg, ref=sha)
            return sha_lower

        matches: list[bytes] = []
        for obj_sha in self._repo.object_store:
            if obj_sha.startswith(sha_lower) and isinstance(
                self._repo[obj_sha], GitCommit
            ):
                matches.append(obj_sha)

        if not matches:
            msg = f"Commit not found: {sha}"
            raise CommitNotFoundError(msg, ref=sha)
        if len(matches) > 1:
            msg = f"Ambiguous SHA prefix: {sha} (matches {len(matches)} commits)"
            raise CommitNotFoundError(msg, ref=sha)
        return matches[0]

    # =========================================================================
    # Conversion
    # =========================================================================

    def _to_commit(self, obj: GitCommit) -> Commit:
        author_name, author_email = _split_identity(obj.author)
        _, committer_email = _split_identity(obj.committer)
        tz = timezone(timedelta(seconds=obj.author_timezone))
        return Commit(
            sha=obj.id.decode("ascii"),
            author_name=author_name,
            author_email=author_email,
            committer_email=committer_email,
            message=obj.message.decode("utf-8", errors="replace"),
            parent_shas=tuple(p.decode("ascii") for p in obj.parents),
            timestamp=datetime.fromtimestamp(obj.author_time, tz=tz),
        )

    def _walk(
        self,
        include: GitCommit,
        *,
        exclude: GitCommit | None = None,
        path: str | None = None,
    ) -> Iterator[GitCommit]:
        walker_kwargs: dict[str, object] = {"include": [include.id]}
        if exclude is not None:
            walker_kwargs["exclude"] = [exclude.id]
        if path:
            walker_kwargs["paths"] = [path.strip("/").encode("utf-8")]
        for entry in self._repo.get_walker(**walker_kwargs):  # pyright: ignore[reportArgumentType]
            yield entry.commit

    # =========================================================================
    # History
    # =========================================================================

    def list_branches(self) -> list[str]:
        with _upstream("list_branches"):
            names = self._repo.refs.keys(base=b"refs/heads/")
            return sorted(name.decode("utf-8", errors="replace") for name in names)

    def count_commits(self, ref: str) -> int:
        with _upstream("count_commits"):
            return sum(1 for _ in self._walk(self._resolve(ref)))

    def commits_in_range(self, ref: str, offset: int, limit: int) -> list[Commit]:
        with _upstream("commits_in_range"):
            walk = self._walk(self._resolve(ref))
            return [self._to_commit(c) for c in islice(walk, offset, offset + limit)]

    def count_commits_for_path(self, ref: str, path: str) -> int:
        with _upstream("count_commits_for_path"):
            return sum(1 for _ in self._walk(self._resolve(ref), path=path))

    def commits_for_path(
        self,
        ref: str,
        path: str,
        offset: int,
        limit: int,
    ) -> list[Commit]:
        with _upstream("commits_for_path"):
            walk = self._walk(self._resolve(ref), path=path)
            return [self._to_commit(c) for c in islice(walk, offset, offset + limit)]

    def search_commits(self, ref: str, query: str) -> list[Commit]:
        needle = query.lower()
        with _upstream("search_commits"):
            matches = (
                c
                for c in self._walk(self._resolve(ref))
                if needle in c.message.decode("utf-8", errors="replace").lower()
            )
            return [self._to_commit(c) for c in islice(matches, _SEARCH_MAX_RESULTS)]

    def get_commit(self, sha: str) -> Commit:
        with _upstream("get_commit"):
            return self._to_commit(self._resolve(sha))

    def commits_between(self, before: str, after: str) -> list[Commit]:
        with _upstream("commits_between"):
            after_commit = self._resolve(after)
            before_commit = self._resolve(before)
            return [
                self._to_commit(c)
                for c in self._walk(after_commit, exclude=before_commit)
            ]

    # =========================================================================
    # Diffs
    # =========================================================================

    def diff_for_commit(self, sha: str, max_lines: int) -> DiffResult:
        with _upstream("diff_for_commit"):
            commit = self._resolve(sha)
            parent_tree: bytes | None = None
            if commit.parents:
                parent = self._repo[commit.parents[0]]
                parent_tree = getattr(parent, "tree", None)
            return apply_line_budget(
                self._diff_trees(parent_tree, commit.tree), max_lines
            )

    def diff_for_range(self, before: str, after: str, max_lines: int) -> DiffResult:
        with _upstream("diff_for_range"):
            before_commit = self._resolve(before)
            after_commit = self._resolve(after)
            return apply_line_budget(
                self._diff_trees(before_commit.tree, after_commit.tree), max_lines
            )

    def _diff_trees(
        self,
        old_tree: bytes | None,
        new_tree: bytes,
    ) -> Iterator[DiffFile]:
        """Yield a DiffFile per changed path, lazily."""
        detector = RenameDetector(
            self._repo.object_store, rename_threshold=_RENAME_THRESHOLD
        )
        for change in tree_changes(
            self._repo.object_store, old_tree, new_tree, rename_detector=detector
        ):
            old_entry = change.old
            new_entry = change.new
            old_path = _decode_path(old_entry.path) if old_entry else None
            new_path = _decode_path(new_entry.path) if new_entry else None

            if (old_entry and old_entry.mode and S_ISGITLINK(old_entry.mode)) or (
                new_entry and new_entry.mode and S_ISGITLINK(new_entry.mode)
            ):
                continue

            old_content = self._blob_data(old_entry.sha if old_entry else None)
            new_content = self._blob_data(new_entry.sha if new_entry else None)

            yield build_diff_file(
                new_path or old_path or "",
                old_content,
                new_content,
                is_new=change.type == CHANGE_ADD,
                is_deleted=change.type == CHANGE_DELETE,
                old_path=old_path,
            )

    def _blob_data(self, sha: bytes | None) -> bytes:
        if not sha:
            return b""
        blob = self._repo[sha]
        return blob.as_raw_string() if isinstance(blob, Blob) else b""

    # =========================================================================
    # Blobs
    # =========================================================================

    def blob_prefix(self, sha: str, path: str, max_bytes: int) -> bytes:
        with _upstream("blob_prefix"):
            commit = self._resolve(sha)
            try:
                _, blob_sha = tree_lookup_path(
                    self._repo.__getitem__, commit.tree, path.strip("/").encode("utf-8")
                )
            except (KeyError, NotTreeError) as e:
                msg = f"File not found at {sha}: {path}"
                raise BlobNotFoundError(msg, sha=sha, path=path) from e

            blob = self._repo[blob_sha]
            if not isinstance(blob, Blob):
                msg = f"Not a file at {sha}: {path}"
                raise BlobNotFoundError(msg, sha=sha, path=path)

            prefix = bytearray()
            for chunk in blob.as_raw_chunks():
                prefix += chunk[: max_bytes - len(prefix)]
                if len(prefix) >= max_bytes:
                    break
            return bytes(prefix)
