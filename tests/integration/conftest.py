from collections.abc import Iterator, Mapping
from pathlib import Path

import pytest
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.object_store import BaseObjectStore
from dulwich.repo import Repo


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


def _write_tree(store: BaseObjectStore, files: Mapping[str, bytes]) -> bytes:
    """Store a tree for a flat ``path -> content`` mapping and return its id."""
    tree = Tree()
    subdirs: dict[str, dict[str, bytes]] = {}
    for path, data in files.items():
        head, _, rest = path.partition("/")
        if rest:
            subdirs.setdefault(head, {})[rest] = data
            continue
        blob = Blob.from_string(data)
        store.add_object(blob)
        tree.add(head.encode(), 0o100644, blob.id)
    for name, entries in subdirs.items():
        tree.add(name.encode(), 0o040000, _write_tree(store, entries))
    store.add_object(tree)
    return tree.id


class GitRepoBuilder:
    """Builds commits in a real Git repository without a working tree.

    Each branch keeps a snapshot of its files; ``commit`` applies changes on
    top of it (``None`` removes a path) and advances the branch.
    """

    def __init__(self, path: Path) -> None:
        self.path: Path = path
        path.mkdir(parents=True, exist_ok=True)
        self.repo: Repo = Repo.init(str(path))
        self.repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/main")
        self._snapshots: dict[str, dict[str, bytes]] = {}
        self._clock: int = 1_700_000_000

    def commit(  # noqa: PLR0913
        self,
        message: str,
        changes: Mapping[str, bytes | None] | None = None,
        *,
        branch: str = "main",
        author: str = "Test User <test@example.com>",
        timezone: int = 0,
        parents: list[str] | None = None,
    ) -> str:
        """Commit changes on branch and return the new commit SHA."""
        ref = f"refs/heads/{branch}".encode()
        snapshot = dict(self._snapshots.get(branch, {}))
        for path, data in (changes or {}).items():
            if data is None:
                snapshot.pop(path, None)
            else:
                snapshot[path] = data
        self._snapshots[branch] = snapshot

        if parents is None:
            parents = [self.repo.refs[ref].decode()] if ref in self.repo.refs else []

        self._clock += 60
        commit = Commit()
        commit.tree = _write_tree(self.repo.object_store, snapshot)
        commit.parents = [p.encode() for p in parents]
        commit.author = commit.committer = author.encode()
        commit.author_time = commit.commit_time = self._clock
        commit.author_timezone = commit.commit_timezone = timezone
        commit.encoding = b"UTF-8"
        commit.message = message.encode()
        self.repo.object_store.add_object(commit)
        self.repo.refs[ref] = commit.id
        return commit.id.decode()

    def branch(self, name: str, sha: str) -> None:
        """Create a branch pointing at sha, inheriting the files of main."""
        self.repo.refs[f"refs/heads/{name}".encode()] = sha.encode()
        self._snapshots[name] = dict(self._snapshots.get("main", {}))

    def tag(self, name: str, sha: str, *, annotated: bool = False) -> None:
        target = sha.encode()
        if annotated:
            tag = Tag()
            tag.tagger = b"Test User <test@example.com>"
            tag.tag_time = self._clock
            tag.tag_timezone = 0
            tag.name = name.encode()
            tag.message = b"release\n"
            tag.object = (Commit, target)
            self.repo.object_store.add_object(tag)
            target = tag.id
        self.repo.refs[f"refs/tags/{name}".encode()] = target

    def close(self) -> None:
        self.repo.close()


@pytest.fixture
def git_repo(tmp_path: Path) -> Iterator[GitRepoBuilder]:
    builder = GitRepoBuilder(tmp_path / "repo")
    yield builder
    builder.close()
