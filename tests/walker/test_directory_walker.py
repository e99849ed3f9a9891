"""Unit tests for the DirectoryWalker class."""

import os
import sys

import pytest

from codefence.exceptions import DirectoryNotFoundError
from codefence.types import FileEntry
from codefence.walker.directory_walker import DirectoryWalker
from codefence.walker.permission_action import PermissionAction


def make_tree(root, paths):
    for relative_path in paths:
        path = root / relative_path
        if relative_path.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(relative_path)


def try_symlink(target, link):
    try:
        os.symlink(target, link)
    except (OSError, NotImplementedError):
        pytest.skip("Symlink creation not supported on this platform/environment")


@pytest.fixture
def unreadable_dir(tmp_path):
    """A directory without read permission, skipped where permissions are not enforced."""
    if sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0):
        pytest.skip("Directory permissions are not enforced for this user/platform")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("secret")
    locked.chmod(0o000)
    yield locked
    locked.chmod(0o755)


def test_walk_order(tmp_path):
    make_tree(tmp_path, ["b.txt", "a/z.txt", "a/b/c.txt", "a.txt", "c/"])

    entries = list(DirectoryWalker(tmp_path).walk())

    assert entries == [
        FileEntry("a", is_dir=True),
        FileEntry("a/b", is_dir=True),
        FileEntry("a/b/c.txt"),
        FileEntry("a/z.txt"),
        FileEntry("a.txt"),
        FileEntry("b.txt"),
        FileEntry("c", is_dir=True),
    ]


def test_sorting_is_by_code_point(tmp_path):
    make_tree(tmp_path, ["b.txt", "B.txt", "_x.txt", "a.txt"])
    names = [entry.relative_path for entry in DirectoryWalker(tmp_path).walk()]
    assert names == ["B.txt", "_x.txt", "a.txt", "b.txt"]


def test_walk_is_repeatable(tmp_path):
    make_tree(tmp_path, ["x/1.txt", "x/2.txt", "y.txt"])
    walker = DirectoryWalker(tmp_path)
    assert list(walker.walk()) == list(walker.walk())


def test_walk_sees_changes_between_calls(tmp_path):
    make_tree(tmp_path, ["one.txt"])
    walker = DirectoryWalker(tmp_path)
    assert len(list(walker.walk())) == 1
    make_tree(tmp_path, ["two.txt"])
    assert len(list(walker.walk())) == 2


def test_empty_directory(tmp_path):
    assert list(DirectoryWalker(tmp_path).walk()) == []


def test_walk_is_lazy(tmp_path):
    make_tree(tmp_path, ["a/1.txt", "b/2.txt"])
    walker = DirectoryWalker(tmp_path)
    iterator = walker.walk()
    assert next(iterator) == FileEntry("a", is_dir=True)
    # Removing a directory that has not been reached yet is not an error
    (tmp_path / "b" / "2.txt").unlink()
    (tmp_path / "b").rmdir()
    assert list(iterator) == [FileEntry("a/1.txt")]


def test_missing_root(tmp_path):
    walker = DirectoryWalker(tmp_path / "missing")
    with pytest.raises(DirectoryNotFoundError):
        list(walker.walk())


def test_root_is_a_file(tmp_path):
    make_tree(tmp_path, ["file.txt"])
    with pytest.raises(DirectoryNotFoundError):
        list(DirectoryWalker(tmp_path / "file.txt").walk())


def test_prune(tmp_path):
    make_tree(tmp_path, ["keep/a.txt", "skip/b.txt", "keep/skip/c.txt"])
    visited = []

    def prune(relative_path):
        visited.append(relative_path)
        return relative_path.split("/")[-1] == "skip"

    entries = [entry.relative_path for entry in DirectoryWalker(tmp_path, prune=prune).walk()]

    assert entries == ["keep", "keep/a.txt"]
    assert visited == ["keep", "keep/skip", "skip"]


def test_follows_directory_symlinks(tmp_path):
    make_tree(tmp_path, ["real/file.txt"])
    try_symlink(tmp_path / "real", tmp_path / "alias")

    entries = [entry.relative_path for entry in DirectoryWalker(tmp_path).walk()]

    assert entries == ["alias", "alias/file.txt", "real", "real/file.txt"]


def test_follows_file_symlinks(tmp_path):
    make_tree(tmp_path, ["real.txt"])
    try_symlink(tmp_path / "real.txt", tmp_path / "link.txt")

    entries = list(DirectoryWalker(tmp_path).walk())

    assert entries == [FileEntry("link.txt"), FileEntry("real.txt")]


def test_symlink_cycle_is_skipped(tmp_path):
    make_tree(tmp_path, ["a/file.txt"])
    try_symlink(tmp_path, tmp_path / "a" / "loop")

    entries = [entry.relative_path for entry in DirectoryWalker(tmp_path).walk()]

    assert entries == ["a", "a/file.txt"]


def test_broken_symlink_is_skipped(tmp_path):
    make_tree(tmp_path, ["real.txt"])
    try_symlink(tmp_path / "missing.txt", tmp_path / "broken.txt")

    entries = [entry.relative_path for entry in DirectoryWalker(tmp_path).walk()]

    assert entries == ["real.txt"]


def test_symlinks_not_followed(tmp_path):
    make_tree(tmp_path, ["real/file.txt", "real.txt"])
    try_symlink(tmp_path / "real", tmp_path / "alias")
    try_symlink(tmp_path / "real.txt", tmp_path / "link.txt")

    entries = [entry.relative_path for entry in DirectoryWalker(tmp_path, follow_symlinks=False).walk()]

    assert entries == ["real", "real/file.txt", "real.txt"]


def test_unreadable_directory_warns(tmp_path, unreadable_dir):
    messages = []
    walker = DirectoryWalker(tmp_path, on_warning=messages.append)

    entries = [entry.relative_path for entry in walker.walk()]

    assert entries == ["locked"]
    assert len(messages) == 1
    assert messages[0].startswith("Cannot read directory 'locked': ")
    assert walker.warnings == messages


def test_unreadable_directory_ignored(tmp_path, unreadable_dir):
    messages = []
    walker = DirectoryWalker(tmp_path, permission_action=PermissionAction.IGNORE, on_warning=messages.append)

    assert [entry.relative_path for entry in walker.walk()] == ["locked"]
    assert messages == []
    assert walker.warnings == []


def test_unreadable_directory_raises(tmp_path, unreadable_dir):
    walker = DirectoryWalker(tmp_path, permission_action=PermissionAction.RAISE)
    with pytest.raises(PermissionError, match="Access denied to"):
        list(walker.walk())
