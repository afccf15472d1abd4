import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from lsfiles.dir import Dir, DotFilter
from lsfiles.git import GitCache


@pytest.fixture
def tree(tmp_path):
    root = tmp_path.resolve()
    (root / "a.txt").write_text("a")
    (root / ".hidden").write_text("h")
    (root / "sub").mkdir()
    return root


def names(items):
    return sorted(item.name for item in items)


def test_read_dir_lists_every_entry(tree):
    d = Dir.read_dir(tree)
    assert d.path == tree
    assert sorted(d.contents) == sorted([tree / "a.txt", tree / ".hidden", tree / "sub"])


def test_read_dir_of_file_raises(tree):
    with pytest.raises(OSError):
        Dir.read_dir(tree / "a.txt")


def test_read_dir_missing_raises(tree):
    with pytest.raises(FileNotFoundError):
        Dir.read_dir(tree / "missing")


def test_shows_dotfiles():
    assert DotFilter.DOTFILES_AND_DOTS.shows_dotfiles()
    assert DotFilter.DOTFILES.shows_dotfiles()
    assert not DotFilter.JUST_FILES.shows_dotfiles()


def test_files_hides_dotfiles_by_default(tree):
    d = Dir.read_dir(tree)
    assert names(d.files()) == ["a.txt", "sub"]


def test_files_with_dotfiles(tree):
    d = Dir.read_dir(tree)
    assert names(d.files(DotFilter.DOTFILES)) == [".hidden", "a.txt", "sub"]


def test_files_with_dots_come_first(tree):
    d = Dir.read_dir(tree)
    listed = list(d.files(DotFilter.DOTFILES_AND_DOTS))
    assert [f.name for f in listed[:2]] == [".", ".."]
    assert all(f.is_all_all for f in listed[:2])
    assert not any(f.is_all_all for f in listed[2:])
    assert listed[1].path == tree / ".."
    assert names(listed[2:]) == [".hidden", "a.txt", "sub"]


def test_files_know_their_parent(tree):
    d = Dir.read_dir(tree)
    assert all(f.parent_dir is d for f in d.files())


def test_vanished_entry_yields_error(tree):
    d = Dir.read_dir(tree)
    (tree / "a.txt").unlink()
    results = list(d.files())
    errors = [r for r in results if isinstance(r, OSError)]
    assert len(errors) == 1
    assert isinstance(errors[0], FileNotFoundError)
    assert Path(errors[0].filename) == tree / "a.txt"


def test_contains_and_join(tree):
    d = Dir.read_dir(tree)
    assert d.contains(tree / "a.txt")
    assert not d.contains(tree / "b.txt")
    assert d.join("x") == tree / "x"


def _runner(repo_root, porcelain):
    def run(args, cwd=None, **kwargs):
        if "rev-parse" in args:
            return subprocess.CompletedProcess(args, 0, stdout=os.fsencode(str(repo_root)) + b"\n", stderr=b"")
        return subprocess.CompletedProcess(args, 0, stdout=porcelain, stderr=b"")
    return run


def test_git_ignored_files_are_skipped(tree):
    (tree / "build.log").write_text("log")
    d = Dir.read_dir(tree)
    with mock.patch("lsfiles.git.subprocess.run", side_effect=_runner(tree, b"!! build.log\0")):
        cache = GitCache([tree])
        ignoring = names(d.files(DotFilter.JUST_FILES, cache, True))
        showing = names(d.files(DotFilter.JUST_FILES, cache, False))
    assert ignoring == ["a.txt", "sub"]
    assert showing == ["a.txt", "build.log", "sub"]


def test_git_ignoring_without_cache_hides_nothing(tree):
    d = Dir.read_dir(tree)
    assert names(d.files(DotFilter.JUST_FILES, None, True)) == ["a.txt", "sub"]