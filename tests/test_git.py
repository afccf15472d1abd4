import os
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from lsfiles.fields import Git, GitStatus
from lsfiles.git import (
    GitCache,
    GitRepo,
    RepoStatuses,
    StatusFlag,
    index_status,
    parse_porcelain,
    reorient,
    working_tree_status,
)


@pytest.fixture
def workdir(tmp_path):
    return tmp_path.resolve()


def make_runner(repo_root: Path, porcelain: bytes, calls: list):
    def run(args, cwd=None, **kwargs):
        calls.append(tuple(args))
        if "rev-parse" in args:
            if Path(cwd).is_relative_to(repo_root):
                return subprocess.CompletedProcess(args, 0, stdout=os.fsencode(str(repo_root)) + b"\n", stderr=b"")
            return subprocess.CompletedProcess(args, 128, stdout=b"", stderr=b"fatal: not a git repository")
        return subprocess.CompletedProcess(args, 0, stdout=porcelain, stderr=b"")
    return run


def test_parse_modified_file(workdir):
    result = parse_porcelain(b" M src/a.rs\0", workdir)
    assert result.statuses == [(workdir / "src" / "a.rs", StatusFlag.WT_MODIFIED)]


def test_parse_rename_skips_original_path(workdir):
    result = parse_porcelain(b"R  new.txt\0old.txt\0?? u.txt\0", workdir)
    assert result.statuses == [
        (workdir / "new.txt", StatusFlag.INDEX_RENAMED),
        (workdir / "u.txt", StatusFlag.WT_NEW),
    ]


def test_parse_ignored_directory_and_conflict(workdir):
    result = parse_porcelain("!! target/\0UU c.txt\0", workdir)
    assert result.statuses == [
        (workdir / "target", StatusFlag.IGNORED),
        (workdir / "c.txt", StatusFlag.CONFLICTED),
    ]


def test_parse_str_and_bytes_agree(workdir):
    text = "MM a.txt\0A  b.txt\0"
    assert parse_porcelain(text, workdir) == parse_porcelain(text.encode(), workdir)


@pytest.mark.parametrize("flags, expected", [
    (StatusFlag.WT_NEW | StatusFlag.WT_MODIFIED, GitStatus.NEW),
    (StatusFlag.WT_MODIFIED, GitStatus.MODIFIED),
    (StatusFlag.WT_DELETED, GitStatus.DELETED),
    (StatusFlag.WT_RENAMED, GitStatus.RENAMED),
    (StatusFlag.WT_TYPECHANGE, GitStatus.TYPE_CHANGE),
    (StatusFlag.IGNORED, GitStatus.IGNORED),
    (StatusFlag.CONFLICTED, GitStatus.CONFLICTED),
    (StatusFlag.INDEX_NEW, GitStatus.NOT_MODIFIED),
])
def test_working_tree_status(flags, expected):
    assert working_tree_status(flags) == expected


@pytest.mark.parametrize("flags, expected", [
    (StatusFlag.INDEX_NEW | StatusFlag.INDEX_MODIFIED, GitStatus.NEW),
    (StatusFlag.INDEX_MODIFIED, GitStatus.MODIFIED),
    (StatusFlag.INDEX_DELETED, GitStatus.DELETED),
    (StatusFlag.INDEX_RENAMED, GitStatus.RENAMED),
    (StatusFlag.INDEX_TYPECHANGE, GitStatus.TYPE_CHANGE),
    (StatusFlag.WT_MODIFIED, GitStatus.NOT_MODIFIED),
])
def test_index_status(flags, expected):
    assert index_status(flags) == expected


def test_file_status_staged_and_unstaged(workdir):
    statuses = parse_porcelain(b"MM a.txt\0", workdir)
    assert statuses.file_status(workdir / "a.txt") == Git(GitStatus.MODIFIED, GitStatus.MODIFIED)
    assert statuses.file_status(workdir / "other.txt") == Git()


def test_file_under_ignored_directory_is_ignored(workdir):
    statuses = parse_porcelain(b"!! target/\0", workdir)
    assert statuses.file_status(workdir / "target" / "debug" / "x").unstaged == GitStatus.IGNORED
    assert statuses.file_status(workdir / "src" / "x").unstaged == GitStatus.NOT_MODIFIED


def test_dir_status_aggregates_children(workdir):
    statuses = RepoStatuses([
        (workdir / "src" / "a", StatusFlag.WT_MODIFIED),
        (workdir / "src" / "b", StatusFlag.INDEX_NEW),
    ])
    assert statuses.dir_status(workdir / "src") == Git(GitStatus.NEW, GitStatus.MODIFIED)
    assert statuses.file_status(workdir / "src") == Git()
    assert statuses.status(workdir / "src", True) == statuses.dir_status(workdir / "src")
    assert statuses.status(workdir / "src" / "a", False) == statuses.file_status(workdir / "src" / "a")


def test_reorient_keeps_missing_absolute_path(workdir):
    missing = workdir / "nowhere" / "file"
    assert reorient(missing) == missing


def test_reorient_relative_path_uses_cwd(workdir, monkeypatch):
    (workdir / "f").write_text("x")
    monkeypatch.chdir(workdir)
    assert reorient("f") == workdir / "f"


def test_repo_has_path_and_workdir(workdir):
    repo = GitRepo(workdir=workdir, original_path=workdir / "a", extra_paths=[workdir / "b"])
    assert repo.has_path(workdir / "a" / "x")
    assert repo.has_path(workdir / "b")
    assert not repo.has_path(workdir / "c")
    assert repo.has_workdir(str(workdir))


def test_repo_search_uses_injected_statuses(workdir):
    repo = GitRepo(workdir=workdir, original_path=workdir,
                   statuses=parse_porcelain(b"?? n.txt\0", workdir))
    assert repo.search(workdir / "n.txt", False).unstaged == GitStatus.NEW


def test_discover_outside_repository_raises(workdir):
    repo_root = workdir / "repo"
    outside = workdir / "outside"
    repo_root.mkdir()
    outside.mkdir()
    with mock.patch("lsfiles.git.subprocess.run", side_effect=make_runner(repo_root, b"", [])):
        with pytest.raises(LookupError):
            GitRepo.discover(outside)


def test_discover_finds_workdir_for_file(workdir):
    repo_root = workdir / "repo"
    repo_root.mkdir()
    (repo_root / "a.txt").write_text("x")
    with mock.patch("lsfiles.git.subprocess.run", side_effect=make_runner(repo_root, b"", [])):
        repo = GitRepo.discover(repo_root / "a.txt")
    assert repo.workdir == repo_root
    assert repo.original_path == repo_root / "a.txt"


def test_cache_groups_paths_and_records_misses(workdir):
    repo_root = workdir / "repo"
    (repo_root / "sub").mkdir(parents=True)
    (repo_root / "other").mkdir()
    outside = workdir / "outside"
    outside.mkdir()
    calls = []
    with mock.patch("lsfiles.git.subprocess.run", side_effect=make_runner(repo_root, b"", calls)):
        cache = GitCache([repo_root / "sub", repo_root / "other", outside, outside, repo_root / "sub" / "x"])
    assert len(cache.repos) == 1
    assert cache.repos[0].extra_paths == [repo_root / "other"]
    assert cache.misses == [outside]
    assert cache.has_anything_for(repo_root / "other" / "f")
    assert not cache.has_anything_for(outside / "f")
    assert len(calls) == 3


def test_cache_get_queries_once(workdir):
    repo_root = workdir / "repo"
    repo_root.mkdir()
    calls = []
    runner = make_runner(repo_root, b" M a.txt\0A  b.txt\0", calls)
    with mock.patch("lsfiles.git.subprocess.run", side_effect=runner):
        cache = GitCache([repo_root])
        first = cache.get(repo_root / "a.txt", False)
        second = cache.get(repo_root / "b.txt", False)
        whole = cache.get(repo_root, True)
    assert first == Git(GitStatus.NOT_MODIFIED, GitStatus.MODIFIED)
    assert second == Git(GitStatus.NEW, GitStatus.NOT_MODIFIED)
    assert whole == Git(GitStatus.NEW, GitStatus.MODIFIED)
    assert sum("status" in call for call in calls) == 1


def test_cache_get_outside_repository_is_default(workdir):
    cache = GitCache()
    assert cache.get(workdir / "x", False) == Git()
    assert not cache.has_anything_for(workdir)