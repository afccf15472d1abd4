"""Git status of files and directories, read through the ``git`` command."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from enum import IntFlag
from pathlib import Path
from typing import Iterable, Optional, Union

from lsfiles.fields import Git, GitStatus

log = logging.getLogger(__name__)

_STATUS_COMMAND = (
    "git", "status", "--porcelain=v1", "-z",
    "--ignored=matching", "--untracked-files=all",
)
_TOPLEVEL_COMMAND = ("git", "rev-parse", "--show-toplevel")

_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


class StatusFlag(IntFlag):
    """Raw status bits of one path in a repository."""

    CURRENT = 0
    INDEX_NEW = 1 << 0
    INDEX_MODIFIED = 1 << 1
    INDEX_DELETED = 1 << 2
    INDEX_RENAMED = 1 << 3
    INDEX_TYPECHANGE = 1 << 4
    WT_NEW = 1 << 7
    WT_MODIFIED = 1 << 8
    WT_DELETED = 1 << 9
    WT_TYPECHANGE = 1 << 10
    WT_RENAMED = 1 << 11
    IGNORED = 1 << 14
    CONFLICTED = 1 << 15


_INDEX_CODES = {
    "A": StatusFlag.INDEX_NEW,
    "C": StatusFlag.INDEX_NEW,
    "M": StatusFlag.INDEX_MODIFIED,
    "D": StatusFlag.INDEX_DELETED,
    "R": StatusFlag.INDEX_RENAMED,
    "T": StatusFlag.INDEX_TYPECHANGE,
}

_WORKTREE_CODES = {
    "A": StatusFlag.WT_NEW,
    "M": StatusFlag.WT_MODIFIED,
    "D": StatusFlag.WT_DELETED,
    "R": StatusFlag.WT_RENAMED,
    "T": StatusFlag.WT_TYPECHANGE,
}


def _flags_for(code: str) -> StatusFlag:
    if code == "??":
        return StatusFlag.WT_NEW
    if code == "!!":
        return StatusFlag.IGNORED
    if code in _CONFLICT_CODES:
        return StatusFlag.CONFLICTED
    index, worktree = code[0], code[1]
    return _INDEX_CODES.get(index, StatusFlag.CURRENT) | _WORKTREE_CODES.get(worktree, StatusFlag.CURRENT)


def working_tree_status(status: StatusFlag) -> GitStatus:
    """The user-facing status of unstaged changes."""
    for flag, result in (
        (StatusFlag.WT_NEW, GitStatus.NEW),
        (StatusFlag.WT_MODIFIED, GitStatus.MODIFIED),
        (StatusFlag.WT_DELETED, GitStatus.DELETED),
        (StatusFlag.WT_RENAMED, GitStatus.RENAMED),
        (StatusFlag.WT_TYPECHANGE, GitStatus.TYPE_CHANGE),
        (StatusFlag.IGNORED, GitStatus.IGNORED),
        (StatusFlag.CONFLICTED, GitStatus.CONFLICTED),
    ):
        if status & flag:
            return result
    return GitStatus.NOT_MODIFIED


def index_status(status: StatusFlag) -> GitStatus:
    """The user-facing status of staged changes."""
    for flag, result in (
        (StatusFlag.INDEX_NEW, GitStatus.NEW),
        (StatusFlag.INDEX_MODIFIED, GitStatus.MODIFIED),
        (StatusFlag.INDEX_DELETED, GitStatus.DELETED),
        (StatusFlag.INDEX_RENAMED, GitStatus.RENAMED),
        (StatusFlag.INDEX_TYPECHANGE, GitStatus.TYPE_CHANGE),
    ):
        if status & flag:
            return result
    return GitStatus.NOT_MODIFIED


def reorient(path) -> Path:
    """Make a path absolute against the current directory, canonical if it exists."""
    try:
        joined = Path(os.getcwd()) / path
    except OSError:
        joined = Path(".") / path
    try:
        return joined.resolve(strict=True)
    except (OSError, RuntimeError):
        return joined


@dataclass
class RepoStatuses:
    """Every path with a status in a repository, and its status bits."""

    statuses: list[tuple[Path, StatusFlag]] = field(default_factory=list)

    def status(self, index, prefix_lookup: bool) -> Git:
        """A directory's aggregate status when ``prefix_lookup``, else a file's."""
        return self.dir_status(index) if prefix_lookup else self.file_status(index)

    def _combine(self, matches) -> Git:
        combined = StatusFlag.CURRENT
        for entry_path, flags in self.statuses:
            if matches(entry_path, flags):
                combined |= flags
        return Git(staged=index_status(combined), unstaged=working_tree_status(combined))

    def file_status(self, file) -> Git:
        """The status of one file, counting ignored parent directories."""
        path = reorient(file)
        return self._combine(
            lambda entry, flags: path.is_relative_to(entry)
            if flags == StatusFlag.IGNORED else entry == path
        )

    def dir_status(self, dir) -> Git:
        """The combined status of everything under a directory."""
        path = reorient(dir)
        return self._combine(
            lambda entry, flags: path.is_relative_to(entry)
            if flags == StatusFlag.IGNORED else entry.is_relative_to(path)
        )


def parse_porcelain(output: Union[bytes, str], workdir) -> RepoStatuses:
    """Read NUL-separated porcelain v1 status output into statuses."""
    text = os.fsdecode(output) if isinstance(output, bytes) else output
    base = Path(workdir)
    statuses: list[tuple[Path, StatusFlag]] = []
    entries = iter(text.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        code, name = entry[:2], entry[3:]
        if "R" in code or "C" in code:
            next(entries, None)  # the path the entry was renamed or copied from
        statuses.append((base / name.rstrip("/"), _flags_for(code)))
    return RepoStatuses(statuses)


def _run_git(args, cwd) -> Optional[bytes]:
    try:
        result = subprocess.run(list(args), cwd=os.fspath(cwd), capture_output=True)
    except OSError as exc:
        log.error("Error running git: %r", exc)
        return None
    if result.returncode != 0:
        log.error("git exited with status %d: %s", result.returncode,
                  os.fsdecode(result.stderr or b"").strip())
        return None
    return result.stdout


@dataclass
class GitRepo:
    """A repository discovered on the filesystem, queried at most once."""

    workdir: Path
    original_path: Path
    extra_paths: list[Path] = field(default_factory=list)
    statuses: Optional[RepoStatuses] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    @classmethod
    def discover(cls, path) -> "GitRepo":
        """Find the repository containing ``path``; raises ``LookupError``."""
        original = Path(path)
        log.info("Searching for Git repository above %r", original)
        start = original if original.is_dir() else original.parent
        output = _run_git(_TOPLEVEL_COMMAND, start)
        toplevel = os.fsdecode(output).strip() if output is not None else ""
        if not toplevel:
            raise LookupError(f"no Git working directory above {original}")
        return cls(workdir=Path(toplevel), original_path=original)

    def _query(self) -> RepoStatuses:
        log.info("Getting Git statuses for repo with workdir %r", self.workdir)
        output = _run_git(_STATUS_COMMAND, self.workdir)
        if output is None:
            return RepoStatuses()
        return parse_porcelain(output, self.workdir)

    def search(self, index, prefix_lookup: bool) -> Git:
        """The status of a path, querying the repository on first use."""
        with self._lock:
            if self.statuses is None:
                log.debug("Querying Git repo %r for the first time", self.workdir)
                self.statuses = self._query()
            else:
                log.debug("Git repo %r has been found in cache", self.workdir)
            return self.statuses.status(index, prefix_lookup)

    def has_workdir(self, path) -> bool:
        """Whether this repository has the given working directory."""
        return self.workdir == Path(path)

    def has_path(self, path) -> bool:
        """Whether the path lies under one of the paths that led here."""
        candidate = Path(path)
        return any(candidate.is_relative_to(base) for base in (self.original_path, *self.extra_paths))


class GitCache:
    """Repositories found above the paths that are going to be listed."""

    def __init__(self, paths: Iterable = ()) -> None:
        self.repos: list[GitRepo] = []
        self.misses: list[Path] = []
        for raw in paths:
            path = Path(raw)
            if path in self.misses:
                log.debug("Skipping %r because it already came back Gitless", path)
                continue
            if any(repo.has_path(path) for repo in self.repos):
                log.debug("Skipping %r because we already queried it", path)
                continue
            try:
                found = GitRepo.discover(path)
            except LookupError as exc:
                log.error("Error discovering Git repositories: %s", exc)
                self.misses.append(path)
                continue
            existing = next((repo for repo in self.repos if repo.has_workdir(found.workdir)), None)
            if existing is not None:
                log.debug("Adding to existing repo (workdir matches with %r)", existing.workdir)
                existing.extra_paths.append(found.original_path)
            else:
                log.debug("Discovered new Git repo")
                self.repos.append(found)

    def has_anything_for(self, index) -> bool:
        """Whether any known repository covers the path."""
        return any(repo.has_path(index) for repo in self.repos)

    def get(self, index, prefix_lookup: bool) -> Git:
        """The status of a path, or an unmodified status outside any repository."""
        repo = next((repo for repo in self.repos if repo.has_path(index)), None)
        return repo.search(index, prefix_lookup) if repo is not None else Git()