"""Directories whose contents are being listed."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

from lsfiles.fields import Git, GitStatus
from lsfiles.file import File

if TYPE_CHECKING:
    from lsfiles.git import GitCache

log = logging.getLogger(__name__)


class DotFilter(Enum):
    """Which hidden entries a listing shows; ``JUST_FILES`` is the default."""

    DOTFILES_AND_DOTS = "dotfiles_and_dots"
    DOTFILES = "dotfiles"
    JUST_FILES = "just_files"

    def shows_dotfiles(self) -> bool:
        """Whether names starting with a dot are listed."""
        return self is not DotFilter.JUST_FILES

    def _shows_dots(self) -> bool:
        return self is DotFilter.DOTFILES_AND_DOTS


@dataclass
class Dir:
    """A directory and the paths read from it."""

    path: Path
    contents: list[Path] = field(default_factory=list)

    @classmethod
    def read_dir(cls, path) -> "Dir":
        """Read a directory's entries; raises ``OSError`` on failure."""
        base = Path(path)
        log.info("Reading directory %r", base)
        with os.scandir(base) as entries:
            contents = [base / entry.name for entry in entries]
        return cls(path=base, contents=contents)

    def files(
        self,
        dots: DotFilter = DotFilter.JUST_FILES,
        git: Optional["GitCache"] = None,
        git_ignoring: bool = False,
    ) -> Iterator[Union[File, OSError]]:
        """Yield a ``File`` per visible entry, or the ``OSError`` met statting it.

        With ``DOTFILES_AND_DOTS`` the ``.`` and ``..`` entries come first.
        """
        if dots._shows_dots():
            try:
                yield File.new_aa_current(self)
            except OSError as exc:
                yield exc
            try:
                yield File.new_aa_parent(self.path / "..", self)
            except OSError as exc:
                yield exc

        show_dotfiles = dots.shows_dotfiles()
        for path in self.contents:
            name = File.filename(path)
            if not show_dotfiles and name.startswith("."):
                continue
            if git_ignoring:
                status = git.get(path, False) if git is not None else Git()
                if status.unstaged == GitStatus.IGNORED:
                    continue
            try:
                yield File.from_args(path, self, name)
            except OSError as exc:
                if exc.filename is None:
                    exc.filename = os.fspath(path)
                yield exc

    def contains(self, path) -> bool:
        """Whether this directory holds an entry with the given path."""
        wanted = Path(path)
        return any(entry == wanted for entry in self.contents)

    def join(self, child) -> Path:
        """This directory's path with ``child`` appended."""
        return self.path / child