"""What to do when a listed file turns out to be a directory."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RecurseOptions:
    """How to descend into directories."""

    tree: bool = False
    max_depth: int | None = None

    def is_too_deep(self, depth: int) -> bool:
        """Whether a directory at the given depth is beyond the limit."""
        return self.max_depth is not None and self.max_depth <= depth


class DirActionKind(Enum):
    """The three ways of treating a directory argument."""

    AS_FILE = "as_file"
    LIST = "list"
    RECURSE = "recurse"


@dataclass(frozen=True)
class DirAction:
    """The action to take for a directory; recursion carries its options."""

    kind: DirActionKind = DirActionKind.LIST
    recurse: RecurseOptions | None = None

    def __post_init__(self) -> None:
        if self.kind is DirActionKind.RECURSE and self.recurse is None:
            raise ValueError("recursing requires recurse options")
        if self.kind is not DirActionKind.RECURSE and self.recurse is not None:
            raise ValueError("only recursing takes recurse options")

    def recurse_options(self) -> RecurseOptions | None:
        """The recurse options, if this action recurses."""
        return self.recurse if self.kind is DirActionKind.RECURSE else None

    def treat_dirs_as_files(self) -> bool:
        """Whether directories are listed like ordinary files."""
        if self.kind is DirActionKind.AS_FILE:
            return True
        if self.kind is DirActionKind.RECURSE:
            assert self.recurse is not None
            return self.recurse.tree
        return False