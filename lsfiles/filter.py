"""Filtering and sorting the list of files before they are displayed."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from lsfiles.dir import DotFilter
from lsfiles.file import File

_DIGITS = frozenset("0123456789")
_CHUNK_RE = re.compile(r"[0-9]+|\S")


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_optional(a, b) -> int:
    """Compare two optional values, with ``None`` before any value."""
    if a is None or b is None:
        return _cmp(a is not None, b is not None)
    return _cmp(a, b)


def _compare_chunks(left: Sequence[str], right: Sequence[str]) -> int:
    for ca, cb in zip(left, right):
        if ca[0] in _DIGITS and cb[0] in _DIGITS:
            if ca[0] == "0" or cb[0] == "0":
                # Leading zeros: compare digit by digit, like a fraction.
                result = _cmp(ca, cb)
            else:
                # Plain numbers: the longer run of digits is the larger number.
                result = _cmp((len(ca), ca), (len(cb), cb))
        else:
            result = _cmp(ca[0], cb[0])
        if result:
            return result
    return _cmp(len(left), len(right))


def natural_compare(a: str, b: str) -> int:
    """Compare strings so that runs of digits sort as numbers.

    Whitespace is skipped, and uppercase letters come before lowercase ones.
    Returns a negative number, zero, or a positive number.
    """
    return _compare_chunks(_CHUNK_RE.findall(a), _CHUNK_RE.findall(b))


def natural_compare_ignore_case(a: str, b: str) -> int:
    """Like ``natural_compare``, but with letters compared case-insensitively."""
    return _compare_chunks(_CHUNK_RE.findall(a.lower()), _CHUNK_RE.findall(b.lower()))


class SortCase(Enum):
    """Whether names are sorted case-sensitively."""

    ABCabc = "ABCabc"
    """Case-sensitively, with 'A' coming before 'a'."""

    AaBbCc = "AaBbCc"
    """Case-insensitively, with 'A' equal to 'a'."""


class SortKind(Enum):
    """The field that files are sorted by."""

    UNSORTED = "unsorted"
    NAME = "name"
    EXTENSION = "extension"
    SIZE = "size"
    FILE_INODE = "inode"
    MODIFIED_DATE = "modified"
    ACCESSED_DATE = "accessed"
    CHANGED_DATE = "changed"
    CREATED_DATE = "created"
    FILE_TYPE = "type"
    MODIFIED_AGE = "age"
    NAME_MIX_HIDDEN = "name_mix_hidden"


_CASED_KINDS = frozenset({SortKind.NAME, SortKind.EXTENSION, SortKind.NAME_MIX_HIDDEN})


def _strip_dot(name: str) -> str:
    return name[1:] if name.startswith(".") else name


@dataclass(frozen=True)
class SortField:
    """A sort field; name-based kinds carry a ``SortCase``."""

    kind: SortKind
    case: Optional[SortCase] = None

    def __post_init__(self) -> None:
        if self.kind in _CASED_KINDS and self.case is None:
            raise ValueError(f"sorting by {self.kind.value} requires a sort case")
        if self.kind not in _CASED_KINDS and self.case is not None:
            raise ValueError(f"sorting by {self.kind.value} takes no sort case")

    def compare_files(self, a: File, b: File) -> int:
        """Compare two files for listing order; negative when ``a`` comes first."""
        kind = self.kind
        names = natural_compare if self.case is SortCase.ABCabc else natural_compare_ignore_case

        if kind is SortKind.UNSORTED:
            return 0
        if kind is SortKind.NAME:
            return names(a.name, b.name)
        if kind is SortKind.SIZE:
            return _cmp(a.metadata.st_size, b.metadata.st_size)
        if kind is SortKind.FILE_INODE:
            return _cmp(a.metadata.st_ino, b.metadata.st_ino)
        if kind is SortKind.MODIFIED_DATE:
            return _cmp_optional(a.modified_time(), b.modified_time())
        if kind is SortKind.ACCESSED_DATE:
            return _cmp_optional(a.accessed_time(), b.accessed_time())
        if kind is SortKind.CHANGED_DATE:
            return _cmp_optional(a.changed_time(), b.changed_time())
        if kind is SortKind.CREATED_DATE:
            return _cmp_optional(a.created_time(), b.created_time())
        if kind is SortKind.MODIFIED_AGE:
            return _cmp_optional(b.modified_time(), a.modified_time())
        if kind is SortKind.FILE_TYPE:
            return _cmp(a.type_char(), b.type_char()) or natural_compare(a.name, b.name)
        if kind is SortKind.EXTENSION:
            return _cmp_optional(a.ext, b.ext) or names(a.name, b.name)
        return names(_strip_dot(a.name), _strip_dot(b.name))


_ERROR_WILDCARDS = "wildcards are either regular `*` or recursive `**`"
_ERROR_RECURSIVE_WILDCARDS = "recursive wildcards must form a single path component"
_ERROR_INVALID_RANGE = "invalid range pattern"


class PatternError(ValueError):
    """A glob pattern that could not be parsed."""

    def __init__(self, pos: int, msg: str) -> None:
        super().__init__(f"Pattern syntax error near position {pos}: {msg}")
        self.pos = pos
        self.msg = msg


def _class_regex(spec: str, negated: bool) -> str:
    parts = []
    k = 0
    while k < len(spec):
        if k + 3 <= len(spec) and spec[k + 1] == "-":
            low, high = spec[k], spec[k + 2]
            if low <= high:
                parts.append(f"{re.escape(low)}-{re.escape(high)}")
            k += 3
        else:
            parts.append(re.escape(spec[k]))
            k += 1
    if not parts:
        return "." if negated else "(?!)"
    return f"[{'^' if negated else ''}{''.join(parts)}]"


def _translate(pattern: str) -> str:
    out = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "?":
            out.append(".")
            i += 1
        elif ch == "*":
            old = i
            while i < n and pattern[i] == "*":
                i += 1
            count = i - old
            if count > 2:
                raise PatternError(old + 2, _ERROR_WILDCARDS)
            if count == 1:
                out.append(".*")
                continue
            if not (old == 0 or pattern[old - 1] == "/"):
                raise PatternError(old - 1, _ERROR_RECURSIVE_WILDCARDS)
            if i < n and pattern[i] == "/":
                i += 1
                out.append("(?:.*/)?")
            elif i == n:
                out.append(".*")
            else:
                raise PatternError(i, _ERROR_RECURSIVE_WILDCARDS)
        elif ch == "[":
            if i + 4 <= n and pattern[i + 1] == "!":
                close = pattern.find("]", i + 3)
                if close >= 0:
                    out.append(_class_regex(pattern[i + 2:close], negated=True))
                    i = close + 1
                    continue
            elif i + 3 <= n and pattern[i + 1] != "!":
                close = pattern.find("]", i + 2)
                if close >= 0:
                    out.append(_class_regex(pattern[i + 1:close], negated=False))
                    i = close + 1
                    continue
            raise PatternError(i, _ERROR_INVALID_RANGE)
        else:
            out.append(re.escape(ch))
            i += 1
    return "".join(out)


@dataclass(frozen=True)
class GlobPattern:
    """A shell glob pattern: ``*``, ``**``, ``?``, ``[...]`` and ``[!...]``.

    Raises ``PatternError`` when the pattern is malformed.
    """

    pattern: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(_translate(self.pattern), re.DOTALL))

    def matches(self, name: str) -> bool:
        """Whether the whole of ``name`` matches this pattern."""
        return self._regex.fullmatch(name) is not None


@dataclass(frozen=True)
class IgnorePatterns:
    """Globs whose matching file names are hidden from a listing."""

    patterns: tuple[GlobPattern, ...] = ()

    @classmethod
    def parse_from_iter(cls, inputs: Iterable[str]) -> tuple["IgnorePatterns", list[PatternError]]:
        """Parse glob strings, returning the valid patterns and the errors."""
        patterns = []
        errors = []
        for text in inputs:
            try:
                patterns.append(GlobPattern(text))
            except PatternError as exc:
                errors.append(exc)
        return cls(tuple(patterns)), errors

    @classmethod
    def empty(cls) -> "IgnorePatterns":
        """A set of patterns that matches nothing."""
        return cls()

    def is_ignored(self, name: str) -> bool:
        """Whether any pattern matches the file name."""
        return any(pattern.matches(name) for pattern in self.patterns)


class GitIgnore(Enum):
    """Whether files that Git ignores are hidden."""

    CHECK_AND_IGNORE = "check_and_ignore"
    OFF = "off"


@dataclass
class FileFilter:
    """Which files to show and in what order."""

    sort_field: SortField
    list_dirs_first: bool = False
    reverse: bool = False
    only_dirs: bool = False
    dot_filter: DotFilter = DotFilter.JUST_FILES
    ignore_patterns: IgnorePatterns = field(default_factory=IgnorePatterns.empty)
    git_ignore: GitIgnore = GitIgnore.OFF

    def filter_child_files(self, files: Iterable[File]) -> list[File]:
        """The files found in a directory that pass the filter."""
        kept = [f for f in files if not self.ignore_patterns.is_ignored(f.name)]
        if self.only_dirs:
            kept = [f for f in kept if f.is_directory()]
        return kept

    def filter_argument_files(self, files: Iterable[File]) -> list[File]:
        """The files named on the command line that pass the filter."""
        return [f for f in files if not self.ignore_patterns.is_ignored(f.name)]

    def sort_files(self, files: Iterable[File]) -> list[File]:
        """The files in listing order."""
        ordered = sorted(files, key=functools.cmp_to_key(self.sort_field.compare_files))
        if self.reverse:
            ordered.reverse()
        if self.list_dirs_first:
            ordered.sort(key=lambda f: not f.points_to_directory())
        return ordered