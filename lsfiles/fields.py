"""Value types describing the metadata of a listed file."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum


@functools.total_ordering
class FileType(Enum):
    """A file's base type as reported by the filesystem.

    The declaration order is the order used when sorting by type.
    """

    DIRECTORY = 0
    FILE = 1
    LINK = 2
    PIPE = 3
    SOCKET = 4
    CHAR_DEVICE = 5
    BLOCK_DEVICE = 6
    SPECIAL = 7

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FileType):
            return NotImplemented
        return self.value < other.value

    def is_regular_file(self) -> bool:
        """Whether this is the type of a plain regular file."""
        return self is FileType.FILE


@dataclass(frozen=True)
class Permissions:
    """A Unix permission bitfield, one flag per bit."""

    user_read: bool = False
    user_write: bool = False
    user_execute: bool = False

    group_read: bool = False
    group_write: bool = False
    group_execute: bool = False

    other_read: bool = False
    other_write: bool = False
    other_execute: bool = False

    sticky: bool = False
    setgid: bool = False
    setuid: bool = False


@dataclass(frozen=True)
class PermissionsPlus:
    """File type, permissions and xattr presence, shown as one column."""

    file_type: FileType
    permissions: Permissions
    xattrs: bool


@dataclass(frozen=True)
class OctalPermissions:
    """Permissions meant to be displayed as octal values."""

    permissions: Permissions


@dataclass(frozen=True)
class Links:
    """A file's hard link count.

    ``multiple`` is set only for regular files with more than one link.
    """

    count: int
    multiple: bool


@dataclass(frozen=True)
class Inode:
    """A file's inode number."""

    number: int


@dataclass(frozen=True)
class DeviceIDs:
    """Major and minor device IDs of a block or character device."""

    major: int
    minor: int


@dataclass(frozen=True)
class User:
    """The numeric ID of the user owning a file."""

    uid: int


@dataclass(frozen=True)
class Group:
    """The numeric ID of the group a file belongs to."""

    gid: int


@dataclass(frozen=True, order=True)
class Time:
    """One of a file's timestamps."""

    seconds: int
    nanoseconds: int


class GitStatus(Enum):
    """A file's status in a Git repository."""

    NOT_MODIFIED = "not_modified"
    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    TYPE_CHANGE = "type_change"
    IGNORED = "ignored"
    CONFLICTED = "conflicted"


@dataclass(frozen=True)
class Git:
    """A file's staged and unstaged Git status."""

    staged: GitStatus = GitStatus.NOT_MODIFIED
    unstaged: GitStatus = GitStatus.NOT_MODIFIED