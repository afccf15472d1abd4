"""Listing a file's extended attributes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

ENABLED: bool = hasattr(os, "listxattr")


class FollowSymlinks(Enum):
    """Whether attribute lookups follow a symlink to its target."""

    YES = True
    NO = False


@dataclass(frozen=True)
class Attribute:
    """An extended attribute's name and the size of its value."""

    name: str
    size: int


def list_attrs(path, follow: FollowSymlinks) -> list[Attribute]:
    """List the attributes of ``path`` whose values are not empty.

    Raises ``OSError`` if the attributes cannot be listed. On systems without
    extended attribute support the list is always empty.
    """
    raw = os.fspath(path)
    nul = b"\0" if isinstance(raw, bytes) else "\0"
    if nul in raw:
        raise OSError("Error: path somehow contained a NUL?")

    lister = getattr(os, "listxattr", None)
    getter = getattr(os, "getxattr", None)
    if lister is None or getter is None:
        return []

    follow_symlinks = follow is FollowSymlinks.YES
    attrs = []
    for name in lister(raw, follow_symlinks=follow_symlinks):
        try:
            value = getter(raw, name, follow_symlinks=follow_symlinks)
        except OSError:
            continue
        if value:
            attrs.append(Attribute(name=name, size=len(value)))
    return attrs


def attributes(path) -> list[Attribute]:
    """Attributes of ``path``, following symlinks."""
    return list_attrs(path, FollowSymlinks.YES)


def symlink_attributes(path) -> list[Attribute]:
    """Attributes of ``path`` itself, not following symlinks."""
    return list_attrs(path, FollowSymlinks.NO)