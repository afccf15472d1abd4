"""Files, and the metadata that is read about them."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Union

from lsfiles.fields import DeviceIDs, FileType, Group, Inode, Links, Permissions, Time, User

if TYPE_CHECKING:
    from lsfiles.dir import Dir

log = logging.getLogger(__name__)

_NS_PER_SECOND = 1_000_000_000

# Extensions of generated files, mapped to the extensions of their sources.
_SOURCE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "css": ("sass", "scss", "styl", "less"),
    "js": ("coffee", "ts"),
    **{
        ext: ("tex",)
        for ext in (
            "aux", "bbl", "bcf", "blg", "fdb_latexmk",
            "fls", "lof", "log", "lot", "toc",
        )
    },
}


def _normal_components(path) -> list[str]:
    """The named components of a path, without root, empty or ``.`` parts."""
    text = os.fsdecode(os.fspath(path))
    return [part for part in text.split("/") if part not in ("", ".")]


def _time_from_ns(ns: int) -> Time:
    seconds, nanoseconds = divmod(ns, _NS_PER_SECOND)
    return Time(seconds=seconds, nanoseconds=nanoseconds)


def _with_extension(path: Path, ext: str) -> Path:
    """Replace the extension of the final component, as a file stem sees it."""
    name = path.name
    dot = name.rfind(".")
    stem = name[:dot] if dot > 0 else name
    return path.with_name(f"{stem}.{ext}")


@dataclass(eq=False)
class File:
    """A path together with its name, extension and cached metadata."""

    name: str
    ext: Optional[str]
    path: Path
    metadata: os.stat_result
    parent_dir: Optional["Dir"] = None
    is_all_all: bool = field(default=False)

    @classmethod
    def from_args(cls, path, parent_dir: Optional["Dir"] = None, filename: Optional[str] = None) -> "File":
        """Stat ``path`` without following symlinks; raises ``OSError``."""
        name = filename if filename is not None else cls.filename(path)
        ext = cls.extension_of(path)
        log.debug("Statting file %r", path)
        metadata = os.lstat(path)
        return cls(name=name, ext=ext, path=Path(path), metadata=metadata,
                   parent_dir=parent_dir, is_all_all=False)

    @classmethod
    def new_aa_current(cls, parent_dir: "Dir") -> "File":
        """The ``.`` entry of a directory listing."""
        path = Path(parent_dir.path)
        log.debug("Statting file %r", path)
        metadata = os.lstat(path)
        return cls(name=".", ext=cls.extension_of(path), path=path, metadata=metadata,
                   parent_dir=parent_dir, is_all_all=True)

    @classmethod
    def new_aa_parent(cls, path, parent_dir: "Dir") -> "File":
        """The ``..`` entry of a directory listing."""
        log.debug("Statting file %r", path)
        metadata = os.lstat(path)
        return cls(name="..", ext=cls.extension_of(path), path=Path(path), metadata=metadata,
                   parent_dir=parent_dir, is_all_all=True)

    @staticmethod
    def filename(path) -> str:
        """The last component of a path, including ``/``, ``.`` and ``..``."""
        text = os.fsdecode(os.fspath(path))
        parts = _normal_components(text)
        if parts:
            return parts[-1]
        if text.startswith("/"):
            return "/"
        if text.startswith("."):
            return "."
        log.error("Path %r has no last component", text)
        return text

    @staticmethod
    def extension_of(path) -> Optional[str]:
        """The lowercased text after the last dot of the file name, if any.

        Dotfiles count, so ``.vimrc`` has the extension ``vimrc``.
        """
        parts = _normal_components(path)
        if not parts or parts[-1] == "..":
            return None
        name = parts[-1]
        dot = name.rfind(".")
        if dot < 0:
            return None
        return name[dot + 1:].lower()

    def is_directory(self) -> bool:
        """Whether this file is a directory."""
        return stat.S_ISDIR(self.metadata.st_mode)

    def points_to_directory(self) -> bool:
        """Whether this is a directory or a symlink leading to one."""
        if self.is_directory():
            return True
        if self.is_link():
            target = self.link_target()
            if target.file is not None:
                return target.file.points_to_directory()
        return False

    def to_dir(self) -> "Dir":
        """Read this directory's contents; raises ``OSError`` on failure."""
        from lsfiles.dir import Dir

        return Dir.read_dir(self.path)

    def is_file(self) -> bool:
        """Whether this is a regular file."""
        return stat.S_ISREG(self.metadata.st_mode)

    def is_executable_file(self) -> bool:
        """Whether this is a regular file executable by its owner."""
        return self.is_file() and bool(self.metadata.st_mode & stat.S_IXUSR)

    def is_link(self) -> bool:
        """Whether this is a symlink."""
        return stat.S_ISLNK(self.metadata.st_mode)

    def is_pipe(self) -> bool:
        """Whether this is a named pipe."""
        return stat.S_ISFIFO(self.metadata.st_mode)

    def is_char_device(self) -> bool:
        """Whether this is a character device."""
        return stat.S_ISCHR(self.metadata.st_mode)

    def is_block_device(self) -> bool:
        """Whether this is a block device."""
        return stat.S_ISBLK(self.metadata.st_mode)

    def is_socket(self) -> bool:
        """Whether this is a socket."""
        return stat.S_ISSOCK(self.metadata.st_mode)

    def _reorient_target_path(self, target: Path) -> Path:
        if target.is_absolute():
            return target
        if self.parent_dir is not None:
            return Path(self.parent_dir.join(target))
        return self.path.parent / target

    def link_target(self) -> "FileTarget":
        """Follow this symlink.

        Gives the file at the other end, the path it would be at if the link
        is broken, or the error raised while reading the link.
        """
        log.debug("Reading link %r", self.path)
        try:
            target = Path(os.readlink(self.path))
        except OSError as exc:
            return FileTarget(error=exc)

        absolute = self._reorient_target_path(target)
        try:
            metadata = os.stat(absolute)
        except OSError as exc:
            log.error("Error following link %r: %r", target, exc)
            return FileTarget(path=target)

        file = File(name=File.filename(target), ext=File.extension_of(target),
                    path=target, metadata=metadata, parent_dir=None, is_all_all=False)
        return FileTarget(file=file, path=target)

    def links(self) -> Links:
        """The hard link count, flagged when a regular file has several."""
        count = self.metadata.st_nlink
        return Links(count=count, multiple=self.is_file() and count > 1)

    def inode(self) -> Inode:
        """This file's inode."""
        return Inode(self.metadata.st_ino)

    def blocks(self) -> Optional[int]:
        """Blocks used by a regular file or link; ``None`` for other types."""
        if self.is_file() or self.is_link():
            return self.metadata.st_blocks
        return None

    def user(self) -> User:
        """The ID of the owning user."""
        return User(self.metadata.st_uid)

    def group(self) -> Group:
        """The ID of the owning group."""
        return Group(self.metadata.st_gid)

    def size(self) -> Union[int, DeviceIDs, None]:
        """Size in bytes, device IDs for devices, or ``None`` for directories."""
        if self.is_directory():
            return None
        if self.is_char_device() or self.is_block_device():
            rdev = self.metadata.st_rdev
            return DeviceIDs(major=(rdev >> 8) & 0xFF, minor=rdev & 0xFF)
        return self.metadata.st_size

    def modified_time(self) -> Optional[Time]:
        """The last modification time."""
        return _time_from_ns(self.metadata.st_mtime_ns)

    def changed_time(self) -> Optional[Time]:
        """The last status change time."""
        return _time_from_ns(self.metadata.st_ctime_ns)

    def accessed_time(self) -> Optional[Time]:
        """The last access time."""
        return _time_from_ns(self.metadata.st_atime_ns)

    def created_time(self) -> Optional[Time]:
        """The creation time, where the platform records one."""
        ns = getattr(self.metadata, "st_birthtime_ns", None)
        if ns is not None:
            return _time_from_ns(ns)
        seconds = getattr(self.metadata, "st_birthtime", None)
        if seconds is not None:
            return _time_from_ns(int(seconds * _NS_PER_SECOND))
        return None

    def type_char(self) -> FileType:
        """This file's base type."""
        if self.is_file():
            return FileType.FILE
        if self.is_directory():
            return FileType.DIRECTORY
        if self.is_pipe():
            return FileType.PIPE
        if self.is_link():
            return FileType.LINK
        if self.is_char_device():
            return FileType.CHAR_DEVICE
        if self.is_block_device():
            return FileType.BLOCK_DEVICE
        if self.is_socket():
            return FileType.SOCKET
        return FileType.SPECIAL

    def permissions(self) -> Permissions:
        """This file's permission bits."""
        bits = self.metadata.st_mode

        def has(bit: int) -> bool:
            return bits & bit == bit

        return Permissions(
            user_read=has(stat.S_IRUSR),
            user_write=has(stat.S_IWUSR),
            user_execute=has(stat.S_IXUSR),
            group_read=has(stat.S_IRGRP),
            group_write=has(stat.S_IWGRP),
            group_execute=has(stat.S_IXGRP),
            other_read=has(stat.S_IROTH),
            other_write=has(stat.S_IWOTH),
            other_execute=has(stat.S_IXOTH),
            sticky=has(stat.S_ISVTX),
            setgid=has(stat.S_ISGID),
            setuid=has(stat.S_ISUID),
        )

    def extension_is_one_of(self, choices: Iterable[str]) -> bool:
        """Whether the extension is among ``choices``; false with no extension."""
        return self.ext is not None and self.ext in choices

    def name_is_one_of(self, choices: Iterable[str]) -> bool:
        """Whether the full file name is among ``choices``."""
        return self.name in choices

    def get_source_files(self) -> list[Path]:
        """Paths whose existence marks this file as compiled from them."""
        if self.ext is None:
            return []
        return [_with_extension(self.path, ext) for ext in _SOURCE_EXTENSIONS.get(self.ext, ())]


@dataclass
class FileTarget:
    """The result of following a symlink.

    ``file`` is set when the target exists; otherwise ``path`` holds where the
    target would be, or ``error`` holds why the link could not be read.
    """

    file: Optional[File] = None
    path: Optional[Path] = None
    error: Optional[OSError] = None

    def is_broken(self) -> bool:
        """Whether the link does not lead to a file, for whatever reason."""
        return self.file is None