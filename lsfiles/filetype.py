"""Kinds of file (image, video, compressed and so on) judged by name."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from lsfiles.file import File


class FileKind(Enum):
    """A kind of file recognised by its name or extension."""

    TEMP = "temp"
    IMMEDIATE = "immediate"
    IMAGE = "image"
    VIDEO = "video"
    MUSIC = "music"
    LOSSLESS = "lossless"
    CRYPTO = "crypto"
    DOCUMENT = "document"
    COMPRESSED = "compressed"
    COMPILED = "compiled"

    @property
    def style(self) -> str:
        """The terminal SGR parameters used to colour this kind of file."""
        return _STYLES[self]


_STYLES = {
    FileKind.TEMP: "38;5;244",
    FileKind.IMMEDIATE: "1;4;33",
    FileKind.IMAGE: "38;5;133",
    FileKind.VIDEO: "38;5;135",
    FileKind.MUSIC: "38;5;92",
    FileKind.LOSSLESS: "38;5;93",
    FileKind.CRYPTO: "38;5;109",
    FileKind.DOCUMENT: "38;5;105",
    FileKind.COMPRESSED: "31",
    FileKind.COMPILED: "38;5;137",
}

_IMMEDIATE_NAMES = frozenset({
    "Makefile", "Cargo.toml", "SConstruct", "CMakeLists.txt",
    "build.gradle", "pom.xml", "Rakefile", "package.json", "Gruntfile.js",
    "Gruntfile.coffee", "BUILD", "BUILD.bazel", "WORKSPACE", "build.xml",
    "webpack.config.js", "meson.build", "composer.json", "RoboFile.php", "PKGBUILD",
    "Justfile", "Procfile", "Dockerfile", "Containerfile", "Vagrantfile", "Brewfile",
    "Gemfile", "Pipfile", "build.sbt", "mix.exs", "bsconfig.json", "tsconfig.json",
})

_IMAGE = frozenset({
    "png", "jfi", "jfif", "jif", "jpe", "jpeg", "jpg", "gif", "bmp",
    "tiff", "tif", "ppm", "pgm", "pbm", "pnm", "webp", "raw", "arw",
    "svg", "stl", "eps", "dvi", "ps", "cbr", "jpf", "cbz", "xpm",
    "ico", "cr2", "orf", "nef", "heif",
})

_VIDEO = frozenset({
    "avi", "flv", "m2v", "m4v", "mkv", "mov", "mp4", "mpeg",
    "mpg", "ogm", "ogv", "vob", "wmv", "webm", "m2ts", "heic",
})

_MUSIC = frozenset({"aac", "m4a", "mp3", "ogg", "wma", "mka", "opus"})

_LOSSLESS = frozenset({"alac", "ape", "flac", "wav"})

_CRYPTO = frozenset({"asc", "enc", "gpg", "pgp", "sig", "signature", "pfx", "p12"})

_DOCUMENT = frozenset({
    "djvu", "doc", "docx", "dvi", "eml", "eps", "fotd", "key",
    "keynote", "numbers", "odp", "odt", "pages", "pdf", "ppt",
    "pptx", "rtf", "xls", "xlsx",
})

_COMPRESSED = frozenset({
    "zip", "tar", "Z", "z", "gz", "bz2", "a", "ar", "7z",
    "iso", "dmg", "tc", "rar", "par", "tgz", "xz", "txz",
    "lz", "tlz", "lzma", "deb", "rpm", "zst",
})

_TEMP = frozenset({"tmp", "swp", "swo", "swn", "bak", "bk"})

_COMPILED = frozenset({"class", "elc", "hi", "o", "pyc", "zwc", "ko"})


class FileExtensions:
    """Classifies files by their names and extensions."""

    def is_immediate(self, file: File) -> bool:
        """A file that starts or describes a project's build."""
        return (
            file.name.lower().startswith("readme")
            or file.name.endswith(".ninja")
            or file.name_is_one_of(_IMMEDIATE_NAMES)
        )

    def is_image(self, file: File) -> bool:
        return file.extension_is_one_of(_IMAGE)

    def is_video(self, file: File) -> bool:
        return file.extension_is_one_of(_VIDEO)

    def is_music(self, file: File) -> bool:
        return file.extension_is_one_of(_MUSIC)

    def is_lossless(self, file: File) -> bool:
        """Lossless audio."""
        return file.extension_is_one_of(_LOSSLESS)

    def is_crypto(self, file: File) -> bool:
        return file.extension_is_one_of(_CRYPTO)

    def is_document(self, file: File) -> bool:
        return file.extension_is_one_of(_DOCUMENT)

    def is_compressed(self, file: File) -> bool:
        return file.extension_is_one_of(_COMPRESSED)

    def is_temp(self, file: File) -> bool:
        """Backup, swap and editor auto-save files."""
        name = file.name
        return (
            name.endswith("~")
            or (name.startswith("#") and name.endswith("#"))
            or file.extension_is_one_of(_TEMP)
        )

    def is_compiled(self, file: File) -> bool:
        """Compiled output, or a file whose source sits in the same directory."""
        if file.extension_is_one_of(_COMPILED):
            return True
        directory = file.parent_dir
        if directory is None:
            return False
        return any(directory.contains(path) for path in file.get_source_files())

    def kind(self, file: File) -> Optional[FileKind]:
        """The first kind the file matches, checked in colouring order."""
        checks = (
            (self.is_temp, FileKind.TEMP),
            (self.is_immediate, FileKind.IMMEDIATE),
            (self.is_image, FileKind.IMAGE),
            (self.is_video, FileKind.VIDEO),
            (self.is_music, FileKind.MUSIC),
            (self.is_lossless, FileKind.LOSSLESS),
            (self.is_crypto, FileKind.CRYPTO),
            (self.is_document, FileKind.DOCUMENT),
            (self.is_compressed, FileKind.COMPRESSED),
            (self.is_compiled, FileKind.COMPILED),
        )
        return next((kind for check, kind in checks if check(file)), None)

    def icon_kind(self, file: File) -> Optional[FileKind]:
        """The kind that picks the file's icon: audio (as ``MUSIC``), image or video."""
        if self.is_music(file) or self.is_lossless(file):
            return FileKind.MUSIC
        if self.is_image(file):
            return FileKind.IMAGE
        if self.is_video(file):
            return FileKind.VIDEO
        return None