"""File listing building blocks: file metadata, directory reading, filtering and natural sorting, file kinds, Git status, extended attributes and debug logging."""

__version__ = "0.1.0"