"""Debug logging to standard error, switched on by an environment variable."""

from __future__ import annotations

import logging
import os
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_RESET = "\x1b[0m"


def _paint(code: str, text: str) -> str:
    return f"\x1b[{code}m{text}{_RESET}"


_BRACKET = "38;5;243"


def _level_label(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return _paint("31", "ERROR")
    if levelno >= logging.WARNING:
        return _paint("33", "WARN")
    if levelno >= logging.INFO:
        return _paint("36", "INFO")
    if levelno >= logging.DEBUG:
        return _paint("34", "DEBUG")
    return _paint("38;5;245", "TRACE")


class ColourFormatter(logging.Formatter):
    """Formats records as ``[LEVEL target] message`` with terminal colours."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        opening = _paint(_BRACKET, "[")
        closing = _paint(_BRACKET, "]")
        return f"{opening}{_level_label(record.levelno)} {record.name}{closing} {message}"


def configure(ev) -> None:
    """Enable logging according to the value of an environment variable.

    Nothing happens when ``ev`` is missing or empty. The value ``trace``
    enables trace output; any other value enables debug output.
    """
    if ev is None:
        return
    value = os.fsdecode(ev)
    if not value:
        return

    root = logging.getLogger()
    root.setLevel(TRACE if value == "trace" else logging.DEBUG)

    if any(isinstance(h.formatter, ColourFormatter) for h in root.handlers):
        print(
            "Failed to initialise logger: attempted to set a logger after "
            "the logging system was already initialized",
            file=sys.stderr,
        )
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColourFormatter())
    root.addHandler(handler)