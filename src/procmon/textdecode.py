"""String helpers for decoding the fixed-format text files under /proc."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

WHITESPACE = " \n\r\t\f\v"


def rtrim(value: str) -> str:
    """Strip trailing whitespace."""
    return value.rstrip(WHITESPACE)


def ltrim(value: str) -> str:
    """Strip leading whitespace."""
    return value.lstrip(WHITESPACE)


def trim(value: str) -> str:
    return value.strip(WHITESPACE)


def split_in_two(value: str, delimiters: str) -> tuple[str, str]:
    """
    Split a string at the first character found in ``delimiters``.

    Both halves are trimmed. When no delimiter is present the whole string
    is the left half and the right half is empty.

    Args:
        value: String to split.
        delimiters: Set of single-character delimiters.

    Returns:
        ``(left, right)`` tuple.
    """
    for index, char in enumerate(value):
        if char in delimiters:
            return trim(value[:index]), trim(value[index + 1 :])
    return trim(value), ""


def split(value: str, separator: str) -> list[str]:
    """
    Split on every occurrence of ``separator``, left-trimming each token.

    A string that starts with the separator does not yield a leading empty
    token. A string without any separator yields a single token.
    """
    tokens = [ltrim(token) for token in value.split(separator)]
    if value.startswith(separator):
        tokens = tokens[1:]
    return tokens


def is_number(value: str) -> bool:
    """True when the string is non-empty and made only of ASCII digits."""
    return bool(value) and all("0" <= char <= "9" for char in value)


def to_integral(value: str) -> int:
    """Convert a trimmed string to int. Raises ValueError when malformed."""
    return int(trim(value))


def to_float(value: str) -> float:
    """Convert a trimmed string to float. Raises ValueError when malformed."""
    return float(trim(value))


def read_text(path: str | os.PathLike[str]) -> str:
    """
    Read a whole file, returning an empty string when it cannot be read.

    Files under /proc disappear whenever a process exits, and some are only
    readable by their owner, so every failure here is treated as "no data".
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            return fh.read()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return ""


def read_lines(path: str | os.PathLike[str]) -> list[str]:
    """Read a file as a list of lines without their line terminators."""
    return read_text(path).splitlines()


def read_joined(path: str | os.PathLike[str]) -> str:
    """Read every line of a file and concatenate them without newlines."""
    return "".join(read_lines(path))


def scan_numeric_subdirectories(
    path: str | os.PathLike[str],
    visitor: Callable[[str], None],
) -> None:
    """
    Call ``visitor`` with the name of every purely numeric subdirectory.

    Used to enumerate process ids under the process information root. An
    unreadable root yields no callbacks.
    """
    try:
        entries = list(os.scandir(path))
    except OSError as exc:
        logger.debug("Cannot list %s: %s", path, exc)
        return

    for entry in entries:
        if not is_number(entry.name):
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            # Entry vanished between listing and stat
            continue
        if is_dir:
            visitor(entry.name)


def last_segment(path: str | os.PathLike[str]) -> str:
    """Return the final component of a path, ignoring trailing separators."""
    return Path(path).name
