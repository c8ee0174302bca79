"""INI parser producing the nested value tree consumed by the store.

Grammar summary:

* A line whose trimmed form ends in an odd number of backslashes continues
  on the next line; the pieces are joined with a single space. The
  continued line is consumed and never parsed as a line of its own.
* Lines starting with ``#`` or ``;`` are comments.
* ``[name]`` opens a section. Names that are empty or contain any of
  ``[ ] # ; =`` invalidate the section and its keys are discarded.
* Unquoted ``#`` or ``;`` starts an inline comment.
* ``key = value`` splits on the first ``=``; values are typed by
  :func:`infer_value`.

The parser never fails: malformed lines are skipped one at a time.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from dotconf.coercion import parse_float_literal, parse_int_literal
from dotconf.types import WideInt

logger = logging.getLogger(__name__)

__all__ = ["infer_value", "parse_ini", "strip_inline_comment", "unescape"]

_FORBIDDEN = frozenset("[]#;=")
_COMMENT_CHARS = ("#", ";")
_QUOTES = ('"', "'")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "0": "\0",
}

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})

# Natural signed machine-word bounds; values at either edge are widened.
_WORD_MAX = sys.maxsize
_WORD_MIN = -sys.maxsize - 1


def _is_valid_name(name: str) -> bool:
    return bool(name) and not (_FORBIDDEN & set(name))


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def unescape(value: str) -> str:
    """Replace ``\\n \\t \\r \\\\ \\" \\' \\0`` escapes; unknown escapes stay literal."""
    if "\\" not in value:
        return value

    out: list[str] = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and i + 1 < len(value) and value[i + 1] in _ESCAPES:
            out.append(_ESCAPES[value[i + 1]])
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def strip_inline_comment(line: str) -> str:
    """Cut *line* at the first ``#`` or ``;`` outside quotes, then trim it.

    A backslash hides the following character from quote and comment
    detection without interpreting it.
    """
    quote: str | None = None
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\" and i + 1 < len(line):
            i += 2
            continue
        if quote is None and char in _QUOTES:
            quote = char
        elif char == quote:
            quote = None
        elif quote is None and char in _COMMENT_CHARS:
            return line[:i].strip()
        i += 1
    return line


def infer_value(value: str) -> Any:
    """Turn a raw, trimmed INI value into a typed value.

    Order: quoted string, boolean word, integer, float, comma list, string.
    """
    if not value:
        return ""

    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return unescape(value[1:-1])

    lowered = value.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False

    number = parse_int_literal(value)
    if number is not None:
        if number >= _WORD_MAX or number <= _WORD_MIN:
            return WideInt(number)
        return number

    real = parse_float_literal(value)
    if real is not None:
        return real

    if "," in value:
        parts = [unescape(part.strip()) for part in value.split(",") if part.strip()]
        if len(parts) > 1:
            return parts

    return unescape(value)


def _logical_lines(content: str) -> list[tuple[int, str]]:
    """Join continued lines, returning ``(line_number, text)`` pairs."""
    raw = content.split("\n")
    result: list[tuple[int, str]] = []
    i = 0
    while i < len(raw):
        start = i
        line = raw[i].strip()
        while _continues(line) and i + 1 < len(raw):
            line = line[:-1].strip()
            i += 1
            following = raw[i].strip()
            if following:
                line = f"{line} {following}" if line else following
        result.append((start + 1, line))
        i += 1
    return result


def parse_ini(content: str) -> dict[str, Any]:
    """Parse INI text into a dict; section keys land in nested dicts."""
    result: dict[str, Any] = {}
    current: dict[str, Any] | None = result

    for lineno, line in _logical_lines(content):
        if not line or line.startswith(_COMMENT_CHARS):
            continue

        if len(line) >= 2 and line[0] == "[" and line[-1] == "]":
            name = line[1:-1].strip()
            if not _is_valid_name(name):
                logger.warning("Ignoring keys under invalid INI section %r (line %d)", name, lineno)
                current = None
                continue
            section = result.get(name)
            if not isinstance(section, dict):
                section = {}
                result[name] = section
            current = section
            continue

        stripped = strip_inline_comment(line)
        if not stripped:
            continue

        key, sep, value = stripped.partition("=")
        if not sep:
            logger.debug("Skipping INI line %d without '='", lineno)
            continue
        key = key.strip()
        if not _is_valid_name(key):
            logger.debug("Skipping INI line %d with invalid key %r", lineno, key)
            continue

        typed = infer_value(value.strip())
        if current is not None:
            current[key] = typed

    return result
