"""Conversion of stored dynamic values into typed results.

Every ``to_*`` function takes the raw value returned by the resolver
(possibly :data:`~dotconf.paths.MISSING`) plus a fallback, and never raises:
anything that cannot be converted yields the fallback.
"""

from __future__ import annotations

import json
import math
import re
from datetime import timedelta
from decimal import Decimal
from typing import Any

from dotconf.paths import MISSING

__all__ = [
    "format_float",
    "parse_duration",
    "parse_float_literal",
    "parse_int_literal",
    "stringify",
    "to_bool",
    "to_duration",
    "to_float",
    "to_int",
    "to_string",
    "to_string_list",
]

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")
_BOOL_WORDS = {"true": True, "1": True, "false": False, "0": False}

_DURATION_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION_PART_RE = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")


def parse_int_literal(text: str) -> int | None:
    """Parse a base-10 integer that fits in a signed 64-bit range."""
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text, 10)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_float_literal(text: str) -> float | None:
    """Parse a decimal or hex (``0x1p-2``) floating-point literal, including inf and nan."""
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return None
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        # finite literal out of range
        return None
    return value


def parse_duration(text: str) -> timedelta:
    """Parse a unit-suffixed duration such as ``"1h30m"``, ``"-1.5s"`` or ``"300ms"``.

    Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.
    A bare ``"0"`` is accepted; any other number needs a unit.

    Raises:
        ValueError: If *text* is not a valid duration expression.
    """
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total_ns = Decimal(0)
    pos = 0
    while pos < len(rest):
        match = _DURATION_PART_RE.match(rest, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        if number in ("", "."):
            raise ValueError(f"invalid duration {text!r}")
        total_ns += Decimal(number) * _DURATION_UNITS[unit]
        pos = match.end()

    nanoseconds = int(total_ns)
    if nanoseconds > INT64_MAX:
        raise ValueError(f"duration {text!r} out of range")
    micros = nanoseconds // 1000
    return timedelta(microseconds=-micros if negative else micros)


def format_float(value: float) -> str:
    """Format *value* in the shortest form that round-trips.

    Exponent notation is used below 1e-4 and from 1e6 upward, so ``100.0``
    renders as ``"100"`` and ``1234567.0`` as ``"1.234567e+06"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    digits = Decimal(repr(value)).normalize().as_tuple()
    ndigits = len(digits.digits)
    point = ndigits + digits.exponent
    if point - 1 < -4 or point - 1 >= 6:
        return f"{value:.{ndigits - 1}e}"
    return f"{value:.{max(ndigits - point, 0)}f}"


def stringify(value: Any) -> str:
    """Render any stored value as a string.

    Booleans become ``"true"``/``"false"``, ``None`` becomes ``"null"``, floats
    go through :func:`format_float` and containers are rendered as JSON.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return str(value)


def to_string(value: Any, default: str = "") -> str:
    if value is MISSING:
        return default
    return stringify(value)


def to_int(value: Any, default: int = 0) -> int:
    if value is MISSING or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return int(value)
    if isinstance(value, str):
        parsed = parse_int_literal(value)
        if parsed is not None:
            return parsed
    return default


def to_float(value: Any, default: float = 0.0) -> float:
    if value is MISSING or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        parsed = parse_float_literal(value)
        if parsed is not None:
            return parsed
    return default


def to_bool(value: Any, default: bool = False) -> bool:
    """Strict boolean conversion: only true/false/1/0 strings are understood."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _BOOL_WORDS.get(value.lower(), default)
    return default


def to_duration(value: Any, default: timedelta | None = None) -> timedelta:
    """Convert a stored value into a :class:`~datetime.timedelta`.

    Strings are parsed as unit expressions first, then as a whole number of
    seconds. Integers count seconds and floats count fractional seconds.
    """
    fallback = default if default is not None else timedelta(0)
    if value is MISSING or isinstance(value, bool):
        return fallback
    if isinstance(value, timedelta):
        return value
    try:
        if isinstance(value, str):
            try:
                return parse_duration(value)
            except ValueError:
                seconds = parse_int_literal(value)
                if seconds is None:
                    return fallback
                return timedelta(seconds=seconds)
        if isinstance(value, (int, float)):
            return timedelta(seconds=value)
    except (ValueError, OverflowError):
        return fallback
    return fallback


def to_string_list(value: Any, default: list[str] | None = None) -> list[str]:
    """Convert a stored value into a list of strings.

    Lists are stringified element-wise. A single string is split on commas
    without trimming, so ``""`` yields ``[""]``.
    """
    if isinstance(value, (list, tuple)):
        return [stringify(item) for item in value]
    if isinstance(value, str):
        return value.split(",")
    return list(default) if default is not None else []
