"""Dot-path resolution and mutation over nested configuration dicts.

All functions here operate on plain dicts and assume the caller holds
whatever lock protects them.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "MISSING",
    "assign",
    "child_keys",
    "has_path",
    "lookup",
    "set_default",
]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()
"""Sentinel returned by :func:`lookup` when a key does not resolve."""


def lookup(data: dict[str, Any], key: str, separator: str = ".") -> Any:
    """Resolve a flat or dotted key against *data*.

    A literal key stored at the top level always wins over the nested
    interpretation of the same string. Every non-final segment of a dotted
    path must hold a dict; anything else ends the walk.

    Returns:
        The stored value, or :data:`MISSING` if the key does not resolve.
    """
    if key in data:
        return data[key]
    if separator not in key:
        return MISSING

    current: Any = data
    for part in key.split(separator):
        if not isinstance(current, dict) or part not in current:
            return MISSING
        current = current[part]
    return current


def has_path(data: dict[str, Any], key: str, separator: str = ".") -> bool:
    """Return True if *key* exists flatly or resolves through nested dicts."""
    return lookup(data, key, separator) is not MISSING


def assign(data: dict[str, Any], key: str, value: Any, separator: str = ".") -> None:
    """Store *value* at *key*, creating intermediate dicts as needed.

    An existing flat key is overwritten in place. Otherwise a dotted key is
    written as a nested path, and any non-dict value met on the way is
    discarded and replaced by an empty dict.
    """
    if key in data or separator not in key:
        data[key] = value
        return

    parts = key.split(separator)
    current = data
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def set_default(data: dict[str, Any], key: str, value: Any, separator: str = ".") -> bool:
    """Assign *value* only if *key* does not already resolve.

    Returns:
        True if the value was inserted.
    """
    if has_path(data, key, separator):
        return False
    assign(data, key, value, separator)
    return True


def child_keys(data: dict[str, Any], prefix: str, separator: str = ".") -> list[str]:
    """List the immediate children of *prefix* as full key paths."""
    node = lookup(data, prefix, separator)
    if not isinstance(node, dict):
        return []
    return [f"{prefix}{separator}{name}" for name in node]
