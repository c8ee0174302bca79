"""Configuration store with dot-path access and typed accessors."""

from __future__ import annotations

import copy
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Mapping

from dotconf.coercion import (
    stringify,
    to_bool,
    to_duration,
    to_float,
    to_int,
    to_string,
    to_string_list,
)
from dotconf.errors import ConfigNilError
from dotconf.loader import build_candidate
from dotconf.lock import ReadWriteLock
from dotconf.paths import MISSING, assign, child_keys, has_path, lookup, set_default
from dotconf.types import ConfigSettings, LoadOptions

logger = logging.getLogger(__name__)

__all__ = ["Config", "NullConfig", "NULL_CONFIG", "ensure_config"]


class Config:
    """Configuration accessor with dot-path key support.

    Keys are either flat (matched verbatim against the top level) or dotted
    paths into nested dicts; a literal flat key always wins. Typed getters
    never raise and fall back to the supplied default or a zero value.

    Thread safety:
        Internally synchronized with a readers-writer lock. Any number of
        threads may read concurrently; set, clear and load commits are
        exclusive.
    """

    def __init__(
        self,
        settings: ConfigSettings | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            settings: Construction settings; defaults to ``ConfigSettings()``.
            data: Optional seed data, merged after ``settings.initial``.
        """
        self._settings = settings if settings is not None else ConfigSettings()
        self._separator = self._settings.separator
        self._lock = ReadWriteLock()
        self._data: dict[str, Any] = {}

        if self._settings.initial:
            self.load_from_map(self._settings.initial)
        if data:
            self.load_from_map(data)

    @property
    def separator(self) -> str:
        """The character separating segments of a dotted key."""
        return self._separator

    def _read(self, key: str, convert: Callable[[Any, Any], Any], default: Any) -> Any:
        with self._lock.read():
            return convert(lookup(self._data, key, self._separator), default)

    # ----- Store -----

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by flat or dotted key.

        Containers are returned as deep copies.
        """
        with self._lock.read():
            value = lookup(self._data, key, self._separator)
            if isinstance(value, (dict, list)):
                value = copy.deepcopy(value)
        return default if value is MISSING else value

    def set(self, key: str, value: Any) -> None:
        """Set a value, creating nested dicts for dotted keys.

        If the literal key already exists at the top level it is overwritten
        in place. Otherwise any non-dict value on the dotted path is replaced
        by a dict so the write always succeeds.
        """
        value = copy.deepcopy(value)
        with self._lock.write():
            assign(self._data, key, value, self._separator)

    def has(self, key: str) -> bool:
        """Return True if *key* exists flatly or as a resolvable nested path."""
        with self._lock.read():
            return has_path(self._data, key, self._separator)

    def keys(self) -> list[str]:
        """Return the top-level keys."""
        with self._lock.read():
            return list(self._data)

    def size(self) -> int:
        """Return the number of top-level keys."""
        with self._lock.read():
            return len(self._data)

    def is_empty(self) -> bool:
        return self.size() == 0

    def clear(self) -> None:
        """Remove all configuration data."""
        with self._lock.write():
            self._data = {}

    def get_all(self) -> dict[str, Any]:
        """Return a deep copy of all configuration data."""
        with self._lock.read():
            return copy.deepcopy(self._data)

    def load_from_map(self, data: Mapping[str, Any]) -> None:
        """Merge *data* into the top level; existing keys are overwritten."""
        incoming = copy.deepcopy(dict(data))
        with self._lock.write():
            self._data.update(incoming)

    def set_nested_defaults(self, defaults: Mapping[str, Any]) -> None:
        """Insert each default whose key does not already resolve."""
        incoming = copy.deepcopy(dict(defaults))
        with self._lock.write():
            for key, value in incoming.items():
                set_default(self._data, key, value, self._separator)

    def load_from_file(self, path: str | Path, options: LoadOptions | None = None) -> None:
        """Load *path* and replace the entire store content with the result.

        Decoding, defaults, environment overlay and validation all run on a
        private candidate tree; the store is only touched once all of them
        succeed, so a failed load leaves the previous content intact.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigReadError: If the file cannot be read.
            ConfigParseError: If JSON/YAML content is malformed.
            RequiredKeyMissingError: If a required key is missing.
            ValidationFailedError: If the validation callback raises.
        """
        candidate = build_candidate(path, options or LoadOptions(), self._separator)
        with self._lock.write():
            self._data = candidate
        logger.debug("Loaded configuration from %s (%d top-level keys)", path, len(candidate))

    # ----- Typed accessors -----

    def get_string(self, key: str, default: str = "") -> str:
        return self._read(key, to_string, default)

    def get_int(self, key: str, default: int = 0) -> int:
        return self._read(key, to_int, default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return self._read(key, to_float, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean; strings must be true/false/1/0 (case-insensitive)."""
        return self._read(key, to_bool, default)

    def get_duration(self, key: str, default: timedelta | None = None) -> timedelta:
        """Get a duration from a unit string (``"1m30s"``) or a number of seconds."""
        return self._read(key, to_duration, default)

    def get_string_list(self, key: str, default: list[str] | None = None) -> list[str]:
        """Get a list of strings; a plain string is split on commas."""
        return self._read(key, to_string_list, default)

    def get_nested_map(self, key: str) -> dict[str, Any] | None:
        """Return a deep copy of the dict at *key*, or None if it is not a dict."""
        with self._lock.read():
            value = lookup(self._data, key, self._separator)
            if isinstance(value, dict):
                return copy.deepcopy(value)
        return None

    def get_nested_keys(self, prefix: str) -> list[str]:
        """Return the full key paths of the immediate children of *prefix*.

        Example: ``["server.host", "server.port"]`` for prefix ``"server"``.
        """
        with self._lock.read():
            return child_keys(self._data, prefix, self._separator)

    # ----- Dunder helpers -----

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return self.size()

    def __str__(self) -> str:
        with self._lock.read():
            return "".join(f"{key}: {stringify(value)}\n" for key, value in self._data.items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys()!r})"


class NullConfig(Config):
    """An always-empty, read-only Config.

    Stands in for an absent configuration handle: every getter returns its
    default or zero value, mutators are no-ops and loading raises
    ConfigNilError.
    """

    def set(self, key: str, value: Any) -> None:
        return None

    def clear(self) -> None:
        return None

    def load_from_map(self, data: Mapping[str, Any]) -> None:
        return None

    def set_nested_defaults(self, defaults: Mapping[str, Any]) -> None:
        return None

    def load_from_file(self, path: str | Path, options: LoadOptions | None = None) -> None:
        raise ConfigNilError()


NULL_CONFIG = NullConfig()
"""Shared null configuration instance."""


def ensure_config(config: Config | None) -> Config:
    """Return *config*, or :data:`NULL_CONFIG` when it is None."""
    return config if config is not None else NULL_CONFIG
