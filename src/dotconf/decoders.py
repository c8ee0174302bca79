"""Format detection and decoding of configuration text into value trees."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml

from dotconf.coercion import stringify
from dotconf.errors import ConfigParseError, InvalidFormatError
from dotconf.ini import parse_ini
from dotconf.types import ConfigFormat

logger = logging.getLogger(__name__)

__all__ = ["decode", "detect_format", "normalize_tree"]

_EXTENSIONS: dict[str, ConfigFormat] = {
    ".json": ConfigFormat.JSON,
    ".yaml": ConfigFormat.YAML,
    ".yml": ConfigFormat.YAML,
}


def detect_format(path: str | Path) -> ConfigFormat:
    """Infer the file format from its extension; unknown extensions mean INI."""
    return _EXTENSIONS.get(Path(path).suffix.lower(), ConfigFormat.INI)


def normalize_tree(value: Any) -> Any:
    """Coerce decoder output into the store's value shapes.

    Mapping keys become strings, tuples and sets become lists and
    date/time objects become ISO-8601 strings.
    """
    if isinstance(value, dict):
        return {
            (key if isinstance(key, str) else stringify(key)): normalize_tree(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [normalize_tree(item) for item in value]
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def _decode_json(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(
            message=f"Invalid JSON in {source}: {e}", format=ConfigFormat.JSON.value, cause=e
        ) from e


def _decode_yaml(text: str, source: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(
            message=f"Invalid YAML in {source}: {e}", format=ConfigFormat.YAML.value, cause=e
        ) from e


def decode(text: str, format: ConfigFormat | str, source: str = "<string>") -> dict[str, Any]:
    """Decode configuration *text* into a fresh nested dict.

    Args:
        text: Raw file content.
        format: Format of *text*.
        source: Name used in error messages, usually the file path.

    Raises:
        ConfigParseError: If JSON/YAML text is malformed or not a mapping.
        InvalidFormatError: If *format* is not a supported format.
    """
    try:
        fmt = ConfigFormat(format)
    except ValueError as e:
        raise InvalidFormatError(format=format) from e

    if fmt is ConfigFormat.INI:
        return parse_ini(text)

    if fmt is ConfigFormat.JSON:
        data = _decode_json(text, source)
    else:
        data = _decode_yaml(text, source)

    if data is None:
        logger.debug("Empty %s document in %s", fmt.value, source)
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            message=f"{fmt.value.upper()} configuration in {source} must be a mapping, got {type(data).__name__}",
            format=fmt.value,
        )
    return normalize_tree(data)
