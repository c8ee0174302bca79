"""Load pipeline: read, decode, default, overlay and validate a candidate tree.

Everything here works on a locally owned dict. Committing the result into a
store is left to :meth:`dotconf.config.Config.load_from_file`, which is the
only step that takes the write lock.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from dotconf.decoders import decode, detect_format
from dotconf.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigReadError,
    RequiredKeyMissingError,
    ValidationFailedError,
)
from dotconf.paths import has_path, set_default
from dotconf.types import ConfigFormat, LoadOptions, ValidationFunc

logger = logging.getLogger(__name__)

__all__ = [
    "apply_defaults",
    "apply_environment",
    "build_candidate",
    "check_required_keys",
    "run_validation",
]


def apply_defaults(data: dict[str, Any], defaults: Mapping[str, Any], separator: str = ".") -> None:
    """Insert each default whose key does not already resolve in *data*."""
    for key, value in defaults.items():
        if set_default(data, key, copy.deepcopy(value), separator):
            logger.debug("Applied default for '%s'", key)


def apply_environment(data: dict[str, Any], environ: Mapping[str, str] | None = None) -> list[str]:
    """Override existing top-level keys with same-named environment variables.

    Only keys already present are considered and empty variables are ignored,
    so the environment can never introduce new keys.

    Returns:
        The keys that were overridden.
    """
    env = os.environ if environ is None else environ
    overridden: list[str] = []
    for key in list(data):
        env_value = env.get(key)
        if env_value:
            data[key] = env_value
            overridden.append(key)
    if overridden:
        logger.debug("Environment overrides applied for: %s", ", ".join(overridden))
    return overridden


def check_required_keys(data: dict[str, Any], required_keys: list[str], separator: str = ".") -> None:
    """Raise RequiredKeyMissingError for the first key that does not resolve."""
    for key in required_keys:
        if not has_path(data, key, separator):
            raise RequiredKeyMissingError(key=key)


def run_validation(data: dict[str, Any], validation_func: ValidationFunc | None) -> None:
    """Call *validation_func* on a deep copy of *data*.

    The callback reports failure by raising; the exception is wrapped in
    ValidationFailedError.
    """
    if validation_func is None:
        return
    try:
        validation_func(copy.deepcopy(data))
    except Exception as e:
        raise ValidationFailedError(reason=str(e) or type(e).__name__, cause=e) from e


def build_candidate(path: str | Path, options: LoadOptions, separator: str = ".") -> dict[str, Any]:
    """Produce the fully merged and validated tree for *path*.

    Raises:
        ConfigNotFoundError: If *path* does not exist.
        ConfigReadError: If the file cannot be read.
        ConfigParseError: If JSON/YAML content is malformed or not valid UTF-8.
        RequiredKeyMissingError: If a required key is absent after merging.
        ValidationFailedError: If the validation callback raises.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigNotFoundError(config_path=str(path))

    fmt = options.format if options.format is not None else detect_format(file_path)
    logger.debug("Loading %s as %s", file_path, fmt.value)

    # Non-UTF-8 bytes in INI text survive as surrogate escapes.
    errors = "surrogateescape" if fmt is ConfigFormat.INI else "strict"
    try:
        text = file_path.read_text(encoding="utf-8", errors=errors)
    except OSError as e:
        raise ConfigReadError(config_path=str(path), reason=str(e), cause=e) from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(
            message=f"Invalid UTF-8 in {path}: {e}", format=fmt.value, cause=e
        ) from e

    data = decode(text, fmt, source=str(path))
    apply_defaults(data, options.default_values, separator)
    if not options.ignore_env:
        apply_environment(data)
    check_required_keys(data, options.required_keys, separator)
    run_validation(data, options.validation_func)
    return data
