"""Process-wide shared Config and convenience loaders.

Prefer passing an explicit :class:`~dotconf.config.Config` around. The
shared instance exists for code that needs one well-known configuration
handle; it is created on first use and never torn down.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Mapping

from dotconf.config import Config
from dotconf.types import LoadOptions

__all__ = ["get_default_config", "load", "load_with_defaults", "must_load"]

_default_config: Config | None = None
_default_lock = threading.Lock()


def get_default_config() -> Config:
    """Return the shared Config, constructing it exactly once."""
    global _default_config
    if _default_config is None:
        with _default_lock:
            if _default_config is None:
                _default_config = Config()
    return _default_config


def load(path: str | Path, options: LoadOptions | None = None) -> Config:
    """Load *path* into the shared Config and return it."""
    config = get_default_config()
    config.load_from_file(path, options)
    return config


def must_load(path: str | Path, options: LoadOptions | None = None) -> Config:
    """Load *path* into a new Config.

    Raises:
        ConfigStoreError: Any load failure, unchanged.
    """
    config = Config()
    config.load_from_file(path, options)
    return config


def load_with_defaults(path: str | Path, defaults: Mapping[str, Any]) -> Config:
    """Load *path* into a new Config with *defaults* applied."""
    return must_load(path, LoadOptions(default_values=dict(defaults)))
