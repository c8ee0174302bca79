"""dotconf - Thread-safe hierarchical configuration store."""

from __future__ import annotations

# Core
from dotconf.config import NULL_CONFIG, Config, NullConfig, ensure_config
from dotconf.global_config import get_default_config, load, load_with_defaults, must_load

# Types
from dotconf.types import ConfigFormat, ConfigSettings, DynamicValue, LoadOptions, WideInt

# Parsing
from dotconf.coercion import parse_duration
from dotconf.decoders import decode, detect_format
from dotconf.ini import parse_ini

# Errors
from dotconf.errors import (
    ConfigNilError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigReadError,
    ConfigStoreError,
    ErrorCodes,
    InvalidFormatError,
    RequiredKeyMissingError,
    ValidationFailedError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Config",
    "NullConfig",
    "NULL_CONFIG",
    "ensure_config",
    "get_default_config",
    "load",
    "must_load",
    "load_with_defaults",
    # Types
    "ConfigFormat",
    "ConfigSettings",
    "DynamicValue",
    "LoadOptions",
    "WideInt",
    # Parsing
    "decode",
    "detect_format",
    "parse_duration",
    "parse_ini",
    # Errors
    "ErrorCodes",
    "ConfigStoreError",
    "ConfigNotFoundError",
    "ConfigReadError",
    "ConfigParseError",
    "ConfigNilError",
    "InvalidFormatError",
    "RequiredKeyMissingError",
    "ValidationFailedError",
]
