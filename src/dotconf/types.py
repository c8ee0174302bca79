"""Value model, format enum and option structs for dotconf."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ConfigFormat",
    "ConfigSettings",
    "DynamicValue",
    "LoadOptions",
    "ValidationFunc",
    "WideInt",
]

DynamicValue = str | int | float | bool | list[str] | dict[str, Any] | None
"""Closed set of value shapes held by the store; nested dicts recurse into it."""

ValidationFunc = Callable[[dict[str, Any]], Any]


class WideInt(int):
    """An integer the INI parser widened to a 64-bit representation.

    Behaves exactly like ``int``; the subclass only records that the literal
    sat on the edge of the signed machine-word range.
    """

    def __repr__(self) -> str:
        return f"WideInt({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class ConfigFormat(str, Enum):
    """Supported configuration file formats."""

    INI = "ini"
    JSON = "json"
    YAML = "yaml"


class ConfigSettings(BaseModel):
    """Construction-time settings for a Config instance.

    Attributes:
        separator: Single character used to split dotted key paths.
        initial: Seed data merged into the store right after construction.
    """

    separator: str = "."
    initial: dict[str, Any] = Field(default_factory=dict)

    @field_validator("separator")
    @classmethod
    def _check_separator(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("separator must be exactly one character")
        if value.isspace():
            raise ValueError("separator must not be whitespace")
        return value


class LoadOptions(BaseModel):
    """Options controlling a single file load.

    Attributes:
        format: Explicit file format; detected from the extension when None.
        ignore_env: Skip the environment variable overlay.
        required_keys: Keys (flat or dotted) that must exist after merging.
        default_values: Fallback values applied where the file has no value.
        validation_func: Callable receiving a copy of the merged data. It
            reports failure by raising an exception.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    format: ConfigFormat | None = None
    ignore_env: bool = False
    required_keys: list[str] = Field(default_factory=list)
    default_values: dict[str, Any] = Field(default_factory=dict)
    validation_func: ValidationFunc | None = None
