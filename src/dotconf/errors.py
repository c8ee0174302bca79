"""Error hierarchy for the dotconf configuration store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "ConfigStoreError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigNilError",
    "InvalidFormatError",
    "RequiredKeyMissingError",
    "ValidationFailedError",
    "ErrorCodes",
]


class ConfigStoreError(Exception):
    """Base error for all dotconf errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(ConfigStoreError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )

    @property
    def config_path(self) -> str:
        """The path that was looked up."""
        return self.details["config_path"]


class ConfigReadError(ConfigStoreError):
    """Raised when an existing configuration file cannot be read."""

    def __init__(self, config_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_READ_ERROR",
            message=f"Could not read configuration file {config_path}: {reason}",
            details={"config_path": config_path, "reason": reason},
            **kwargs,
        )


class ConfigParseError(ConfigStoreError):
    """Raised when a JSON or YAML configuration file has invalid syntax."""

    def __init__(self, message: str, format: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_PARSE_ERROR",
            message=message,
            details={"format": format},
            **kwargs,
        )


class ConfigNilError(ConfigStoreError):
    """Raised when loading into the null configuration object."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_NIL", message="Configuration is nil", **kwargs)


class InvalidFormatError(ConfigStoreError):
    """Raised when an unsupported configuration format is requested."""

    def __init__(self, format: Any, **kwargs: Any) -> None:
        super().__init__(
            code="INVALID_FORMAT",
            message=f"Invalid configuration format: {format!r}",
            details={"format": format},
            **kwargs,
        )


class RequiredKeyMissingError(ConfigStoreError):
    """Raised when a required key is absent after defaults and environment merge."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="REQUIRED_KEY_MISSING",
            message=f"Required configuration key is missing: {key!r}",
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The missing key."""
        return self.details["key"]


class ValidationFailedError(ConfigStoreError):
    """Raised when the caller-supplied validation callback rejects the configuration."""

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="VALIDATION_FAILED",
            message=f"Validation failed: {reason}",
            details={"reason": reason},
            **kwargs,
        )


class ErrorCodes:
    """All dotconf error codes as constants.

    Example:
        if error.code == ErrorCodes.REQUIRED_KEY_MISSING:
            handle_missing(error.details["key"])
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
    CONFIG_READ_ERROR = "CONFIG_READ_ERROR"
    CONFIG_NIL = "CONFIG_NIL"
    INVALID_FORMAT = "INVALID_FORMAT"
    REQUIRED_KEY_MISSING = "REQUIRED_KEY_MISSING"
    VALIDATION_FAILED = "VALIDATION_FAILED"
