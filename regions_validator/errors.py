"""Structured error codes for regions-validator.

These errors are fatal: they stop a run before a report can be produced.
Per-entity findings are never raised, they are recorded as violations
(see regions_validator.validation.results).

All errors follow the format RGNV-{category}{number}:
- RGNV-SCH*: Schema loading errors
- RGNV-CFG*: Configuration errors
- RGNV-VAL*: Validation setup errors
- RGNV-EXT*: External validator errors
"""

from __future__ import annotations

from typing import Any


class RegionsValidatorError(Exception):
    """Base class for all regions-validator errors.

    All errors have:
    - code: Structured error code (e.g., RGNV-SCH001)
    - message: Human-readable error message
    """

    code: str = "RGNV-000"

    # Reserved attribute names that cannot be overwritten by context
    _RESERVED_ATTRS = frozenset({"code", "message", "context", "args"})

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error message.
            **context: Additional context stored as error attributes.
                Reserved keys (code, message, context, args) are ignored.
        """
        self.message = message
        self.context = context
        for key, value in context.items():
            if key not in self._RESERVED_ATTRS:
                setattr(self, key, value)
        super().__init__(f"[{self.code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# Schema Errors (RGNV-SCH*)
class SchemaError(RegionsValidatorError):
    """Base class for schema-related errors."""

    code = "RGNV-SCH000"


class SchemaNotFoundError(SchemaError):
    """Raised when a schema document is missing from the schemas directory.

    Error code: RGNV-SCH001
    """

    code = "RGNV-SCH001"

    def __init__(self, path: str) -> None:
        super().__init__(f"Schema not found: {path}", path=path)


class SchemaLoadError(SchemaError):
    """Raised when a schema document cannot be parsed or is not a valid draft 7 schema.

    Error code: RGNV-SCH002
    """

    code = "RGNV-SCH002"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load schema {path}: {reason}", path=path, reason=reason)


# Configuration Errors (RGNV-CFG*)
class ConfigError(RegionsValidatorError):
    """Base class for configuration-related errors."""

    code = "RGNV-CFG000"


class ConfigParseError(ConfigError):
    """Raised when a configuration file cannot be parsed.

    Error code: RGNV-CFG001
    """

    code = "RGNV-CFG001"

    def __init__(self, path: str, parse_error: str) -> None:
        super().__init__(
            f"Failed to parse config file {path}: {parse_error}",
            path=path,
            parse_error=parse_error,
        )


class ConfigInvalidStructureError(ConfigError):
    """Raised when a configuration file has an invalid structure.

    Error code: RGNV-CFG002
    """

    code = "RGNV-CFG002"

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(
            f"Invalid config structure in {path}: {detail}",
            path=path,
            detail=detail,
        )


class ConfigInvalidValueError(ConfigError):
    """Raised when a setting has a value of the wrong type or range.

    Error code: RGNV-CFG003
    """

    code = "RGNV-CFG003"

    def __init__(self, key: str, value: Any, expected: str) -> None:
        super().__init__(
            f"Invalid value for '{key}': {value!r} (expected {expected})",
            key=key,
            value=value,
            expected=expected,
        )


# Validation Errors (RGNV-VAL*)
class ValidationError(RegionsValidatorError):
    """Base class for validation setup errors."""

    code = "RGNV-VAL000"


class RegistryNotFoundError(ValidationError):
    """Raised when the registry base path does not exist.

    Error code: RGNV-VAL001
    """

    code = "RGNV-VAL001"

    def __init__(self, path: str) -> None:
        super().__init__(f"Registry not found at {path}", path=path)


class MalformedGeometryError(ValidationError):
    """Raised when a coverage polygon cannot be parsed into a polygonal geometry.

    Error code: RGNV-VAL002
    """

    code = "RGNV-VAL002"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed polygon: {reason}", reason=reason)


# External Validator Errors (RGNV-EXT*)
class ExternalValidatorError(RegionsValidatorError):
    """Base class for errors raised while talking to the feed-spec validator."""

    code = "RGNV-EXT000"


class MalformedReportError(ExternalValidatorError):
    """Raised when a feed-spec validator report is missing or cannot be parsed.

    Error code: RGNV-EXT001
    """

    code = "RGNV-EXT001"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Malformed validator report {path}: {reason}", path=path, reason=reason)
