"""JSON output envelope for machine-readable CLI output.

Envelope Structure:
    {
        "success": true|false,
        "command": "check",
        "data": { ... },
        "errors": [ ... ]  # Only present when success=false
    }

Usage:
    from regions_validator.json_output import success_envelope, error_envelope, ErrorDetail

    envelope = success_envelope("check", report.to_dict())
    print(envelope.to_json())
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorDetail:
    """Structure for individual error entries in the errors array.

    Attributes:
        type: Error or violation kind (e.g., "SchemaNotFoundError", "UnresolvedReference")
        message: Human-readable error description
        code: Structured error code, when the error carries one
    """

    type: str
    message: str
    code: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        result = {"type": self.type, "message": self.message}
        if self.code is not None:
            result["code"] = self.code
        return result


@dataclass
class OutputEnvelope:
    """The consistent wrapper structure for all JSON command output.

    Attributes:
        success: True if command completed without errors, False otherwise
        command: Name of the command that produced this output
        data: Command-specific payload; structure varies by command
        errors: Array of error objects; present only when success=False
    """

    success: bool
    command: str
    data: dict[str, Any] | None
    errors: list[ErrorDetail] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        The errors field is excluded when None (for success cases).
        """
        result: dict[str, Any] = {
            "success": self.success,
            "command": self.command,
            "data": self.data,
        }

        if self.errors is not None:
            result["errors"] = [e.to_dict() for e in self.errors]

        return result

    def to_json(self, *, indent: int | None = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def success_envelope(command: str, data: dict[str, Any]) -> OutputEnvelope:
    """Create a success envelope with the given command and data."""
    return OutputEnvelope(success=True, command=command, data=data)


def error_envelope(
    command: str,
    errors: list[ErrorDetail],
    *,
    data: dict[str, Any] | None = None,
) -> OutputEnvelope:
    """Create an error envelope with the given command and errors.

    Args:
        command: Name of the command (e.g., "check")
        errors: List of ErrorDetail objects describing the errors
        data: Optional partial data to include (default: empty dict)

    Returns:
        OutputEnvelope with success=False and the provided errors
    """
    return OutputEnvelope(
        success=False,
        command=command,
        data=data if data is not None else {},
        errors=errors,
    )
