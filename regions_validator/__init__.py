"""regions-validator - Quality gate for a registry of regions and transit feeds."""

from regions_validator.cli import cli
from regions_validator.validation import Severity, ValidationReport, Violation, ViolationKind
from regions_validator.validation.runner import check

__all__ = [
    "Severity",
    "ValidationReport",
    "Violation",
    "ViolationKind",
    "check",
    "cli",
]
