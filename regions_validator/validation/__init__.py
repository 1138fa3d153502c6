"""Validation results for regions registries.

This package provides:
- Violation / ViolationKind / Severity: individual findings
- ValidationReport: thread-safe aggregate of a run's findings
- runner.check(): run every validation against a registry
"""

from regions_validator.validation.results import (
    Severity,
    ValidationReport,
    Violation,
    ViolationKind,
)

__all__ = [
    "Severity",
    "ValidationReport",
    "Violation",
    "ViolationKind",
]
