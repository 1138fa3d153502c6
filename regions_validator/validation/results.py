"""Validation result data structures.

Checks never raise for a defect in the data: they produce Violation records,
which are accumulated into a ValidationReport for CLI display and JSON export.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from regions_validator.gtfs import FeedSpecReport


class Severity(Enum):
    """Severity level for violations.

    ERROR: Fails the run
    WARNING: Recorded for audit, does not fail the run
    INFO: Recorded for audit, does not fail the run
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ViolationKind(Enum):
    """Category of a violation."""

    SCHEMA_VIOLATION = "SchemaViolation"
    FILE_NAMING_MISMATCH = "FileNamingMismatch"
    DUPLICATE_IDENTITY = "DuplicateIdentity"
    UNRESOLVED_REFERENCE = "UnresolvedReference"
    UNRECOGNIZED_CODE = "UnrecognizedCode"
    MALFORMED_GEOMETRY = "MalformedGeometry"
    POINT_NOT_CONTAINED = "PointNotContained"
    TIMEZONE_MISMATCH = "TimezoneMismatch"
    DUPLICATE_COST_TYPE = "DuplicateCostType"
    MALFORMED_URL = "MalformedUrl"
    EXTERNAL_VALIDATOR_UNREACHABLE = "ExternalValidatorUnreachable"
    EXTERNAL_SPEC_ERROR = "ExternalSpecError"
    EXTERNAL_SPEC_WARNING = "ExternalSpecWarning"


@dataclass(frozen=True)
class Violation:
    """A single defect found in the registry.

    Attributes:
        entity_ref: File path or ``<kind>:<label>`` of the offending entity.
        kind: Category of the violation.
        message: Human-readable description.
        severity: ERROR fails the run; WARNING and INFO are kept for audit.
    """

    entity_ref: str
    kind: ViolationKind
    message: str
    severity: Severity = Severity.ERROR

    @property
    def is_fatal(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "entity": self.entity_ref,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """Aggregate of every violation found during a run.

    The report is an append-only sink; ``add`` and ``extend`` may be called
    from worker threads.

    Attributes:
        violations: Violations in the order they were recorded.
        feed_reports: Per-feed summaries from the feed-spec validator.
        counts: Number of entities loaded per kind.
    """

    violations: list[Violation] = field(default_factory=list)
    feed_reports: list[FeedSpecReport] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def add(self, violation: Violation) -> None:
        with self._lock:
            self.violations.append(violation)

    def extend(self, violations: Iterable[Violation]) -> None:
        batch = list(violations)
        with self._lock:
            self.violations.extend(batch)

    def add_feed_report(self, feed_report: FeedSpecReport) -> None:
        with self._lock:
            self.feed_reports.append(feed_report)

    @property
    def passed(self) -> bool:
        """True if no ERROR-severity violation was recorded."""
        return not any(v.is_fatal for v in self.violations)

    @property
    def errors(self) -> list[Violation]:
        """Return only ERROR-severity violations."""
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Violation]:
        """Return only WARNING-severity violations."""
        return [v for v in self.violations if v.severity == Severity.WARNING]

    def by_kind(self, kind: ViolationKind) -> list[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def kind_counts(self) -> dict[str, int]:
        """Number of violations per kind, for summaries."""
        return dict(Counter(v.kind.value for v in self.violations))

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict for --json output."""
        return {
            "passed": self.passed,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "entities": dict(self.counts),
            "violations": [v.to_dict() for v in self.violations],
            "feed_reports": [r.to_dict() for r in self.feed_reports],
        }
