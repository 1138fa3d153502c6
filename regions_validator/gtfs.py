"""Feed-spec validation through the MobilityData GTFS validator.

Static feeds declaring the GTFS standard are handed to the external
validator, which downloads the feed from its source URL and writes a
``report.json`` into a per-feed output directory. The report's notices are
turned into violations: ERROR notices fail the run, WARNING and INFO notices
are recorded for audit only.

The validator runs as a subprocess (``gtfs-validator --url ... --output_base
...``), bounded by a per-feed timeout. Any failure to run it or to read its
report is a feed-level violation, never a crash of the whole run.
"""

from __future__ import annotations

import json
import logging
import re
import shlex
import subprocess
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from regions_validator.config import ValidatorSettings
from regions_validator.constants import REPORT_FILE_NAME
from regions_validator.errors import MalformedReportError
from regions_validator.models import EntityKind, StaticFeed
from regions_validator.urls import is_well_formed_url
from regions_validator.validation.results import Severity, Violation, ViolationKind

logger = logging.getLogger(__name__)

SYSTEM_ERRORS_FILE_NAME = "system_errors.json"

# Keep the tail of the validator's stderr in violation messages short
_STDERR_TAIL = 400

_UNSAFE_DIR_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class NoticeSeverity(Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Notice:
    """One notice type reported by the validator.

    Attributes:
        code: Notice code (e.g., "foreign_key_violation").
        severity: INFO, WARNING or ERROR.
        total_notices: Number of occurrences in the feed.
    """

    code: str
    severity: NoticeSeverity
    total_notices: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Notice:
        return cls(
            code=str(data["code"]),
            severity=NoticeSeverity(str(data["severity"]).upper()),
            total_notices=int(data.get("totalNotices", 0)),
        )


class OutcomeStatus(Enum):
    OK = "ok"
    TIMED_OUT = "timed_out"
    UNREACHABLE = "unreachable"
    MALFORMED_REPORT = "malformed_report"


@dataclass(frozen=True)
class FeedSpecOutcome:
    """Result of one external validation.

    Attributes:
        status: OK when a report was produced and parsed.
        notices: Parsed notices (empty unless status is OK).
        detail: Explanation for non-OK outcomes.
    """

    status: OutcomeStatus
    notices: tuple[Notice, ...] = ()
    detail: str = ""

    @classmethod
    def ok(cls, notices: Sequence[Notice]) -> FeedSpecOutcome:
        return cls(OutcomeStatus.OK, tuple(notices))

    @classmethod
    def failed(cls, status: OutcomeStatus, detail: str) -> FeedSpecOutcome:
        return cls(status, (), detail)


@dataclass(frozen=True)
class FeedSpecReport:
    """Per-feed summary of a feed-spec validation.

    ``status`` is an OutcomeStatus value, or "skipped" for feeds whose type
    is not validated externally.
    """

    feed_id: str
    feed_type: str
    status: str
    errors: int = 0
    warnings: int = 0
    infos: int = 0
    notices: tuple[Notice, ...] = field(default=(), compare=False)

    @property
    def message(self) -> str:
        if self.status == "skipped":
            return f"Source {self.feed_id} ({self.feed_type}) not validated: no validator for this type."
        if self.status != OutcomeStatus.OK.value:
            return f"Source {self.feed_id} could not be validated ({self.status})."
        return f"Source {self.feed_id} has {self.errors} errors, {self.warnings} warnings."

    def to_dict(self) -> dict[str, Any]:
        return {
            "feed_id": self.feed_id,
            "type": self.feed_type,
            "status": self.status,
            "errors": self.errors,
            "warnings": self.warnings,
            "infos": self.infos,
            "notices": [
                {"code": n.code, "severity": n.severity.value, "totalNotices": n.total_notices}
                for n in self.notices
            ],
        }


class FeedSpecValidator(Protocol):
    """External feed-spec validator contract."""

    def validate(
        self,
        feed_id: str,
        source_url: str,
        output_dir: Path,
        timeout: float,
    ) -> FeedSpecOutcome: ...


def parse_report(report_path: Path) -> list[Notice]:
    """Parse the notices of a validator ``report.json``.

    Raises:
        MalformedReportError: If the report is missing, not JSON, or its
            notices lack a code, a known severity or a count.
    """
    try:
        data = json.loads(report_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise MalformedReportError(str(report_path), "report file not found") from e
    except (OSError, json.JSONDecodeError) as e:
        raise MalformedReportError(str(report_path), str(e)) from e

    if not isinstance(data, dict) or not isinstance(data.get("notices"), list):
        raise MalformedReportError(str(report_path), "missing 'notices' list")

    try:
        return [Notice.from_dict(item) for item in data["notices"]]
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedReportError(str(report_path), f"invalid notice: {e}") from e


def read_system_errors(output_dir: Path) -> list[str]:
    """Return the notice codes of ``system_errors.json``, if the validator wrote one."""
    errors_path = output_dir / SYSTEM_ERRORS_FILE_NAME
    if not errors_path.exists():
        return []
    try:
        data = json.loads(errors_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return []
    notices = data.get("notices", []) if isinstance(data, dict) else data
    if not isinstance(notices, list):
        return []
    return [str(n.get("code", "unknown")) for n in notices if isinstance(n, dict)]


class GtfsValidatorCli:
    """Runs the MobilityData GTFS validator command line.

    Args:
        command: Command used to launch the validator, e.g. ``gtfs-validator``
            or ``java -jar gtfs-validator-cli.jar``.
    """

    def __init__(self, command: str) -> None:
        self.argv = shlex.split(command)
        if not self.argv:
            raise ValueError("GTFS validator command is empty")

    def build_command(self, source_url: str, output_dir: Path) -> list[str]:
        return [*self.argv, "--url", source_url, "--output_base", str(output_dir)]

    def validate(
        self,
        feed_id: str,
        source_url: str,
        output_dir: Path,
        timeout: float,
    ) -> FeedSpecOutcome:
        output_dir.mkdir(parents=True, exist_ok=True)
        command = self.build_command(source_url, output_dir)
        logger.info("Validating GTFS feed %s", feed_id)
        logger.debug("Running %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return FeedSpecOutcome.failed(
                OutcomeStatus.TIMED_OUT, f"validator did not finish within {timeout:g}s"
            )
        except OSError as e:
            return FeedSpecOutcome.failed(OutcomeStatus.UNREACHABLE, f"cannot run validator: {e}")

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()[-_STDERR_TAIL:]
            return FeedSpecOutcome.failed(
                OutcomeStatus.UNREACHABLE,
                f"validator exited with status {completed.returncode}: {stderr}",
            )

        system_errors = read_system_errors(output_dir)
        if system_errors:
            return FeedSpecOutcome.failed(
                OutcomeStatus.UNREACHABLE, f"validator system errors: {', '.join(system_errors)}"
            )

        try:
            notices = parse_report(output_dir / REPORT_FILE_NAME)
        except MalformedReportError as e:
            return FeedSpecOutcome.failed(OutcomeStatus.MALFORMED_REPORT, e.message)
        return FeedSpecOutcome.ok(notices)


_NOTICE_TO_SEVERITY = {
    NoticeSeverity.ERROR: Severity.ERROR,
    NoticeSeverity.WARNING: Severity.WARNING,
    NoticeSeverity.INFO: Severity.INFO,
}

_NOTICE_LOG_LEVEL = {
    NoticeSeverity.ERROR: logging.ERROR,
    NoticeSeverity.WARNING: logging.WARNING,
    NoticeSeverity.INFO: logging.INFO,
}


def notices_to_violations(feed: StaticFeed, notices: Sequence[Notice]) -> list[Violation]:
    """Turn validator notices into violations with matching severity."""
    ref = EntityKind.STATIC_FEED.ref(feed.label)
    violations: list[Violation] = []
    for notice in notices:
        logger.log(
            _NOTICE_LOG_LEVEL[notice.severity],
            "%s: %s, amount: %d",
            feed.id,
            notice.code,
            notice.total_notices,
        )
        kind = (
            ViolationKind.EXTERNAL_SPEC_ERROR
            if notice.severity == NoticeSeverity.ERROR
            else ViolationKind.EXTERNAL_SPEC_WARNING
        )
        violations.append(
            Violation(
                ref,
                kind,
                f"{notice.severity.value} {notice.code}, amount: {notice.total_notices}",
                severity=_NOTICE_TO_SEVERITY[notice.severity],
            )
        )
    return violations


def _summarize(feed: StaticFeed, outcome: FeedSpecOutcome) -> FeedSpecReport:
    totals = {severity: 0 for severity in NoticeSeverity}
    for notice in outcome.notices:
        totals[notice.severity] += notice.total_notices
    return FeedSpecReport(
        feed_id=feed.id,
        feed_type=feed.type,
        status=outcome.status.value,
        errors=totals[NoticeSeverity.ERROR],
        warnings=totals[NoticeSeverity.WARNING],
        infos=totals[NoticeSeverity.INFO],
        notices=outcome.notices,
    )


def report_subdirectory(feed_id: str) -> str:
    """Directory name, under the report directory, holding a feed's reports.

    Path separators and other unsafe characters become ``_``, and leading or
    trailing dots are dropped, so the result never leaves the report directory.
    """
    name = _UNSAFE_DIR_CHARS.sub("_", feed_id).strip(".")
    return name or "_"


def validate_feed(
    feed: StaticFeed,
    validator: FeedSpecValidator,
    settings: ValidatorSettings,
) -> tuple[list[Violation], FeedSpecReport]:
    """Validate one static feed with the external validator.

    Feeds whose type is not GTFS are skipped and summarized as such.
    """
    if not feed.is_gtfs:
        logger.info("Skipping feed-spec validation of %s: type %s", feed.id, feed.type)
        return [], FeedSpecReport(feed_id=feed.id, feed_type=feed.type, status="skipped")

    ref = EntityKind.STATIC_FEED.ref(feed.label)
    if not is_well_formed_url(feed.source.url):
        outcome = FeedSpecOutcome.failed(
            OutcomeStatus.UNREACHABLE, f"malformed source URL '{feed.source.url}'"
        )
    else:
        outcome = validator.validate(
            feed.id,
            feed.source.url,
            settings.report_dir / report_subdirectory(feed.id),
            settings.feed_spec_timeout,
        )

    if outcome.status != OutcomeStatus.OK:
        logger.warning("Feed-spec validation of %s failed: %s", feed.id, outcome.detail)
        violation = Violation(
            ref,
            ViolationKind.EXTERNAL_VALIDATOR_UNREACHABLE,
            f"Feed-spec validation {outcome.status.value}: {outcome.detail}",
        )
        return [violation], _summarize(feed, outcome)

    return notices_to_violations(feed, outcome.notices), _summarize(feed, outcome)


def validate_feeds(
    feeds: Sequence[StaticFeed],
    validator: FeedSpecValidator,
    settings: ValidatorSettings,
) -> list[tuple[list[Violation], FeedSpecReport]]:
    """Validate feeds concurrently, bounded by ``settings.max_workers``.

    Results are returned in the order of ``feeds``.
    """
    if not feeds:
        return []

    max_workers = max(1, min(settings.max_workers, len(feeds)))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda feed: validate_feed(feed, validator, settings), feeds))
