"""regions-validator CLI.

The CLI is a thin wrapper around the Python API (see validation/runner.py).
All validation logic lives in the library; the CLI handles user interaction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn

import click

from regions_validator.config import resolve_settings
from regions_validator.errors import RegionsValidatorError
from regions_validator.json_output import ErrorDetail, error_envelope, success_envelope
from regions_validator.output import detail, error, info, success, warn
from regions_validator.validation import Severity, ValidationReport, Violation
from regions_validator.validation.runner import check as validate_registry

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def should_output_json(ctx: click.Context, json_flag: bool = False) -> bool:
    """Determine if JSON output should be used.

    Global --format=json takes precedence, but the per-command --json flag
    also works.
    """
    obj = ctx.find_root().obj or {}
    global_format = obj.get("format", "text")
    return global_format == "json" or json_flag


def output_json_envelope(envelope: Any) -> None:
    """Output a JSON envelope to stdout."""
    click.echo(envelope.to_json())


@click.group()
@click.version_option(package_name="regions-validator")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format (json for machine parsing, text for humans).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostic logging (written to stderr).",
)
@click.pass_context
def cli(ctx: click.Context, output_format: str, log_level: str) -> None:
    """regions-validator - Validate a registry of regions and transit feeds."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["format"] = output_format


def _output_check_json(report: ValidationReport) -> None:
    """Output check results as JSON envelope."""
    data = report.to_dict()
    data["summary"] = {
        "total": len(report.violations),
        "errors": len(report.errors),
        "warnings": len(report.warnings),
        "by_kind": report.kind_counts(),
    }

    if report.passed:
        envelope = success_envelope("check", data)
    else:
        errors = [
            ErrorDetail(type=v.kind.value, message=f"{v.entity_ref}: {v.message}")
            for v in report.errors
        ]
        envelope = error_envelope("check", errors, data=data)

    output_json_envelope(envelope)


def _print_violation(violation: Violation) -> None:
    """Print a single violation with formatting matching its severity."""
    msg = f"{violation.entity_ref}: [{violation.kind.value}] {violation.message}"
    if violation.severity == Severity.ERROR:
        error(msg)
    elif violation.severity == Severity.WARNING:
        warn(msg)
    else:
        info(msg)


def _print_check_summary(report: ValidationReport) -> None:
    """Print check summary message."""
    counts = ", ".join(f"{count} {kind}" for kind, count in sorted(report.counts.items()))
    if counts:
        detail(f"Checked {counts}")

    if report.passed:
        success("All validation checks passed")
        return

    error_count = len(report.errors)
    warning_count = len(report.warnings)
    parts = [f"{error_count} error{'s' if error_count != 1 else ''}"]
    if warning_count:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
    error(f"Validation failed: {', '.join(parts)}")


def _fail(use_json: bool, err: RegionsValidatorError) -> NoReturn:
    if use_json:
        envelope = error_envelope(
            "check",
            [ErrorDetail(type=type(err).__name__, message=err.message, code=err.code)],
        )
        output_json_envelope(envelope)
    else:
        error(str(err))
    raise SystemExit(1) from err


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Also show the resolved settings")
@click.option(
    "--skip-feed-spec",
    is_flag=True,
    help="Do not run the external GTFS validator.",
)
@click.option(
    "--gtfs-validator",
    "gtfs_validator",
    help="Command used to launch the GTFS validator (default: gtfs-validator).",
)
@click.option(
    "--feed-spec-timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Per-feed timeout in seconds for the GTFS validator.",
)
@click.option("--workers", type=click.IntRange(min=1), help="Maximum worker threads.")
@click.option(
    "--report-dir",
    type=click.Path(path_type=Path),
    help="Directory receiving GTFS validation reports.",
)
@click.pass_context
def check(
    ctx: click.Context,
    path: Path,
    json_output: bool,
    verbose: bool,
    skip_feed_spec: bool,
    gtfs_validator: str | None,
    feed_spec_timeout: float | None,
    workers: int | None,
    report_dir: Path | None,
) -> None:
    """Validate a regions registry.

    Runs schema, naming, reference, geographic, cost, URL and feed-spec checks
    and reports every violation found.

    PATH is the registry base directory (default: current directory).
    """
    use_json = should_output_json(ctx, json_output)

    if not path.exists():
        if use_json:
            envelope = error_envelope(
                "check",
                [ErrorDetail(type="PathNotFoundError", message=f"Path does not exist: {path}")],
            )
            output_json_envelope(envelope)
        else:
            error(f"Path does not exist: {path}")
        raise SystemExit(1)

    try:
        settings = resolve_settings(
            path,
            gtfs_validator=gtfs_validator,
            feed_spec_timeout=feed_spec_timeout,
            max_workers=workers,
            report_dir=report_dir,
            skip_feed_spec=skip_feed_spec,
        )
        report = validate_registry(path, settings=settings)
    except RegionsValidatorError as err:
        _fail(use_json, err)

    if use_json:
        _output_check_json(report)
    else:
        if verbose:
            for key, value in settings.to_dict().items():
                detail(f"{key}: {value}")
        for violation in report.violations:
            _print_violation(violation)
        for feed_report in report.feed_reports:
            detail(feed_report.message)
        _print_check_summary(report)

    # Exit code: 1 if any errors (not warnings)
    if report.errors:
        raise SystemExit(1)
