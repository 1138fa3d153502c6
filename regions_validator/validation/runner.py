"""Validation runner that executes every check against a registry."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from regions_validator.config import ValidatorSettings, resolve_settings
from regions_validator.costs import check_vehicle_costs
from regions_validator.errors import ConfigInvalidValueError, RegistryNotFoundError
from regions_validator.geo import TimezoneFinderLookup, TimezoneLookup, check_region_geometry
from regions_validator.graph import index_entities, resolve_references
from regions_validator.gtfs import FeedSpecValidator, GtfsValidatorCli, validate_feeds
from regions_validator.loader import load_entities
from regions_validator.models import EntityKind, Region
from regions_validator.schemas import SchemaRegistry
from regions_validator.standards import check_region_standards
from regions_validator.urls import check_realtime_feed_urls, check_static_feed_urls
from regions_validator.validation.results import ValidationReport, Violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationContext:
    """Everything a run needs, built once and shared read-only by all checks.

    Attributes:
        base_path: Registry base path.
        settings: Resolved settings.
        schemas: Compiled schemas for every entity kind.
        timezone_lookup: Timezone lookup used by the geo checks.
        feed_validator: External feed-spec validator, or None to skip it.
    """

    base_path: Path
    settings: ValidatorSettings
    schemas: SchemaRegistry
    timezone_lookup: TimezoneLookup
    feed_validator: FeedSpecValidator | None = None


def build_context(
    base_path: Path,
    *,
    settings: ValidatorSettings | None = None,
    timezone_lookup: TimezoneLookup | None = None,
    feed_validator: FeedSpecValidator | None = None,
) -> ValidationContext:
    """Build the context of a run.

    Raises:
        RegistryNotFoundError: If ``base_path`` is not a directory.
        SchemaError: If a schema cannot be loaded.
        ConfigError: If the configuration is invalid.
    """
    if not base_path.is_dir():
        raise RegistryNotFoundError(str(base_path))

    if settings is None:
        settings = resolve_settings(base_path)

    if feed_validator is None and settings.gtfs_validator:
        try:
            feed_validator = GtfsValidatorCli(settings.gtfs_validator)
        except ValueError as e:
            raise ConfigInvalidValueError(
                "gtfs_validator", settings.gtfs_validator, f"a shell-style command line ({e})"
            ) from e

    return ValidationContext(
        base_path=base_path,
        settings=settings,
        schemas=SchemaRegistry.for_registry(base_path),
        timezone_lookup=timezone_lookup or TimezoneFinderLookup(),
        feed_validator=feed_validator if settings.feed_spec_enabled else None,
    )


def check_region(region: Region, context: ValidationContext) -> list[Violation]:
    """Run every region-local check; none of them short-circuits another."""
    violations = check_region_standards(region)
    violations.extend(check_region_geometry(region, context.timezone_lookup))
    violations.extend(check_vehicle_costs(region))
    return violations


def run(context: ValidationContext) -> ValidationReport:
    """Run every validation of a registry.

    Checks run over the indexed entities: when two files declare the same
    identity, only the first one is checked further.
    """
    report = ValidationReport()
    base_path = context.base_path

    loaded = {
        kind: load_entities(base_path, kind, context.schemas, report) for kind in EntityKind
    }
    report.counts = {kind.value: len(items) for kind, items in loaded.items()}

    regions = index_entities(loaded[EntityKind.REGION], report)
    static_feeds = index_entities(loaded[EntityKind.STATIC_FEED], report)
    realtime_feeds = index_entities(loaded[EntityKind.REALTIME_FEED], report)

    resolve_references(regions, static_feeds, realtime_feeds, report)

    logger.info("Verifying pt-realtime-feeds...")
    for item in realtime_feeds.values():
        report.extend(check_realtime_feed_urls(item.entity))

    logger.info("Verifying pt-static-feeds...")
    for item in static_feeds.values():
        report.extend(check_static_feed_urls(item.entity))

    logger.info("Verifying regions...")
    region_entities = [item.entity for item in regions.values()]
    if region_entities:
        workers = max(1, min(context.settings.max_workers, len(region_entities)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, keeping the report deterministic
            for violations in executor.map(lambda r: check_region(r, context), region_entities):
                report.extend(violations)

    if context.feed_validator is not None:
        logger.info("Validating feed specifications...")
        feeds = [item.entity for item in static_feeds.values()]
        for violations, feed_report in validate_feeds(feeds, context.feed_validator, context.settings):
            report.extend(violations)
            report.add_feed_report(feed_report)
    else:
        logger.info("Feed-spec validation disabled")

    if report.passed:
        logger.info("No errors detected")
    else:
        logger.info("%d error(s) detected", len(report.errors))
    return report


def check(
    base_path: Path,
    *,
    settings: ValidatorSettings | None = None,
    timezone_lookup: TimezoneLookup | None = None,
    feed_validator: FeedSpecValidator | None = None,
) -> ValidationReport:
    """Validate a registry.

    Args:
        base_path: Registry base path (holding schemas/, regions/, ...).
        settings: Optional settings; resolved from config/env when omitted.
        timezone_lookup: Optional lookup; defaults to timezonefinder.
        feed_validator: Optional external validator; defaults to the
            MobilityData CLI when a command is configured.

    Returns:
        ValidationReport with every violation found.

    Raises:
        RegionsValidatorError: For fatal setup errors (missing registry,
            unloadable schemas, invalid configuration).
    """
    context = build_context(
        base_path,
        settings=settings,
        timezone_lookup=timezone_lookup,
        feed_validator=feed_validator,
    )
    return run(context)
