"""Shared pytest fixtures for regions-validator tests."""

from __future__ import annotations

import copy
import json
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from regions_validator.config import ValidatorSettings
from regions_validator.gtfs import FeedSpecOutcome, Notice, NoticeSeverity
from regions_validator.schemas import SchemaRegistry

BUENOS_AIRES_TZ = "America/Argentina/Buenos_Aires"
CORDOBA_TZ = "America/Argentina/Cordoba"


# =============================================================================
# Test doubles
# =============================================================================


class FakeTimezoneLookup:
    """TimezoneLookup answering from a fixed table instead of timezonefinder.

    Coordinates missing from ``zones`` resolve to ``default``.
    """

    def __init__(
        self,
        default: frozenset[str] = frozenset({BUENOS_AIRES_TZ}),
        zones: Mapping[tuple[float, float], frozenset[str]] | None = None,
    ) -> None:
        self.default = default
        self.zones = dict(zones or {})
        self.calls: list[tuple[float, float]] = []

    def timezones_at(self, lat: float, lng: float) -> frozenset[str]:
        self.calls.append((lat, lng))
        return self.zones.get((lat, lng), self.default)


class FakeFeedSpecValidator:
    """FeedSpecValidator returning canned outcomes and recording its calls."""

    def __init__(self, outcomes: Mapping[str, FeedSpecOutcome] | None = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: list[dict[str, Any]] = []

    def validate(
        self,
        feed_id: str,
        source_url: str,
        output_dir: Path,
        timeout: float,
    ) -> FeedSpecOutcome:
        self.calls.append(
            {"feed_id": feed_id, "source_url": source_url, "output_dir": output_dir, "timeout": timeout}
        )
        return self.outcomes.get(feed_id, FeedSpecOutcome.ok([]))


def notice(code: str, severity: str, total: int = 1) -> Notice:
    """Build a validator notice."""
    return Notice(code=code, severity=NoticeSeverity(severity), total_notices=total)


# =============================================================================
# Fixture Directory Access
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def registry_template(fixtures_dir: Path) -> Path:
    """Pristine registry: one region, one GTFS static feed, one real-time feed."""
    return fixtures_dir / "registry"


@pytest.fixture
def sample_report(fixtures_dir: Path) -> Path:
    """Validator report.json with one ERROR, one WARNING and one INFO notice."""
    return fixtures_dir / "reports" / "report.json"


# =============================================================================
# Registries
# =============================================================================


@pytest.fixture
def registry(tmp_path: Path, registry_template: Path) -> Path:
    """Writable copy of the sample registry under tmp_path."""
    target = tmp_path / "registry"
    shutil.copytree(registry_template, target)
    return target


@pytest.fixture
def empty_registry(tmp_path: Path, registry_template: Path) -> Path:
    """Registry holding only the schemas directory."""
    target = tmp_path / "empty-registry"
    target.mkdir()
    shutil.copytree(registry_template / "schemas", target / "schemas")
    return target


@pytest.fixture
def schemas(registry_template: Path) -> SchemaRegistry:
    """Compiled schemas of the sample registry."""
    return SchemaRegistry.for_registry(registry_template)


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Return a helper writing a JSON document, creating parent directories."""

    def _write(path: Path, document: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write


# =============================================================================
# Documents
# =============================================================================


def _load(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def region_doc(registry_template: Path) -> dict[str, Any]:
    """Fresh copy of the sample region document (Bahia Blanca)."""
    return copy.deepcopy(_load(registry_template / "regions" / "ar-b-bahiablanca.json"))


@pytest.fixture
def static_feed_doc(registry_template: Path) -> dict[str, Any]:
    """Fresh copy of the sample GTFS static feed document."""
    return copy.deepcopy(_load(registry_template / "pt-static-feeds" / "bahia-blanca-gtfs.json"))


@pytest.fixture
def realtime_feed_doc(registry_template: Path) -> dict[str, Any]:
    """Fresh copy of the sample real-time feed document."""
    return copy.deepcopy(
        _load(registry_template / "pt-realtime-feeds" / "bahia-blanca-vehicles.json")
    )


# =============================================================================
# Run collaborators
# =============================================================================


@pytest.fixture
def fake_lookup() -> FakeTimezoneLookup:
    """Timezone lookup placing every coordinate in Buenos Aires."""
    return FakeTimezoneLookup()


@pytest.fixture
def fake_feed_validator() -> FakeFeedSpecValidator:
    """Feed-spec validator reporting every feed as clean."""
    return FakeFeedSpecValidator()


@pytest.fixture
def settings(tmp_path: Path) -> ValidatorSettings:
    """Settings with feed-spec validation enabled and reports under tmp_path."""
    return ValidatorSettings(
        gtfs_validator="gtfs-validator",
        feed_spec_timeout=30.0,
        max_workers=2,
        report_dir=tmp_path / "reports",
    )


@pytest.fixture
def make_lookup() -> type[FakeTimezoneLookup]:
    """Return the fake lookup class, for tests needing a custom zone table."""
    return FakeTimezoneLookup


@pytest.fixture
def make_feed_validator() -> type[FakeFeedSpecValidator]:
    """Return the fake feed-spec validator class, for tests needing canned outcomes."""
    return FakeFeedSpecValidator


@pytest.fixture
def make_notice() -> Callable[..., Notice]:
    """Return a helper building validator notices."""
    return notice
