"""Geographic consistency checks for regions.

For every region, the coverage polygon is parsed once and each declared city
is tested for containment and for the region's timezone being observed at the
city's coordinates. The geometry and timezone algorithms come from shapely and
timezonefinder; this module only wires them to regions.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any, Protocol

from shapely.errors import ShapelyError
from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity

from regions_validator.errors import MalformedGeometryError
from regions_validator.models import City, EntityKind, Region
from regions_validator.validation.results import Violation, ViolationKind

logger = logging.getLogger(__name__)

POLYGONAL_TYPES = frozenset({"Polygon", "MultiPolygon"})


class TimezoneLookup(Protocol):
    """Returns the timezone identifiers observed at a coordinate."""

    def timezones_at(self, lat: float, lng: float) -> frozenset[str]: ...


class TimezoneFinderLookup:
    """TimezoneLookup backed by ``timezonefinder``.

    The underlying finder is built on first use and shared by all threads.
    """

    def __init__(self) -> None:
        self._finder: Any = None
        self._lock = threading.Lock()

    def _get_finder(self) -> Any:
        if self._finder is None:
            from timezonefinder import TimezoneFinder

            logger.debug("Loading timezone boundaries")
            self._finder = TimezoneFinder()
        return self._finder

    def timezones_at(self, lat: float, lng: float) -> frozenset[str]:
        with self._lock:
            zone = self._get_finder().timezone_at(lng=lng, lat=lat)
        return frozenset({zone}) if zone else frozenset()


def parse_polygon(document: Mapping[str, Any]) -> BaseGeometry:
    """Parse a GeoJSON geometry document into a polygonal shapely geometry.

    Raises:
        MalformedGeometryError: If the document is not a valid, non-empty
            Polygon or MultiPolygon.
    """
    try:
        geometry = shape(document)
    except (ShapelyError, AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise MalformedGeometryError(f"{type(e).__name__}: {e}") from e

    if geometry.geom_type not in POLYGONAL_TYPES:
        raise MalformedGeometryError(f"expected Polygon or MultiPolygon, got {geometry.geom_type}")
    if geometry.is_empty:
        raise MalformedGeometryError("geometry is empty")
    if not geometry.is_valid:
        raise MalformedGeometryError(explain_validity(geometry))
    return geometry


def _check_city(
    region: Region,
    polygon: BaseGeometry,
    city: City,
    lookup: TimezoneLookup,
    ref: str,
) -> list[Violation]:
    violations: list[Violation] = []

    # GeoJSON order: x = longitude, y = latitude
    if not polygon.contains(Point(city.lng, city.lat)):
        violations.append(
            Violation(
                ref,
                ViolationKind.POINT_NOT_CONTAINED,
                f"City {city.name} is not contained in {region.label} polygon",
            )
        )

    zones = lookup.timezones_at(city.lat, city.lng)
    if not zones:
        violations.append(
            Violation(
                ref,
                ViolationKind.TIMEZONE_MISMATCH,
                f"No timezone found for city {city.name} ({city.lat}, {city.lng})",
            )
        )
    elif region.timezone not in zones:
        violations.append(
            Violation(
                ref,
                ViolationKind.TIMEZONE_MISMATCH,
                f"City {city.name} is in {', '.join(sorted(zones))}, "
                f"not in region timezone {region.timezone}",
            )
        )

    return violations


def check_region_geometry(region: Region, lookup: TimezoneLookup) -> list[Violation]:
    """Check containment and timezone of every city of a region.

    A malformed polygon yields a single MalformedGeometry violation and skips
    the remaining geo checks for the region.
    """
    ref = EntityKind.REGION.ref(region.label)
    try:
        polygon = parse_polygon(region.coverage.polygon)
    except MalformedGeometryError as e:
        return [Violation(ref, ViolationKind.MALFORMED_GEOMETRY, e.message)]

    violations: list[Violation] = []
    for city in region.coverage.cities:
        violations.extend(_check_city(region, polygon, city, lookup, ref))
    return violations
