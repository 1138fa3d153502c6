"""Tests for regions_validator.geo."""

from __future__ import annotations

from typing import Any

import pytest

from regions_validator.errors import MalformedGeometryError
from regions_validator.geo import check_region_geometry, parse_polygon
from regions_validator.models import Region
from regions_validator.validation import ViolationKind

CORDOBA_TZ = "America/Argentina/Cordoba"

BOWTIE = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [1.0, 1.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]],
}


class TestParsePolygon:
    @pytest.mark.unit
    def test_polygon(self, region_doc: dict[str, Any]) -> None:
        polygon = parse_polygon(region_doc["coverage"]["polygon"])

        assert polygon.geom_type == "Polygon"
        assert polygon.area > 0

    @pytest.mark.unit
    def test_multipolygon(self) -> None:
        document = {
            "type": "MultiPolygon",
            "coordinates": [
                [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                [[[2, 2], [3, 2], [3, 3], [2, 3], [2, 2]]],
            ],
        }

        assert parse_polygon(document).geom_type == "MultiPolygon"

    @pytest.mark.unit
    def test_self_intersecting_polygon(self) -> None:
        with pytest.raises(MalformedGeometryError) as exc_info:
            parse_polygon(BOWTIE)

        assert "Self-intersection" in exc_info.value.message

    @pytest.mark.unit
    def test_non_polygonal_geometry(self) -> None:
        with pytest.raises(MalformedGeometryError) as exc_info:
            parse_polygon({"type": "Point", "coordinates": [0, 0]})

        assert "got Point" in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "document",
        [
            {"type": "Polygon", "coordinates": []},
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]},
            {"type": "Hexagon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
            {"coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        ],
    )
    def test_unparsable_geometry(self, document: dict[str, Any]) -> None:
        with pytest.raises(MalformedGeometryError):
            parse_polygon(document)


class TestCheckRegionGeometry:
    @pytest.mark.unit
    def test_consistent_region(self, region_doc: dict[str, Any], fake_lookup: Any) -> None:
        assert check_region_geometry(Region.from_dict(region_doc), fake_lookup) == []
        # One lookup per city
        assert len(fake_lookup.calls) == 2

    @pytest.mark.unit
    def test_city_outside_polygon(self, region_doc: dict[str, Any], fake_lookup: Any) -> None:
        region_doc["coverage"]["cities"].append({"name": "Buenos Aires", "lat": -34.6037, "lng": -58.3816})

        violations = check_region_geometry(Region.from_dict(region_doc), fake_lookup)

        assert [v.kind for v in violations] == [ViolationKind.POINT_NOT_CONTAINED]
        assert violations[0].message == (
            "City Buenos Aires is not contained in Bahia Blanca, B, AR polygon"
        )

    @pytest.mark.unit
    def test_latitude_and_longitude_are_not_swapped(
        self, region_doc: dict[str, Any], fake_lookup: Any
    ) -> None:
        region_doc["coverage"]["cities"] = [{"name": "Swapped", "lat": -62.2663, "lng": -38.7183}]

        violations = check_region_geometry(Region.from_dict(region_doc), fake_lookup)

        assert [v.kind for v in violations] == [ViolationKind.POINT_NOT_CONTAINED]

    @pytest.mark.unit
    def test_city_in_other_timezone(self, region_doc: dict[str, Any], make_lookup: Any) -> None:
        lookup = make_lookup(zones={(-38.7183, -62.2663): frozenset({CORDOBA_TZ})})

        violations = check_region_geometry(Region.from_dict(region_doc), lookup)

        assert [v.kind for v in violations] == [ViolationKind.TIMEZONE_MISMATCH]
        assert violations[0].message == (
            "City Bahia Blanca is in America/Argentina/Cordoba, "
            "not in region timezone America/Argentina/Buenos_Aires"
        )

    @pytest.mark.unit
    def test_any_matching_zone_is_enough(self, region_doc: dict[str, Any], make_lookup: Any) -> None:
        lookup = make_lookup(default=frozenset({CORDOBA_TZ, "America/Argentina/Buenos_Aires"}))

        assert check_region_geometry(Region.from_dict(region_doc), lookup) == []

    @pytest.mark.unit
    def test_no_timezone_at_city(self, region_doc: dict[str, Any], make_lookup: Any) -> None:
        lookup = make_lookup(default=frozenset())

        violations = check_region_geometry(Region.from_dict(region_doc), lookup)

        assert [v.kind for v in violations] == [ViolationKind.TIMEZONE_MISMATCH] * 2
        assert violations[0].message.startswith("No timezone found for city Bahia Blanca")

    @pytest.mark.unit
    def test_malformed_polygon_skips_city_checks(
        self, region_doc: dict[str, Any], fake_lookup: Any
    ) -> None:
        region_doc["coverage"]["polygon"] = BOWTIE

        violations = check_region_geometry(Region.from_dict(region_doc), fake_lookup)

        assert [v.kind for v in violations] == [ViolationKind.MALFORMED_GEOMETRY]
        assert violations[0].entity_ref == "region:Bahia Blanca, B, AR"
        assert fake_lookup.calls == []

    @pytest.mark.unit
    def test_containment_and_timezone_reported_together(
        self, region_doc: dict[str, Any], make_lookup: Any
    ) -> None:
        region_doc["coverage"]["cities"] = [{"name": "Cordoba", "lat": -31.4201, "lng": -64.1888}]
        lookup = make_lookup(default=frozenset({CORDOBA_TZ}))

        violations = check_region_geometry(Region.from_dict(region_doc), lookup)

        assert [v.kind for v in violations] == [
            ViolationKind.POINT_NOT_CONTAINED,
            ViolationKind.TIMEZONE_MISMATCH,
        ]
