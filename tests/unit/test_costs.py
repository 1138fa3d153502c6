"""Tests for regions_validator.costs."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from regions_validator.costs import check_vehicle_costs, find_repeated
from regions_validator.models import Region
from regions_validator.validation import ViolationKind


class TestFindRepeated:
    @pytest.mark.unit
    def test_reports_each_repeat_after_first(self) -> None:
        assert find_repeated(["DIESEL", "GAS", "DIESEL", "DIESEL", "GAS"]) == ["DIESEL", "DIESEL", "GAS"]

    @pytest.mark.unit
    @given(st.lists(st.sampled_from(["DIESEL", "GASOLINE", "CNG", "ELECTRIC"]), max_size=12))
    def test_repeat_count_matches_duplicates(self, values: list[str]) -> None:
        assert len(find_repeated(values)) == len(values) - len(set(values))


class TestCheckVehicleCosts:
    @pytest.mark.unit
    def test_unique_entries(self, region_doc: dict[str, Any]) -> None:
        assert check_vehicle_costs(Region.from_dict(region_doc)) == []

    @pytest.mark.unit
    def test_no_cost_tables(self, region_doc: dict[str, Any]) -> None:
        del region_doc["vehicleCost"]

        assert check_vehicle_costs(Region.from_dict(region_doc)) == []

    @pytest.mark.unit
    def test_fuel_type_listed_twice(self, region_doc: dict[str, Any]) -> None:
        region_doc["vehicleCost"]["averageCostPerLiter"] = [
            {"fuelType": "DIESEL", "value": 1.05},
            {"fuelType": "DIESEL", "value": 1.10},
        ]

        violations = check_vehicle_costs(Region.from_dict(region_doc))

        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.DUPLICATE_COST_TYPE
        assert violations[0].message == "Cost specified more than once for fuel type DIESEL"

    @pytest.mark.unit
    def test_vehicle_type_listed_twice(self, region_doc: dict[str, Any]) -> None:
        region_doc["vehicleCost"]["averageCostPerKm"].append({"vehicleType": "CAR", "value": 0.3})

        violations = check_vehicle_costs(Region.from_dict(region_doc))

        assert [v.message for v in violations] == [
            "Cost specified more than once for vehicle type CAR"
        ]

    @pytest.mark.unit
    def test_both_tables_checked(self, region_doc: dict[str, Any]) -> None:
        cost = region_doc["vehicleCost"]
        cost["averageCostPerLiter"].append({"fuelType": "GASOLINE", "value": 2})
        cost["averageCostPerKm"].append({"vehicleType": "MOTORCYCLE", "value": 2})

        violations = check_vehicle_costs(Region.from_dict(region_doc))

        assert len(violations) == 2
        assert "fuel type GASOLINE" in violations[0].message
        assert "vehicle type MOTORCYCLE" in violations[1].message
