"""Vehicle cost table checks."""

from __future__ import annotations

from collections.abc import Iterable

from regions_validator.models import EntityKind, Region
from regions_validator.validation.results import Violation, ViolationKind


def find_repeated(values: Iterable[str]) -> list[str]:
    """Return every occurrence of a value after its first one, in order."""
    seen: set[str] = set()
    repeated: list[str] = []
    for value in values:
        if value in seen:
            repeated.append(value)
        seen.add(value)
    return repeated


def check_vehicle_costs(region: Region) -> list[Violation]:
    """Each fuel type and each vehicle type may be priced at most once."""
    vehicle_cost = region.vehicle_cost
    if vehicle_cost is None:
        return []

    ref = EntityKind.REGION.ref(region.label)
    violations: list[Violation] = []

    if vehicle_cost.average_cost_per_liter is not None:
        for fuel_type in find_repeated(e.fuel_type for e in vehicle_cost.average_cost_per_liter):
            violations.append(
                Violation(
                    ref,
                    ViolationKind.DUPLICATE_COST_TYPE,
                    f"Cost specified more than once for fuel type {fuel_type}",
                )
            )

    if vehicle_cost.average_cost_per_km is not None:
        for vehicle_type in find_repeated(e.vehicle_type for e in vehicle_cost.average_cost_per_km):
            violations.append(
                Violation(
                    ref,
                    ViolationKind.DUPLICATE_COST_TYPE,
                    f"Cost specified more than once for vehicle type {vehicle_type}",
                )
            )

    return violations
