"""Typed entities of a regions registry."""

from regions_validator.models.entity import Entity, EntityKind, HasIdentity
from regions_validator.models.feed import RealtimeFeed, Source, StaticFeed
from regions_validator.models.region import (
    City,
    Code,
    CostPerKm,
    CostPerLiter,
    Coverage,
    Locale,
    Region,
    VehicleCost,
)

__all__ = [
    "City",
    "Code",
    "CostPerKm",
    "CostPerLiter",
    "Coverage",
    "Entity",
    "EntityKind",
    "HasIdentity",
    "Locale",
    "RealtimeFeed",
    "Region",
    "Source",
    "StaticFeed",
    "VehicleCost",
]
