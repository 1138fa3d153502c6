"""Region dataclasses.

A region is a geographic coverage area with locale, currency, timezone and
optional references to the static feeds that serve it. One region is stored
per file under ``regions/``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

_WHITESPACE = re.compile(r"\s", re.ASCII)


@dataclass(frozen=True)
class Code:
    """Identity of a region.

    Attributes:
        country_code: ISO 3166-1 alpha-2 country code.
        city_name: Human-readable city name (may contain spaces).
        subdivision_code: Optional ISO 3166-2 subdivision suffix.
    """

    country_code: str
    city_name: str
    subdivision_code: str | None = None

    @property
    def has_subdivision(self) -> bool:
        return bool(self.subdivision_code)

    @property
    def display_name(self) -> str:
        """City, subdivision and country joined for messages."""
        parts = [self.city_name]
        if self.has_subdivision:
            parts.append(str(self.subdivision_code))
        parts.append(self.country_code)
        return ", ".join(parts)

    def canonical_file_name(self) -> str:
        """File name this code must be stored under.

        ``countryCode[-subdivisionCode]-cityName.json``, lowercased, with all
        ASCII whitespace removed from the city name.
        """
        parts = [self.country_code]
        if self.has_subdivision:
            parts.append(str(self.subdivision_code))
        parts.append(_WHITESPACE.sub("", self.city_name))
        return ("-".join(parts) + ".json").lower()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"countryCode": self.country_code, "cityName": self.city_name}
        if self.subdivision_code is not None:
            result["subdivisionCode"] = self.subdivision_code
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Code:
        return cls(
            country_code=data["countryCode"],
            city_name=data["cityName"],
            subdivision_code=data.get("subdivisionCode"),
        )


@dataclass(frozen=True)
class Locale:
    language: str
    country: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Locale:
        return cls(language=data["language"], country=data["country"])


@dataclass(frozen=True)
class City:
    """A named point that must lie inside its region's coverage."""

    name: str
    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> City:
        return cls(name=data["name"], lat=float(data["lat"]), lng=float(data["lng"]))


@dataclass(frozen=True)
class Coverage:
    """Coverage area of a region.

    Attributes:
        polygon: Raw GeoJSON geometry document; parsed by the geo checks.
        cities: Cities that must be contained in the polygon.
        default_location: Optional raw default location document.
    """

    polygon: dict[str, Any]
    cities: tuple[City, ...] = ()
    default_location: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coverage:
        return cls(
            polygon=data["polygon"],
            cities=tuple(City.from_dict(c) for c in data.get("cities", [])),
            default_location=data.get("defaultLocation"),
        )


@dataclass(frozen=True)
class CostPerLiter:
    fuel_type: str
    value: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CostPerLiter:
        return cls(fuel_type=data["fuelType"], value=float(data["value"]))


@dataclass(frozen=True)
class CostPerKm:
    vehicle_type: str
    value: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CostPerKm:
        return cls(vehicle_type=data["vehicleType"], value=float(data["value"]))


@dataclass(frozen=True)
class VehicleCost:
    """Average vehicle costs; either table may be absent."""

    average_cost_per_liter: tuple[CostPerLiter, ...] | None = None
    average_cost_per_km: tuple[CostPerKm, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VehicleCost:
        per_liter = data.get("averageCostPerLiter")
        per_km = data.get("averageCostPerKm")
        return cls(
            average_cost_per_liter=(
                tuple(CostPerLiter.from_dict(e) for e in per_liter) if per_liter is not None else None
            ),
            average_cost_per_km=(
                tuple(CostPerKm.from_dict(e) for e in per_km) if per_km is not None else None
            ),
        )


@dataclass(frozen=True)
class Region:
    """A region document.

    Attributes:
        code: Identity of the region (unique across the registry).
        locale: Language and country used for the region.
        currency: ISO 4217 currency code.
        timezone: IANA timezone identifier.
        coverage: Polygon and cities covered by the region.
        feeds: Ids of static feeds serving the region.
        vehicle_cost: Optional average cost tables.
    """

    code: Code
    locale: Locale
    currency: str
    timezone: str
    coverage: Coverage
    feeds: frozenset[str] = field(default_factory=frozenset)
    vehicle_cost: VehicleCost | None = None

    @property
    def identity(self) -> Code:
        return self.code

    @property
    def label(self) -> str:
        return self.code.display_name

    def canonical_file_name(self) -> str:
        return self.code.canonical_file_name()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Region:
        """Create a Region from a schema-conformant document.

        Raises:
            KeyError, TypeError, ValueError: If a required field is missing or
                has an unexpected shape.
        """
        vehicle_cost = data.get("vehicleCost")
        return cls(
            code=Code.from_dict(data["code"]),
            locale=Locale.from_dict(data["locale"]),
            currency=data["currency"],
            timezone=data["timezone"],
            coverage=Coverage.from_dict(data["coverage"]),
            feeds=frozenset(data.get("feeds") or ()),
            vehicle_cost=VehicleCost.from_dict(vehicle_cost) if vehicle_cost is not None else None,
        )
