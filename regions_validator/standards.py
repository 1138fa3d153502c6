"""Recognized standard code sets: ISO 3166-1, ISO 639-1, ISO 4217 and IANA tz."""

from __future__ import annotations

import zoneinfo
from functools import lru_cache

import pycountry

from regions_validator.models import EntityKind, Region
from regions_validator.validation.results import Violation, ViolationKind


@lru_cache(maxsize=1)
def iso_countries() -> frozenset[str]:
    """ISO 3166-1 alpha-2 country codes, uppercase."""
    return frozenset(country.alpha_2.upper() for country in pycountry.countries)


@lru_cache(maxsize=1)
def iso_languages() -> frozenset[str]:
    """ISO 639-1 (two-letter) language codes, lowercase."""
    return frozenset(
        lang.alpha_2.lower() for lang in pycountry.languages if getattr(lang, "alpha_2", None)
    )


@lru_cache(maxsize=1)
def iso_currencies() -> frozenset[str]:
    """ISO 4217 currency codes, uppercase."""
    return frozenset(currency.alpha_3.upper() for currency in pycountry.currencies)


@lru_cache(maxsize=1)
def timezone_ids() -> frozenset[str]:
    """IANA timezone identifiers known to the interpreter."""
    return frozenset(zoneinfo.available_timezones())


def is_country(value: str) -> bool:
    return value.upper() in iso_countries()


def is_language(value: str) -> bool:
    return value.lower() in iso_languages()


def is_currency(value: str) -> bool:
    return value.upper() in iso_currencies()


def is_timezone(value: str) -> bool:
    return value in timezone_ids()


def check_region_standards(region: Region) -> list[Violation]:
    """Check that a region's codes come from the recognized standard sets.

    Country, language and currency codes are compared case-insensitively;
    timezone identifiers are case-sensitive.
    """
    ref = EntityKind.REGION.ref(region.label)
    checks = (
        ("code.countryCode", region.code.country_code, is_country, "ISO 3166-1 country code"),
        ("locale.country", region.locale.country, is_country, "ISO 3166-1 country code"),
        ("locale.language", region.locale.language, is_language, "ISO 639-1 language code"),
        ("currency", region.currency, is_currency, "ISO 4217 currency code"),
        ("timezone", region.timezone, is_timezone, "IANA timezone identifier"),
    )
    return [
        Violation(
            ref,
            ViolationKind.UNRECOGNIZED_CODE,
            f"{field_name} '{value}' is not a recognized {expected}",
        )
        for field_name, value, predicate, expected in checks
        if not predicate(value)
    ]
