"""Syntactic URL checks for feed documents. No network access is performed."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from regions_validator.models import EntityKind, RealtimeFeed, StaticFeed
from regions_validator.validation.results import Violation, ViolationKind

RECOGNIZED_SCHEMES: frozenset[str] = frozenset({"http", "https", "ftp", "ftps", "file"})

_WHITESPACE = re.compile(r"\s")


def is_well_formed_url(value: str) -> bool:
    """True if ``value`` is an absolute URL with a recognized scheme.

    Non-file URLs must name a host; an explicit port must be numeric and in range.
    """
    if not value or _WHITESPACE.search(value):
        return False
    try:
        parts = urlsplit(value)
        # Accessing .port validates it
        _ = parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in RECOGNIZED_SCHEMES:
        return False
    if parts.scheme.lower() == "file":
        return bool(parts.path)
    return bool(parts.hostname)


def _check(ref: str, field_name: str, url: str) -> Violation | None:
    if is_well_formed_url(url):
        return None
    return Violation(ref, ViolationKind.MALFORMED_URL, f"{field_name} '{url}' is not a valid URL")


def check_static_feed_urls(feed: StaticFeed) -> list[Violation]:
    """Check source, API-information and data-provider URLs of a static feed."""
    ref = EntityKind.STATIC_FEED.ref(feed.label)
    candidates = [("source.url", feed.source.url)]
    if feed.source.api_information_url is not None:
        candidates.append(("source.apiInformation.url", feed.source.api_information_url))
    candidates.append(("dataProvider.url", feed.data_provider_url))
    return [v for v in (_check(ref, name, url) for name, url in candidates) if v is not None]


def check_realtime_feed_urls(feed: RealtimeFeed) -> list[Violation]:
    """Check the source URL of a real-time feed."""
    violation = _check(EntityKind.REALTIME_FEED.ref(feed.label), "source.url", feed.source.url)
    return [violation] if violation is not None else []
