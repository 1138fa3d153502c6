"""Entity kinds stored in a registry.

EntityKind is a closed enumeration: each member knows its directory, the
schema that governs it, and how to parse a document into its typed entity.
Every entity type implements the HasIdentity protocol.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from enum import Enum
from typing import Any, Protocol, Union

from regions_validator.constants import (
    LEGACY_REALTIME_FEEDS_DIR,
    LEGACY_STATIC_FEEDS_DIR,
    REALTIME_FEED_SCHEMA_FILE,
    REALTIME_FEEDS_DIR,
    REGION_SCHEMA_FILE,
    REGIONS_DIR,
    STATIC_FEED_SCHEMA_FILE,
    STATIC_FEEDS_DIR,
)
from regions_validator.models.feed import RealtimeFeed, StaticFeed
from regions_validator.models.region import Region

Entity = Union[Region, StaticFeed, RealtimeFeed]


class HasIdentity(Protocol):
    """Capability shared by every registry entity."""

    @property
    def identity(self) -> Hashable: ...

    @property
    def label(self) -> str: ...

    def canonical_file_name(self) -> str: ...


class EntityKind(Enum):
    """Kind of document stored in a registry directory."""

    REGION = "region"
    STATIC_FEED = "static-feed"
    REALTIME_FEED = "realtime-feed"

    @property
    def directory(self) -> str:
        return _DIRECTORIES[self]

    @property
    def legacy_directory(self) -> str | None:
        return _LEGACY_DIRECTORIES.get(self)

    @property
    def schema_file(self) -> str:
        return _SCHEMA_FILES[self]

    def parse(self, document: dict[str, Any]) -> Entity:
        """Deserialize a schema-conformant document into this kind's entity."""
        return _PARSERS[self](document)

    def ref(self, label: str) -> str:
        """Build the entity reference used in violations, e.g. ``static-feed:sapem``."""
        return f"{self.value}:{label}"


_DIRECTORIES = {
    EntityKind.REGION: REGIONS_DIR,
    EntityKind.STATIC_FEED: STATIC_FEEDS_DIR,
    EntityKind.REALTIME_FEED: REALTIME_FEEDS_DIR,
}

_LEGACY_DIRECTORIES = {
    EntityKind.STATIC_FEED: LEGACY_STATIC_FEEDS_DIR,
    EntityKind.REALTIME_FEED: LEGACY_REALTIME_FEEDS_DIR,
}

_SCHEMA_FILES = {
    EntityKind.REGION: REGION_SCHEMA_FILE,
    EntityKind.STATIC_FEED: STATIC_FEED_SCHEMA_FILE,
    EntityKind.REALTIME_FEED: REALTIME_FEED_SCHEMA_FILE,
}

_PARSERS: dict[EntityKind, Callable[[dict[str, Any]], Entity]] = {
    EntityKind.REGION: Region.from_dict,
    EntityKind.STATIC_FEED: StaticFeed.from_dict,
    EntityKind.REALTIME_FEED: RealtimeFeed.from_dict,
}
