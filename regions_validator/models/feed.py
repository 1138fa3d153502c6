"""Public-transport feed dataclasses.

Static feeds live under ``pt-static-feeds/`` and real-time feeds under
``pt-realtime-feeds/``; both are keyed by ``id`` and stored as ``<id>.json``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from regions_validator.constants import ENTITY_EXTENSION, GTFS_FEED_TYPE


def _feed_file_name(feed_id: str) -> str:
    return f"{feed_id}{ENTITY_EXTENSION}".lower()


@dataclass(frozen=True)
class Source:
    url: str
    api_information_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Source:
        api_information = data.get("apiInformation")
        return cls(
            url=data["url"],
            api_information_url=api_information.get("url") if api_information else None,
        )


@dataclass(frozen=True)
class StaticFeed:
    """A static (non-streaming) public-transport feed.

    Attributes:
        id: Unique feed identifier.
        type: Declared data standard (e.g., "GTFS").
        source: Where the feed is published.
        data_provider_url: Home page of the organisation publishing the data.
        realtime: Ids of real-time feeds complementing this feed.
    """

    id: str
    type: str
    source: Source
    data_provider_url: str
    realtime: frozenset[str] = field(default_factory=frozenset)

    @property
    def identity(self) -> str:
        return self.id

    @property
    def label(self) -> str:
        return self.id

    @property
    def is_gtfs(self) -> bool:
        return self.type == GTFS_FEED_TYPE

    def canonical_file_name(self) -> str:
        return _feed_file_name(self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StaticFeed:
        return cls(
            id=data["id"],
            type=data["type"],
            source=Source.from_dict(data["source"]),
            data_provider_url=data["dataProvider"]["url"],
            realtime=frozenset(data.get("realtime") or ()),
        )


@dataclass(frozen=True)
class RealtimeFeed:
    """A streaming public-transport feed."""

    id: str
    source: Source

    @property
    def identity(self) -> str:
        return self.id

    @property
    def label(self) -> str:
        return self.id

    def canonical_file_name(self) -> str:
        return _feed_file_name(self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RealtimeFeed:
        return cls(id=data["id"], source=Source.from_dict(data["source"]))
