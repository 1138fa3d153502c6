"""Tests for regions_validator.urls."""

from __future__ import annotations

import string
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from regions_validator.models import RealtimeFeed, StaticFeed
from regions_validator.urls import (
    check_realtime_feed_urls,
    check_static_feed_urls,
    is_well_formed_url,
)
from regions_validator.validation import ViolationKind

hostnames = st.lists(
    st.text(st.sampled_from(string.ascii_lowercase + string.digits), min_size=1, max_size=12),
    min_size=1,
    max_size=4,
).map(".".join)
schemes = st.sampled_from(["http", "https", "ftp", "ftps"])
paths = st.text(st.sampled_from(string.ascii_letters + string.digits + "/-_."), max_size=30)


class TestIsWellFormedUrl:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        [
            "https://datos.example.org/transporte/gtfs.zip",
            "http://localhost:8080/feed",
            "ftp://ftp.example.org/pub/gtfs.zip",
            "HTTPS://EXAMPLE.ORG",
            "file:///srv/feeds/gtfs.zip",
            "https://example.org/feed?token=abc&format=zip",
        ],
    )
    def test_valid(self, url: str) -> None:
        assert is_well_formed_url(url)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "",
            "example.org/gtfs.zip",
            "https://",
            "https:///path-only",
            "mailto:data@example.org",
            "gopher://example.org",
            "https://example.org:99999/feed",
            "https://example.org:port/feed",
            "https://example.org/feed with spaces",
            "file:",
        ],
    )
    def test_invalid(self, url: str) -> None:
        assert not is_well_formed_url(url)

    @pytest.mark.unit
    @given(scheme=schemes, host=hostnames, path=paths)
    def test_generated_urls_are_accepted(self, scheme: str, host: str, path: str) -> None:
        assert is_well_formed_url(f"{scheme}://{host}/{path}")

    @pytest.mark.unit
    @given(text=st.text(max_size=40))
    def test_never_raises(self, text: str) -> None:
        assert isinstance(is_well_formed_url(text), bool)

    @pytest.mark.unit
    @given(text=st.text(min_size=1, max_size=40))
    def test_text_with_whitespace_is_rejected(self, text: str) -> None:
        assert not is_well_formed_url(f"https://example.org/{text} x")


class TestFeedUrlChecks:
    @pytest.mark.unit
    def test_valid_static_feed(self, static_feed_doc: dict[str, Any]) -> None:
        assert check_static_feed_urls(StaticFeed.from_dict(static_feed_doc)) == []

    @pytest.mark.unit
    def test_malformed_source_url(self, static_feed_doc: dict[str, Any]) -> None:
        static_feed_doc["source"]["url"] = "not a url"

        violations = check_static_feed_urls(StaticFeed.from_dict(static_feed_doc))

        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.MALFORMED_URL
        assert violations[0].entity_ref == "static-feed:bahia-blanca-gtfs"
        assert violations[0].message == "source.url 'not a url' is not a valid URL"

    @pytest.mark.unit
    def test_every_url_field_is_checked(self, static_feed_doc: dict[str, Any]) -> None:
        static_feed_doc["source"]["apiInformation"]["url"] = "api docs"
        static_feed_doc["dataProvider"]["url"] = "www.bahia.gob.ar"

        violations = check_static_feed_urls(StaticFeed.from_dict(static_feed_doc))

        assert [v.message.split(" ")[0] for v in violations] == [
            "source.apiInformation.url",
            "dataProvider.url",
        ]

    @pytest.mark.unit
    def test_realtime_feed(self, realtime_feed_doc: dict[str, Any]) -> None:
        feed = RealtimeFeed.from_dict(realtime_feed_doc)
        assert check_realtime_feed_urls(feed) == []

        realtime_feed_doc["source"]["url"] = "vehicle-positions.pb"
        violations = check_realtime_feed_urls(RealtimeFeed.from_dict(realtime_feed_doc))

        assert [v.entity_ref for v in violations] == ["realtime-feed:bahia-blanca-vehicles"]
