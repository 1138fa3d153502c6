"""Registry layout and built-in defaults.

Directory and file names are relative to the registry base path.
"""

from __future__ import annotations

SCHEMAS_DIR = "schemas"

REGIONS_DIR = "regions"
STATIC_FEEDS_DIR = "pt-static-feeds"
REALTIME_FEEDS_DIR = "pt-realtime-feeds"

# Older registries used these names before the pt-* rename
LEGACY_STATIC_FEEDS_DIR = "publictransportfeeds"
LEGACY_REALTIME_FEEDS_DIR = "realtimedatafeeds"

REGION_SCHEMA_FILE = "region.schema.json"
STATIC_FEED_SCHEMA_FILE = "pt-static-feed.schema.json"
REALTIME_FEED_SCHEMA_FILE = "pt-realtime-feed.schema.json"

ENTITY_EXTENSION = ".json"

# Feed type that is handed to the external specification validator
GTFS_FEED_TYPE = "GTFS"

DEFAULT_GTFS_VALIDATOR = "gtfs-validator"
DEFAULT_REPORT_DIR = "gtfs-validation-reports"
DEFAULT_FEED_SPEC_TIMEOUT = 900.0
DEFAULT_MAX_WORKERS = 4

REPORT_FILE_NAME = "report.json"
