"""Configuration for validation runs.

Settings are resolved with the following precedence (highest to lowest):
1. CLI argument
2. Environment variable (REGIONS_VALIDATOR_<KEY>)
3. Registry-level config file (validator.yaml at the registry base path)
4. Built-in default

Usage:
    from regions_validator.config import resolve_settings

    settings = resolve_settings(base_path, feed_spec_timeout=cli_timeout)
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from regions_validator.constants import (
    DEFAULT_FEED_SPEC_TIMEOUT,
    DEFAULT_GTFS_VALIDATOR,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REPORT_DIR,
)
from regions_validator.errors import (
    ConfigInvalidStructureError,
    ConfigInvalidValueError,
    ConfigParseError,
)

CONFIG_FILENAME = "validator.yaml"

ENV_PREFIX = "REGIONS_VALIDATOR_"

DEFAULTS: dict[str, Any] = {
    "gtfs_validator": DEFAULT_GTFS_VALIDATOR,
    "feed_spec_timeout": DEFAULT_FEED_SPEC_TIMEOUT,
    "max_workers": DEFAULT_MAX_WORKERS,
    "report_dir": DEFAULT_REPORT_DIR,
}

KNOWN_SETTINGS: frozenset[str] = frozenset(DEFAULTS)


@dataclass(frozen=True)
class ValidatorSettings:
    """Resolved, immutable settings for one validation run.

    Attributes:
        gtfs_validator: Command used to launch the GTFS validator, or None to
            skip feed-spec validation entirely.
        feed_spec_timeout: Per-feed wall-clock limit in seconds.
        max_workers: Upper bound for worker threads in each fan-out.
        report_dir: Directory receiving one report sub-directory per feed.
    """

    gtfs_validator: str | None = DEFAULT_GTFS_VALIDATOR
    feed_spec_timeout: float = DEFAULT_FEED_SPEC_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    report_dir: Path = Path(DEFAULT_REPORT_DIR)

    @property
    def feed_spec_enabled(self) -> bool:
        """True when a GTFS validator command is configured."""
        return bool(self.gtfs_validator)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "gtfs_validator": self.gtfs_validator,
            "feed_spec_timeout": self.feed_spec_timeout,
            "max_workers": self.max_workers,
            "report_dir": str(self.report_dir),
        }


def get_config_path(base_path: Path) -> Path:
    """Return the path of the registry-level config file."""
    return base_path / CONFIG_FILENAME


def load_config(base_path: Path) -> dict[str, Any]:
    """Load configuration from validator.yaml.

    Args:
        base_path: Registry base path.

    Returns:
        Config dictionary. Returns empty dict if the file doesn't exist or is empty.

    Raises:
        ConfigParseError: If the file is not valid YAML.
        ConfigInvalidStructureError: If the top level is not a mapping.
    """
    config_file = get_config_path(base_path)

    if not config_file.exists():
        return {}

    content = config_file.read_text(encoding="utf-8")
    if not content.strip():
        return {}

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(config_file), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidStructureError(
            str(config_file), f"expected a mapping, got {type(data).__name__}"
        )
    return data


def _get_env_var_name(key: str) -> str:
    """Convert a setting key to environment variable name.

    Args:
        key: Setting key (e.g., "max_workers")

    Returns:
        Environment variable name (e.g., "REGIONS_VALIDATOR_MAX_WORKERS")
    """
    return f"{ENV_PREFIX}{key.upper()}"


def get_setting(
    key: str,
    cli_value: Any | None = None,
    config: dict[str, Any] | None = None,
) -> Any | None:
    """Resolve a single setting with full precedence.

    Args:
        key: Setting key (e.g., "report_dir")
        cli_value: Value passed via CLI argument (highest precedence)
        config: Already-loaded config file contents

    Returns:
        Resolved value. An explicit null in the config file is returned as None.
    """
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(_get_env_var_name(key))
    if env_value is not None:
        return env_value

    if config is not None and key in config:
        return config[key]

    return DEFAULTS.get(key)


def _as_positive_float(key: str, value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigInvalidValueError(key, value, "a number of seconds") from e
    if result <= 0:
        raise ConfigInvalidValueError(key, value, "a positive number of seconds")
    return result


def _as_command(key: str, value: Any) -> str | None:
    if not value:
        return None
    command = str(value)
    try:
        argv = shlex.split(command)
    except ValueError as e:
        raise ConfigInvalidValueError(key, value, f"a shell-style command line ({e})") from e
    if not argv:
        raise ConfigInvalidValueError(key, value, "a non-empty command line")
    return command


def _as_positive_int(key: str, value: Any) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigInvalidValueError(key, value, "an integer") from e
    if result < 1:
        raise ConfigInvalidValueError(key, value, "an integer >= 1")
    return result


def resolve_settings(
    base_path: Path,
    *,
    gtfs_validator: str | None = None,
    feed_spec_timeout: float | None = None,
    max_workers: int | None = None,
    report_dir: Path | None = None,
    skip_feed_spec: bool = False,
) -> ValidatorSettings:
    """Build ValidatorSettings for a registry.

    Args:
        base_path: Registry base path (where validator.yaml may live).
        gtfs_validator: CLI override for the validator command.
        feed_spec_timeout: CLI override for the per-feed timeout.
        max_workers: CLI override for the worker pool size.
        report_dir: CLI override for the report directory.
        skip_feed_spec: If True, disable feed-spec validation regardless of config.

    Returns:
        Immutable ValidatorSettings.

    Raises:
        ConfigError: If the config file or a resolved value is invalid.
    """
    config = load_config(base_path)

    command: str | None = None
    if not skip_feed_spec:
        command = _as_command(
            "gtfs_validator", get_setting("gtfs_validator", gtfs_validator, config)
        )

    resolved_report_dir = Path(str(get_setting("report_dir", report_dir, config)))
    if not resolved_report_dir.is_absolute():
        resolved_report_dir = base_path / resolved_report_dir

    return ValidatorSettings(
        gtfs_validator=command,
        feed_spec_timeout=_as_positive_float(
            "feed_spec_timeout", get_setting("feed_spec_timeout", feed_spec_timeout, config)
        ),
        max_workers=_as_positive_int("max_workers", get_setting("max_workers", max_workers, config)),
        report_dir=resolved_report_dir,
    )
