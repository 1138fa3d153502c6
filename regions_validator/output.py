"""Standardized terminal output utilities.

All user-facing CLI messages should use these functions for consistent
formatting across the application. Diagnostic progress goes through the
``logging`` module instead.

Basic Usage:
    from regions_validator.output import success, info, warn, error, detail

    success("All validation checks passed")
    info("Loaded 42 regions")
    warn("sapem: 3 x stop_too_far_from_shape")
    error("Region 'Bahia Blanca, b, ar' references unknown static feed 'sapem'")
    detail("Hint: add pt-static-feeds/sapem.json")
"""

from __future__ import annotations

import sys
from typing import TextIO

import click

# ANSI color codes via click's style system
_STYLES = {
    "success": {"fg": "green"},
    "info": {"fg": "blue"},
    "warn": {"fg": "yellow"},
    "error": {"fg": "red"},
    "detail": {"fg": "bright_black"},  # Dimmed/gray
}

_PREFIXES = {
    "success": "\u2713",  # checkmark
    "info": "\u2192",  # arrow
    "warn": "\u26a0",  # warning
    "error": "\u2717",  # X
    "detail": " ",  # space (no prefix, just indent)
}


def _output(
    message: str,
    style: str,
    *,
    file: TextIO | None = None,
    nl: bool = True,
) -> None:
    """Internal helper for styled output.

    Args:
        message: The message to display.
        style: The style name (success, error, info, warn, detail).
        file: File to write to.
        nl: Whether to print a newline after the message.
    """
    prefix = _PREFIXES[style]
    fg_color = _STYLES[style]["fg"]
    styled_prefix = click.style(prefix, fg=fg_color)
    styled_message = click.style(message, fg=fg_color)
    click.echo(f"{styled_prefix} {styled_message}", file=file, nl=nl)


def success(message: str, *, file: TextIO | None = None, nl: bool = True) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("All validation checks passed")
        ✓ All validation checks passed
    """
    _output(message, "success", file=file, nl=nl)


def info(message: str, *, file: TextIO | None = None, nl: bool = True) -> None:
    """Print an info message with blue arrow.

    Example:
        >>> info("Loaded 42 regions")
        → Loaded 42 regions
    """
    _output(message, "info", file=file, nl=nl)


def warn(message: str, *, file: TextIO | None = None, nl: bool = True) -> None:
    """Print a warning message with yellow warning symbol (default: stderr)."""
    _output(message, "warn", file=file or sys.stderr, nl=nl)


def error(message: str, *, file: TextIO | None = None, nl: bool = True) -> None:
    """Print an error message with red X (default: stderr)."""
    _output(message, "error", file=file or sys.stderr, nl=nl)


def detail(message: str, *, file: TextIO | None = None, nl: bool = True) -> None:
    """Print a detail/progress message in dimmed text."""
    _output(message, "detail", file=file, nl=nl)
