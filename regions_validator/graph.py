"""Identity indexes and cross-reference resolution.

Regions reference static feeds by id, and static feeds reference real-time
feeds by id. References are soft: a dangling id is a violation, never a crash.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from regions_validator.loader import LoadedEntity
from regions_validator.validation.results import ValidationReport, Violation, ViolationKind


def index_entities(
    loaded: Iterable[LoadedEntity],
    report: ValidationReport,
) -> dict[Hashable, LoadedEntity]:
    """Index entities by identity.

    The first occurrence of an identity wins; every later entity with the same
    identity is reported once as DuplicateIdentity and left out of the index.
    """
    index: dict[Hashable, LoadedEntity] = {}
    for item in loaded:
        identity = item.entity.identity
        first = index.get(identity)
        if first is not None:
            report.add(
                Violation(
                    item.relative_path,
                    ViolationKind.DUPLICATE_IDENTITY,
                    f"Duplicate {item.kind.value} identity '{item.entity.label}' "
                    f"(already declared in {first.relative_path})",
                )
            )
            continue
        index[identity] = item
    return index


def find_unresolved(references: Iterable[str], targets: Mapping[Any, Any]) -> list[str]:
    """Return referenced ids missing from ``targets``, sorted."""
    return sorted(ref for ref in set(references) if ref not in targets)


def resolve_references(
    regions: Mapping[Hashable, LoadedEntity],
    static_feeds: Mapping[Hashable, LoadedEntity],
    realtime_feeds: Mapping[Hashable, LoadedEntity],
    report: ValidationReport,
) -> None:
    """Check every region→static feed and static feed→real-time feed reference."""
    for item in regions.values():
        for missing in find_unresolved(item.entity.feeds, static_feeds):
            report.add(
                Violation(
                    item.ref,
                    ViolationKind.UNRESOLVED_REFERENCE,
                    f"Region '{item.entity.label}' references unknown static feed '{missing}'",
                )
            )

    for item in static_feeds.values():
        for missing in find_unresolved(item.entity.realtime, realtime_feeds):
            report.add(
                Violation(
                    item.ref,
                    ViolationKind.UNRESOLVED_REFERENCE,
                    f"Static feed '{item.entity.label}' references unknown real-time feed '{missing}'",
                )
            )
