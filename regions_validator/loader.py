"""Entity loading: schema validation, parsing and canonical-name checks.

Each document is read in full and its file handle released before it is
validated. A document that fails its schema is never parsed; a naming
mismatch is recorded but the entity is still returned.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from regions_validator.constants import ENTITY_EXTENSION
from regions_validator.models import Entity, EntityKind
from regions_validator.schemas import SchemaRegistry
from regions_validator.validation.results import ValidationReport, Violation, ViolationKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedEntity:
    """A parsed entity together with the file it was read from.

    Attributes:
        kind: Entity kind.
        path: Absolute path of the source document.
        relative_path: Path relative to the registry base, used in violations.
        entity: The typed entity.
    """

    kind: EntityKind
    path: Path
    relative_path: str
    entity: Entity

    @property
    def ref(self) -> str:
        return self.kind.ref(self.entity.label)


def resolve_directory(base_path: Path, kind: EntityKind) -> Path | None:
    """Return the directory holding documents of ``kind``, or None if absent.

    The current directory name wins over the legacy one when both exist.
    """
    current = base_path / kind.directory
    if current.is_dir():
        return current
    if kind.legacy_directory is not None:
        legacy = base_path / kind.legacy_directory
        if legacy.is_dir():
            logger.info("Using legacy directory %s for %s documents", legacy, kind.value)
            return legacy
    return None


def list_documents(directory: Path) -> list[Path]:
    """List the JSON documents of a directory in a stable order."""
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ENTITY_EXTENSION
    )


def _relative(path: Path, base_path: Path) -> str:
    try:
        return path.relative_to(base_path).as_posix()
    except ValueError:
        return str(path)


def load_document(
    path: Path,
    kind: EntityKind,
    schemas: SchemaRegistry,
    *,
    relative_path: str,
) -> tuple[LoadedEntity | None, list[Violation]]:
    """Validate and parse a single document.

    Returns:
        The loaded entity (None when the document is unusable) and the
        violations found while loading it.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        return None, [Violation(relative_path, ViolationKind.SCHEMA_VIOLATION, f"Cannot read file: {e}")]

    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        return None, [Violation(relative_path, ViolationKind.SCHEMA_VIOLATION, f"Invalid JSON: {e}")]

    schema_errors = schemas.validate(kind, document)
    if schema_errors:
        return None, [
            Violation(relative_path, ViolationKind.SCHEMA_VIOLATION, message) for message in schema_errors
        ]

    try:
        entity = kind.parse(document)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        return None, [
            Violation(
                relative_path,
                ViolationKind.SCHEMA_VIOLATION,
                f"Cannot parse {kind.value} document: {type(e).__name__}: {e}",
            )
        ]

    violations: list[Violation] = []
    expected = entity.canonical_file_name()
    if path.name.lower() != expected:
        violations.append(
            Violation(
                relative_path,
                ViolationKind.FILE_NAMING_MISMATCH,
                f"File name '{path.name}' does not match canonical name '{expected}'",
            )
        )

    return LoadedEntity(kind=kind, path=path, relative_path=relative_path, entity=entity), violations


def load_entities(
    base_path: Path,
    kind: EntityKind,
    schemas: SchemaRegistry,
    report: ValidationReport,
) -> list[LoadedEntity]:
    """Load every document of one kind from a registry.

    A missing directory yields an empty list: registries may omit an entity
    kind entirely.

    Args:
        base_path: Registry base path.
        kind: Kind of entity to load.
        schemas: Compiled schemas.
        report: Sink receiving loading violations.

    Returns:
        Loaded entities in file-name order.
    """
    directory = resolve_directory(base_path, kind)
    if directory is None:
        logger.info("No %s directory in %s", kind.value, base_path)
        return []

    loaded: list[LoadedEntity] = []
    for path in list_documents(directory):
        logger.debug("Validating %s", path)
        entity, violations = load_document(
            path, kind, schemas, relative_path=_relative(path, base_path)
        )
        report.extend(violations)
        if entity is not None:
            loaded.append(entity)

    logger.info("Loaded %d %s document(s) from %s", len(loaded), kind.value, directory)
    return loaded
