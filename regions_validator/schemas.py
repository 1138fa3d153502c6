"""Schema registry: compiled JSON Schema validators for each entity kind.

The registry is built once per run and is read-only afterwards, so a single
instance can be shared by every loader and worker thread.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError as JsonSchemaError

from regions_validator.constants import SCHEMAS_DIR
from regions_validator.errors import SchemaLoadError, SchemaNotFoundError
from regions_validator.models import EntityKind

logger = logging.getLogger(__name__)


def compile_schema(schema_document: Mapping[str, Any], *, source: str = "<schema>") -> Draft7Validator:
    """Compile a draft 7 schema document into a validator.

    Args:
        schema_document: Parsed JSON Schema.
        source: Where the schema came from, for error messages.

    Raises:
        SchemaLoadError: If the document is not a valid draft 7 schema.
    """
    try:
        Draft7Validator.check_schema(schema_document)
    except JsonSchemaError as e:
        raise SchemaLoadError(source, e.message) from e
    return Draft7Validator(schema_document)


def _format_error_path(path: Any) -> str:
    parts = [str(p) for p in path]
    return "/".join(parts) if parts else "<root>"


@dataclass(frozen=True)
class SchemaRegistry:
    """Compiled validators keyed by entity kind."""

    validators: Mapping[EntityKind, Draft7Validator]

    @classmethod
    def load(cls, schemas_dir: Path) -> SchemaRegistry:
        """Load and compile the schema of every entity kind.

        Args:
            schemas_dir: Directory holding the ``*.schema.json`` files.

        Raises:
            SchemaNotFoundError: If a schema file is missing.
            SchemaLoadError: If a schema file is not valid JSON or not a valid schema.
        """
        validators: dict[EntityKind, Draft7Validator] = {}
        for kind in EntityKind:
            schema_path = schemas_dir / kind.schema_file
            if not schema_path.is_file():
                raise SchemaNotFoundError(str(schema_path))
            try:
                document = json.loads(schema_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise SchemaLoadError(str(schema_path), str(e)) from e
            validators[kind] = compile_schema(document, source=str(schema_path))
            logger.debug("Compiled %s schema from %s", kind.value, schema_path)
        return cls(validators=validators)

    @classmethod
    def for_registry(cls, base_path: Path) -> SchemaRegistry:
        """Load the schemas stored in a registry's ``schemas/`` directory."""
        return cls.load(base_path / SCHEMAS_DIR)

    def validate(self, kind: EntityKind, document: Any) -> list[str]:
        """Validate a document against the schema of its kind.

        Returns:
            One message per schema error, ordered by document path; empty
            when the document conforms.
        """
        validator = self.validators[kind]
        errors = sorted(validator.iter_errors(document), key=lambda e: list(map(str, e.path)))
        return [f"{_format_error_path(e.path)}: {e.message}" for e in errors]
