"""
OpenAPI document parser.

Turns raw document bytes (YAML or JSON) into the ordered schema feed consumed
by the converter: one `SchemaEntry` per `components.schemas` entry, in
document order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import yaml

from ..errors import DocumentError
from .handle import SchemaHandle

logger = logging.getLogger(__name__)


@dataclass
class SchemaEntry:
    """A named top-level schema."""

    name: str
    handle: SchemaHandle


class DocumentParser:
    """Parses OpenAPI 3.x documents into an ordered schema feed."""

    def parse(self, data: bytes | str) -> list[SchemaEntry]:
        """
        Parse an OpenAPI document.

        Args:
            data: Document content, YAML or JSON

        Returns:
            Schema entries in document order

        Raises:
            DocumentError: If the document is empty, unreadable or not OpenAPI 3.x
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        if not data.strip():
            raise DocumentError("openapi input cannot be empty")

        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DocumentError(f"failed to parse document: {e}") from e

        return self.entries_from_document(document)

    def entries_from_document(self, document: Any) -> list[SchemaEntry]:
        """Build schema entries from an already loaded document."""
        if not isinstance(document, dict):
            raise DocumentError("document must be a mapping")

        version = document.get("openapi")
        if version is None:
            raise DocumentError("document is not an OpenAPI 3.x document: missing 'openapi' field")
        if not str(version).startswith("3."):
            raise DocumentError(f"unsupported OpenAPI version: {version} (expected 3.x)")

        components = document.get("components") or {}
        schemas = components.get("schemas") or {}
        if not isinstance(schemas, dict):
            raise DocumentError("components.schemas must be a mapping")

        entries = []
        for name, node in schemas.items():
            name = str(name)
            handle = SchemaHandle(raw=node, components=schemas, path=f"#/components/schemas/{name}")
            entries.append(SchemaEntry(name=name, handle=handle))

        logger.debug("Parsed %d schemas from OpenAPI %s document", len(entries), version)
        return entries
