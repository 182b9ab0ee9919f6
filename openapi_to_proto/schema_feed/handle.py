"""
Schema handles: read-only views over OpenAPI schema nodes.

A handle wraps one schema node exactly as it appears in the document (which
may be a bare `$ref`) and resolves local references lazily against the
document's `components.schemas` table. Self-referencing schemas are therefore
safe to wrap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..utils import REFERENCE_PREFIX


@dataclass
class SchemaHandle:
    """A schema node plus the component table used to resolve its references."""

    raw: Any = None
    components: dict[str, Any] = field(default_factory=dict, repr=False)

    # Location in the document (for debugging)
    path: str = ""

    # --- Reference handling ---

    @property
    def is_reference(self) -> bool:
        return isinstance(self.raw, dict) and "$ref" in self.raw

    @property
    def reference(self) -> str:
        if not self.is_reference:
            return ""
        return str(self.raw["$ref"])

    @property
    def reference_name(self) -> str:
        """Target schema name of a local reference, empty when not a local reference."""
        ref = self.reference
        if not ref.startswith(REFERENCE_PREFIX):
            return ""
        return ref[len(REFERENCE_PREFIX) :]

    def _resolve(self) -> tuple[dict[str, Any] | None, str | None]:
        node = self.raw
        seen: set[str] = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = str(node["$ref"])
            if ref in seen:
                return None, f"cannot resolve reference {ref}: circular reference"
            seen.add(ref)
            if not ref.startswith(REFERENCE_PREFIX):
                return None, f"cannot resolve reference {ref}: only local {REFERENCE_PREFIX} references are supported"
            target = self.components.get(ref[len(REFERENCE_PREFIX) :])
            if not isinstance(target, dict):
                return None, f"cannot resolve reference {ref}: schema not found"
            node = target

        if not isinstance(node, dict):
            return None, "schema body is empty or not an object"
        return node, None

    @property
    def schema(self) -> dict[str, Any] | None:
        """The resolved schema body, None when it cannot be resolved."""
        return self._resolve()[0]

    @property
    def build_error(self) -> str | None:
        return self._resolve()[1]

    def _get(self, key: str, default: Any = None) -> Any:
        body = self.schema
        if body is None:
            return default
        return body.get(key, default)

    def _child(self, node: Any, suffix: str) -> SchemaHandle:
        return SchemaHandle(raw=node, components=self.components, path=f"{self.path}/{suffix}")

    def _children(self, key: str) -> list[SchemaHandle]:
        nodes = self._get(key) or []
        return [self._child(node, f"{key}/{i}") for i, node in enumerate(nodes)]

    # --- Accessors ---

    @property
    def types(self) -> list[str]:
        """Declared types, lower-cased. `nullable: true` adds "null"."""
        declared = self._get("type")
        if declared is None:
            types = []
        elif isinstance(declared, list):
            types = [str(t).lower() for t in declared]
        else:
            types = [str(declared).lower()]
        if self._get("nullable") is True and types and "null" not in types:
            types.append("null")
        return types

    @property
    def primary_type(self) -> str:
        """First declared type that is not "null", empty if none."""
        for t in self.types:
            if t != "null":
                return t
        return ""

    @property
    def format(self) -> str:
        return str(self._get("format") or "")

    @property
    def description(self) -> str:
        return str(self._get("description") or "")

    @property
    def properties(self) -> dict[str, SchemaHandle]:
        props = self._get("properties") or {}
        return {str(name): self._child(node, f"properties/{name}") for name, node in props.items()}

    @property
    def items(self) -> SchemaHandle | None:
        node = self._get("items")
        if node is None:
            return None
        return self._child(node, "items")

    @property
    def enum(self) -> list[Any]:
        return list(self._get("enum") or [])

    @property
    def one_of(self) -> list[SchemaHandle]:
        return self._children("oneOf")

    @property
    def all_of(self) -> list[SchemaHandle]:
        return self._children("allOf")

    @property
    def any_of(self) -> list[SchemaHandle]:
        return self._children("anyOf")

    @property
    def not_(self) -> SchemaHandle | None:
        node = self._get("not")
        if node is None:
            return None
        return self._child(node, "not")

    @property
    def discriminator_property(self) -> str:
        discriminator = self._get("discriminator")
        if not isinstance(discriminator, dict):
            return ""
        return str(discriminator.get("propertyName") or "")

    @property
    def discriminator_mapping(self) -> dict[str, str]:
        discriminator = self._get("discriminator")
        if not isinstance(discriminator, dict):
            return {}
        mapping = discriminator.get("mapping") or {}
        return {str(value): str(ref) for value, ref in mapping.items()}

    def extension(self, name: str) -> Any:
        """Look up an `x-` extension, preferring a sibling of `$ref` over the resolved body."""
        if isinstance(self.raw, dict) and name in self.raw:
            return self.raw[name]
        return self._get(name)

    def has_extension(self, name: str) -> bool:
        if isinstance(self.raw, dict) and name in self.raw:
            return True
        body = self.schema
        return body is not None and name in body
