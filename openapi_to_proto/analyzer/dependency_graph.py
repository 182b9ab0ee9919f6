"""
Dependency graph between top-level schemas.

Records which schemas reference which, marks discriminated unions and their
variants, and classifies every schema as native-only (it is, or depends on, a
union) or IDL-eligible.
"""

from __future__ import annotations

import logging
from collections import deque

from ..schema_feed import SchemaHandle
from .ir_nodes import ClassificationResult

logger = logging.getLogger(__name__)

UNION_REASON = "contains oneOf"


def collect_references(handle: SchemaHandle) -> list[str]:
    """
    Names of the schemas referenced by a schema's properties.

    Direct property references, array item references and references inside
    inline objects (at any depth) all count. Union variants do not: they are
    recorded separately by the graph.
    """
    refs: list[str] = []
    _collect_properties(handle, refs)
    return refs


def _collect_properties(handle: SchemaHandle, refs: list[str]) -> None:
    for prop in handle.properties.values():
        _collect_node(prop, refs)


def _collect_node(node: SchemaHandle, refs: list[str]) -> None:
    if node.is_reference:
        if node.reference_name:
            refs.append(node.reference_name)
        return
    if node.schema is None:
        return

    if node.primary_type == "array":
        items = node.items
        if items is not None:
            _collect_node(items, refs)
    else:
        _collect_properties(node, refs)


class DependencyGraph:
    """Adjacency map of "references" edges keyed by schema name."""

    def __init__(self):
        self.schemas: dict[str, SchemaHandle] = {}
        self.edges: dict[str, list[str]] = {}
        self.union_reasons: dict[str, str] = {}
        self.union_variants: dict[str, list[str]] = {}

    def add_schema(self, name: str, handle: SchemaHandle) -> None:
        """Register a top-level schema, its union data and its outgoing edges."""
        self.schemas[name] = handle

        if handle.one_of:
            self.union_reasons[name] = UNION_REASON
            self.union_variants[name] = [v.reference_name for v in handle.one_of if v.reference_name]
            logger.debug("Schema %s is a union of %s", name, self.union_variants[name])

        for target in collect_references(handle):
            self.add_edge(name, target)

    def add_edge(self, source: str, target: str) -> None:
        targets = self.edges.setdefault(source, [])
        if target not in targets:
            targets.append(target)

    def classify(self) -> ClassificationResult:
        """
        Partition registered schemas into native-only and IDL-eligible.

        Union roots and their variants seed the native-only set. A breadth-first
        walk over reversed edges then demotes every schema that references an
        already native-only schema, attributing it to the union that caused the
        first demotion on its path. Names that were never registered stay out
        of the result.
        """
        reasons: dict[str, str] = {}
        root_cause: dict[str, str] = {}
        queue: deque[str] = deque()

        def mark(name: str, reason: str, cause: str) -> None:
            reasons[name] = reason
            root_cause[name] = cause
            queue.append(name)

        for root, reason in self.union_reasons.items():
            if root in self.schemas and root not in reasons:
                mark(root, reason, root)

        for root, variants in self.union_variants.items():
            for variant in variants:
                if variant in self.schemas and variant not in reasons:
                    mark(variant, f"variant of union {root}", root)

        while queue:
            current = queue.popleft()
            for source, targets in self.edges.items():
                if source in reasons or source not in self.schemas:
                    continue
                if current in targets:
                    cause = root_cause[current]
                    mark(source, f"references union type {cause}", cause)

        result = ClassificationResult(reasons=reasons)
        for name in self.schemas:
            if name in reasons:
                result.native_only.append(name)
            else:
                result.idl_eligible.append(name)

        logger.debug(
            "Classified %d schemas: %d native-only, %d IDL-eligible",
            len(self.schemas),
            len(result.native_only),
            len(result.idl_eligible),
        )
        return result
