"""
Conversion pipeline.

Orchestrates the phases of a conversion:

1. Parse the document into an ordered schema feed
2. Validate each schema and register it in the dependency graph
3. Classify schemas as IDL-eligible or native-only
4. Build proto3 IR for IDL-eligible schemas, Go IR for native-only ones
5. Emit proto3 and Go text

Every call builds fresh trackers, graph and builders. Any error aborts the
whole conversion; no partial output is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .analyzer.dependency_graph import DependencyGraph
from .analyzer.ir_nodes import ClassificationResult, GoFile, ProtoFile, TypeInfo, TypeLocation
from .analyzer.name_tracker import NameTracker
from .analyzer.native_builder import build_native
from .analyzer.proto_builder import ProtoBuilder
from .analyzer.validator import validate_schema
from .backends import GoBackend, ProtoBackend
from .config import ConvertOptions
from .schema_feed import DocumentParser, SchemaEntry
from .utils import extract_package_name

logger = logging.getLogger(__name__)


@dataclass
class ConvertResult:
    """Output of `convert`: proto3 text, Go text and the type map."""

    protobuf: str = ""
    golang: str = ""
    type_map: dict[str, TypeInfo] = field(default_factory=dict)

    # IR behind the emitted text
    proto_file: ProtoFile | None = None
    go_file: GoFile | None = None
    classification: ClassificationResult | None = None


@dataclass
class StructResult:
    """Output of `convert_to_struct`: Go text for every schema and the type map."""

    golang: str = ""
    type_map: dict[str, TypeInfo] = field(default_factory=dict)
    go_file: GoFile | None = None


def _check_input(openapi: bytes | str) -> None:
    if not openapi or not openapi.strip():
        raise ValueError("openapi input cannot be empty")


def _check_options(options: ConvertOptions) -> None:
    if not options.package_name:
        raise ValueError("package name cannot be empty")
    if not options.package_path:
        raise ValueError("package path cannot be empty")


def build_graph(entries: list[SchemaEntry]) -> DependencyGraph:
    """Validate every schema and register it, in feed order."""
    graph = DependencyGraph()
    for entry in entries:
        validate_schema(entry.name, entry.handle)
        graph.add_schema(entry.name, entry.handle)
    return graph


def convert(openapi: bytes | str, options: ConvertOptions) -> ConvertResult:
    """
    Convert an OpenAPI 3.x document to proto3 and Go.

    Args:
        openapi: Document content, YAML or JSON
        options: Package settings and generation comment options

    Returns:
        ConvertResult; `protobuf` is empty when every schema is native-only,
        `golang` is empty when none is

    Raises:
        ValueError: For empty input or missing package settings
        ConversionError: For any schema the converter cannot handle
    """
    _check_input(openapi)
    _check_options(options)
    entries = DocumentParser().parse(openapi)
    return convert_schemas(entries, options)


def convert_schemas(entries: list[SchemaEntry], options: ConvertOptions) -> ConvertResult:
    """Run the conversion over an already parsed schema feed."""
    _check_options(options)

    graph = build_graph(entries)
    classification = graph.classify()

    proto_entries = [e for e in entries if not classification.is_native_only(e.name)]
    native_entries = [e for e in entries if classification.is_native_only(e.name)]

    tracker = NameTracker()
    proto_builder = ProtoBuilder(tracker)
    for entry in proto_entries:
        proto_builder.add_schema(entry.name, entry.handle)
    proto_file = proto_builder.finish(options.package_name, options.package_path)

    go_package_path = options.effective_go_package_path
    go_file = build_native(
        [(e.name, e.handle) for e in native_entries],
        graph.schemas,
        extract_package_name(go_package_path),
        tracker,
        proto_builder.allocated_names,
    )

    result = ConvertResult(proto_file=proto_file, go_file=go_file, classification=classification)
    if proto_entries or not native_entries:
        result.protobuf = ProtoBackend(options).generate(proto_file)
    if native_entries:
        result.golang = GoBackend(options).generate(go_file)

    for entry in entries:
        if classification.is_native_only(entry.name):
            result.type_map[entry.name] = TypeInfo(TypeLocation.GOLANG, classification.reasons[entry.name])
        else:
            result.type_map[entry.name] = TypeInfo(TypeLocation.PROTO)

    logger.info(
        "Converted %d schemas: %d proto, %d golang",
        len(entries),
        len(proto_entries),
        len(native_entries),
    )
    return result


def convert_to_struct(openapi: bytes | str, options: ConvertOptions) -> StructResult:
    """
    Convert every schema of an OpenAPI 3.x document to Go structs.

    Unions still get their discriminator codec. Type map reasons come from
    the same classification `convert` uses.

    Raises:
        ValueError: For empty input or a missing Go package path
        ConversionError: For any schema the converter cannot handle
    """
    _check_input(openapi)
    go_package_path = options.effective_go_package_path
    if not go_package_path:
        raise ValueError("go package path cannot be empty")

    entries = DocumentParser().parse(openapi)
    graph = build_graph(entries)
    classification = graph.classify()

    go_file = build_native(
        [(e.name, e.handle) for e in entries],
        graph.schemas,
        extract_package_name(go_package_path),
    )

    result = StructResult(go_file=go_file)
    if entries:
        result.golang = GoBackend(options).generate(go_file)
    for entry in entries:
        result.type_map[entry.name] = TypeInfo(TypeLocation.GOLANG, classification.reasons.get(entry.name, ""))

    logger.info("Converted %d schemas to Go structs", len(entries))
    return result
