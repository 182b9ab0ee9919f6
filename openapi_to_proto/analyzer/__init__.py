"""
Analyzer module.

Contains validation, the dependency graph, name allocation and IR building.
"""

from __future__ import annotations

from .dependency_graph import DependencyGraph
from .ir_nodes import (
    ClassificationResult,
    GoFile,
    NativeField,
    NativeStruct,
    ProtoEnum,
    ProtoEnumValue,
    ProtoField,
    ProtoFile,
    ProtoMessage,
    TypeInfo,
    TypeLocation,
)
from .name_tracker import NameTracker
from .native_builder import NativeBuilder, build_native
from .proto_builder import ProtoBuilder
from .validator import validate_schema

__all__ = [
    "ClassificationResult",
    "DependencyGraph",
    "GoFile",
    "NameTracker",
    "NativeBuilder",
    "NativeField",
    "NativeStruct",
    "ProtoBuilder",
    "ProtoEnum",
    "ProtoEnumValue",
    "ProtoField",
    "ProtoFile",
    "ProtoMessage",
    "TypeInfo",
    "TypeLocation",
    "build_native",
    "validate_schema",
]
