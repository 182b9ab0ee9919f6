"""
IR (Intermediate Representation) node definitions.

These nodes represent the classified and resolved schemas, ready for
emission. Builders create them once; emitters only read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeLocation(Enum):
    """Which output a schema is emitted to."""

    PROTO = "proto"
    GOLANG = "golang"


@dataclass
class TypeInfo:
    """Classification record of one schema in the type map."""

    location: TypeLocation = TypeLocation.PROTO
    reason: str = ""  # Why the schema is native-only (empty for proto)

    def to_dict(self) -> dict:
        result = {"location": self.location.value}
        if self.reason:
            result["reason"] = self.reason
        return result


@dataclass
class ClassificationResult:
    """Partition of all registered schemas into native-only and IDL-eligible."""

    native_only: list[str] = field(default_factory=list)
    idl_eligible: list[str] = field(default_factory=list)
    reasons: dict[str, str] = field(default_factory=dict)  # native-only name -> reason

    def is_native_only(self, name: str) -> bool:
        return name in self.reasons


# --- proto3 IR ---


@dataclass
class ProtoEnumValue:
    """A single enum value."""

    name: str = ""
    number: int = 0


@dataclass
class ProtoEnum:
    """A proto3 enum. Values start with the synthetic <NAME>_UNSPECIFIED = 0."""

    name: str = ""
    description: str = ""
    values: list[ProtoEnumValue] = field(default_factory=list)
    original_name: str = ""


@dataclass
class ProtoField:
    """A field of a proto3 message."""

    name: str = ""  # Sanitized field identifier
    type: str = ""  # Wire type, e.g. "int32", "google.protobuf.Timestamp", "Address"
    number: int = 0
    json_name: str = ""  # Original property name, always emitted
    description: str = ""
    repeated: bool = False
    enum_values: list[str] = field(default_factory=list)  # Allowed literals of a string enum

    # Schema name referenced by this field, resolved to its allocated name after building
    ref_schema: str = ""


@dataclass
class ProtoMessage:
    """A proto3 message."""

    name: str = ""
    description: str = ""
    fields: list[ProtoField] = field(default_factory=list)
    nested: list[ProtoMessage] = field(default_factory=list)
    original_name: str = ""


@dataclass
class ProtoFile:
    """Everything the proto3 emitter needs, in discovery order."""

    package_name: str = ""
    go_package: str = ""
    definitions: list[ProtoMessage | ProtoEnum] = field(default_factory=list)
    uses_timestamp: bool = False

    @property
    def messages(self) -> list[ProtoMessage]:
        return [d for d in self.definitions if isinstance(d, ProtoMessage)]

    @property
    def enums(self) -> list[ProtoEnum]:
        return [d for d in self.definitions if isinstance(d, ProtoEnum)]


# --- Go IR ---


@dataclass
class NativeField:
    """A field of a Go struct."""

    name: str = ""
    type: str = ""  # Go type without the outer pointer, e.g. "string", "[]*Address"
    json_name: str = ""  # Original property name ("-" for union variant fields)
    description: str = ""
    is_pointer: bool = False

    @property
    def go_type(self) -> str:
        return f"*{self.type}" if self.is_pointer else self.type


@dataclass
class NativeStruct:
    """A Go struct, optionally a discriminated union wrapper."""

    name: str = ""
    description: str = ""
    fields: list[NativeField] = field(default_factory=list)

    # Union wrapper data
    is_union: bool = False
    variants: list[str] = field(default_factory=list)
    discriminator: str = ""
    discriminator_map: dict[str, str] = field(default_factory=dict)  # lowercase value -> variant


@dataclass
class GoFile:
    """Everything the Go emitter needs, in discovery order."""

    package_name: str = ""
    structs: list[NativeStruct] = field(default_factory=list)
    needs_time: bool = False

    @property
    def has_unions(self) -> bool:
        return any(s.is_union for s in self.structs)
