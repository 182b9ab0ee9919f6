"""
Native struct builder.

Converts native-only schemas into Go struct IR. A schema with `oneOf` becomes
a union wrapper: one pointer field per variant plus a discriminator map used
by the generated MarshalJSON/UnmarshalJSON pair. Every other object becomes a
plain struct whose fields mirror the IDL builder's type resolution with Go
types instead of proto3 types.
"""

from __future__ import annotations

import logging

from ..errors import (
    ConversionError,
    DiscriminatorError,
    MalformedSchemaError,
    NamingError,
    UnsupportedConstructError,
)
from ..schema_feed import SchemaHandle
from ..utils import contains_type, extract_reference_name, sanitize_field_name, to_pascal_case
from .ir_nodes import GoFile, NativeField, NativeStruct
from .name_tracker import NameTracker
from .validator import check_enum, check_property, check_resolved, validate_field_numbers

logger = logging.getLogger(__name__)

INTEGER_FORMATS = {
    "int8": "int8",
    "int16": "int16",
    "int32": "int32",
    "int64": "int64",
    "uint8": "uint8",
    "uint16": "uint16",
    "uint32": "uint32",
    "uint64": "uint64",
    "int": "int32",
    "": "int32",
}

NUMBER_FORMATS = {
    "float": "float32",
    "double": "float64",
    "": "float64",
}


class NativeBuilder:
    """Builds Go struct IR for one conversion.

    Args:
        schemas: All registered top-level schemas, used to resolve union variants
        tracker: Type-name tracker, shared with the IDL builder when both run
        external_names: Allocated names of schemas emitted as proto3 messages/enums
    """

    def __init__(
        self,
        schemas: dict[str, SchemaHandle],
        tracker: NameTracker | None = None,
        external_names: dict[str, str] | None = None,
    ):
        self.schemas = schemas
        self.tracker = tracker or NameTracker()
        self.external_names = dict(external_names or {})
        self.structs: list[NativeStruct] = []
        self.needs_time = False
        self._names: dict[str, str] = {}

    def allocate(self, names: list[str]) -> None:
        """Reserve Go type names for top-level schemas, in order."""
        for name in names:
            if name not in self._names:
                self._names[name] = self.tracker.unique_name(to_pascal_case(name))

    def type_name(self, schema_name: str) -> str:
        if schema_name in self._names:
            return self._names[schema_name]
        if schema_name in self.external_names:
            return self.external_names[schema_name]
        return to_pascal_case(schema_name)

    def add_schema(self, name: str, handle: SchemaHandle) -> NativeStruct | None:
        """
        Build the struct for one top-level schema.

        Returns:
            The struct, or None for an enum schema (referenced as its scalar type)
        """
        check_resolved(handle, name)

        if handle.enum:
            check_enum(handle, name)
            logger.debug("Schema %s is an enum, referenced as a scalar", name)
            return None

        self.allocate([name])
        if handle.one_of:
            struct = self._build_union(name, handle)
            self.structs.append(struct)
        elif contains_type(handle.types, "object") or handle.properties:
            struct = self._build_struct(self.type_name(name), handle, name, None)
        else:
            raise MalformedSchemaError("only objects and enums supported at top level", name)

        logger.debug("Built struct %s from schema %s", struct.name, name)
        return struct

    def finish(self, package_name: str) -> GoFile:
        return GoFile(package_name=package_name, structs=list(self.structs), needs_time=self.needs_time)

    # --- Unions ---

    def _build_union(self, name: str, handle: SchemaHandle) -> NativeStruct:
        variants = []
        for i, variant in enumerate(handle.one_of):
            check_resolved(variant, name, f"oneOf[{i}]")
            variants.append(variant.reference_name)

        discriminator_map = self._discriminator_map(name, handle, variants)

        struct = NativeStruct(
            name=self.type_name(name),
            description=handle.description,
            is_union=True,
            variants=[self.type_name(v) for v in variants],
            discriminator=handle.discriminator_property,
            discriminator_map={value: self.type_name(v) for value, v in discriminator_map.items()},
        )
        for variant in struct.variants:
            struct.fields.append(NativeField(name=variant, type=variant, json_name="-", is_pointer=True))
        return struct

    def _discriminator_map(self, name: str, handle: SchemaHandle, variants: list[str]) -> dict[str, str]:
        """
        Map lowercase discriminator values to variant schema names.

        Raises:
            DiscriminatorError: For colliding values, mapping targets outside
                the oneOf, uncovered variants or variants lacking the
                discriminator property
        """
        mapping: dict[str, str] = {}

        explicit = handle.discriminator_mapping
        if explicit:
            declared: dict[str, str] = {}
            for value, ref in explicit.items():
                try:
                    target = extract_reference_name(ref)
                except MalformedSchemaError as e:
                    raise DiscriminatorError(
                        f"invalid discriminator mapping for value '{value}': {e.message}", name
                    ) from None
                if target not in variants:
                    raise DiscriminatorError(
                        f"discriminator mapping value '{value}' targets '{target}', which is not a oneOf variant",
                        name,
                    )
                key = value.lower()
                if key in mapping and mapping[key] != target:
                    raise DiscriminatorError(
                        f"discriminator conflict: values '{declared[key]}' and '{value}' "
                        f"both map to lowercase '{key}'",
                        name,
                    )
                mapping[key] = target
                declared[key] = value

            for variant in variants:
                if variant not in mapping.values():
                    raise DiscriminatorError(f"variant '{variant}' not covered by discriminator mapping", name)
            return mapping

        for variant in variants:
            key = variant.lower()
            if key in mapping and mapping[key] != variant:
                raise DiscriminatorError(
                    f"discriminator conflict: variants '{mapping[key]}' and '{variant}' "
                    f"both map to lowercase '{key}'",
                    name,
                )
            mapping[key] = variant

        discriminator = handle.discriminator_property
        for variant in variants:
            variant_handle = self.schemas.get(variant)
            if variant_handle is None:
                raise DiscriminatorError(f"variant '{variant}' not found in schemas", name)
            if discriminator not in variant_handle.properties:
                raise DiscriminatorError(
                    f"discriminator property '{discriminator}' missing in variant '{variant}'", name
                )
        return mapping

    # --- Structs ---

    def _build_struct(self, go_name: str, handle: SchemaHandle, schema_name: str, path: str | None) -> NativeStruct:
        validate_field_numbers(handle, schema_name, path)
        struct = NativeStruct(name=go_name, description=handle.description)
        # Parent precedes the inline structs discovered while building its fields
        self.structs.append(struct)

        field_names = NameTracker()
        for prop_name, prop in handle.properties.items():
            prop_path = f"{path}.{prop_name}" if path else prop_name
            check_property(prop, schema_name, prop_path)
            try:
                sanitize_field_name(prop_name)
            except NamingError as e:
                raise e.with_context(schema_name, prop_path) from None

            go_type, is_pointer = self._go_type(prop, prop_name, schema_name, prop_path)
            struct.fields.append(
                NativeField(
                    name=field_names.unique_name(to_pascal_case(prop_name)),
                    type=go_type,
                    json_name=prop_name,
                    description=prop.description,
                    is_pointer=is_pointer,
                )
            )
        return struct

    def _go_type(self, prop: SchemaHandle, prop_name: str, schema_name: str, path: str) -> tuple[str, bool]:
        """Go type of a property, without the outer pointer, and whether it is a pointer."""
        if prop.is_reference:
            if prop.enum:
                return self._scalar_type(prop.primary_type, prop.format, schema_name, path), False
            return self.type_name(prop.reference_name), True

        prop_type = prop.primary_type
        if prop_type == "array":
            items = prop.items
            if items is None:
                raise MalformedSchemaError("array must have items defined", schema_name, path)
            check_property(items, schema_name, path)
            element, is_pointer = self._go_type(items, prop_name, schema_name, path)
            return "[]" + ("*" if is_pointer else "") + element, False

        if prop_type == "object":
            inline_name = self.tracker.unique_name(to_pascal_case(prop_name))
            self._build_struct(inline_name, prop, schema_name, path)
            return inline_name, True

        return self._scalar_type(prop_type, prop.format, schema_name, path), False

    def _scalar_type(self, type_name: str, format_name: str, schema_name: str, path: str | None) -> str:
        if type_name == "integer":
            if format_name not in INTEGER_FORMATS:
                raise UnsupportedConstructError(f"unsupported integer format: {format_name}", schema_name, path)
            return INTEGER_FORMATS[format_name]
        if type_name == "number":
            if format_name not in NUMBER_FORMATS:
                raise UnsupportedConstructError(f"unsupported number format: {format_name}", schema_name, path)
            return NUMBER_FORMATS[format_name]
        if type_name == "string":
            if format_name in ("date", "date-time"):
                self.needs_time = True
                return "time.Time"
            if format_name in ("byte", "binary"):
                return "[]byte"
            return "string"
        if type_name == "boolean":
            return "bool"
        raise UnsupportedConstructError(f"unsupported type: {type_name}", schema_name, path)


def build_native(
    entries: list[tuple[str, SchemaHandle]],
    schemas: dict[str, SchemaHandle],
    package_name: str,
    tracker: NameTracker | None = None,
    external_names: dict[str, str] | None = None,
) -> GoFile:
    """Build the Go file IR for (name, handle) pairs, in order."""
    builder = NativeBuilder(schemas, tracker, external_names)
    builder.allocate([name for name, handle in entries if not handle.enum])
    for name, handle in entries:
        try:
            builder.add_schema(name, handle)
        except ConversionError as e:
            raise e.with_context(name) from None
    return builder.finish(package_name)
