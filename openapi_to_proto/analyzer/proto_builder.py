"""
IDL message builder.

Converts IDL-eligible schemas into proto3 messages and enums:

1. Top-level objects become messages named through the shared type tracker
2. Integer enums (top-level or inline) become enums with a synthetic zero value
3. String enums stay string fields annotated with their allowed literals
4. Inline objects become nested messages inside their parent
5. Field numbers are sequential unless pinned with x-proto-number
"""

from __future__ import annotations

import logging

from ..errors import MalformedSchemaError, NamingError, UnsupportedConstructError
from ..schema_feed import SchemaHandle
from ..utils import (
    contains_type,
    literal_text,
    sanitize_field_name,
    to_enum_value_name,
    to_pascal_case,
    to_snake_case,
)
from .ir_nodes import ProtoEnum, ProtoEnumValue, ProtoField, ProtoFile, ProtoMessage
from .name_tracker import NameTracker
from .validator import (
    check_enum,
    check_property,
    check_resolved,
    is_integer_enum,
    is_string_enum,
    validate_field_numbers,
)

logger = logging.getLogger(__name__)

TIMESTAMP_TYPE = "google.protobuf.Timestamp"


def _enum_literals(handle: SchemaHandle) -> list[str]:
    return [text for text in (literal_text(v) for v in handle.enum) if text is not None]


def _is_plural(name: str) -> bool:
    # "es" is covered by "s"; no attempt at singularization
    return name.endswith("s")


class ProtoBuilder:
    """Builds proto3 IR for one conversion.

    Messages and enums share one type-name tracker. Each message gets its own
    field-name tracker.
    """

    def __init__(self, tracker: NameTracker | None = None):
        self.tracker = tracker or NameTracker()
        self.definitions: list[ProtoMessage | ProtoEnum] = []
        self.uses_timestamp = False

        # Top-level schema name -> allocated message/enum name
        self._allocated: dict[str, str] = {}
        # Fields whose type is a reference, resolved to allocated names in finish()
        self._ref_fields: list[ProtoField] = []

    def add_schema(self, name: str, handle: SchemaHandle) -> ProtoMessage | ProtoEnum | None:
        """
        Build the IR for one top-level schema.

        Returns:
            The message or enum, or None for a string enum (emitted inline)
        """
        check_resolved(handle, name)

        if handle.enum:
            check_enum(handle, name)
            if is_string_enum(handle):
                logger.debug("Schema %s is a string enum, kept inline", name)
                return None
            enum = self._build_enum(to_pascal_case(name), handle, handle.description, name)
            self._allocated[name] = enum.name
            return enum

        if not contains_type(handle.types, "object"):
            raise MalformedSchemaError("only objects and enums supported at top level", name)

        message = self._build_message(to_pascal_case(name), handle, name, None, name)
        self._allocated[name] = message.name
        self.definitions.append(message)
        logger.debug("Built message %s from schema %s (%d fields)", message.name, name, len(message.fields))
        return message

    @property
    def allocated_names(self) -> dict[str, str]:
        """Top-level schema name -> allocated message/enum name."""
        return dict(self._allocated)

    def finish(self, package_name: str, go_package: str) -> ProtoFile:
        """Resolve references to allocated names and return the file IR."""
        for field in self._ref_fields:
            field.type = self._allocated.get(field.ref_schema, field.ref_schema)
        return ProtoFile(
            package_name=package_name,
            go_package=go_package,
            definitions=list(self.definitions),
            uses_timestamp=self.uses_timestamp,
        )

    # --- Enums ---

    def _build_enum(self, candidate: str, handle: SchemaHandle, description: str, original_name: str) -> ProtoEnum:
        enum_name = self.tracker.unique_name(candidate)
        enum = ProtoEnum(name=enum_name, description=description, original_name=original_name)
        enum.values.append(ProtoEnumValue(name=f"{to_snake_case(enum_name).upper()}_UNSPECIFIED", number=0))
        for i, text in enumerate(_enum_literals(handle), start=1):
            enum.values.append(ProtoEnumValue(name=to_enum_value_name(enum_name, text), number=i))

        self.definitions.append(enum)
        logger.debug("Built enum %s with %d values", enum_name, len(enum.values))
        return enum

    # --- Messages ---

    def _build_message(
        self,
        candidate: str,
        handle: SchemaHandle,
        schema_name: str,
        path: str | None,
        original_name: str,
    ) -> ProtoMessage:
        numbers = validate_field_numbers(handle, schema_name, path)

        message = ProtoMessage(
            name=self.tracker.unique_name(candidate),
            description=handle.description,
            original_name=original_name,
        )

        field_names = NameTracker()
        next_number = 1
        for prop_name, prop in handle.properties.items():
            prop_path = f"{path}.{prop_name}" if path else prop_name
            check_property(prop, schema_name, prop_path)

            try:
                field_name = field_names.unique_name(sanitize_field_name(prop_name))
            except NamingError as e:
                raise e.with_context(schema_name, prop_path) from None

            field = ProtoField(name=field_name, json_name=prop_name, description=prop.description)
            self._resolve_type(field, prop, prop_name, schema_name, prop_path, message)

            # Inline objects and integer enums carry the description on the generated type
            if contains_type(prop.types, "object") or is_integer_enum(prop):
                field.description = ""

            if prop_name in numbers:
                field.number = numbers[prop_name]
            else:
                field.number = next_number
                next_number += 1

            message.fields.append(field)

        return message

    def _build_nested(
        self,
        prop_name: str,
        handle: SchemaHandle,
        schema_name: str,
        path: str,
        parent: ProtoMessage,
        in_array: bool = False,
    ) -> ProtoMessage:
        if _is_plural(prop_name):
            kind = "plural array property" if in_array else "property"
            raise NamingError(
                f"cannot derive message name from {kind} '{prop_name}'; use singular form or $ref",
                schema_name,
                path,
            )

        nested = self._build_message(to_pascal_case(prop_name), handle, schema_name, path, prop_name)
        parent.nested.append(nested)
        return nested

    # --- Types ---

    def _resolve_reference(self, field: ProtoField, handle: SchemaHandle) -> None:
        if is_string_enum(handle):
            field.type = "string"
            field.enum_values = _enum_literals(handle)
            return
        field.type = handle.reference_name
        field.ref_schema = handle.reference_name
        self._ref_fields.append(field)

    def _resolve_type(
        self,
        field: ProtoField,
        prop: SchemaHandle,
        prop_name: str,
        schema_name: str,
        path: str,
        parent: ProtoMessage,
    ) -> None:
        if prop.is_reference:
            self._resolve_reference(field, prop)
            return

        prop_type = prop.primary_type
        if prop_type == "array":
            field.repeated = True
            self._resolve_items(field, prop, prop_name, schema_name, path, parent)
        elif prop_type == "object":
            field.type = self._build_nested(prop_name, prop, schema_name, path, parent).name
        elif prop.enum:
            if is_string_enum(prop):
                field.type = "string"
                field.enum_values = _enum_literals(prop)
            else:
                field.type = self._build_enum(to_pascal_case(prop_name), prop, prop.description, prop_name).name
        else:
            field.type = self._scalar_type(prop_type, prop.format, schema_name, path)

    def _resolve_items(
        self,
        field: ProtoField,
        prop: SchemaHandle,
        prop_name: str,
        schema_name: str,
        path: str,
        parent: ProtoMessage,
    ) -> None:
        items = prop.items
        if items is None:
            raise MalformedSchemaError("array must have items defined", schema_name, path)
        check_property(items, schema_name, path)

        if items.primary_type == "array":
            raise UnsupportedConstructError("nested arrays not supported", schema_name, path)

        if items.is_reference:
            self._resolve_reference(field, items)
        elif items.enum:
            if is_string_enum(items):
                field.type = "string"
                field.enum_values = _enum_literals(items)
                return
            if _is_plural(prop_name):
                raise NamingError(
                    f"cannot derive enum name from plural array property '{prop_name}'; use singular form or $ref",
                    schema_name,
                    path,
                )
            field.type = self._build_enum(to_pascal_case(prop_name), items, items.description, prop_name).name
        elif items.primary_type == "object":
            field.type = self._build_nested(prop_name, items, schema_name, path, parent, in_array=True).name
        else:
            field.type = self._scalar_type(items.primary_type, items.format, schema_name, path)

    def _scalar_type(self, type_name: str, format_name: str, schema_name: str, path: str) -> str:
        if type_name == "integer":
            return "int64" if format_name == "int64" else "int32"
        if type_name == "number":
            return "float" if format_name == "float" else "double"
        if type_name == "string":
            if format_name in ("date", "date-time"):
                self.uses_timestamp = True
                return TIMESTAMP_TYPE
            if format_name in ("byte", "binary"):
                return "bytes"
            return "string"
        if type_name == "boolean":
            return "bool"
        raise UnsupportedConstructError(f"unsupported type: {type_name}", schema_name, path)

