"""
Schema validation predicates.

`validate_schema` checks one top-level schema and its direct properties. The
individual predicates are reused by the builders while they descend into
nested objects and array items, so nesting is validated where it is built.
"""

from __future__ import annotations

from ..errors import (
    FieldNumberError,
    MalformedSchemaError,
    UnsupportedConstructError,
)
from ..schema_feed import SchemaHandle
from ..utils import contains_type, is_integer_literal, literal_text

FIELD_NUMBER_EXTENSION = "x-proto-number"
MIN_FIELD_NUMBER = 1
MAX_FIELD_NUMBER = 536870911
RESERVED_FIELD_NUMBERS = range(19000, 20000)


def check_resolved(handle: SchemaHandle, schema_name: str, property_name: str | None = None) -> None:
    """Raise if the schema body could not be resolved by the parser."""
    error = handle.build_error
    if error:
        raise MalformedSchemaError(error, schema_name, property_name)


def check_composition(handle: SchemaHandle, schema_name: str, property_name: str | None = None) -> None:
    """Reject allOf, anyOf and not."""
    if handle.all_of:
        keyword = "allOf"
    elif handle.any_of:
        keyword = "anyOf"
    elif handle.not_ is not None:
        keyword = "not"
    else:
        return
    raise UnsupportedConstructError(f"uses '{keyword}' which is not supported", schema_name, property_name)


def check_one_of(handle: SchemaHandle, schema_name: str, property_name: str | None = None) -> None:
    """Check the shape of a oneOf: 2+ variants, a discriminator, only $ref variants."""
    variants = handle.one_of
    if not variants:
        return
    if len(variants) < 2:
        raise UnsupportedConstructError("oneOf must have at least 2 variants", schema_name, property_name)
    if not handle.discriminator_property:
        raise UnsupportedConstructError("oneOf requires discriminator", schema_name, property_name)
    for i, variant in enumerate(variants):
        if not variant.is_reference:
            raise UnsupportedConstructError(
                f"oneOf variant {i} must use $ref, inline schemas not supported", schema_name, property_name
            )


def is_string_enum(handle: SchemaHandle) -> bool:
    """An enum declared with type string stays an annotated string field."""
    return bool(handle.enum) and contains_type(handle.types, "string")


def is_integer_enum(handle: SchemaHandle) -> bool:
    return bool(handle.enum) and contains_type(handle.types, "integer")


def check_enum(handle: SchemaHandle, schema_name: str, property_name: str | None = None) -> None:
    """
    Validate an enum: explicit type, non-null literals of a single kind.

    A literal is integer-like when its text parses as an integer.

    Raises:
        MalformedSchemaError: For a missing type, null literals or mixed kinds
    """
    if not handle.types:
        raise MalformedSchemaError("enum must have explicit type field", schema_name, property_name)

    has_integer = False
    has_string = False
    for value in handle.enum:
        text = literal_text(value)
        if text is None or text == "":
            raise MalformedSchemaError("enum cannot contain null values", schema_name, property_name)
        if is_integer_literal(text):
            has_integer = True
        else:
            has_string = True

    if has_integer and has_string:
        raise MalformedSchemaError("enum contains mixed types (string and integer)", schema_name, property_name)


def check_property(handle: SchemaHandle, schema_name: str, property_name: str) -> None:
    """Check a property has a resolvable body and a usable type."""
    check_resolved(handle, schema_name, property_name)
    check_composition(handle, schema_name, property_name)
    if handle.is_reference:
        return
    if handle.one_of:
        check_one_of(handle, schema_name, property_name)
        raise UnsupportedConstructError(
            "inline oneOf not supported; declare the union as a named schema and use $ref",
            schema_name,
            property_name,
        )

    types = handle.types
    if not types:
        raise MalformedSchemaError("property must have type or $ref", schema_name, property_name)
    if len([t for t in types if t != "null"]) > 1:
        raise UnsupportedConstructError(
            "multi-type properties not supported (only nullable variants allowed)", schema_name, property_name
        )
    if handle.enum:
        check_enum(handle, schema_name, property_name)


def _parse_field_number(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and is_integer_literal(value):
        return int(value)
    return None


def validate_field_numbers(handle: SchemaHandle, schema_name: str, path: str | None = None) -> dict[str, int]:
    """
    Validate x-proto-number annotations of an object's properties.

    Args:
        handle: The object schema
        schema_name: Top-level schema name, for error context
        path: Property path of a nested inline object, for error context

    Returns:
        Mapping of property name to pinned field number, empty when unannotated

    Raises:
        FieldNumberError: For partial annotation, non-integers, out-of-range,
            reserved or duplicate numbers
    """
    properties = handle.properties
    annotated = [name for name, prop in properties.items() if prop.has_extension(FIELD_NUMBER_EXTENSION)]
    if not annotated:
        return {}
    if len(annotated) != len(properties):
        raise FieldNumberError(
            f"x-proto-number must be specified on all fields or none "
            f"(found on {len(annotated)} of {len(properties)} fields)",
            schema_name,
            path,
        )

    numbers: dict[str, int] = {}
    used_by: dict[int, str] = {}
    for name, prop in properties.items():
        prop_path = f"{path}.{name}" if path else name
        raw = prop.extension(FIELD_NUMBER_EXTENSION)
        number = _parse_field_number(raw)
        if number is None:
            raise FieldNumberError(f"x-proto-number must be a valid integer, got: {raw}", schema_name, prop_path)
        if number < MIN_FIELD_NUMBER or number > MAX_FIELD_NUMBER:
            raise FieldNumberError(
                f"x-proto-number must be between {MIN_FIELD_NUMBER} and {MAX_FIELD_NUMBER}, got: {number}",
                schema_name,
                prop_path,
            )
        if number in RESERVED_FIELD_NUMBERS:
            raise FieldNumberError(
                f"x-proto-number {number} is in reserved range 19000-19999", schema_name, prop_path
            )
        if number in used_by:
            raise FieldNumberError(
                f"duplicate x-proto-number {number} used by properties '{used_by[number]}' and '{name}'",
                schema_name,
                path,
            )
        used_by[number] = name
        numbers[name] = number
    return numbers


def validate_schema(name: str, handle: SchemaHandle) -> None:
    """
    Validate a top-level schema and its direct properties.

    Field numbering is checked here for every object schema, whichever output
    it ends up in.

    Raises:
        ConversionError: The first problem found
    """
    check_resolved(handle, name)
    check_composition(handle, name)
    check_one_of(handle, name)
    if handle.enum:
        check_enum(handle, name)
    if handle.properties:
        validate_field_numbers(handle, name)
    for prop_name, prop in handle.properties.items():
        check_property(prop, name, prop_name)
