"""
Utility functions for the OpenAPI to proto3/Go converter.
"""

from __future__ import annotations

import re
from typing import Any

from .errors import MalformedSchemaError, NamingError

REFERENCE_PREFIX = "#/components/schemas/"

# Runs of characters that are not valid in a proto3 or Go identifier
_INVALID_RUN = re.compile(r"[^A-Za-z0-9]+")
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")


def contains_type(types: list[str], item: str) -> bool:
    """Case-insensitive membership test for declared schema types."""
    item = item.lower()
    return any(t.lower() == item for t in types)


def literal_text(value: Any) -> str | None:
    """Textual form of a YAML/JSON scalar literal, None for null."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_integer_literal(text: str) -> bool:
    """Whether a literal's textual form parses as an integer."""
    return bool(_INTEGER_LITERAL.fullmatch(text.strip()))


def extract_reference_name(ref: str) -> str:
    """Extract the schema name from a local reference string.

    Examples:
        "#/components/schemas/Address" -> "Address"
        "#/components/schemas/User/Address" -> "Address"

    Raises:
        MalformedSchemaError: If the reference is not of the form #/components/schemas/Name
    """
    if not ref:
        raise MalformedSchemaError("reference string is empty")

    parts = ref.split("/")
    if len(parts) < 4 or parts[0] != "#" or parts[1] != "components" or parts[2] != "schemas":
        raise MalformedSchemaError(f"invalid reference format: {ref} (expected #/components/schemas/Name)")

    name = parts[-1]
    if not name:
        raise MalformedSchemaError(f"reference has empty name segment: {ref}")
    return name


def to_pascal_case(text: str) -> str:
    """Convert snake_case, kebab-case, camelCase or UPPER text to PascalCase.

    Examples:
        "user" -> "User"
        "USER" -> "User"
        "first_name" -> "FirstName"
        "status-code" -> "StatusCode"
        "petType" -> "PetType"
        "HTTPStatus" -> "HTTPStatus"
    """
    words = [w for w in _INVALID_RUN.split(text) if w]
    result = []
    for word in words:
        if word.isupper():
            result.append(word.capitalize())
        else:
            result.append(word[0].upper() + word[1:])
    return "".join(result)


def to_snake_case(text: str) -> str:
    """Convert PascalCase or camelCase text to snake_case.

    Examples:
        "UserProfile" -> "user_profile"
        "HTTPStatus" -> "http_status"
        "Status_2" -> "status_2"
    """
    text = _INVALID_RUN.sub("_", text)
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    return text.strip("_").lower()


def to_enum_value_name(enum_name: str, value: str) -> str:
    """Build a proto3 enum value identifier scoped by its enum name.

    Examples:
        ("Code", "200") -> "CODE_200"
        ("Status_2", "10") -> "STATUS_2_10"
    """
    prefix = to_snake_case(enum_name).upper()
    suffix = _INVALID_RUN.sub("_", value).strip("_").upper()
    if value.startswith("-"):
        suffix = f"NEG_{suffix}"
    return f"{prefix}_{suffix}"


def sanitize_field_name(name: str) -> str:
    """Turn an OpenAPI property name into a proto3 field identifier.

    Runs of invalid characters collapse into a single underscore. A trailing
    run is dropped unless it contains an underscore from the original name.

    Examples:
        "status-code" -> "status_code"
        "status---code" -> "status_code"
        "status-" -> "status"
        "user_" -> "user_"
        "name-_-" -> "name_"

    Raises:
        NamingError: If the name does not start with a letter
    """
    if not name:
        raise NamingError("field name cannot be empty")
    if name[0] == "_":
        raise NamingError("field name cannot start with underscore")
    if not (name[0].isascii() and name[0].isalpha()):
        raise NamingError("field name must start with a letter")

    out: list[str] = []
    run_has_underscore = False
    for ch in name:
        if ch.isascii() and ch.isalnum():
            out.append(ch)
            run_has_underscore = False
        elif out[-1] == "_":
            run_has_underscore = run_has_underscore or ch == "_"
        else:
            out.append("_")
            run_has_underscore = ch == "_"

    if out[-1] == "_" and not run_has_underscore:
        out.pop()
    return "".join(out)


def extract_package_name(package_path: str) -> str:
    """Derive a Go package name from a Go package path.

    Examples:
        "github.com/example/types" -> "types"
        "github.com/example/proto/v1" -> "proto"
        "" -> "main"
    """
    if not package_path:
        return "main"

    parts = package_path.split("/")
    last = parts[-1]
    if len(last) > 1 and last.startswith("v") and last[1:].isdigit() and len(parts) > 1:
        return parts[-2]
    return last or "main"
