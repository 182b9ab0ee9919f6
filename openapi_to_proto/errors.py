"""
Error types raised while converting OpenAPI schemas.

Every conversion error is fatal for the whole conversion. Errors carry the
schema name and, where applicable, the property path so that diagnostics are
actionable without a debugger.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all schema conversion errors.

    Attributes:
        message: Description of the problem
        schema_name: Name of the schema being converted (if known)
        property_name: Property path inside the schema (if applicable)
    """

    def __init__(self, message: str, schema_name: str | None = None, property_name: str | None = None):
        self.message = message
        self.schema_name = schema_name
        self.property_name = property_name
        super().__init__(self._format())

    def _format(self) -> str:
        parts = []
        if self.schema_name:
            parts.append(f"schema '{self.schema_name}'")
        if self.property_name:
            parts.append(f"property '{self.property_name}'")
        parts.append(self.message)
        return ": ".join(parts)

    def with_context(self, schema_name: str | None = None, property_name: str | None = None) -> ConversionError:
        """Return a copy of this error with missing context filled in."""
        return type(self)(
            self.message,
            schema_name=self.schema_name or schema_name,
            property_name=self.property_name or property_name,
        )


class DocumentError(ConversionError):
    """Raised when the source document cannot be read or a reference cannot be resolved."""


class UnsupportedConstructError(ConversionError):
    """Raised for allOf/anyOf/not, inline unions and multi-type properties."""


class MalformedSchemaError(ConversionError):
    """Raised for unresolved bodies, missing types and invalid enums."""


class NamingError(ConversionError):
    """Raised when a valid identifier cannot be derived from a schema or property name."""


class FieldNumberError(ConversionError):
    """Raised for invalid x-proto-number annotations."""


class DiscriminatorError(ConversionError):
    """Raised when a oneOf discriminator cannot be mapped onto its variants."""
