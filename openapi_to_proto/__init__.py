"""OpenAPI to proto3 converter

A Python package for converting OpenAPI 3.x component schemas into proto3
messages and enums. Discriminated unions (oneOf + discriminator), and every
schema depending on one, are emitted as Go structs with a JSON codec instead.
"""

__version__ = "1.0.0"

from .config import ConvertOptions, OutputConfig, OutputMode
from .errors import (
    ConversionError,
    DiscriminatorError,
    DocumentError,
    FieldNumberError,
    MalformedSchemaError,
    NamingError,
    UnsupportedConstructError,
)
from .generator import ConvertResult, StructResult, convert, convert_schemas, convert_to_struct
from .union_codec import UnionCodec, UnionCodecError
from .writer import AtomicWriter, OutputError

__all__ = [
    "convert",
    "convert_schemas",
    "convert_to_struct",
    "ConvertOptions",
    "ConvertResult",
    "StructResult",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "OutputError",
    "UnionCodec",
    "UnionCodecError",
    "ConversionError",
    "DocumentError",
    "UnsupportedConstructError",
    "MalformedSchemaError",
    "NamingError",
    "FieldNumberError",
    "DiscriminatorError",
]
