"""
Schema feed module.

Contains the schema handle and the OpenAPI document parser.
"""

from __future__ import annotations

from .handle import SchemaHandle
from .parser import DocumentParser, SchemaEntry

__all__ = [
    "SchemaHandle",
    "SchemaEntry",
    "DocumentParser",
]
