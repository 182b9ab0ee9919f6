"""
Emitter backends.

Contains the proto3 and Go text generators.
"""

from __future__ import annotations

from .base import Backend
from .golang_backend import GoBackend
from .proto_backend import ProtoBackend

__all__ = [
    "Backend",
    "ProtoBackend",
    "GoBackend",
]
