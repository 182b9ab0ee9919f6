"""
Discriminated union codec.

Python counterpart of the MarshalJSON/UnmarshalJSON pair emitted for Go union
wrappers. A union value is a mapping of variant name to payload in which
exactly one payload is set:

- Marshaling writes the populated variant's JSON directly, the wrapper adds
  no object layer of its own.
- Unmarshaling reads the discriminator property, lower-cases it, looks it up
  in the discriminator map and sets only the matching variant.
"""

from __future__ import annotations

import json
from typing import Any

from .analyzer.ir_nodes import NativeStruct


class UnionCodecError(ValueError):
    """Raised when a union value cannot be marshaled or unmarshaled."""


class UnionCodec:
    """Marshals and unmarshals one discriminated union."""

    def __init__(self, name: str, discriminator: str, discriminator_map: dict[str, str], variants: list[str]):
        self.name = name
        self.discriminator = discriminator
        self.discriminator_map = {value.lower(): variant for value, variant in discriminator_map.items()}
        self.variants = list(variants)

    @staticmethod
    def from_struct(struct: NativeStruct) -> UnionCodec:
        if not struct.is_union:
            raise ValueError(f"struct '{struct.name}' is not a union")
        return UnionCodec(struct.name, struct.discriminator, struct.discriminator_map, struct.variants)

    def marshal(self, value: dict[str, Any]) -> str:
        """
        Serialize the single populated variant.

        Raises:
            UnionCodecError: If no variant or more than one variant is set
        """
        for key in value:
            if key not in self.variants:
                raise UnionCodecError(f"{self.name}: unknown variant {key}")

        populated = [value[v] for v in self.variants if value.get(v) is not None]
        if len(populated) > 1:
            raise UnionCodecError(f"{self.name}: multiple variants set")
        if not populated:
            raise UnionCodecError(f"{self.name}: no variant set")
        return json.dumps(populated[0])

    def unmarshal(self, data: str | bytes) -> dict[str, Any]:
        """
        Decode JSON text into a union value with exactly one variant set.

        Raises:
            UnionCodecError: For invalid JSON, a missing or non-string
                discriminator, or an unrecognized discriminator value
        """
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            raise UnionCodecError(f"{self.name}: invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise UnionCodecError(f"{self.name}: expected a JSON object")
        if self.discriminator not in payload:
            raise UnionCodecError(f"{self.name}: missing discriminator property {self.discriminator}")

        tag = payload[self.discriminator]
        if not isinstance(tag, str):
            raise UnionCodecError(f"{self.name}: discriminator property {self.discriminator} must be a string")

        variant = self.discriminator_map.get(tag.lower())
        if variant is None:
            raise UnionCodecError(f"{self.name}: unrecognized {self.discriminator} value: {tag}")

        result: dict[str, Any] = {v: None for v in self.variants}
        result[variant] = payload
        return result
