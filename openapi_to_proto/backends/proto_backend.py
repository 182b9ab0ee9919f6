"""
proto3 emitter.

Renders a ProtoFile in discovery order. Nested messages are declared inside
their parent before its fields, and every field carries its original property
name as `json_name`.
"""

from __future__ import annotations

import json

from ..analyzer.ir_nodes import ProtoEnum, ProtoField, ProtoFile, ProtoMessage
from .base import Backend, format_comment

INDENT = "  "


class ProtoBackend(Backend):
    """Renders proto3 IDL text."""

    TEMPLATE_LANG = "proto"
    FILE_EXTENSION = "proto"

    def generate(self, ir: ProtoFile) -> str:
        body = "".join(self.render_definition(d) for d in ir.definitions)
        header = self.prefix_template.render(
            generation_comment=self.generation_comment(),
            package_name=ir.package_name,
            go_package=ir.go_package,
            uses_timestamp=ir.uses_timestamp,
            body=body,
        )
        return header + "\n"

    def render_definition(self, definition: ProtoMessage | ProtoEnum) -> str:
        if isinstance(definition, ProtoEnum):
            return self.render_enum(definition)
        return self.render_message(definition)

    def render_enum(self, enum: ProtoEnum) -> str:
        lines = ["\n", format_comment(enum.description), f"enum {enum.name} {{\n"]
        for value in enum.values:
            lines.append(f"{INDENT}{value.name} = {value.number};\n")
        lines.append("}\n")
        return "".join(lines)

    def render_message(self, message: ProtoMessage, indent: str = "") -> str:
        lines = ["\n", format_comment(message.description, indent), f"{indent}message {message.name} {{\n"]

        for nested in message.nested:
            lines.append(self.render_message(nested, indent + INDENT).removeprefix("\n"))
            lines.append("\n")

        for field in message.fields:
            lines.append(self.render_field(field, indent + INDENT))

        lines.append(f"{indent}}}\n")
        return "".join(lines)

    def render_field(self, field: ProtoField, indent: str) -> str:
        lines = [format_comment(field.description, indent)]
        if field.enum_values:
            lines.append(f"{indent}// enum: [{', '.join(field.enum_values)}]\n")

        label = "repeated " if field.repeated else ""
        json_name = json.dumps(field.json_name, ensure_ascii=False)
        lines.append(f'{indent}{label}{field.type} {field.name} = {field.number} [json_name = {json_name}];\n')
        return "".join(lines)
