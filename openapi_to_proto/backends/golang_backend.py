"""
Go emitter.

Renders a GoFile: package clause, an import block holding only the imports
the structs use, struct declarations and, for union wrappers, the
MarshalJSON/UnmarshalJSON pair implementing the discriminator contract.
"""

from __future__ import annotations

import json
from typing import Any

from ..analyzer.ir_nodes import GoFile, NativeStruct
from .base import Backend, comment_lines

UNION_IMPORTS = ["encoding/json", "fmt", "strings"]
TIME_IMPORT = "time"


def struct_tag(json_name: str) -> str:
    """Go struct tag literal for a JSON property name.

    The tag is a raw string unless the name holds a backquote, which a raw
    string cannot contain.
    """
    tag = "json:" + json.dumps(json_name, ensure_ascii=False)
    if "`" in tag:
        return json.dumps(tag, ensure_ascii=False)
    return f"`{tag}`"


class GoBackend(Backend):
    """Renders Go source text."""

    TEMPLATE_LANG = "golang"
    FILE_EXTENSION = "go"

    def _setup_templates(self) -> None:
        super()._setup_templates()
        self.struct_template = self.jinja_env.get_template("struct.go.jinja2")
        self.union_template = self.jinja_env.get_template("union.go.jinja2")

    def generate(self, ir: GoFile) -> str:
        body = "".join(self.render_struct(s) for s in ir.structs)
        return self.prefix_template.render(
            generation_comment=self.generation_comment(),
            package_name=ir.package_name,
            imports=self.imports(ir),
            body=body,
        )

    def imports(self, ir: GoFile) -> list[str]:
        imports = []
        if ir.has_unions:
            imports.extend(UNION_IMPORTS)
        if ir.needs_time:
            imports.append(TIME_IMPORT)
        return sorted(imports)

    def render_struct(self, struct: NativeStruct) -> str:
        result = "\n" + self.struct_template.render(self._struct_context(struct)) + "\n"
        if struct.is_union:
            result += "\n" + self.union_template.render(self._union_context(struct)) + "\n"
        return result

    def _struct_context(self, struct: NativeStruct) -> dict[str, Any]:
        fields = [
            {
                "name": field.name,
                "type": field.go_type,
                "tag": struct_tag(field.json_name),
                "comment_lines": comment_lines(field.description),
            }
            for field in struct.fields
        ]
        return {
            "name": struct.name,
            "comment_lines": comment_lines(struct.description),
            "fields": fields,
        }

    def _union_context(self, struct: NativeStruct) -> dict[str, Any]:
        return {
            "name": struct.name,
            "variants": struct.variants,
            "discriminator": struct.discriminator,
            "discriminator_map": struct.discriminator_map,
        }
