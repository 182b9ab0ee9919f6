"""
Base class for emitter backends.

Defines the interface that the proto3 and Go backends implement.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..config import ConvertOptions


def format_comment(description: str, indent: str = "") -> str:
    """Format a description as `//` comment lines; blank lines become a bare `//`."""
    return "".join(f"{line}\n" for line in comment_lines(description, indent))


def comment_lines(description: str, indent: str = "") -> list[str]:
    if not description.strip():
        return []
    lines = []
    for line in description.split("\n"):
        trimmed = line.rstrip(" \t")
        lines.append(f"{indent}//" if not trimmed else f"{indent}// {trimmed}")
    return lines


class Backend(ABC):
    """Abstract base class for emitter backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, options: ConvertOptions):
        """
        Initialize the backend.

        Args:
            options: Conversion options (generation comment settings)
        """
        self.options = options
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["go_string"] = json.dumps

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def generate(self, ir: Any) -> str:
        """
        Generate source text from IR.

        Args:
            ir: The file-level intermediate representation

        Returns:
            Generated source as a string
        """

    def generation_comment(self) -> str:
        """Header marking the output as generated, empty when disabled."""
        if not self.options.add_generation_comment:
            return ""

        from .. import __version__

        lines = [f"// Code generated by openapi_to_proto v{__version__}. DO NOT EDIT."]
        if self.options.generation_command:
            lines.append(f"// Command: {self.options.generation_command}")
        return "\n".join(lines)
