"""
Configuration for the OpenAPI to proto3/Go converter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutputMode(Enum):
    """How output files are handled when they already exist."""

    ERROR_IF_EXISTS = "error_if_exists"
    FORCE = "force"


@dataclass
class OutputConfig:
    """Configuration for writing generated files."""

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS

    @staticmethod
    def from_dict(d: dict) -> OutputConfig:
        config = OutputConfig()
        if "mode" in d:
            config.mode = OutputMode(d["mode"])
        return config

    def to_dict(self) -> dict:
        return {"mode": self.mode.value}


@dataclass
class ConvertOptions:
    """Options for a single conversion."""

    # proto3 package declaration, e.g. "api.v1"
    package_name: str = ""

    # Go import path used for the proto go_package option
    package_path: str = ""

    # Go import path for the generated Go code (defaults to package_path)
    go_package_path: str = ""

    # Add a "Code generated" comment at the top of each output
    add_generation_comment: bool = False

    # Command line recorded in the generation comment
    generation_command: str = ""

    @property
    def effective_go_package_path(self) -> str:
        return self.go_package_path or self.package_path

    @staticmethod
    def from_dict(d: dict) -> ConvertOptions:
        """Create options from a dictionary, ignoring unknown keys."""
        options = ConvertOptions()
        for k, v in d.items():
            if hasattr(options, k) and k != "effective_go_package_path":
                setattr(options, k, v)
        return options

    def to_dict(self) -> dict:
        return {
            "package_name": self.package_name,
            "package_path": self.package_path,
            "go_package_path": self.go_package_path,
            "add_generation_comment": self.add_generation_comment,
            "generation_command": self.generation_command,
        }
