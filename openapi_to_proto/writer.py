"""
Atomic file writer for generated output.

Ensures that an interrupted or rejected write never leaves a generated file
half written.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

from .config import OutputConfig, OutputMode


class OutputError(Exception):
    """Raised when generated output fails validation or cannot be written.

    This can happen when:
    - The target file exists and force mode is off
    - The content does not look like the expected language
    """


def _check_braces(content: str, language: str) -> None:
    open_braces = content.count("{")
    close_braces = content.count("}")
    if open_braces != close_braces:
        raise OutputError(f"Generated {language} has unbalanced braces: {open_braces} open, {close_braces} close")


def validate_proto(content: str) -> None:
    if 'syntax = "proto3";' not in content:
        raise OutputError("Generated proto is missing the proto3 syntax declaration")
    _check_braces(content, "proto")


def validate_go(content: str) -> None:
    if "package " not in content:
        raise OutputError("Generated Go code is missing the package clause")
    _check_braces(content, "Go code")


def validate_json(content: str) -> None:
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        raise OutputError(f"Generated JSON is not valid: {e}") from e


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        config: OutputConfig | None = None,
        validators: dict[str, Callable[[str], None]] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            config: Output settings (overwrite mode)
            validators: Validation function per language, defaults for "proto", "go" and "json"
        """
        self.config = config or OutputConfig()
        self._validators = {"proto": validate_proto, "go": validate_go, "json": validate_json}
        self._validators.update(validators or {})

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("proto", "go" or "json")
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If the file exists without force mode, or validation fails
            OSError: If file operations fail
        """
        if self.config.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
            raise OutputError(f"Output file already exists: {path}. Use --force to overwrite.")

        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the final rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                validator = self._validators.get(language)
                if validator is not None:
                    validator(content)

            temp_path.replace(path)

        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise
