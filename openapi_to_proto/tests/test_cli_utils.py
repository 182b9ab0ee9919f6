#!/usr/bin/env python3

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from openapi_to_proto.cli_utils import reconstruct_command_line


def get_click_command():
    """Helper to get Click command for testing"""
    from openapi_to_proto.openapi_to_proto import openapi_to_proto

    return openapi_to_proto


@click.command()
@click.option("--name", "-n", default=None)
@click.option("--force", "-f", is_flag=True, default=False)
@click.option("--mode", default="strict")
@click.argument("path")
def echo_command(name, force, mode, path):
    click.echo(reconstruct_command_line(echo_command))


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context the program name is returned"""
        result = reconstruct_command_line(get_click_command())
        assert result == "openapi_to_proto"

    def test_reconstruct_command_line_with_context(self):
        runner = CliRunner()
        result = runner.invoke(echo_command, ["input.yaml", "-n", "api", "-f"])
        assert result.exit_code == 0
        assert result.output.strip() == "openapi_to_proto input.yaml --name api --force"

    def test_defaults_are_omitted(self):
        runner = CliRunner()
        result = runner.invoke(echo_command, ["input.yaml", "--mode", "strict"])
        assert result.output.strip() == "openapi_to_proto input.yaml"

    def test_existing_paths_are_shown_by_name(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("specs").mkdir()
            Path("specs/input.yaml").write_text("openapi: 3.0.0\n")
            result = runner.invoke(echo_command, ["specs/input.yaml"])
        assert result.output.strip() == "openapi_to_proto input.yaml"


if __name__ == "__main__":
    pytest.main([__file__])
