import json
import logging
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .config import ConvertOptions, OutputConfig, OutputMode
from .errors import ConversionError
from .generator import convert, convert_to_struct
from .writer import AtomicWriter, OutputError

logger = logging.getLogger(__name__)


def _type_map_json(type_map) -> str:
    return json.dumps({name: info.to_dict() for name, info in type_map.items()}, indent=2) + "\n"


@click.command()
@click.option("--go-output", "-g", default=None, type=click.Path(resolve_path=True), help="Output file for Go code")
@click.option(
    "--type-map-output",
    "-t",
    default=None,
    type=click.Path(resolve_path=True),
    help="Output file for the JSON type map",
)
@click.option("--package-name", "-p", default=None, type=str, help="proto3 package name, e.g. api.v1")
@click.option("--package-path", default=None, type=str, help="Go import path for the proto go_package option")
@click.option("--go-package-path", default=None, type=str, help="Go import path of the Go code")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--struct-only", is_flag=True, default=False, help="Emit every schema as Go structs, no proto")
@click.option(
    "--add-generation-comment",
    is_flag=True,
    default=False,
    help="Add a 'Code generated' header to generated files",
)
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("proto_output", required=False, default=None, type=click.Path(resolve_path=True))
def openapi_to_proto(
    go_output,
    type_map_output,
    package_name,
    package_path,
    go_package_path,
    config,
    struct_only,
    add_generation_comment,
    force,
    verbose,
    path,
    proto_output,
):
    """Convert the schemas of the OpenAPI document PATH to proto3 and Go."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config_dict = json.load(f)
        options = ConvertOptions.from_dict(config_dict)
        output_config = OutputConfig.from_dict(config_dict.get("output", {}))
    else:
        options = ConvertOptions()
        output_config = OutputConfig()

    # CLI flags override the config file
    if package_name:
        options.package_name = package_name
    if package_path:
        options.package_path = package_path
    if go_package_path:
        options.go_package_path = go_package_path
    if add_generation_comment:
        options.add_generation_comment = True
    if options.add_generation_comment and not options.generation_command:
        options.generation_command = reconstruct_command_line(openapi_to_proto)
    if force:
        output_config.mode = OutputMode.FORCE

    data = Path(path).read_bytes()

    # Collect every output first so that nothing is written unless all succeed
    outputs: list[tuple[Path, str, str]] = []
    try:
        if struct_only:
            if go_output is None:
                raise click.UsageError("--struct-only requires --go-output")
            struct_result = convert_to_struct(data, options)
            outputs.append((Path(go_output), struct_result.golang, "go"))
            type_map = struct_result.type_map
        else:
            if proto_output is None:
                raise click.UsageError("Missing argument 'PROTO_OUTPUT'.")
            result = convert(data, options)
            if result.protobuf:
                outputs.append((Path(proto_output), result.protobuf, "proto"))
            if result.golang:
                if go_output is None:
                    names = ", ".join(n for n, info in result.type_map.items() if info.reason)
                    raise click.ClickException(f"schemas require Go output ({names}); pass --go-output")
                outputs.append((Path(go_output), result.golang, "go"))
            type_map = result.type_map
    except (ConversionError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if type_map_output is not None:
        outputs.append((Path(type_map_output), _type_map_json(type_map), "json"))

    if output_config.mode == OutputMode.ERROR_IF_EXISTS:
        for target, _, _ in outputs:
            if target.exists():
                raise click.ClickException(f"Output file already exists: {target}. Use --force to overwrite.")

    writer = AtomicWriter(output_config)
    try:
        for target, content, language in outputs:
            writer.write(target, content, language)
            logger.info("Wrote %s", target)
    except OutputError as e:
        raise click.ClickException(str(e)) from e
