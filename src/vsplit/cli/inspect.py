"""CLI inspect command."""

import sys
from pathlib import Path

import click

from vsplit.cli import exit_code_for, get_cli_config
from vsplit.cli.exit_codes import ExitCode
from vsplit.exceptions import VSplitError
from vsplit.introspector import FFprobeIntrospector
from vsplit.introspector.formatters import format_human, format_json
from vsplit.runner import ProcessRunner
from vsplit.tools import require_tool


@click.command("inspect")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def inspect_command(ctx: click.Context, file: Path, output_format: str) -> None:
    """Probe a media file and display its streams.

    FILE is the path to the media file to inspect.
    """
    config = get_cli_config(ctx)

    if not file.exists():
        click.echo(f"Error: File not found: {file}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    try:
        introspector = FFprobeIntrospector(
            ffprobe_path=require_tool("ffprobe", config.tools.ffprobe),
            runner=ProcessRunner(),
            timeout=config.runner.probe_timeout,
        )
        descriptor = introspector.get_format(file)
    except VSplitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))

    if output_format == "json":
        click.echo(format_json(descriptor))
    else:
        click.echo(format_human(descriptor))
