"""CLI plan command: show what a split would do without encoding."""

import json
import shlex
import sys
from pathlib import Path

import click

from vsplit.cli import exit_code_for, get_cli_config
from vsplit.cli.exit_codes import ExitCode
from vsplit.cli.split import build_executor, build_split_options
from vsplit.core import QUALITY_CHOICES
from vsplit.exceptions import VSplitError
from vsplit.executor.transcode import build_split_command


@click.command("plan")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--quality",
    "-q",
    type=click.Choice(QUALITY_CHOICES, case_sensitive=False),
    default=None,
    help="Quality ceiling (default: none).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory used in the shown command.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan_command(
    ctx: click.Context,
    file: Path,
    quality: str | None,
    output_dir: Path | None,
    output_json: bool,
) -> None:
    """Probe FILE and print the transcode plan and ffmpeg command."""
    config = get_cli_config(ctx)

    try:
        options = build_split_options(config, quality=quality)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.INVALID_OPTIONS)

    try:
        executor = build_executor(config, require_ffmpeg=False)
        descriptor, plan = executor.plan(file, options)
        target_dir = executor.resolve_output_dir(
            output_dir or config.split.output_dir, options
        )
    except VSplitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))

    command = build_split_command(
        executor.ffmpeg_path,
        descriptor.path,
        target_dir,
        plan,
        segment_duration=options.segment_duration,
        playlist_name=options.playlist_name,
        segment_template=options.segment_template,
    )

    if output_json:
        data = {
            "file": str(descriptor.path),
            "quality": options.quality.value if options.quality else None,
            "plan": plan.to_dict(),
            "command": list(command),
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"File: {descriptor.path}")
    click.echo(f"Video: {plan.video.ffmpeg_value}")
    click.echo(f"Audio: {plan.audio.ffmpeg_value}")
    if plan.scale_height is not None:
        click.echo(f"Scale: {plan.scale_height}p")
    if plan.bitrate is not None:
        click.echo(f"Bitrate: {plan.bitrate // 1024}K")
    if plan.frame_rate is not None:
        click.echo(f"Frame rate: {plan.frame_rate:.2f}")
    click.echo("")
    click.echo("Decisions:")
    for reason in plan.reasons:
        click.echo(f"  - {reason}")
    click.echo("")
    click.echo(f"Command: {shlex.join(command)}")
