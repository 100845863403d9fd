"""CLI for vsplit."""

import logging
from pathlib import Path

import click

from vsplit.cli.exit_codes import ExitCode
from vsplit.config import (
    ConfigError,
    VSplitConfig,
    build_logging_config,
    get_config,
)
from vsplit.exceptions import (
    InputError,
    MediaIntrospectionError,
    NotTranscodableError,
    ToolNotFoundError,
)
from vsplit.logging import configure_logging

logger = logging.getLogger(__name__)


def exit_code_for(error: BaseException | None) -> ExitCode:
    """Map a failure to the CLI exit code."""
    if isinstance(error, NotTranscodableError):
        return ExitCode.NOT_TRANSCODABLE
    if isinstance(error, InputError):
        return ExitCode.TARGET_NOT_FOUND
    if isinstance(error, ToolNotFoundError):
        return ExitCode.TOOL_NOT_AVAILABLE
    if isinstance(error, MediaIntrospectionError):
        return ExitCode.PARSE_ERROR
    return ExitCode.OPERATION_FAILED


def get_cli_config(ctx: click.Context) -> VSplitConfig:
    """Configuration loaded by the main group."""
    return ctx.find_root().obj["config"]


@click.group()
@click.version_option(package_name="vsplit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.vsplit/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """vsplit - Split media files into HLS playlists with ffmpeg."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path=config_path, strict=True)
        except (ConfigError, ValueError) as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            ctx.exit(ExitCode.CONFIG_ERROR)

    config: VSplitConfig = ctx.obj["config"]
    try:
        logging_config = build_logging_config(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        click.echo(f"Error: Invalid logging options: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)
    configure_logging(logging_config)
    logger.debug("vsplit starting: log_level=%s", logging_config.level)


def _register_commands() -> None:
    from vsplit.cli.inspect import inspect_command
    from vsplit.cli.plan import plan_command
    from vsplit.cli.split import split_command

    main.add_command(inspect_command)
    main.add_command(plan_command)
    main.add_command(split_command)


_register_commands()
