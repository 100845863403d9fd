"""CLI split command."""

import contextlib
import logging
import signal
import sys
import threading
from collections.abc import Iterator
from pathlib import Path
from types import FrameType
from typing import Any

import click

from vsplit.cli import exit_code_for, get_cli_config
from vsplit.cli.exit_codes import ExitCode
from vsplit.config import VSplitConfig
from vsplit.core import QUALITY_CHOICES
from vsplit.exceptions import VSplitError
from vsplit.executor import SplitExecutor, SplitOptions, SplitStatus
from vsplit.executor.transcode.types import MIN_BITRATE
from vsplit.introspector import FFprobeIntrospector
from vsplit.runner import CancellableContext, ProcessRunner
from vsplit.tools import (
    parse_input_duration,
    parse_segment_opened,
    parse_stderr_progress,
    require_tool,
    resolve_tool,
)

logger = logging.getLogger(__name__)


def build_executor(
    config: VSplitConfig, *, require_ffmpeg: bool = True
) -> SplitExecutor:
    """Create a SplitExecutor wired to the configured tools.

    Raises:
        ToolNotFoundError: If ffprobe (or ffmpeg, when required) is missing.
    """
    runner = ProcessRunner(
        reap_timeout=config.runner.reap_timeout,
        kill_after_grace=config.runner.kill_after_grace,
    )
    probe = FFprobeIntrospector(
        ffprobe_path=require_tool("ffprobe", config.tools.ffprobe),
        runner=runner,
        timeout=config.runner.probe_timeout,
    )
    if require_ffmpeg:
        ffmpeg_path = require_tool("ffmpeg", config.tools.ffmpeg)
    else:
        ffmpeg_path = resolve_tool("ffmpeg", config.tools.ffmpeg) or Path("ffmpeg")
    return SplitExecutor(probe=probe, runner=runner, ffmpeg_path=ffmpeg_path)


def build_split_options(
    config: VSplitConfig,
    *,
    quality: str | None = None,
    segment_duration: int | None = None,
    auto_output_dir: bool | None = None,
    bitrate: int | None = None,
    frame_rate: float | None = None,
    video_encoder: str | None = None,
    audio_encoder: str | None = None,
) -> SplitOptions:
    """Merge CLI options over the configured split defaults.

    Raises:
        ValueError: If the merged options are invalid.
    """
    defaults = config.split
    return SplitOptions(
        quality=quality if quality is not None else defaults.quality,
        segment_duration=(
            segment_duration
            if segment_duration is not None
            else defaults.segment_duration
        ),
        auto_output_dir=(
            auto_output_dir if auto_output_dir is not None else defaults.auto_output_dir
        ),
        video_encoder=video_encoder or defaults.video_encoder,
        audio_encoder=audio_encoder or defaults.audio_encoder,
        bitrate=bitrate,
        frame_rate=frame_rate,
    )


class _ProgressReporter:
    """Renders ffmpeg output as a progress bar or as raw lines."""

    def __init__(self, verbose: bool) -> None:
        self._verbose = verbose
        self._stack = contextlib.ExitStack()
        self._bar: Any = None
        self._position = 0
        self._duration: float | None = None
        self.segments = 0

    def __call__(self, line: str) -> None:
        segment = parse_segment_opened(line)
        if segment is not None:
            self.segments += 1
            logger.debug("Segment %d: %s", self.segments, segment)

        if self._verbose:
            click.echo(line, err=True)
            return

        if self._duration is None:
            duration = parse_input_duration(line)
            if duration:
                self._duration = duration
                self._bar = self._stack.enter_context(
                    click.progressbar(length=100, label="Splitting", show_percent=True)
                )
            return

        progress = parse_stderr_progress(line)
        if progress is None or self._bar is None:
            return
        percent = int(progress.get_percent(self._duration))
        if percent > self._position:
            self._bar.update(percent - self._position)
            self._position = percent

    def close(self) -> None:
        self._stack.close()


@contextlib.contextmanager
def _cancel_on_sigint(context: CancellableContext) -> Iterator[None]:
    """Turn Ctrl+C into a cancellation request for the duration."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum: int, frame: FrameType | None) -> None:
        logger.info("Interrupt received, cancelling split")
        context.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


@click.command("split")
@click.argument("input_file", type=click.Path(path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: ./output).",
)
@click.option(
    "--quality",
    "-q",
    type=click.Choice(QUALITY_CHOICES, case_sensitive=False),
    default=None,
    help="Quality ceiling (default: none).",
)
@click.option(
    "--segment-duration",
    type=click.IntRange(min=1),
    default=None,
    help="Target segment length in seconds (default: 10).",
)
@click.option(
    "--auto-dir/--no-auto-dir",
    "auto_output_dir",
    default=None,
    help="Write into a new unique subdirectory of the output directory.",
)
@click.option(
    "--bitrate",
    type=click.IntRange(min=MIN_BITRATE),
    default=None,
    help="Override the quality tier's video bitrate ceiling (bits/s, min 1024).",
)
@click.option(
    "--frame-rate",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Override the quality tier's framerate ceiling.",
)
@click.option("--video-encoder", default=None, help="Video encoder (default: libx264).")
@click.option("--audio-encoder", default=None, help="Audio encoder (default: aac).")
@click.option("--verbose", "-v", is_flag=True, help="Print ffmpeg output lines.")
@click.pass_context
def split_command(
    ctx: click.Context,
    input_file: Path,
    output_dir: Path | None,
    quality: str | None,
    segment_duration: int | None,
    auto_output_dir: bool | None,
    bitrate: int | None,
    frame_rate: float | None,
    video_encoder: str | None,
    audio_encoder: str | None,
    verbose: bool,
) -> None:
    """Split INPUT_FILE into an HLS playlist and segments."""
    config = get_cli_config(ctx)

    try:
        options = build_split_options(
            config,
            quality=quality,
            segment_duration=segment_duration,
            auto_output_dir=auto_output_dir,
            bitrate=bitrate,
            frame_rate=frame_rate,
            video_encoder=video_encoder,
            audio_encoder=audio_encoder,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.INVALID_OPTIONS)

    try:
        executor = build_executor(config)
    except VSplitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))

    context = CancellableContext()
    reporter = _ProgressReporter(verbose)
    try:
        with _cancel_on_sigint(context):
            result = executor.split(
                input_file,
                output_dir or config.split.output_dir,
                options,
                context=context,
                progress_callback=reporter,
            )
    finally:
        reporter.close()

    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if result.status is SplitStatus.SUCCEEDED:
        click.echo(f"Playlist: {result.playlist_path}")
        if reporter.segments:
            click.echo(f"Segments: {reporter.segments}")
        return

    if result.status is SplitStatus.CANCELLED:
        click.echo("Split cancelled.", err=True)
        sys.exit(ExitCode.INTERRUPTED)

    click.echo(f"Error: {result.error_message}", err=True)
    if result.output and not verbose:
        click.echo(result.output, err=True)
    sys.exit(exit_code_for(result.error))
