"""HLS split executor.

SplitExecutor drives one split through PLANNING (validate, probe, plan)
and ENCODING (prepare the output directory, run ffmpeg) to a terminal
status. Failures are reported on the SplitResult rather than raised.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from pathlib import Path

from vsplit.exceptions import (
    InputError,
    MediaIntrospectionError,
    OperationCancelledError,
    ProcessError,
    VSplitError,
)
from vsplit.introspector import FFprobeIntrospector, FormatDescriptor, MediaIntrospector
from vsplit.logging import job_context
from vsplit.runner import CancellableContext, ProcessRunner
from vsplit.tools import require_tool

from .command import build_split_command
from .decisions import plan_transcode
from .types import SplitOptions, SplitResult, SplitStatus, TranscodePlan

_module_logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

# Parent of auto-created output directories when none is given
DEFAULT_OUTPUT_ROOT = Path("output")


def _has_whitespace(path: Path) -> bool:
    return any(ch.isspace() for ch in str(path))


class SplitExecutor:
    """Splits media files into HLS playlists with ffmpeg."""

    def __init__(
        self,
        probe: MediaIntrospector | None = None,
        runner: ProcessRunner | None = None,
        ffmpeg_path: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            probe: Introspector for input files. An FFprobeIntrospector is
                created on first use if None.
            runner: Process runner for ffmpeg.
            ffmpeg_path: ffmpeg executable. Looked up on PATH if None.
            logger: Logger for lifecycle messages.
        """
        self._logger = logger if logger is not None else _module_logger
        self._runner = runner or ProcessRunner()
        self._probe = probe
        self._ffmpeg_path = ffmpeg_path

    @property
    def probe(self) -> MediaIntrospector:
        if self._probe is None:
            self._probe = FFprobeIntrospector(runner=self._runner)
        return self._probe

    @property
    def ffmpeg_path(self) -> Path:
        """ffmpeg executable.

        Raises:
            ToolNotFoundError: If no path was given and ffmpeg is not on PATH.
        """
        if self._ffmpeg_path is None:
            self._ffmpeg_path = require_tool("ffmpeg")
        return self._ffmpeg_path

    def validate_input(self, input_path: Path, output_dir: Path | None = None) -> None:
        """Check that the input (and output directory) can be used.

        Raises:
            InputError: If a path contains whitespace or the input does not
                exist.
        """
        if _has_whitespace(input_path):
            raise InputError(f"Input path cannot contain whitespace: {input_path}")
        if output_dir is not None and _has_whitespace(output_dir):
            raise InputError(f"Output path cannot contain whitespace: {output_dir}")
        if not input_path.is_file():
            raise InputError(f"Input file not found: {input_path}")

    def plan(
        self, input_path: Path, options: SplitOptions | None = None
    ) -> tuple[FormatDescriptor, TranscodePlan]:
        """Probe and plan without encoding.

        Raises:
            InputError: If the input cannot be used.
            NotTranscodableError: If the input lacks the streams a split needs.
            MediaIntrospectionError: If probing fails.
            ProcessError: If ffprobe cannot be run.
        """
        options = options or SplitOptions()
        self.validate_input(input_path)
        descriptor = self.probe.get_format(input_path)
        plan = plan_transcode(
            descriptor,
            options.quality,
            options.overrides,
            video_encoder=options.video_encoder,
            audio_encoder=options.audio_encoder,
            logger=self._logger,
        )
        return descriptor, plan

    def resolve_output_dir(
        self, output_dir: Path | None, options: SplitOptions
    ) -> Path:
        """Return the directory a split writes into, without creating it."""
        if options.auto_output_dir:
            return (output_dir or DEFAULT_OUTPUT_ROOT) / str(uuid.uuid4())
        if output_dir is None:
            raise InputError(
                "An output directory is required when auto_output_dir is off"
            )
        return output_dir

    def split(
        self,
        input_path: Path,
        output_dir: Path | None = None,
        options: SplitOptions | None = None,
        *,
        context: CancellableContext | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> SplitResult:
        """Split a media file into an HLS playlist and segments.

        The split counts as one unit of work on the context for its whole
        duration, so context.wait() returns once split() has finished.

        Args:
            input_path: Source media file.
            output_dir: Output directory. With auto_output_dir (the default)
                a fresh subdirectory is created inside it ("output" if None).
            options: Split options. Defaults to SplitOptions().
            context: Cancellation token. A private one is used if None.
            progress_callback: Called with each line ffmpeg prints.

        Returns:
            SplitResult with a terminal status.
        """
        options = options or SplitOptions()
        context = context or CancellableContext(logger=self._logger)
        input_path = Path(input_path)
        output_dir = Path(output_dir) if output_dir is not None else None
        result = SplitResult(input_path=input_path)

        context.add(1)
        try:
            with job_context(input_file=input_path):
                self._run(
                    result, input_path, output_dir, options, context, progress_callback
                )
        finally:
            context.done()
        return result

    def _run(
        self,
        result: SplitResult,
        input_path: Path,
        output_dir: Path | None,
        options: SplitOptions,
        context: CancellableContext,
        progress_callback: ProgressCallback | None,
    ) -> None:
        self._logger.info("Planning split of %s", input_path)
        try:
            self.validate_input(input_path, output_dir)
            if context.cancelled:
                self._cancel(result, "Cancelled before probing")
                return
            descriptor, plan = self.plan(input_path, options)
        except VSplitError as e:
            if isinstance(e, (ProcessError, MediaIntrospectionError)):
                result.command = e.command
                result.output = e.output
            if context.cancelled:
                self._cancel(result, f"Cancelled while probing: {e}")
                return
            self._fail(result, str(e), e)
            return
        result.plan = plan
        result.warnings.extend(descriptor.warnings)

        if context.cancelled:
            self._cancel(result, "Cancelled before encoding")
            return

        self._transition(result, SplitStatus.ENCODING)
        try:
            ffmpeg_path = self.ffmpeg_path
            target_dir = self.resolve_output_dir(output_dir, options)
        except VSplitError as e:
            self._fail(result, str(e), e)
            return

        command = build_split_command(
            ffmpeg_path,
            input_path,
            target_dir,
            plan,
            segment_duration=options.segment_duration,
            playlist_name=options.playlist_name,
            segment_template=options.segment_template,
        )
        result.command = command
        result.output_dir = target_dir
        result.playlist_path = target_dir / options.playlist_name

        try:
            if options.auto_output_dir:
                target_dir.mkdir(parents=True, exist_ok=False)
            else:
                target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._fail(
                result, f"Could not create output directory {target_dir}: {e}", e
            )
            return
        self._logger.info("Writing HLS output to %s", target_dir)

        def sink(line: str) -> None:
            if progress_callback is not None:
                progress_callback(line)

        try:
            self._runner.run_streaming(context, command[0], command[1:], sink)
        except OperationCancelledError as e:
            result.output = e.output
            self._cancel(result, str(e))
            return
        except ProcessError as e:
            result.output = e.output
            self._fail(result, str(e), e)
            return

        self._transition(result, SplitStatus.SUCCEEDED)

    def _transition(self, result: SplitResult, status: SplitStatus) -> None:
        self._logger.info(
            "Split %s: %s -> %s",
            result.input_path.name,
            result.status.value,
            status.value,
        )
        result.status = status

    def _fail(
        self, result: SplitResult, message: str, error: Exception | None = None
    ) -> None:
        self._logger.error("Split failed for %s: %s", result.input_path, message)
        result.error_message = message
        result.error = error
        self._transition(result, SplitStatus.FAILED)

    def _cancel(self, result: SplitResult, message: str) -> None:
        result.error_message = message
        self._transition(result, SplitStatus.CANCELLED)


def split(
    input_path: Path,
    output_dir: Path | None = None,
    options: SplitOptions | None = None,
    *,
    context: CancellableContext | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SplitResult:
    """Split a media file with a default SplitExecutor."""
    return SplitExecutor().split(
        input_path,
        output_dir,
        options,
        context=context,
        progress_callback=progress_callback,
    )
