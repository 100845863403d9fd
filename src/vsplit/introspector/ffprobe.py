"""FFprobe-based media introspection."""

import json
import logging
from pathlib import Path

from vsplit.exceptions import (
    InputError,
    MediaIntrospectionError,
    ProcessExitError,
    ProcessTimeoutError,
)
from vsplit.introspector.parsers import parse_ffprobe_output
from vsplit.introspector.types import FormatDescriptor
from vsplit.runner import ProcessRunner
from vsplit.tools import require_tool

logger = logging.getLogger(__name__)

# Default ffprobe timeout in seconds
DEFAULT_PROBE_TIMEOUT = 60.0


class FFprobeIntrospector:
    """Media introspector using ffprobe.

    Runs ffprobe as a buffered child process and parses its JSON output.
    """

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        runner: ProcessRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: ffprobe executable. Looked up on PATH if None.
            runner: Process runner. A default runner is created if None.
            timeout: Seconds before ffprobe is abandoned.

        Raises:
            ToolNotFoundError: If ffprobe cannot be found.
        """
        self._ffprobe_path = ffprobe_path or require_tool("ffprobe")
        self._runner = runner or ProcessRunner()
        self._timeout = timeout if timeout is not None else DEFAULT_PROBE_TIMEOUT

    @property
    def ffprobe_path(self) -> Path:
        return self._ffprobe_path

    @staticmethod
    def probe_args(path: Path) -> list[str]:
        """Return the ffprobe arguments used to probe a file."""
        return [
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

    def get_format(self, path: Path) -> FormatDescriptor:
        """Probe a media file.

        Raises:
            InputError: If the file does not exist.
            MediaIntrospectionError: If ffprobe fails or returns unusable
                output.
            ToolNotFoundError: If ffprobe disappeared since construction.
        """
        if not path.exists():
            raise InputError(f"File not found: {path}")

        args = self.probe_args(path)
        try:
            output = self._runner.run_buffered(
                self._ffprobe_path, args, timeout=self._timeout, combine_output=False
            )
        except ProcessTimeoutError as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out after {self._timeout}s for {path}",
                command=e.command,
                output=e.output,
            ) from e
        except ProcessExitError as e:
            detail = e.output.strip() or f"exit status {e.returncode}"
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {detail}",
                command=e.command,
                output=e.output,
            ) from e

        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe JSON for {path}: {e}",
                command=ProcessRunner.build_command(self._ffprobe_path, args),
                output=output,
            ) from e

        descriptor = parse_ffprobe_output(path, data)
        for warning in descriptor.warnings:
            logger.warning("%s: %s", path.name, warning)
        return descriptor
