"""Exception hierarchy for vsplit.

All errors raised by vsplit derive from VSplitError so callers can catch
the whole family with one clause:

- InputError: the input file or its path cannot be used
- NotTranscodableError: the probed file lacks the streams a split needs
- MediaIntrospectionError: ffprobe failed or produced unusable output
- ProcessError: an external tool could not be run to a clean exit
"""

from __future__ import annotations


class VSplitError(Exception):
    """Base class for all vsplit errors."""

    pass


class InputError(VSplitError):
    """Raised when an input path is unusable (missing, malformed)."""

    pass


class NotTranscodableError(InputError):
    """Raised when a file is not a transcodable media file."""

    pass


class MediaIntrospectionError(VSplitError):
    """Raised when media introspection fails.

    Attributes:
        command: The ffprobe argument vector, when ffprobe was run.
        output: Diagnostic output captured from ffprobe, if any.
    """

    def __init__(
        self,
        message: str,
        command: tuple[str, ...] = (),
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
        self.output = output


class ProcessError(VSplitError):
    """Raised when an external process fails.

    Attributes:
        command: The exact argument vector that was (or would have been) run.
        output: Diagnostic output captured from the process, if any.
    """

    def __init__(
        self,
        message: str,
        command: tuple[str, ...] = (),
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
        self.output = output


class ToolNotFoundError(ProcessError):
    """Raised when an executable cannot be located."""

    pass


class ProcessStartError(ProcessError):
    """Raised when a process cannot be launched (pipe setup, permissions)."""

    pass


class ProcessTimeoutError(ProcessError):
    """Raised when a buffered run exceeds its timeout."""

    pass


class ProcessExitError(ProcessError):
    """Raised when a process exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        returncode: int,
        command: tuple[str, ...] = (),
        output: str = "",
    ) -> None:
        super().__init__(message, command=command, output=output)
        self.returncode = returncode


class OperationCancelledError(ProcessError):
    """Raised when a run stops because cancellation was requested.

    Kept distinct from the failure errors so callers can tell
    "I asked it to stop" from "it broke".
    """

    pass
