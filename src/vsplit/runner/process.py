"""External process runner with buffered and streaming modes.

run_buffered() runs a tool to completion and returns its output.
run_streaming() delivers merged stdout/stderr line by line while the tool
runs, under a CancellableContext. A reader thread feeds a bounded queue;
the calling thread blocks on that queue and reacts to whichever arrives
first: a line, end of output, or the cancellation wake-up marker.
"""

from __future__ import annotations

import logging
import queue
import shlex
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import threading
from collections import deque
from collections.abc import Callable, Sequence
from pathlib import Path

from vsplit.exceptions import (
    OperationCancelledError,
    ProcessExitError,
    ProcessStartError,
    ProcessTimeoutError,
    ToolNotFoundError,
)
from vsplit.runner.context import CancellableContext

LineSink = Callable[[str], None]

# Queue markers
_END = object()
_CANCELLED = object()


def _tool_name(command: Sequence[str]) -> str:
    return Path(command[0]).name if command else "unknown"


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class ProcessRunner:
    """Runs external commands and supervises their lifetime.

    Each invocation owns its child process and pipes exclusively; nothing is
    shared between invocations except an intentionally shared context.
    """

    LINE_QUEUE_SIZE: int = 1024
    DEFAULT_REAP_TIMEOUT: float = 5.0
    READER_JOIN_TIMEOUT: float = 2.0
    EXIT_POLL_INTERVAL: float = 0.5
    OUTPUT_TAIL_LINES: int = 50

    def __init__(
        self,
        logger: logging.Logger | None = None,
        reap_timeout: float | None = None,
        kill_after_grace: bool = False,
    ) -> None:
        """Initialize the runner.

        Args:
            logger: Logger for diagnostics. Defaults to this module's logger.
            reap_timeout: Seconds to wait for a cancelled child to exit.
                None uses DEFAULT_REAP_TIMEOUT.
            kill_after_grace: Kill a cancelled child that is still running
                after reap_timeout. When False the runner logs a warning and
                stops waiting instead.
        """
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._reap_timeout = (
            reap_timeout if reap_timeout is not None else self.DEFAULT_REAP_TIMEOUT
        )
        self._kill_after_grace = kill_after_grace

    @staticmethod
    def build_command(name: str | Path, args: Sequence[str | Path]) -> tuple[str, ...]:
        """Return the argument vector for a tool and its arguments."""
        return (str(name), *(str(arg) for arg in args))

    def run_buffered(
        self,
        name: str | Path,
        args: Sequence[str | Path],
        *,
        timeout: float | None = None,
        combine_output: bool = True,
    ) -> str:
        """Run a command to completion.

        Args:
            name: Executable name or path.
            args: Arguments passed to the executable.
            timeout: Seconds before the child is killed. None waits forever.
            combine_output: Merge stderr into the returned output. When False
                only stdout is returned and stderr is attached to errors.

        Returns:
            The captured output.

        Raises:
            ToolNotFoundError: If the executable does not exist.
            ProcessStartError: If the process cannot be launched.
            ProcessTimeoutError: If the timeout expires.
            ProcessExitError: If the process exits non-zero. The error carries
                whatever output was captured.
        """
        command = self.build_command(name, args)
        self._logger.info("Running: %s", shlex.join(command))

        try:
            result = subprocess.run(  # nosec B603 - argv list, no shell
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if combine_output else subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"Executable not found: {name}", command=command
            ) from e
        except subprocess.TimeoutExpired as e:
            # subprocess.run() kills the child before raising
            raise ProcessTimeoutError(
                f"{_tool_name(command)} timed out after {timeout}s",
                command=command,
                output=_decode(e.output),
            ) from e
        except OSError as e:
            raise ProcessStartError(
                f"Could not start {_tool_name(command)}: {e}", command=command
            ) from e

        output = result.stdout or ""
        if result.returncode != 0:
            diagnostic = output if combine_output else (result.stderr or "")
            self._logger.debug(
                "%s exited with status %d", _tool_name(command), result.returncode
            )
            raise ProcessExitError(
                f"{_tool_name(command)} exited with status {result.returncode}",
                returncode=result.returncode,
                command=command,
                output=diagnostic,
            )
        return output

    def run_streaming(
        self,
        context: CancellableContext,
        name: str | Path,
        args: Sequence[str | Path],
        line_sink: LineSink,
    ) -> None:
        """Run a command, delivering each non-blank output line as it arrives.

        stdout and stderr are merged. Lines reach line_sink in the order the
        child wrote them. The call is tracked as one unit of work on context.

        Exactly one outcome is reported: a normal return (exit status 0), the
        process error, or OperationCancelledError. Once output has ended or
        the child has exited, every buffered line is delivered before the
        outcome, and a cancellation requested after that point does not
        change it.

        Args:
            context: Cancellation/completion token for the job.
            name: Executable name or path.
            args: Arguments passed to the executable.
            line_sink: Called with each non-blank line (newline stripped).

        Raises:
            OperationCancelledError: If cancellation was observed first,
                including cancellation before the process was started.
            ToolNotFoundError: If the executable does not exist.
            ProcessStartError: If the process or its pipes cannot be set up.
            ProcessExitError: If the process exits non-zero.
        """
        command = self.build_command(name, args)
        if context.cancelled:
            raise OperationCancelledError(
                f"{_tool_name(command)} cancelled before start", command=command
            )

        context.add(1)
        try:
            self._stream(context, command, line_sink)
        finally:
            context.done()

    def _stream(
        self,
        context: CancellableContext,
        command: tuple[str, ...],
        line_sink: LineSink,
    ) -> None:
        tool = _tool_name(command)
        self._logger.info("Running: %s", shlex.join(command))

        try:
            process = subprocess.Popen(  # nosec B603 - argv list, no shell
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"Executable not found: {command[0]}", command=command
            ) from e
        except OSError as e:
            raise ProcessStartError(
                f"Could not start {tool}: {e}", command=command
            ) from e

        lines: queue.Queue[object] = queue.Queue(maxsize=self.LINE_QUEUE_SIZE)
        stop_event = threading.Event()
        output_ended = threading.Event()
        captured: deque[str] = deque(maxlen=self.OUTPUT_TAIL_LINES)

        reader = threading.Thread(
            target=self._read_output,
            args=(process, lines, stop_event, output_ended),
            name=f"{tool}-output-reader",
            daemon=True,
        )
        reader.start()

        def wake() -> None:
            try:
                lines.put_nowait(_CANCELLED)
            except queue.Full:
                # The consumer checks context.cancelled after every dequeue
                pass

        remove_callback = context.add_cancel_callback(wake)
        returncode: int | None = None
        try:
            if not self._pump(
                context, process, lines, output_ended, line_sink, captured
            ):
                returncode = self._wait_for_exit(context, process)
            if returncode is None:
                self._logger.info("%s (pid %d) cancelled", tool, process.pid)
                stop_event.set()
                self._reap(process)
        except BaseException:
            # Sink failure or interrupt: release the child before propagating
            stop_event.set()
            self._reap(process)
            raise
        finally:
            remove_callback()
            self._release(process, reader, stop_event)

        if returncode is None:
            raise OperationCancelledError(
                f"{tool} cancelled", command=command, output="\n".join(captured)
            )

        if returncode != 0:
            self._logger.error("%s exited with status %d", tool, returncode)
            raise ProcessExitError(
                f"{tool} exited with status {returncode}",
                returncode=returncode,
                command=command,
                output="\n".join(captured),
            )
        self._logger.debug("%s exited cleanly", tool)

    def _pump(
        self,
        context: CancellableContext,
        process: subprocess.Popen[str],
        lines: queue.Queue[object],
        output_ended: threading.Event,
        line_sink: LineSink,
        captured: deque[str],
    ) -> bool:
        """Deliver queued lines until output ends or cancellation wins.

        A cancellation seen after the child has exited does not stop the
        drain: the remaining output is delivered and the real exit status
        is reported.

        Returns:
            True if cancellation was observed while the child was running.
        """
        while True:
            item = lines.get()
            if item is _END:
                return False
            if item is _CANCELLED or context.cancelled:
                if not output_ended.is_set() and process.poll() is None:
                    return True
                if item is _CANCELLED:
                    continue
            line = str(item)
            captured.append(line)
            self._logger.debug("%s", line)
            line_sink(line)

    def _wait_for_exit(
        self, context: CancellableContext, process: subprocess.Popen[str]
    ) -> int | None:
        """Wait for a process whose output has ended.

        Returns:
            The exit status, or None if cancellation arrived while the child
            was still running.
        """
        while True:
            try:
                return process.wait(timeout=self.EXIT_POLL_INTERVAL)
            except subprocess.TimeoutExpired:
                if context.cancelled:
                    return None

    def _read_output(
        self,
        process: subprocess.Popen[str],
        lines: queue.Queue[object],
        stop_event: threading.Event,
        output_ended: threading.Event,
    ) -> None:
        """Read output lines into the queue (runs on the reader thread)."""
        try:
            assert process.stdout is not None
            for raw in process.stdout:
                if stop_event.is_set():
                    break
                line = raw.rstrip("\r\n")
                if not line.strip():
                    continue
                self._put(lines, line, stop_event)
        except (ValueError, OSError) as e:
            # A failed read ends the stream; captured lines are still delivered
            self._logger.debug("Output reader stopped: %s", e)
        finally:
            output_ended.set()
            self._put(lines, _END, stop_event)

    @staticmethod
    def _put(
        lines: queue.Queue[object], item: object, stop_event: threading.Event
    ) -> None:
        while not stop_event.is_set():
            try:
                lines.put(item, timeout=0.1)
                return
            except queue.Full:
                continue

    def _reap(self, process: subprocess.Popen[str]) -> None:
        """Ask a child to terminate and wait a bounded time for it to exit."""
        if process.poll() is not None:
            return

        try:
            process.terminate()
        except OSError as e:
            self._logger.debug("terminate() failed for pid %d: %s", process.pid, e)

        try:
            process.wait(timeout=self._reap_timeout)
            return
        except subprocess.TimeoutExpired:
            pass

        if not self._kill_after_grace:
            self._logger.warning(
                "Process %d did not exit within %.1fs of cancellation; "
                "no longer waiting for it",
                process.pid,
                self._reap_timeout,
            )
            return

        self._logger.warning(
            "Process %d did not exit within %.1fs, killing",
            process.pid,
            self._reap_timeout,
        )
        process.kill()
        try:
            process.wait(timeout=self._reap_timeout)
        except subprocess.TimeoutExpired:
            self._logger.error("Process %d survived kill; abandoning", process.pid)

    def _release(
        self,
        process: subprocess.Popen[str],
        reader: threading.Thread,
        stop_event: threading.Event,
    ) -> None:
        """Join the reader thread and close the output pipe."""
        if process.poll() is None:
            # Child still running (cancel path); the reader may be mid-read
            stop_event.set()
            return

        reader.join(timeout=self.READER_JOIN_TIMEOUT)
        if reader.is_alive():
            self._logger.error(
                "Output reader for pid %d failed to stop; thread abandoned",
                process.pid,
            )
            return
        if process.stdout is not None:
            process.stdout.close()
