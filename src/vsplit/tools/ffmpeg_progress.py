"""Parsing of ffmpeg's stderr status lines.

ffmpeg reports encoding progress on stderr as lines of the form:

    frame= 1234 fps= 30 q=28.0 size=  2048kB time=00:01:23.45 speed=2.0x

The HLS muxer also logs "Opening '<segment>' for writing" as each segment
is started, which gives a segment count.
"""

import re
from dataclasses import dataclass


@dataclass
class FFmpegProgress:
    """One parsed ffmpeg status line."""

    frame: int | None = None
    fps: float | None = None
    bitrate: str | None = None
    out_time_us: int | None = None  # Output time in microseconds
    speed: str | None = None

    @property
    def out_time_seconds(self) -> float | None:
        """Output time in seconds."""
        if self.out_time_us is not None:
            return self.out_time_us / 1_000_000
        return None

    def get_percent(self, duration_seconds: float | None) -> float:
        """Progress as a percentage of the input duration.

        Returns:
            0.0 to 100.0, or 0.0 when either side is unknown.
        """
        if duration_seconds is None or duration_seconds <= 0:
            return 0.0
        out_time = self.out_time_seconds
        if out_time is None:
            return 0.0
        return min(100.0, (out_time / duration_seconds) * 100)


_FRAME = re.compile(r"frame=\s*(\d+)")
_FPS = re.compile(r"fps=\s*([\d.]+)")
_BITRATE = re.compile(r"bitrate=\s*(\S+)")
_SPEED = re.compile(r"speed=\s*(\S+)")
_TIME = re.compile(r"time=\s*(-?)(\d+):(\d+):(\d+)(?:\.(\d+))?")
_SEGMENT = re.compile(r"Opening '([^']+\.ts)' for writing")
_DURATION = re.compile(r"^\s*Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")


def _na(value: str) -> str | None:
    return None if value == "N/A" else value


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse an ffmpeg stderr status line.

    Args:
        line: One line of ffmpeg output.

    Returns:
        FFmpegProgress, or None if the line is not a status line.
    """
    if "frame=" not in line:
        return None

    result = FFmpegProgress()
    if match := _FRAME.search(line):
        result.frame = int(match.group(1))
    if match := _FPS.search(line):
        try:
            result.fps = float(match.group(1))
        except ValueError:
            pass
    if match := _BITRATE.search(line):
        result.bitrate = _na(match.group(1))
    if match := _SPEED.search(line):
        result.speed = _na(match.group(1))

    time_match = _TIME.search(line)
    if time_match and not time_match.group(1):
        hours, minutes, seconds = (int(g) for g in time_match.group(2, 3, 4))
        fraction = time_match.group(5) or "0"
        micros = int(fraction[:6].ljust(6, "0"))
        whole_seconds = hours * 3600 + minutes * 60 + seconds
        result.out_time_us = whole_seconds * 1_000_000 + micros

    return result


def parse_segment_opened(line: str) -> str | None:
    """Return the segment path if the line reports a new HLS segment."""
    match = _SEGMENT.search(line)
    return match.group(1) if match else None


def parse_input_duration(line: str) -> float | None:
    """Return the input duration in seconds from ffmpeg's "Duration:" line."""
    match = _DURATION.search(line)
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    return hours * 3600 + minutes * 60 + float(match.group(3))
