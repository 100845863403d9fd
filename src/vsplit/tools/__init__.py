"""External tool lookup and output parsing."""

from vsplit.tools.detection import TOOL_HINTS, require_tool, resolve_tool
from vsplit.tools.ffmpeg_progress import (
    FFmpegProgress,
    parse_input_duration,
    parse_segment_opened,
    parse_stderr_progress,
)

__all__ = [
    "FFmpegProgress",
    "TOOL_HINTS",
    "parse_input_duration",
    "parse_segment_opened",
    "parse_stderr_progress",
    "require_tool",
    "resolve_tool",
]
