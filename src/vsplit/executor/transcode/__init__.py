"""HLS splitting: planning, command assembly and execution."""

from .command import build_split_command
from .decisions import parse_bitrate, parse_frame_rate, plan_transcode
from .executor import SplitExecutor, split
from .types import (
    CodecAction,
    PlanOverrides,
    SplitOptions,
    SplitResult,
    SplitStatus,
    TranscodePlan,
)

__all__ = [
    "CodecAction",
    "PlanOverrides",
    "SplitExecutor",
    "SplitOptions",
    "SplitResult",
    "SplitStatus",
    "TranscodePlan",
    "build_split_command",
    "parse_bitrate",
    "parse_frame_rate",
    "plan_transcode",
    "split",
]
