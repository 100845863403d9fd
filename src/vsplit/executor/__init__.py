"""Split execution."""

from vsplit.executor.transcode import (
    SplitExecutor,
    SplitOptions,
    SplitResult,
    SplitStatus,
    split,
)

__all__ = [
    "SplitExecutor",
    "SplitOptions",
    "SplitResult",
    "SplitStatus",
    "split",
]
