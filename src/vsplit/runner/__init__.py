"""Process supervision for external tools.

- CancellableContext: cooperative cancellation and completion tracking
- ProcessRunner: buffered and streaming execution of external commands
"""

from vsplit.runner.context import CancellableContext, OperationState
from vsplit.runner.process import LineSink, ProcessRunner

__all__ = [
    "CancellableContext",
    "LineSink",
    "OperationState",
    "ProcessRunner",
]
