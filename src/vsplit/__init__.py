"""vsplit - split media files into HLS playlists with ffmpeg."""

from vsplit.core.quality import QualityCeiling
from vsplit.executor import SplitExecutor, SplitOptions, SplitResult, SplitStatus, split
from vsplit.runner import CancellableContext

__version__ = "0.1.0"

__all__ = [
    "CancellableContext",
    "QualityCeiling",
    "SplitExecutor",
    "SplitOptions",
    "SplitResult",
    "SplitStatus",
    "__version__",
    "split",
]
