"""MediaIntrospector interface for stream probing."""

from pathlib import Path
from typing import Protocol

from vsplit.introspector.types import FormatDescriptor


class MediaIntrospector(Protocol):
    """Protocol for media probing implementations.

    The split executor only depends on this protocol, so tests can hand it
    a stub instead of running ffprobe.
    """

    def get_format(self, path: Path) -> FormatDescriptor:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            FormatDescriptor describing the container and its streams.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        ...
