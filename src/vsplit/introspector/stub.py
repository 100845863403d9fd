"""In-memory introspector for tests and dry runs."""

from pathlib import Path

from vsplit.exceptions import MediaIntrospectionError
from vsplit.introspector.types import FormatDescriptor


class StubIntrospector:
    """Returns preset descriptors instead of running ffprobe."""

    def __init__(self, descriptors: dict[Path, FormatDescriptor] | None = None) -> None:
        self._descriptors = dict(descriptors or {})
        self.calls: list[Path] = []

    def add(self, descriptor: FormatDescriptor) -> None:
        """Register a descriptor under its own path."""
        self._descriptors[descriptor.path] = descriptor

    def get_format(self, path: Path) -> FormatDescriptor:
        self.calls.append(path)
        try:
            return self._descriptors[path]
        except KeyError:
            raise MediaIntrospectionError(f"No stub descriptor for {path}") from None
