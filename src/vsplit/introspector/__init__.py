"""Media introspection: probing a file's container and streams."""

from vsplit.introspector.ffprobe import FFprobeIntrospector
from vsplit.introspector.interface import MediaIntrospector
from vsplit.introspector.parsers import parse_ffprobe_output
from vsplit.introspector.stub import StubIntrospector
from vsplit.introspector.types import (
    VIDEO_EXTENSIONS,
    FormatDescriptor,
    StreamDescriptor,
    StreamKind,
)

__all__ = [
    "FFprobeIntrospector",
    "FormatDescriptor",
    "MediaIntrospector",
    "StreamDescriptor",
    "StreamKind",
    "StubIntrospector",
    "VIDEO_EXTENSIONS",
    "parse_ffprobe_output",
]
