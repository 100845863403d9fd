"""Probed media descriptors.

These are the domain objects produced by introspection and consumed by
the planner. They are immutable once probed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Container extensions treated as video files
VIDEO_EXTENSIONS: frozenset[str] = frozenset(
    {
        "3gp",
        "avi",
        "flv",
        "m2ts",
        "m4v",
        "mkv",
        "mov",
        "mp4",
        "mpeg",
        "mpg",
        "mts",
        "ogv",
        "rm",
        "rmvb",
        "ts",
        "vob",
        "webm",
        "wmv",
    }
)


class StreamKind(Enum):
    """Kind of elementary stream."""

    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


@dataclass(frozen=True)
class StreamDescriptor:
    """One elementary stream as reported by ffprobe."""

    index: int
    kind: StreamKind
    codec: str | None = None
    width: int | None = None
    height: int | None = None
    frame_rate: str | None = None  # "num/den", kept as text to stay exact
    bit_rate: str | None = None  # raw ffprobe value; absent means unknown
    duration_seconds: float | None = None
    start_time: float | None = None
    language: str | None = None
    channels: int | None = None
    channel_layout: str | None = None
    codec_type: str | None = None


@dataclass(frozen=True)
class FormatDescriptor:
    """Container-level metadata plus the ordered streams."""

    path: Path
    format_name: str | None = None
    duration_seconds: float | None = None
    bit_rate: str | None = None
    streams: tuple[StreamDescriptor, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def filename(self) -> str:
        """Base name of the probed file."""
        return self.path.name

    @property
    def video(self) -> StreamDescriptor | None:
        """First video stream, if any."""
        return next((s for s in self.streams if s.kind is StreamKind.VIDEO), None)

    @property
    def audio(self) -> StreamDescriptor | None:
        """First audio stream, if any."""
        return next((s for s in self.streams if s.kind is StreamKind.AUDIO), None)

    @property
    def is_video(self) -> bool:
        """True if the file extension names a video container."""
        return self.path.suffix.lstrip(".").casefold() in VIDEO_EXTENSIONS
