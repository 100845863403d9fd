"""Conversion of validated ffprobe output into domain descriptors."""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vsplit.exceptions import MediaIntrospectionError
from vsplit.introspector.schema import FFprobeOutput, FFprobeStream
from vsplit.introspector.types import FormatDescriptor, StreamDescriptor, StreamKind

logger = logging.getLogger(__name__)

_STREAM_KINDS = {
    "video": StreamKind.VIDEO,
    "audio": StreamKind.AUDIO,
}


def parse_duration(value: str | None) -> float | None:
    """Parse an ffprobe duration string to seconds.

    Returns None for missing, unparsable or negative values.
    """
    if value is None or value == "N/A":
        return None
    try:
        seconds = float(value)
    except ValueError:
        logger.warning("Unparsable duration: %r", value)
        return None
    if seconds < 0:
        return None
    return seconds


def map_stream_kind(codec_type: str | None) -> StreamKind:
    """Map ffprobe's codec_type to a StreamKind."""
    if codec_type is None:
        return StreamKind.OTHER
    return _STREAM_KINDS.get(codec_type.casefold(), StreamKind.OTHER)


def _frame_rate(stream: FFprobeStream) -> str | None:
    # r_frame_rate is the base rate; avg_frame_rate is a fallback for
    # containers that leave it at 0/0
    for value in (stream.r_frame_rate, stream.avg_frame_rate):
        if value and value not in ("0/0", "0/1"):
            return value
    return None


def parse_stream(stream: FFprobeStream) -> StreamDescriptor:
    """Convert one validated ffprobe stream into a StreamDescriptor."""
    kind = map_stream_kind(stream.codec_type)
    language = stream.tags.get("language")
    return StreamDescriptor(
        index=stream.index,
        kind=kind,
        codec=stream.codec_name,
        width=stream.width if kind is StreamKind.VIDEO else None,
        height=stream.height if kind is StreamKind.VIDEO else None,
        frame_rate=_frame_rate(stream) if kind is StreamKind.VIDEO else None,
        bit_rate=stream.bit_rate if stream.bit_rate not in (None, "N/A") else None,
        duration_seconds=parse_duration(stream.duration),
        start_time=parse_duration(stream.start_time),
        language=str(language) if language is not None else None,
        channels=stream.channels if kind is StreamKind.AUDIO else None,
        channel_layout=stream.channel_layout if kind is StreamKind.AUDIO else None,
        codec_type=stream.codec_type,
    )


def parse_ffprobe_output(path: Path, data: Any) -> FormatDescriptor:
    """Build a FormatDescriptor from decoded ffprobe JSON.

    Args:
        path: File that was probed.
        data: Decoded JSON document from ffprobe.

    Returns:
        FormatDescriptor with streams in ffprobe order.

    Raises:
        MediaIntrospectionError: If the document does not have the
            expected shape.
    """
    try:
        output = FFprobeOutput.model_validate(data)
    except ValidationError as e:
        raise MediaIntrospectionError(
            f"Unexpected ffprobe output for {path}: {e.error_count()} error(s)"
        ) from e

    warnings: list[str] = []
    streams: list[StreamDescriptor] = []
    seen: set[int] = set()
    for raw in output.streams:
        if raw.index in seen:
            warnings.append(f"Duplicate stream index {raw.index}")
        seen.add(raw.index)
        streams.append(parse_stream(raw))

    if not any(s.kind is StreamKind.VIDEO for s in streams):
        warnings.append("No video stream found")

    fmt = output.format
    return FormatDescriptor(
        path=path,
        format_name=fmt.format_name,
        duration_seconds=parse_duration(fmt.duration),
        bit_rate=fmt.bit_rate if fmt.bit_rate not in (None, "N/A") else None,
        streams=tuple(streams),
        warnings=tuple(warnings),
    )
