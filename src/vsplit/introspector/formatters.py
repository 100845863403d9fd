"""Formatters for probed media descriptors.

Human-readable and JSON renderings of a FormatDescriptor, used by the
``vsplit inspect`` command.
"""

import json
from typing import Any

from vsplit.introspector.types import FormatDescriptor, StreamDescriptor, StreamKind


def format_human(descriptor: FormatDescriptor) -> str:
    """Format a descriptor for terminal output."""
    lines: list[str] = [f"File: {descriptor.path}"]
    if descriptor.format_name:
        lines.append(f"Container: {descriptor.format_name.split(',')[0]}")
    if descriptor.duration_seconds is not None:
        lines.append(f"Duration: {format_duration(descriptor.duration_seconds)}")
    if descriptor.bit_rate:
        lines.append(f"Bitrate: {format_bit_rate(descriptor.bit_rate)}")
    lines.append("")
    lines.append("Streams:")

    for stream in descriptor.streams:
        lines.append(f"  {format_stream_line(stream)}")
    if not descriptor.streams:
        lines.append("  (no streams found)")

    if descriptor.warnings:
        lines.append("")
        lines.append("Warnings:")
        for warning in descriptor.warnings:
            lines.append(f"  - {warning}")

    return "\n".join(lines)


def format_stream_line(stream: StreamDescriptor) -> str:
    """Format a single stream for human output."""
    parts = [f"#{stream.index}", f"[{stream.codec_type or stream.kind.value}]"]
    if stream.codec:
        parts.append(stream.codec)

    if stream.kind is StreamKind.VIDEO:
        if stream.width and stream.height:
            parts.append(f"{stream.width}x{stream.height}")
        if stream.frame_rate:
            fps = frame_rate_to_fps(stream.frame_rate)
            if fps:
                parts.append(f"@ {fps}fps")

    if stream.kind is StreamKind.AUDIO and stream.channel_layout:
        parts.append(stream.channel_layout)

    if stream.bit_rate:
        parts.append(format_bit_rate(stream.bit_rate))

    if stream.language and stream.language != "und":
        parts.append(stream.language)

    return " ".join(parts)


def frame_rate_to_fps(frame_rate: str) -> str | None:
    """Convert a "num/den" or decimal frame rate to a short decimal string.

    Returns:
        e.g. "23.976" or "30", or None if the value cannot be parsed.
    """
    try:
        if "/" in frame_rate:
            num, denom = frame_rate.split("/")
            fps = int(num) / int(denom)
        else:
            fps = float(frame_rate)
    except (ValueError, ZeroDivisionError):
        return None

    if fps == int(fps):
        return str(int(fps))
    return f"{fps:.3f}".rstrip("0").rstrip(".")


def format_bit_rate(bit_rate: str) -> str:
    """Render a bits-per-second value in kb/s, or as-is if not numeric."""
    try:
        return f"{int(bit_rate) // 1000} kb/s"
    except ValueError:
        return bit_rate


def format_duration(seconds: float) -> str:
    """Render seconds as H:MM:SS.ss."""
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}:{minutes:02d}:{secs:05.2f}"


def stream_to_dict(stream: StreamDescriptor) -> dict[str, Any]:
    """Convert a stream to a JSON-serializable dictionary."""
    data: dict[str, Any] = {
        "index": stream.index,
        "kind": stream.kind.value,
        "codec": stream.codec,
    }
    if stream.kind is StreamKind.VIDEO:
        data["width"] = stream.width
        data["height"] = stream.height
        data["frame_rate"] = stream.frame_rate
    if stream.kind is StreamKind.AUDIO:
        data["channels"] = stream.channels
        data["channel_layout"] = stream.channel_layout
    data["bit_rate"] = stream.bit_rate
    data["duration_seconds"] = stream.duration_seconds
    data["language"] = stream.language
    return data


def descriptor_to_dict(descriptor: FormatDescriptor) -> dict[str, Any]:
    """Convert a descriptor to a JSON-serializable dictionary."""
    return {
        "file": str(descriptor.path),
        "is_video": descriptor.is_video,
        "format_name": descriptor.format_name,
        "duration_seconds": descriptor.duration_seconds,
        "bit_rate": descriptor.bit_rate,
        "streams": [stream_to_dict(s) for s in descriptor.streams],
        "warnings": list(descriptor.warnings),
    }


def format_json(descriptor: FormatDescriptor) -> str:
    """Format a descriptor as indented JSON."""
    return json.dumps(descriptor_to_dict(descriptor), indent=2)
