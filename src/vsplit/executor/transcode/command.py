"""FFmpeg command assembly for HLS splitting.

The argument vector is built from ordered option groups: input, codecs,
bitstream filter, optional scaling/rate limits, then the HLS muxer with
the playlist path last.
"""

from __future__ import annotations

from pathlib import Path

from .types import DEFAULT_PLAYLIST_NAME, DEFAULT_SEGMENT_TEMPLATE, TranscodePlan


def build_input_args(input_path: Path) -> tuple[str, ...]:
    # -strict -2 enables the experimental native aac encoder on old builds
    return ("-y", "-i", str(input_path), "-strict", "-2")


def build_codec_args(plan: TranscodePlan) -> tuple[str, ...]:
    args = ("-c:v", plan.video.ffmpeg_value, "-c:a", plan.audio.ffmpeg_value)
    if plan.video.family == "h264":
        # MPEG-TS segments need Annex B framing
        args += ("-bsf:v", "h264_mp4toannexb")
    return args


def build_limit_args(plan: TranscodePlan) -> tuple[str, ...]:
    """Scaling, bitrate and framerate arguments (empty for a copy)."""
    args: tuple[str, ...] = ()
    if plan.scale_height is not None:
        args += ("-vf", f"scale=-2:{plan.scale_height}")
    if plan.bitrate is not None:
        args += ("-b:v", f"{plan.bitrate // 1024}K")
    if plan.frame_rate is not None:
        args += ("-r", f"{plan.frame_rate:.2f}")
    return args


def build_hls_args(
    output_dir: Path,
    segment_duration: int,
    playlist_name: str = DEFAULT_PLAYLIST_NAME,
    segment_template: str = DEFAULT_SEGMENT_TEMPLATE,
) -> tuple[str, ...]:
    return (
        "-f",
        "hls",
        "-hls_list_size",
        "0",
        "-hls_time",
        str(segment_duration),
        "-hls_segment_filename",
        str(output_dir / segment_template),
        str(output_dir / playlist_name),
    )


def build_split_command(
    ffmpeg_path: str | Path,
    input_path: Path,
    output_dir: Path,
    plan: TranscodePlan,
    *,
    segment_duration: int,
    playlist_name: str = DEFAULT_PLAYLIST_NAME,
    segment_template: str = DEFAULT_SEGMENT_TEMPLATE,
) -> tuple[str, ...]:
    """Build the full ffmpeg argument vector for a split.

    Args:
        ffmpeg_path: ffmpeg executable.
        input_path: Source media file.
        output_dir: Directory receiving the playlist and segments.
        plan: Transcode decisions for the source.
        segment_duration: Target segment length in seconds.
        playlist_name: Playlist file name inside output_dir.
        segment_template: Segment file name template inside output_dir.

    Returns:
        Immutable argument vector, executable first.
    """
    return (
        str(ffmpeg_path),
        *build_input_args(input_path),
        *build_codec_args(plan),
        *build_limit_args(plan),
        *build_hls_args(output_dir, segment_duration, playlist_name, segment_template),
    )
