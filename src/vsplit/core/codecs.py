"""Codec alias groups and encoder families.

Single source of truth for deciding whether a probed codec already
belongs to the family an encoder produces, which is what decides between
stream copy and re-encode.
"""

from __future__ import annotations

VIDEO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "hevc": frozenset({"hevc", "h265", "h.265", "x265", "hvc1", "hev1"}),
    "h265": frozenset({"hevc", "h265", "h.265", "x265", "hvc1", "hev1"}),
    "h264": frozenset({"h264", "h.264", "avc", "avc1", "x264"}),
    "avc": frozenset({"h264", "h.264", "avc", "avc1", "x264"}),
    "vp9": frozenset({"vp9", "vp09"}),
    "av1": frozenset({"av1", "av01", "libaom-av1"}),
    "mpeg4": frozenset({"mpeg4", "mp4v"}),
}

AUDIO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "aac": frozenset({"aac", "aac_latm", "mp4a"}),
    "ac3": frozenset({"ac3", "ac-3", "a52"}),
    "eac3": frozenset({"eac3", "e-ac-3", "ec3"}),
    "opus": frozenset({"opus"}),
    "mp3": frozenset({"mp3", "mp3float"}),
    "flac": frozenset({"flac"}),
    "vorbis": frozenset({"vorbis"}),
}

# ffmpeg encoder name -> codec family it produces
ENCODER_FAMILIES: dict[str, str] = {
    "libx264": "h264",
    "h264_nvenc": "h264",
    "h264_qsv": "h264",
    "h264_vaapi": "h264",
    "h264_videotoolbox": "h264",
    "libx265": "hevc",
    "hevc_nvenc": "hevc",
    "hevc_qsv": "hevc",
    "libvpx-vp9": "vp9",
    "libaom-av1": "av1",
    "libsvtav1": "av1",
    "aac": "aac",
    "libfdk_aac": "aac",
    "ac3": "ac3",
    "eac3": "eac3",
    "libopus": "opus",
    "libmp3lame": "mp3",
    "flac": "flac",
    "libvorbis": "vorbis",
}


def encoder_family(encoder: str) -> str:
    """Return the codec family an encoder produces.

    Unknown encoders are assumed to be named after their codec.
    """
    return ENCODER_FAMILIES.get(encoder.casefold(), encoder.casefold())


def _codec_matches(
    aliases: dict[str, frozenset[str]], current: str | None, target: str
) -> bool:
    if current is None:
        return False

    current_lower = current.casefold()
    target_lower = target.casefold()

    if current_lower == target_lower:
        return True
    if current_lower in aliases.get(target_lower, ()):
        return True
    if target_lower in aliases.get(current_lower, ()):
        return True
    return False


def video_codec_matches(current_codec: str | None, target: str) -> bool:
    """Check if a video codec matches a target (case-insensitive, alias-aware).

    Args:
        current_codec: Current video codec from ffprobe.
        target: Target codec family to match against.

    Returns:
        True if codec matches.
    """
    return _codec_matches(VIDEO_CODEC_ALIASES, current_codec, target)


def audio_codec_matches(current_codec: str | None, target: str) -> bool:
    """Check if an audio codec matches a target (case-insensitive, alias-aware)."""
    return _codec_matches(AUDIO_CODEC_ALIASES, current_codec, target)
