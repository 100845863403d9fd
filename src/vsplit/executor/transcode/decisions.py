"""Transcode decisions: what to copy, what to encode, and which limits apply.

The planner never raises quality. A ceiling only scales down sources taller
than the tier, and bitrate/framerate limits are dropped whenever the source
is already at or below them.
"""

from __future__ import annotations

import logging
from fractions import Fraction

from vsplit.core.codecs import audio_codec_matches, video_codec_matches
from vsplit.core.quality import QUALITY_TIERS, QualityCeiling
from vsplit.exceptions import NotTranscodableError
from vsplit.introspector.types import FormatDescriptor

from .types import (
    DEFAULT_AUDIO_ENCODER,
    DEFAULT_VIDEO_ENCODER,
    CodecAction,
    PlanOverrides,
    TranscodePlan,
)

_module_logger = logging.getLogger(__name__)

# Used when a source framerate cannot be parsed
DEFAULT_FRAME_RATE = Fraction(1, 1)


def parse_frame_rate(
    value: str | None, logger: logging.Logger | None = None
) -> Fraction:
    """Parse an ffprobe rational framerate ("30000/1001", "25", "29.97").

    Unparsable or non-positive values fall back to 1/1 with a warning.
    """
    log = logger or _module_logger
    if not value:
        log.warning("Missing frame rate; assuming %s", DEFAULT_FRAME_RATE)
        return DEFAULT_FRAME_RATE
    try:
        rate = Fraction(value.strip())
    except (ValueError, ZeroDivisionError):
        log.warning("Unparsable frame rate %r; assuming %s", value, DEFAULT_FRAME_RATE)
        return DEFAULT_FRAME_RATE
    if rate <= 0:
        log.warning("Invalid frame rate %r; assuming %s", value, DEFAULT_FRAME_RATE)
        return DEFAULT_FRAME_RATE
    return rate


def parse_bitrate(
    value: str | None, logger: logging.Logger | None = None
) -> int | None:
    """Parse an ffprobe bit rate in bits per second.

    Returns:
        The bit rate, or None when it is absent or unparsable. None means
        "unknown", which callers treat as unbounded.
    """
    if value is None:
        return None
    try:
        bitrate = int(value.strip())
    except ValueError:
        (logger or _module_logger).warning(
            "Unparsable bit rate %r; treating as unknown", value
        )
        return None
    if bitrate <= 0:
        return None
    return bitrate


def plan_transcode(
    descriptor: FormatDescriptor,
    ceiling: QualityCeiling | None,
    overrides: PlanOverrides | None = None,
    *,
    video_encoder: str = DEFAULT_VIDEO_ENCODER,
    audio_encoder: str = DEFAULT_AUDIO_ENCODER,
    logger: logging.Logger | None = None,
) -> TranscodePlan:
    """Decide how a probed file is turned into HLS.

    Args:
        descriptor: Probed input.
        ceiling: Quality ceiling tier, or None to keep source quality.
        overrides: Replacements for the tier's bitrate/framerate ceilings.
        video_encoder: Encoder used when the video must be re-encoded.
        audio_encoder: Encoder used when the audio must be re-encoded.
        logger: Logger for decision diagnostics.

    Returns:
        TranscodePlan for the file.

    Raises:
        NotTranscodableError: If the file is not a video container or lacks
            a video or audio stream.
    """
    log = logger or _module_logger
    video = descriptor.video
    audio = descriptor.audio
    if not descriptor.is_video or video is None or audio is None:
        missing = []
        if not descriptor.is_video:
            missing.append("not a video container")
        if video is None:
            missing.append("no video stream")
        if audio is None:
            missing.append("no audio stream")
        raise NotTranscodableError(
            f"{descriptor.filename} is not a transcodable media file "
            f"({', '.join(missing)})"
        )

    reasons: list[str] = []
    scale_height: int | None = None
    bitrate: int | None = None
    frame_rate: float | None = None

    if ceiling is not None:
        tier = QUALITY_TIERS[ceiling]
        if video.height is not None and video.height <= tier.height:
            reasons.append(
                f"Source height {video.height} within {ceiling.value}; "
                "keeping resolution, bitrate and framerate"
            )
        else:
            if video.height is None:
                log.warning("Unknown source height; scaling to %dp", tier.height)
            scale_height = tier.height
            reasons.append(f"Scaling to {tier.height}p ({ceiling.value} ceiling)")

            target_bitrate = tier.bitrate
            if overrides is not None and overrides.bitrate is not None:
                target_bitrate = overrides.bitrate
            source_bitrate = parse_bitrate(video.bit_rate, log)
            if source_bitrate is None:
                log.info("Source bit rate unknown; treating as unbounded")
            if source_bitrate is not None and source_bitrate <= target_bitrate:
                reasons.append(
                    f"Source bit rate {source_bitrate} within ceiling {target_bitrate}"
                )
            else:
                bitrate = target_bitrate
                reasons.append(f"Limiting bit rate to {target_bitrate}")

            target_rate = tier.frame_rate
            if overrides is not None and overrides.frame_rate is not None:
                target_rate = overrides.frame_rate
            source_rate = parse_frame_rate(video.frame_rate, log)
            if source_rate <= target_rate:
                reasons.append(
                    f"Source frame rate {float(source_rate):.3f} within "
                    f"ceiling {target_rate:.3f}"
                )
            else:
                frame_rate = target_rate
                reasons.append(f"Limiting frame rate to {target_rate:.2f}")

    target_video = CodecAction(encoder=video_encoder)
    copy_video = scale_height is None and video_codec_matches(
        video.codec, target_video.family
    )
    if copy_video:
        reasons.append(f"Copying {video.codec} video")
    else:
        reasons.append(f"Encoding video ({video.codec} -> {video_encoder})")

    target_audio = CodecAction(encoder=audio_encoder)
    copy_audio = audio_codec_matches(audio.codec, target_audio.family)
    if copy_audio:
        reasons.append(f"Copying {audio.codec} audio")
    else:
        reasons.append(f"Encoding audio ({audio.codec} -> {audio_encoder})")

    plan = TranscodePlan(
        video=CodecAction(encoder=video_encoder, copy=copy_video),
        audio=CodecAction(encoder=audio_encoder, copy=copy_audio),
        scale_height=scale_height,
        bitrate=bitrate,
        frame_rate=frame_rate,
        reasons=tuple(reasons),
    )
    for reason in plan.reasons:
        log.debug("Plan: %s", reason)
    return plan
