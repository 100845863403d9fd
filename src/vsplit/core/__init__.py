"""Core utilities package.

Pure helpers with no external dependencies: codec alias matching and the
quality tier table.
"""

from vsplit.core.codecs import (
    AUDIO_CODEC_ALIASES,
    ENCODER_FAMILIES,
    VIDEO_CODEC_ALIASES,
    audio_codec_matches,
    encoder_family,
    video_codec_matches,
)
from vsplit.core.quality import (
    QUALITY_CHOICES,
    QUALITY_TIERS,
    QualityCeiling,
    QualityTier,
    parse_quality,
)

__all__ = [
    "AUDIO_CODEC_ALIASES",
    "ENCODER_FAMILIES",
    "VIDEO_CODEC_ALIASES",
    "audio_codec_matches",
    "encoder_family",
    "video_codec_matches",
    "QUALITY_CHOICES",
    "QUALITY_TIERS",
    "QualityCeiling",
    "QualityTier",
    "parse_quality",
]
