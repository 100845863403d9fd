"""Quality ceiling tiers.

Each tier bounds resolution, bitrate and framerate. The table is fixed:
callers pick a tier, not individual numbers (explicit per-split overrides
are handled by the planner).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class QualityCeiling(Enum):
    """Quality ceiling tier selectable for a split."""

    P480 = "480p"
    P720 = "720p"
    P1080 = "1080p"


@dataclass(frozen=True)
class QualityTier:
    """Limits bound to a quality ceiling."""

    height: int
    """Reference output height in pixels."""

    bitrate: int
    """Video bitrate ceiling in bits per second."""

    frame_rate: float
    """Framerate ceiling in frames per second."""


# Framerate ceilings sit just under the NTSC rates so that sources running
# at exactly 24000/1001 or 30000/1001 compare as "at or above" the ceiling.
QUALITY_TIERS: dict[QualityCeiling, QualityTier] = {
    QualityCeiling.P480: QualityTier(
        height=480,
        bitrate=500 * 1024,
        frame_rate=24000 / 1001 - 0.005,
    ),
    QualityCeiling.P720: QualityTier(
        height=720,
        bitrate=1000 * 1024,
        frame_rate=24000 / 1001 - 0.005,
    ),
    QualityCeiling.P1080: QualityTier(
        height=1080,
        bitrate=2000 * 1024,
        frame_rate=30000 / 1001 - 0.005,
    ),
}

QUALITY_CHOICES: tuple[str, ...] = tuple(c.value for c in QualityCeiling) + ("none",)


def parse_quality(value: str | QualityCeiling | None) -> QualityCeiling | None:
    """Parse a quality ceiling name.

    Args:
        value: Tier name ("480p", "720p", "1080p"), "none", or None.

    Returns:
        The matching QualityCeiling, or None for "none"/None.

    Raises:
        ValueError: If the value names no known tier.
    """
    if value is None or isinstance(value, QualityCeiling):
        return value
    normalized = value.strip().casefold()
    if normalized in ("", "none"):
        return None
    try:
        return QualityCeiling(normalized)
    except ValueError:
        raise ValueError(
            f"Invalid quality '{value}'. Must be one of: {', '.join(QUALITY_CHOICES)}"
        ) from None
