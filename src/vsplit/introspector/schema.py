"""Pydantic models for ffprobe JSON output.

Only the fields vsplit reads are declared; everything else ffprobe emits
is ignored. Fields that ffprobe omits depending on the stream kind stay
optional. Malformed integer fields are dropped to None with a warning
rather than failing the whole probe.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def _lenient_int(value: Any, field_name: str) -> int | None:
    """Coerce a value to a non-negative int, or None with a warning."""
    if value is None:
        return None
    if isinstance(value, bool):
        logger.warning("Expected int for %s, got bool", field_name)
        return None
    try:
        result = int(value)
    except (TypeError, ValueError):
        logger.warning("Expected int for %s, got %r", field_name, value)
        return None
    if result < 0:
        logger.warning("Invalid negative %s: %d", field_name, result)
        return None
    return result


class FFprobeStream(BaseModel):
    """One entry of ffprobe's "streams" array."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    index: int = 0
    codec_name: str | None = None
    codec_type: str | None = None
    width: int | None = None
    height: int | None = None
    r_frame_rate: str | None = None
    avg_frame_rate: str | None = None
    bit_rate: str | None = None
    duration: str | None = None
    start_time: str | None = None
    channels: int | None = None
    channel_layout: str | None = None
    tags: dict[str, Any] = Field(default_factory=dict)

    @field_validator("width", "height", "channels", mode="before")
    @classmethod
    def validate_counts(cls, v: Any, info: Any) -> int | None:
        """Drop malformed dimensions and channel counts."""
        return _lenient_int(v, info.field_name)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> dict[str, Any]:
        """Treat a missing or malformed tags object as empty."""
        return v if isinstance(v, dict) else {}


class FFprobeFormat(BaseModel):
    """ffprobe's "format" object."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    filename: str | None = None
    format_name: str | None = None
    duration: str | None = None
    bit_rate: str | None = None
    start_time: str | None = None
    size: str | None = None


class FFprobeOutput(BaseModel):
    """Top-level ffprobe document (-show_streams -show_format)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    streams: list[FFprobeStream]
    format: FFprobeFormat
