"""Split data types: plans, options and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from vsplit.core.codecs import encoder_family
from vsplit.core.quality import QualityCeiling, parse_quality

DEFAULT_SEGMENT_DURATION = 10
DEFAULT_VIDEO_ENCODER = "libx264"
DEFAULT_AUDIO_ENCODER = "aac"
DEFAULT_PLAYLIST_NAME = "media.m3u8"
DEFAULT_SEGMENT_TEMPLATE = "media-%05d.ts"


@dataclass(frozen=True)
class CodecAction:
    """What to do with one stream: copy it or re-encode it.

    The configured encoder is kept even for copies; it names the codec
    family the output stream belongs to either way.
    """

    encoder: str
    copy: bool = False

    @property
    def ffmpeg_value(self) -> str:
        """Value passed to -c:v / -c:a."""
        return "copy" if self.copy else self.encoder

    @property
    def family(self) -> str:
        """Codec family of the output stream."""
        return encoder_family(self.encoder)


@dataclass(frozen=True)
class TranscodePlan:
    """Per-stream decisions for one split.

    Invariant: a copied video stream cannot be scaled, rate-limited or
    retimed, so scale_height, bitrate and frame_rate are all None.
    """

    video: CodecAction
    audio: CodecAction
    scale_height: int | None = None
    bitrate: int | None = None
    """Video bitrate ceiling in bits per second."""
    frame_rate: float | None = None
    """Framerate ceiling in frames per second."""
    reasons: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.video.copy and (
            self.scale_height is not None
            or self.bitrate is not None
            or self.frame_rate is not None
        ):
            raise ValueError(
                "A copied video stream cannot carry scale, bitrate or framerate"
            )

    def to_dict(self) -> dict[str, object]:
        """JSON-serializable view of the plan."""
        return {
            "video": self.video.ffmpeg_value,
            "audio": self.audio.ffmpeg_value,
            "scale_height": self.scale_height,
            "bitrate": self.bitrate,
            "frame_rate": self.frame_rate,
            "reasons": list(self.reasons),
        }


# ffmpeg receives the video bitrate in whole K (1024 bit/s)
MIN_BITRATE = 1024


@dataclass(frozen=True)
class PlanOverrides:
    """Explicit replacements for a tier's bitrate and framerate ceilings."""

    bitrate: int | None = None
    frame_rate: float | None = None

    def __post_init__(self) -> None:
        if self.bitrate is not None and self.bitrate < MIN_BITRATE:
            raise ValueError(
                f"bitrate must be at least {MIN_BITRATE} bits/s, got {self.bitrate}"
            )
        if self.frame_rate is not None and self.frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {self.frame_rate}")


@dataclass(frozen=True)
class SplitOptions:
    """Options for one HLS split.

    Attributes:
        quality: Quality ceiling tier, or None to keep the source quality.
            Tier names ("720p") are accepted and converted.
        segment_duration: Target HLS segment length in seconds.
        auto_output_dir: Write into a fresh unique subdirectory of the
            output directory instead of the directory itself.
        video_encoder: ffmpeg video encoder used when re-encoding.
        audio_encoder: ffmpeg audio encoder used when re-encoding.
        bitrate: Override for the tier bitrate ceiling (bit/s).
        frame_rate: Override for the tier framerate ceiling.
        playlist_name: File name of the generated playlist.
        segment_template: printf-style segment file name.
    """

    quality: QualityCeiling | None = None
    segment_duration: int = DEFAULT_SEGMENT_DURATION
    auto_output_dir: bool = True
    video_encoder: str = DEFAULT_VIDEO_ENCODER
    audio_encoder: str = DEFAULT_AUDIO_ENCODER
    bitrate: int | None = None
    frame_rate: float | None = None
    playlist_name: str = DEFAULT_PLAYLIST_NAME
    segment_template: str = DEFAULT_SEGMENT_TEMPLATE

    def __post_init__(self) -> None:
        if isinstance(self.quality, str):
            object.__setattr__(self, "quality", parse_quality(self.quality))

        if isinstance(self.segment_duration, bool) or not isinstance(
            self.segment_duration, int
        ):
            raise ValueError(
                f"segment_duration must be an integer, got {self.segment_duration!r}"
            )
        if self.segment_duration <= 0:
            raise ValueError(
                f"segment_duration must be positive, got {self.segment_duration}"
            )
        if not self.video_encoder.strip():
            raise ValueError("video_encoder cannot be empty")
        if not self.audio_encoder.strip():
            raise ValueError("audio_encoder cannot be empty")
        # Validates the override values
        overrides = self.overrides
        if overrides is not None and self.quality is None:
            raise ValueError("bitrate and frame_rate overrides require a quality")
        if not self.playlist_name.endswith(".m3u8"):
            raise ValueError(
                f"playlist_name must end with .m3u8, got {self.playlist_name!r}"
            )
        for name in (self.playlist_name, self.segment_template):
            if "/" in name or "\\" in name:
                raise ValueError(f"File name cannot contain a path separator: {name!r}")
        if "%" not in self.segment_template:
            raise ValueError(
                "segment_template must contain a sequence number placeholder, "
                f"got {self.segment_template!r}"
            )

    @property
    def overrides(self) -> PlanOverrides | None:
        """Ceiling overrides, or None when neither is set."""
        if self.bitrate is None and self.frame_rate is None:
            return None
        return PlanOverrides(bitrate=self.bitrate, frame_rate=self.frame_rate)


class SplitStatus(Enum):
    """Lifecycle of a split. The last three are terminal."""

    PLANNING = "planning"
    ENCODING = "encoding"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SplitStatus.SUCCEEDED,
            SplitStatus.FAILED,
            SplitStatus.CANCELLED,
        )


@dataclass
class SplitResult:
    """Outcome of a split."""

    input_path: Path
    status: SplitStatus = SplitStatus.PLANNING
    plan: TranscodePlan | None = None
    output_dir: Path | None = None
    playlist_path: Path | None = None
    command: tuple[str, ...] = ()
    error_message: str | None = None
    output: str = ""
    """Diagnostic output captured from ffmpeg (tail)."""
    error: Exception | None = None
    """Exception behind a FAILED status, if any."""
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is SplitStatus.SUCCEEDED
