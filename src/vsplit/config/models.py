"""Configuration data models.

Each section validates itself in __post_init__; invalid values raise
ValueError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vsplit.core.quality import QUALITY_CHOICES


@dataclass
class ToolPathsConfig:
    """Explicit paths to external tools. None means look up on PATH."""

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class SplitConfig:
    """Defaults for split options."""

    quality: str = "none"
    segment_duration: int = 10
    auto_output_dir: bool = True
    output_dir: Path | None = None
    video_encoder: str = "libx264"
    audio_encoder: str = "aac"

    def __post_init__(self) -> None:
        if self.quality.casefold() not in QUALITY_CHOICES:
            raise ValueError(
                f"quality must be one of {', '.join(QUALITY_CHOICES)}, "
                f"got {self.quality}"
            )
        if self.segment_duration <= 0:
            raise ValueError(
                f"segment_duration must be positive, got {self.segment_duration}"
            )


@dataclass
class RunnerConfig:
    """External process supervision settings."""

    probe_timeout: float = 60.0
    """Seconds before ffprobe is abandoned."""

    reap_timeout: float = 5.0
    """Seconds to wait for a cancelled ffmpeg to exit."""

    kill_after_grace: bool = False
    """Kill ffmpeg if it ignores the termination request."""

    def __post_init__(self) -> None:
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )
        if self.reap_timeout <= 0:
            raise ValueError(f"reap_timeout must be positive, got {self.reap_timeout}")


@dataclass
class LoggingConfig:
    """Configuration for logging output."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass
class VSplitConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
