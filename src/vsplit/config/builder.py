"""Configuration builder with explicit layering.

ConfigSource holds the values one source specifies; ConfigBuilder applies
sources in precedence order and fills the rest from defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from vsplit.config.env import EnvReader
from vsplit.config.models import (
    LoggingConfig,
    RunnerConfig,
    SplitConfig,
    ToolPathsConfig,
    VSplitConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified here" and never overrides a value from a
    lower-precedence source.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Split defaults
    split_quality: str | None = None
    split_segment_duration: int | None = None
    split_auto_output_dir: bool | None = None
    split_output_dir: Path | None = None
    split_video_encoder: str | None = None
    split_audio_encoder: str | None = None

    # Runner
    runner_probe_timeout: float | None = None
    runner_reap_timeout: float | None = None
    runner_kill_after_grace: bool | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds VSplitConfig by layering ConfigSources.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(EnvReader()))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override earlier ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> VSplitConfig:
        """Build the final configuration.

        Raises:
            ValueError: If a merged value fails validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )
        split = SplitConfig(
            quality=self._get("split_quality", "none"),
            segment_duration=self._get("split_segment_duration", 10),
            auto_output_dir=self._get("split_auto_output_dir", True),
            output_dir=self._get("split_output_dir", None),
            video_encoder=self._get("split_video_encoder", "libx264"),
            audio_encoder=self._get("split_audio_encoder", "aac"),
        )
        runner = RunnerConfig(
            probe_timeout=self._get("runner_probe_timeout", 60.0),
            reap_timeout=self._get("runner_reap_timeout", 5.0),
            kill_after_grace=self._get("runner_kill_after_grace", False),
        )
        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )
        return VSplitConfig(
            tools=tools,
            split=split,
            runner=runner,
            logging=logging_config,
        )


def _path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed TOML document."""
    tools = file_config.get("tools", {})
    split = file_config.get("split", {})
    runner = file_config.get("runner", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        ffmpeg_path=_path(tools.get("ffmpeg")),
        ffprobe_path=_path(tools.get("ffprobe")),
        split_quality=split.get("quality"),
        split_segment_duration=split.get("segment_duration"),
        split_auto_output_dir=split.get("auto_output_dir"),
        split_output_dir=_path(split.get("output_dir")),
        split_video_encoder=split.get("video_encoder"),
        split_audio_encoder=split.get("audio_encoder"),
        runner_probe_timeout=runner.get("probe_timeout"),
        runner_reap_timeout=runner.get("reap_timeout"),
        runner_kill_after_grace=runner.get("kill_after_grace"),
        logging_level=logging_conf.get("level"),
        logging_file=_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from VSPLIT_* environment variables."""
    return ConfigSource(
        ffmpeg_path=reader.get_path("VSPLIT_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("VSPLIT_FFPROBE_PATH"),
        split_quality=reader.get_str("VSPLIT_QUALITY"),
        split_segment_duration=reader.get_int("VSPLIT_SEGMENT_DURATION"),
        split_output_dir=reader.get_path("VSPLIT_OUTPUT_DIR"),
        runner_reap_timeout=reader.get_float("VSPLIT_REAP_TIMEOUT"),
        runner_kill_after_grace=reader.get_bool("VSPLIT_KILL_AFTER_GRACE"),
        logging_level=reader.get_str("VSPLIT_LOG_LEVEL"),
        logging_file=reader.get_path("VSPLIT_LOG_FILE"),
        logging_format=reader.get_str("VSPLIT_LOG_FORMAT"),
    )
