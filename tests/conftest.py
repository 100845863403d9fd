"""Shared test fixtures for vsplit."""

import json
import shutil
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from vsplit.config import clear_config_cache
from vsplit.introspector import FormatDescriptor, StreamDescriptor, StreamKind

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_VSPLIT_ENV_VARS = (
    "VSPLIT_FFMPEG_PATH",
    "VSPLIT_FFPROBE_PATH",
    "VSPLIT_QUALITY",
    "VSPLIT_SEGMENT_DURATION",
    "VSPLIT_OUTPUT_DIR",
    "VSPLIT_REAP_TIMEOUT",
    "VSPLIT_KILL_AFTER_GRACE",
    "VSPLIT_LOG_LEVEL",
    "VSPLIT_LOG_FILE",
    "VSPLIT_LOG_FORMAT",
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point vsplit at an empty config file and a clean environment.

    Keeps a developer's ~/.vsplit/config.toml and VSPLIT_* variables out
    of every test.
    """
    config_path = temp_dir / ".vsplit" / "config.toml"
    monkeypatch.setenv("VSPLIT_CONFIG_PATH", str(config_path))
    for var in _VSPLIT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    yield config_path
    clear_config_cache()


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return FIXTURES_DIR / "ffprobe"


@pytest.fixture
def load_ffprobe_fixture(ffprobe_fixtures_dir: Path) -> Callable[[str], dict]:
    """Return a loader for ffprobe JSON fixtures by name (without .json)."""

    def load(name: str) -> dict:
        return json.loads((ffprobe_fixtures_dir / f"{name}.json").read_text())

    return load


@pytest.fixture
def make_descriptor() -> Callable[..., FormatDescriptor]:
    """Return a factory for FormatDescriptors with one video and one audio stream.

    Keyword arguments override the defaults (a 1080p h264/aac mp4). Pass
    video_codec=None or audio_codec=None to omit that stream.
    """

    def make(
        *,
        path: Path | str = "/media/movie.mp4",
        video_codec: str | None = "h264",
        width: int | None = 1920,
        height: int | None = 1080,
        frame_rate: str | None = "30000/1001",
        video_bit_rate: str | None = "3000000",
        audio_codec: str | None = "aac",
        duration: float | None = 596.462,
    ) -> FormatDescriptor:
        streams: list[StreamDescriptor] = []
        if video_codec is not None:
            streams.append(
                StreamDescriptor(
                    index=len(streams),
                    kind=StreamKind.VIDEO,
                    codec=video_codec,
                    width=width,
                    height=height,
                    frame_rate=frame_rate,
                    bit_rate=video_bit_rate,
                    codec_type="video",
                )
            )
        if audio_codec is not None:
            streams.append(
                StreamDescriptor(
                    index=len(streams),
                    kind=StreamKind.AUDIO,
                    codec=audio_codec,
                    channels=2,
                    channel_layout="stereo",
                    codec_type="audio",
                )
            )
        return FormatDescriptor(
            path=Path(path),
            format_name="mov,mp4,m4a,3gp,3g2,mj2",
            duration_seconds=duration,
            streams=tuple(streams),
        )

    return make
