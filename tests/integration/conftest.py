"""Integration test fixtures that use real ffmpeg/ffprobe when installed.

This module provides pytest fixtures for:
- Tool availability detection (ffmpeg, ffprobe)
- A short generated H.264/AAC clip for end-to-end splits
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config


# =============================================================================
# Tool Availability Fixtures
# =============================================================================


def _tool_available(name: str) -> bool:
    """Check if an external tool is available in PATH."""
    return shutil.which(name) is not None


@pytest.fixture(scope="session")
def ffmpeg_available() -> bool:
    """Check if ffmpeg is available."""
    return _tool_available("ffmpeg")


@pytest.fixture(scope="session")
def ffprobe_available() -> bool:
    """Check if ffprobe is available."""
    return _tool_available("ffprobe")


# =============================================================================
# Custom Pytest Markers
# =============================================================================


def pytest_configure(config: Config) -> None:
    """Register custom markers for tool requirements."""
    config.addinivalue_line(
        "markers",
        "requires_ffmpeg: mark test as requiring ffmpeg and ffprobe",
    )


# =============================================================================
# Generated Media Fixtures
# =============================================================================


@pytest.fixture(scope="module")
def generated_h264_clip(
    ffmpeg_available: bool,
    tmp_path_factory: pytest.TempPathFactory,
) -> Path | None:
    """Generate a 3 second 1280x720 H.264/AAC mp4 from lavfi test sources.

    Returns None if ffmpeg is unavailable or cannot encode H.264.
    """
    if not ffmpeg_available:
        return None

    output_path = tmp_path_factory.mktemp("videos") / "clip.mp4"
    command = [
        "ffmpeg",
        "-y",
        "-f",
        "lavfi",
        "-i",
        "testsrc=size=1280x720:rate=30",
        "-f",
        "lavfi",
        "-i",
        "sine=frequency=440:sample_rate=48000",
        "-t",
        "3",
        "-c:v",
        "libx264",
        "-pix_fmt",
        "yuv420p",
        "-c:a",
        "aac",
        str(output_path),
    ]
    result = subprocess.run(command, capture_output=True, timeout=60, check=False)
    if result.returncode != 0 or not output_path.exists():
        return None
    return output_path
