"""Tests for external tool lookup."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from vsplit.exceptions import ToolNotFoundError
from vsplit.tools import require_tool, resolve_tool


@pytest.fixture
def fake_tool(temp_dir: Path) -> Path:
    path = temp_dir / "ffmpeg"
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestResolveTool:
    def test_configured_path_wins(self, fake_tool: Path):
        with patch("vsplit.tools.detection.shutil.which") as mock_which:
            assert resolve_tool("ffmpeg", fake_tool) == fake_tool
        mock_which.assert_not_called()

    def test_missing_configured_path_falls_back_to_path(
        self, temp_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        with patch(
            "vsplit.tools.detection.shutil.which", return_value="/usr/bin/ffmpeg"
        ):
            with caplog.at_level(logging.WARNING):
                result = resolve_tool("ffmpeg", temp_dir / "nope")

        assert result == Path("/usr/bin/ffmpeg")
        assert "does not exist" in caplog.text

    def test_not_found(self):
        with patch("vsplit.tools.detection.shutil.which", return_value=None):
            assert resolve_tool("ffmpeg") is None


class TestRequireTool:
    def test_returns_path(self, fake_tool: Path):
        assert require_tool("ffmpeg", str(fake_tool)) == fake_tool

    def test_raises_with_hint(self):
        with patch("vsplit.tools.detection.shutil.which", return_value=None):
            with pytest.raises(ToolNotFoundError) as exc_info:
                require_tool("ffprobe")

        message = str(exc_info.value)
        assert message.startswith("Required tool not available: ffprobe.")
        assert "install ffmpeg" in message

    def test_unknown_tool_has_no_hint(self):
        with patch("vsplit.tools.detection.shutil.which", return_value=None):
            with pytest.raises(
                ToolNotFoundError, match=r"^Required tool not available: mkvmerge\.$"
            ):
                require_tool("mkvmerge")
