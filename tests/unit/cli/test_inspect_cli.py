"""Unit tests for the inspect CLI command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from vsplit.cli import main
from vsplit.cli.exit_codes import ExitCode
from vsplit.config import ToolPathsConfig, VSplitConfig
from vsplit.exceptions import MediaIntrospectionError, ToolNotFoundError


@pytest.fixture
def cli_runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("vsplit.cli.configure_logging"):
        yield


@pytest.fixture
def media_file(temp_dir: Path) -> Path:
    path = temp_dir / "movie.mp4"
    path.write_bytes(b"\x00" * 16)
    return path


@pytest.fixture
def mock_introspector(media_file, make_descriptor):
    descriptor = make_descriptor(path=media_file)
    with patch(
        "vsplit.cli.inspect.require_tool", return_value=Path("/usr/bin/ffprobe")
    ):
        with patch("vsplit.cli.inspect.FFprobeIntrospector") as mock_cls:
            mock_cls.return_value.get_format.return_value = descriptor
            yield mock_cls


def _invoke(cli_runner, args, config=None):
    return cli_runner.invoke(main, args, obj={"config": config or VSplitConfig()})


class TestInspectCommand:
    def test_human_output(self, cli_runner, media_file, mock_introspector):
        result = _invoke(cli_runner, ["inspect", str(media_file)])

        assert result.exit_code == 0, result.output
        assert f"File: {media_file}" in result.output
        assert "#0 [video] h264 1920x1080 @ 29.97fps 3000 kb/s" in result.output
        assert "#1 [audio] aac stereo" in result.output

    def test_json_output(self, cli_runner, media_file, mock_introspector):
        result = _invoke(cli_runner, ["inspect", str(media_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["file"] == str(media_file)
        assert [s["kind"] for s in data["streams"]] == ["video", "audio"]

    def test_configured_ffprobe_and_timeout(
        self, cli_runner, media_file, make_descriptor
    ):
        config = VSplitConfig(tools=ToolPathsConfig(ffprobe=Path("/opt/ffprobe")))
        with patch(
            "vsplit.cli.inspect.require_tool", return_value=Path("/opt/ffprobe")
        ) as mock_require:
            with patch("vsplit.cli.inspect.FFprobeIntrospector") as mock_cls:
                mock_cls.return_value.get_format.return_value = make_descriptor(
                    path=media_file
                )
                result = _invoke(
                    cli_runner, ["inspect", str(media_file)], config=config
                )

        assert result.exit_code == 0, result.output
        mock_require.assert_called_once_with("ffprobe", Path("/opt/ffprobe"))
        assert mock_cls.call_args.kwargs["timeout"] == 60.0

    def test_missing_file(self, cli_runner, temp_dir):
        result = _invoke(cli_runner, ["inspect", str(temp_dir / "missing.mp4")])

        assert result.exit_code == ExitCode.TARGET_NOT_FOUND
        assert "File not found" in result.output

    def test_ffprobe_missing(self, cli_runner, media_file):
        with patch(
            "vsplit.cli.inspect.require_tool",
            side_effect=ToolNotFoundError("Required tool not available: ffprobe."),
        ):
            result = _invoke(cli_runner, ["inspect", str(media_file)])

        assert result.exit_code == ExitCode.TOOL_NOT_AVAILABLE

    def test_probe_failure(self, cli_runner, media_file, mock_introspector):
        mock_introspector.return_value.get_format.side_effect = (
            MediaIntrospectionError("ffprobe failed for movie.mp4: bad data")
        )

        result = _invoke(cli_runner, ["inspect", str(media_file)])

        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "bad data" in result.output


class TestMainGroup:
    def test_invalid_config_file(self, cli_runner, temp_dir, media_file):
        config_file = temp_dir / "bad.toml"
        config_file.write_text("[split\n")

        result = cli_runner.invoke(
            main, ["--config", str(config_file), "inspect", str(media_file)]
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Invalid configuration" in result.output

    def test_invalid_config_value(self, cli_runner, temp_dir, media_file):
        config_file = temp_dir / "config.toml"
        config_file.write_text('[split]\nquality = "4k"\n')

        result = cli_runner.invoke(
            main, ["--config", str(config_file), "inspect", str(media_file)]
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_logging_options(self, cli_runner, media_file, mock_introspector):
        with patch("vsplit.cli.configure_logging") as mock_configure:
            result = _invoke(
                cli_runner,
                ["--log-level", "debug", "--log-json", "inspect", str(media_file)],
            )

        assert result.exit_code == 0, result.output
        logging_config = mock_configure.call_args.args[0]
        assert logging_config.level == "debug"
        assert logging_config.format == "json"

    def test_help_lists_commands(self, cli_runner):
        result = cli_runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("inspect", "plan", "split"):
            assert command in result.output
