"""Tests for SplitExecutor with a stub introspector and mocked runner."""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vsplit.exceptions import (
    InputError,
    MediaIntrospectionError,
    NotTranscodableError,
    OperationCancelledError,
    ProcessExitError,
    ToolNotFoundError,
)
from vsplit.executor import SplitExecutor, SplitOptions, SplitStatus
from vsplit.introspector import StubIntrospector
from vsplit.runner import CancellableContext, ProcessRunner

FFMPEG = Path("/opt/ffmpeg/bin/ffmpeg")


@pytest.fixture
def input_file(temp_dir: Path) -> Path:
    path = temp_dir / "movie.mp4"
    path.write_bytes(b"\x00" * 16)
    return path


@pytest.fixture
def probe(input_file, make_descriptor) -> StubIntrospector:
    stub = StubIntrospector()
    stub.add(make_descriptor(path=input_file))
    return stub


@pytest.fixture
def runner() -> MagicMock:
    return MagicMock(spec=ProcessRunner)


@pytest.fixture
def executor(probe, runner) -> SplitExecutor:
    return SplitExecutor(probe=probe, runner=runner, ffmpeg_path=FFMPEG)


class TestSplitSuccess:
    def test_copy_split_into_auto_directory(
        self, executor, runner, input_file, temp_dir
    ):
        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.SUCCEEDED
        assert result.success is True
        assert result.error_message is None
        assert result.plan is not None
        assert result.plan.video.copy is True
        assert result.output_dir is not None
        assert result.output_dir.parent == temp_dir / "out"
        assert result.output_dir.is_dir()
        assert result.playlist_path == result.output_dir / "media.m3u8"

        runner.run_streaming.assert_called_once()
        args = runner.run_streaming.call_args.args
        assert args[1] == str(FFMPEG)
        assert args[2] == result.command[1:]
        assert result.command[0] == str(FFMPEG)
        assert result.command[-1] == str(result.playlist_path)

    def test_each_auto_split_gets_a_fresh_directory(
        self, executor, input_file, temp_dir
    ):
        first = executor.split(input_file, temp_dir / "out")
        second = executor.split(input_file, temp_dir / "out")

        assert first.output_dir != second.output_dir

    def test_explicit_output_directory(self, executor, input_file, temp_dir):
        target = temp_dir / "hls"
        target.mkdir()

        result = executor.split(
            input_file, target, SplitOptions(auto_output_dir=False)
        )

        assert result.status is SplitStatus.SUCCEEDED
        assert result.output_dir == target

    def test_explicit_mode_requires_directory(self, executor, input_file):
        result = executor.split(input_file, None, SplitOptions(auto_output_dir=False))

        assert result.status is SplitStatus.FAILED
        assert isinstance(result.error, InputError)

    def test_default_output_root(self, executor, input_file, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)

        result = executor.split(input_file)

        assert result.status is SplitStatus.SUCCEEDED
        assert result.output_dir is not None
        assert result.output_dir.parent == Path("output")

    def test_quality_ceiling_reaches_command(self, executor, input_file, temp_dir):
        result = executor.split(
            input_file, temp_dir / "out", SplitOptions(quality="720p")
        )

        assert result.status is SplitStatus.SUCCEEDED
        assert "scale=-2:720" in result.command
        assert "1000K" in result.command
        assert "23.97" in result.command

    def test_progress_callback_receives_lines(
        self, executor, runner, input_file, temp_dir
    ):
        def fake_stream(context, name, args, sink):
            sink("frame=  10 fps=0.0 time=00:00:00.40 speed=1x")
            sink("frame=  20 fps=0.0 time=00:00:00.80 speed=1x")

        runner.run_streaming.side_effect = fake_stream
        lines: list[str] = []

        result = executor.split(
            input_file, temp_dir / "out", progress_callback=lines.append
        )

        assert result.success
        assert len(lines) == 2

    def test_probe_warnings_copied_to_result(
        self, runner, input_file, make_descriptor, temp_dir
    ):
        descriptor = make_descriptor(path=input_file)
        descriptor = type(descriptor)(
            path=descriptor.path,
            streams=descriptor.streams,
            warnings=("Duplicate stream index 0",),
        )
        executor = SplitExecutor(
            probe=StubIntrospector({input_file: descriptor}),
            runner=runner,
            ffmpeg_path=FFMPEG,
        )

        result = executor.split(input_file, temp_dir / "out")

        assert result.warnings == ["Duplicate stream index 0"]

    def test_logs_transitions(
        self, executor, input_file, temp_dir, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.INFO):
            executor.split(input_file, temp_dir / "out")

        assert "planning -> encoding" in caplog.text
        assert "encoding -> succeeded" in caplog.text


class TestSplitFailures:
    def test_missing_input(self, executor, runner, temp_dir):
        result = executor.split(temp_dir / "missing.mp4", temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert "not found" in result.error_message
        assert isinstance(result.error, InputError)
        runner.run_streaming.assert_not_called()

    @pytest.mark.parametrize("name", ["my movie.mp4", "tab\there.mp4"])
    def test_whitespace_in_input_path(self, executor, runner, temp_dir, name):
        path = temp_dir / name
        path.write_bytes(b"\x00")

        result = executor.split(path, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert "whitespace" in result.error_message
        runner.run_streaming.assert_not_called()

    def test_whitespace_in_output_path(self, executor, input_file, temp_dir):
        result = executor.split(input_file, temp_dir / "my output")

        assert result.status is SplitStatus.FAILED
        assert "Output path" in result.error_message

    def test_not_transcodable(self, runner, input_file, make_descriptor, temp_dir):
        executor = SplitExecutor(
            probe=StubIntrospector(
                {input_file: make_descriptor(path=input_file, audio_codec=None)}
            ),
            runner=runner,
            ffmpeg_path=FFMPEG,
        )

        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert isinstance(result.error, NotTranscodableError)
        assert result.plan is None
        assert not (temp_dir / "out").exists()

    def test_probe_failure(self, runner, input_file, temp_dir):
        executor = SplitExecutor(
            probe=StubIntrospector(), runner=runner, ffmpeg_path=FFMPEG
        )

        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert isinstance(result.error, MediaIntrospectionError)

    def test_ffprobe_failure_keeps_command(self, runner, input_file, temp_dir):
        ffprobe_command = ("/opt/ffprobe", "-v", "quiet", str(input_file))
        probe = MagicMock()
        probe.get_format.side_effect = MediaIntrospectionError(
            "ffprobe failed for movie.mp4: bad data",
            command=ffprobe_command,
            output="bad data",
        )
        executor = SplitExecutor(probe=probe, runner=runner, ffmpeg_path=FFMPEG)

        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert result.command == ffprobe_command
        assert result.output == "bad data"
        runner.run_streaming.assert_not_called()

    def test_ffmpeg_not_found(self, probe, runner, input_file, temp_dir):
        executor = SplitExecutor(probe=probe, runner=runner)

        with patch(
            "vsplit.executor.transcode.executor.require_tool",
            side_effect=ToolNotFoundError("Required tool not available: ffmpeg"),
        ):
            result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert isinstance(result.error, ToolNotFoundError)
        assert result.plan is not None
        runner.run_streaming.assert_not_called()

    def test_ffmpeg_exit_error(self, executor, runner, input_file, temp_dir):
        runner.run_streaming.side_effect = ProcessExitError(
            "ffmpeg exited with status 1",
            returncode=1,
            output="Conversion failed!",
        )

        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.FAILED
        assert result.error_message == "ffmpeg exited with status 1"
        assert result.output == "Conversion failed!"
        assert isinstance(result.error, ProcessExitError)

    def test_existing_output_directory_in_explicit_mode_is_reused(
        self, executor, input_file, temp_dir
    ):
        target = temp_dir / "hls"
        target.mkdir()
        (target / "old.ts").write_bytes(b"")

        result = executor.split(input_file, target, SplitOptions(auto_output_dir=False))

        assert result.success
        assert (target / "old.ts").exists()

    def test_uncreatable_output_directory(self, executor, input_file, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("")

        result = executor.split(
            input_file, blocker / "sub", SplitOptions(auto_output_dir=False)
        )

        assert result.status is SplitStatus.FAILED
        assert "Could not create output directory" in result.error_message


class TestSplitCancellation:
    def test_cancelled_before_start(
        self, executor, runner, probe, input_file, temp_dir
    ):
        context = CancellableContext()
        context.cancel()

        result = executor.split(input_file, temp_dir / "out", context=context)

        assert result.status is SplitStatus.CANCELLED
        assert probe.calls == []
        runner.run_streaming.assert_not_called()
        assert not (temp_dir / "out").exists()

    def test_cancelled_while_encoding(self, executor, runner, input_file, temp_dir):
        runner.run_streaming.side_effect = OperationCancelledError(
            "ffmpeg cancelled", output="frame=  10"
        )

        result = executor.split(input_file, temp_dir / "out")

        assert result.status is SplitStatus.CANCELLED
        assert result.error_message == "ffmpeg cancelled"
        assert result.output == "frame=  10"
        assert result.error is None

    def test_cancel_during_ffprobe_is_not_a_failure(self, runner, input_file, temp_dir):
        context = CancellableContext()

        def interrupted_ffprobe(path):
            context.cancel()
            raise MediaIntrospectionError(
                "ffprobe failed for movie.mp4: exit status 255",
                command=("/opt/ffprobe", str(path)),
            )

        probe = MagicMock()
        probe.get_format.side_effect = interrupted_ffprobe
        executor = SplitExecutor(probe=probe, runner=runner, ffmpeg_path=FFMPEG)

        result = executor.split(input_file, temp_dir / "out", context=context)

        assert result.status is SplitStatus.CANCELLED
        assert result.error is None
        assert result.command == ("/opt/ffprobe", str(input_file))
        runner.run_streaming.assert_not_called()
        assert context.wait(timeout=0) is True

    def test_split_is_tracked_on_context(self, executor, runner, input_file, temp_dir):
        context = CancellableContext()
        outstanding: list[int] = []
        runner.run_streaming.side_effect = (
            lambda ctx, name, args, sink: outstanding.append(ctx.outstanding)
        )

        executor.split(input_file, temp_dir / "out", context=context)

        assert outstanding == [1]
        assert context.wait(timeout=0) is True

    def test_context_drains_after_failure(self, executor, temp_dir):
        context = CancellableContext()

        executor.split(temp_dir / "missing.mp4", temp_dir / "out", context=context)

        assert context.wait(timeout=0) is True


class TestPlan:
    def test_plan_without_encoding(self, executor, runner, input_file):
        descriptor, plan = executor.plan(input_file, SplitOptions(quality="480p"))

        assert descriptor.path == input_file
        assert plan.scale_height == 480
        runner.run_streaming.assert_not_called()

    def test_plan_missing_input(self, executor, temp_dir):
        with pytest.raises(InputError):
            executor.plan(temp_dir / "missing.mp4")


def test_ffmpeg_path_is_looked_up_lazily(probe, runner):
    executor = SplitExecutor(probe=probe, runner=runner)
    with patch(
        "vsplit.executor.transcode.executor.require_tool",
        return_value=Path("/usr/bin/ffmpeg"),
    ) as mock_require:
        assert executor.ffmpeg_path == Path("/usr/bin/ffmpeg")
        assert executor.ffmpeg_path == Path("/usr/bin/ffmpeg")

    mock_require.assert_called_once_with("ffmpeg")
