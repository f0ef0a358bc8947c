"""Tests for the media context and command execution."""

import logging
import subprocess
from unittest.mock import Mock, patch

import pytest
from mediatimeline import (
    EngineError,
    ExecutionResult,
    Executor,
    MediaContext,
    Timeline,
    default_context,
    set_default_context,
)


def completed(returncode=0, stdout="", stderr=""):
    """Mock of a finished subprocess."""
    return Mock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestMediaContext:
    """Test MediaContext class."""

    def test_init_default(self):
        """Test default initialization without verification."""
        ctx = MediaContext(verify=False)
        assert ctx.ffmpeg == "ffmpeg"
        assert ctx.timeout == 120.0
        assert ctx.logger.name == "mediatimeline.media.context"

    def test_custom_logger(self):
        """Test a custom logger is kept."""
        logger = logging.getLogger("render-jobs")
        assert MediaContext(logger=logger, verify=False).logger is logger

    def test_verify_runs_version(self):
        """Test verification runs the binary with -version."""
        with patch("mediatimeline.media.context.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout="ffmpeg version 6.1")
            MediaContext(ffmpeg="/usr/bin/ffmpeg")

        args, kwargs = mock_run.call_args
        assert args[0] == ["/usr/bin/ffmpeg", "-version"]
        assert kwargs["timeout"] == 10

    def test_verify_failure(self):
        """Test a failing binary is rejected."""
        with patch("mediatimeline.media.context.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1, stderr="bad build")
            with pytest.raises(RuntimeError, match="FFmpeg not working"):
                MediaContext()

    def test_verify_missing_binary(self):
        """Test a missing binary is reported."""
        with patch("mediatimeline.media.context.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("no such file")
            with pytest.raises(RuntimeError, match="FFmpeg not found"):
                MediaContext(ffmpeg="/missing/ffmpeg")

    def test_verify_timeout(self):
        """Test a hanging binary is reported."""
        with patch("mediatimeline.media.context.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["ffmpeg", "-version"], 10)
            with pytest.raises(RuntimeError, match="timed out"):
                MediaContext()

    def test_from_env(self, monkeypatch):
        """Test environment configuration."""
        monkeypatch.setenv("MEDIATIMELINE_FFMPEG", "/opt/ffmpeg/bin/ffmpeg")
        monkeypatch.setenv("MEDIATIMELINE_TIMEOUT", "30")

        ctx = MediaContext.from_env(verify=False)
        assert ctx.ffmpeg == "/opt/ffmpeg/bin/ffmpeg"
        assert ctx.timeout == 30.0

        override = MediaContext.from_env(ffmpeg="ffmpeg6", verify=False)
        assert override.ffmpeg == "ffmpeg6"

    def test_from_env_invalid_timeout(self, monkeypatch):
        """Test a non-numeric timeout is rejected."""
        monkeypatch.setenv("MEDIATIMELINE_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="MEDIATIMELINE_TIMEOUT"):
            MediaContext.from_env(verify=False)

    def test_context_manager(self):
        """Test context manager use."""
        with MediaContext(verify=False) as ctx:
            assert ctx.ffmpeg == "ffmpeg"

    def test_default_context(self, monkeypatch):
        """Test the default context is created once and can be replaced."""
        monkeypatch.delenv("MEDIATIMELINE_FFMPEG", raising=False)
        monkeypatch.delenv("MEDIATIMELINE_TIMEOUT", raising=False)

        with patch.object(MediaContext, "_verify_ffmpeg") as mock_verify:
            first = default_context()
            assert default_context() is first
            assert mock_verify.call_count == 1

        custom = MediaContext(ffmpeg="/custom/ffmpeg", verify=False)
        set_default_context(custom)
        assert default_context() is custom


class TestExecutor:
    """Test running commands."""

    def setup_method(self):
        self.ctx = MediaContext(verify=False)

    def test_success(self):
        """Test a successful run returns the captured output."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed(stderr="frame=  30")
            result = Executor(self.ctx).run(["ffmpeg", "-i", "in.mp4", "out.mp4"])

        assert result == ExecutionResult(returncode=0, stdout="", stderr="frame=  30")
        assert result.ok
        args, kwargs = mock_run.call_args
        assert args[0] == ["ffmpeg", "-i", "in.mp4", "out.mp4"]
        assert kwargs["capture_output"] is True
        assert kwargs["stdin"] == subprocess.DEVNULL
        assert kwargs["timeout"] == 120.0

    def test_failure_raises(self):
        """Test a non-zero exit raises with the engine's output."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1, stderr="Invalid argument")
            with pytest.raises(EngineError) as exc:
                Executor(self.ctx).run(["ffmpeg", "-i", "missing.mp4", "out.mp4"])

        assert exc.value.returncode == 1
        assert exc.value.stderr == "Invalid argument"
        assert str(exc.value) == "FFmpeg failed: Invalid argument"

    def test_failure_without_check(self):
        """Test check=False returns the failed result."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1, stderr="oops")
            result = Executor(self.ctx).run(["ffmpeg"], check=False)

        assert not result.ok
        assert result.returncode == 1

    def test_missing_binary(self):
        """Test a missing binary becomes an engine error."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("ffmpeg")
            with pytest.raises(EngineError) as exc:
                Executor(self.ctx).run(["ffmpeg"])

        assert exc.value.returncode == 127

    def test_timeout(self):
        """Test a timeout becomes an engine error with partial output."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(
                ["ffmpeg"], 5, output=b"partial", stderr=b"frame=1"
            )
            with pytest.raises(EngineError, match="timed out after 5s") as exc:
                Executor(self.ctx).run(["ffmpeg"], timeout=5)

        assert exc.value.stdout == "partial"
        assert exc.value.stderr == "frame=1"

    def test_runs_compiled_command(self):
        """Test compiled commands are accepted."""
        command = Timeline().add_video("in.mp4").compile("out.mp4")
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            Executor(self.ctx).run(command)

        assert mock_run.call_args[0][0] == list(command.argv)

    def test_logs_command(self, caplog):
        """Test the command line is logged."""
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            with caplog.at_level(logging.INFO, logger="mediatimeline.media.context"):
                Executor(self.ctx).run(["ffmpeg", "-version"])

        assert "Running FFmpeg: ffmpeg -version" in caplog.text
        assert "FFmpeg completed successfully" in caplog.text


class TestRender:
    """Test Timeline.render."""

    def test_render_uses_context_binary(self):
        """Test render compiles with the context's executable and runs it."""
        ctx = MediaContext(ffmpeg="/usr/local/bin/ffmpeg", timeout=60, verify=False)
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            result = Timeline().add_video("in.mp4").scale(640, 360).render("out.mp4", ctx=ctx)

        assert result.ok
        args, kwargs = mock_run.call_args
        assert args[0][0] == "/usr/local/bin/ffmpeg"
        assert args[0][-1] == "out.mp4"
        assert kwargs["timeout"] == 60

    def test_render_uses_default_context(self):
        """Test render falls back to the default context."""
        set_default_context(MediaContext(ffmpeg="ffmpeg-default", verify=False))
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            Timeline().add_video("in.mp4").render("out.mp4", timeout=3)

        args, kwargs = mock_run.call_args
        assert args[0][0] == "ffmpeg-default"
        assert kwargs["timeout"] == 3

    def test_render_failure(self):
        """Test render raises when the engine fails."""
        ctx = MediaContext(verify=False)
        with patch("mediatimeline.media.executor.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1, stderr="No such file")
            with pytest.raises(EngineError, match="No such file"):
                Timeline().add_video("missing.mp4").render("out.mp4", ctx=ctx)
