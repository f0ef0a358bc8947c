"""Render real media with a local ffmpeg binary.

These tests generate short synthetic clips with the lavfi source, render
timelines through the executor and check the produced files with ffprobe.
They are skipped when no ffmpeg binary is available.
"""

import json
import os
import shutil
import subprocess

import pytest
from mediatimeline import EncoderProfile, MediaContext, Timeline

pytestmark = pytest.mark.functional


def run_ffmpeg(ffmpeg: str, *args: str) -> str:
    """Run ffmpeg directly and return stdout."""
    result = subprocess.run(
        [ffmpeg, "-hide_banner", *args], capture_output=True, text=True, timeout=60
    )
    assert result.returncode == 0, result.stderr
    return result.stdout


def probe(ffmpeg: str, file_path: str) -> dict:
    """Read stream and format info with the ffprobe next to ffmpeg."""
    ffprobe = os.path.join(os.path.dirname(ffmpeg), "ffprobe") if os.path.dirname(ffmpeg) else "ffprobe"
    if shutil.which(ffprobe) is None:
        pytest.skip("ffprobe not found")

    cmd = [
        ffprobe,
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        file_path,
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


def video_stream(info: dict) -> dict:
    return next(s for s in info["streams"] if s["codec_type"] == "video")


@pytest.fixture
def ctx(ffmpeg_binary):
    """Verified context for the local binary."""
    encoders = run_ffmpeg(ffmpeg_binary, "-encoders")
    if "libx264" not in encoders:
        pytest.skip("ffmpeg built without libx264")
    return MediaContext(ffmpeg=ffmpeg_binary, timeout=120)


@pytest.fixture
def encoder():
    return EncoderProfile.h264(preset="ultrafast")


@pytest.fixture
def sample_clip(ctx, temp_dir):
    """Three-second 320x240 clip with a sine audio track."""
    path = os.path.join(temp_dir, "clip.mp4")
    run_ffmpeg(
        ctx.ffmpeg,
        "-f",
        "lavfi",
        "-i",
        "testsrc=duration=3:size=320x240:rate=25",
        "-f",
        "lavfi",
        "-i",
        "sine=frequency=440:duration=3",
        "-c:v",
        "libx264",
        "-preset",
        "ultrafast",
        "-pix_fmt",
        "yuv420p",
        "-c:a",
        "aac",
        "-shortest",
        "-y",
        path,
    )
    return path


@pytest.fixture
def sample_tone(ctx, temp_dir):
    """Two-second mono tone."""
    path = os.path.join(temp_dir, "tone.wav")
    run_ffmpeg(ctx.ffmpeg, "-f", "lavfi", "-i", "sine=frequency=220:duration=2", "-y", path)
    return path


class TestRender:
    """Test rendering synthetic clips."""

    def test_scale_and_trim(self, ctx, encoder, sample_clip, temp_dir):
        """Test a scaled, trimmed render has the requested size and length."""
        output = os.path.join(temp_dir, "scaled.mp4")
        result = (
            Timeline()
            .add_video(sample_clip)
            .trim(0.5, 2.0)
            .scale(160, 120)
            .set_encoder(encoder)
            .render(output, ctx=ctx)
        )

        assert result.ok
        assert os.path.getsize(output) > 0

        info = probe(ctx.ffmpeg, output)
        stream = video_stream(info)
        assert (stream["width"], stream["height"]) == (160, 120)
        assert float(info["format"]["duration"]) == pytest.approx(1.5, abs=0.2)

    def test_audio_mix(self, ctx, encoder, sample_clip, sample_tone, temp_dir):
        """Test background audio is mixed into the clip's own track."""
        output = os.path.join(temp_dir, "mixed.mp4")
        result = (
            Timeline()
            .add_video(sample_clip, volume=0.5)
            .add_audio(sample_tone, start_time=0.5, volume=0.8, fade_in=0.5)
            .set_encoder(encoder)
            .render(output, ctx=ctx)
        )

        assert result.ok
        info = probe(ctx.ffmpeg, output)
        audio = [s for s in info["streams"] if s["codec_type"] == "audio"]
        assert len(audio) == 1

    def test_text_overlay(self, ctx, encoder, sample_clip, temp_dir):
        """Test a text overlay renders when drawtext is available."""
        if " drawtext " not in run_ffmpeg(ctx.ffmpeg, "-filters"):
            pytest.skip("ffmpeg built without drawtext")

        output = os.path.join(temp_dir, "titled.mp4")
        result = (
            Timeline()
            .add_video(sample_clip)
            .add_text("Hello: 'world'", start_time=0.5, duration=2, position="bottom-center")
            .set_encoder(encoder)
            .render(output, ctx=ctx)
        )

        assert result.ok
        assert os.path.getsize(output) > 0
