"""Shared test fixtures and configuration."""

import os
import shutil
import tempfile

import pytest
from dotenv import load_dotenv

from mediatimeline.media import context as context_module

# Auto-load .env file for tests (MEDIATIMELINE_FFMPEG, MEDIATIMELINE_TIMEOUT)
load_dotenv()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def sample_srt():
    """Two-cue SRT document text."""
    return SAMPLE_SRT


@pytest.fixture
def sample_srt_path(temp_dir):
    """Write a small SRT document and return its path."""
    srt_path = os.path.join(temp_dir, "sample.srt")
    with open(srt_path, "w", encoding="utf-8") as f:
        f.write(SAMPLE_SRT)
    return srt_path


@pytest.fixture(autouse=True)
def reset_default_context():
    """Keep the process-wide default context from leaking between tests."""
    context_module.set_default_context(None)
    yield
    context_module.set_default_context(None)


@pytest.fixture
def ffmpeg_binary():
    """Path of a real ffmpeg binary, or skip."""
    ffmpeg = get_test_ffmpeg()
    if shutil.which(ffmpeg) is None:
        pytest.skip(f"ffmpeg not found ({ffmpeg}); set MEDIATIMELINE_FFMPEG to run functional tests")
    return ffmpeg


def get_test_ffmpeg():
    """Get the ffmpeg binary used for functional tests."""
    return os.getenv("MEDIATIMELINE_FFMPEG", "ffmpeg")


SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,500\n"
    "Hello world\n"
    "\n"
    "2\n"
    "00:00:04,000 --> 00:00:06,000\n"
    "Second line\n"
    "continues\n"
)
