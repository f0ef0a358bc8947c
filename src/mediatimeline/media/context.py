"""Media runtime context: engine executable, logger and execution timeout."""

import logging
import os
import subprocess
from typing import Optional

DEFAULT_TIMEOUT = 120.0


class MediaContext:
    """Context for running compiled commands against the FFmpeg binary."""

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        logger: Optional[logging.Logger] = None,
        timeout: Optional[float] = None,
        verify: bool = True,
    ):
        """
        Initialize media context.

        Args:
            ffmpeg: Path to ffmpeg binary
            logger: Logger instance for debugging
            timeout: Seconds before a render is stopped (default 120)
            verify: Check that the binary runs before accepting it
        """
        self.ffmpeg = ffmpeg
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = DEFAULT_TIMEOUT if timeout is None else timeout

        if verify:
            self._verify_ffmpeg()

    @classmethod
    def from_env(cls, **kwargs) -> "MediaContext":
        """
        Build a context from ``MEDIATIMELINE_FFMPEG`` and ``MEDIATIMELINE_TIMEOUT``.

        Keyword arguments override the environment.
        """
        if "ffmpeg" not in kwargs and os.getenv("MEDIATIMELINE_FFMPEG"):
            kwargs["ffmpeg"] = os.environ["MEDIATIMELINE_FFMPEG"]
        if "timeout" not in kwargs and os.getenv("MEDIATIMELINE_TIMEOUT"):
            try:
                kwargs["timeout"] = float(os.environ["MEDIATIMELINE_TIMEOUT"])
            except ValueError:
                raise ValueError(
                    f"MEDIATIMELINE_TIMEOUT must be a number, got {os.environ['MEDIATIMELINE_TIMEOUT']!r}"
                ) from None
        return cls(**kwargs)

    def _verify_ffmpeg(self) -> None:
        """Verify that the FFmpeg binary is available."""
        try:
            result = subprocess.run(
                [self.ffmpeg, "-version"], capture_output=True, text=True, timeout=10
            )
            if result.returncode != 0:
                raise RuntimeError(f"FFmpeg not working: {result.stderr}")

            self.logger.debug("FFmpeg binary verified successfully")

        except FileNotFoundError as e:
            raise RuntimeError(f"FFmpeg not found. Please install FFmpeg: {e}")
        except subprocess.TimeoutExpired:
            raise RuntimeError("FFmpeg verification timed out")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        return None


# Global default context
_DEFAULT_CTX: Optional[MediaContext] = None


def default_context() -> MediaContext:
    """
    Get the default media context.

    Returns:
        Default MediaContext instance (created from the environment on first use)
    """
    global _DEFAULT_CTX
    if _DEFAULT_CTX is None:
        _DEFAULT_CTX = MediaContext.from_env()
    return _DEFAULT_CTX


def set_default_context(ctx: Optional[MediaContext]) -> None:
    """
    Set the default media context.

    Args:
        ctx: MediaContext to use as default (None resets it)
    """
    global _DEFAULT_CTX
    _DEFAULT_CTX = ctx
