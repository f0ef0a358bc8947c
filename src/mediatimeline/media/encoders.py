"""Encoder profiles for timeline output with FFmpeg argument generation."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional, Union

from ..core.errors import ConstructionError
from ..core.types import HardwareAcceleration, Quality


class EncoderProfile(BaseModel):
    """Encoder profile that generates FFmpeg output arguments."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    video_codec: str = "libx264"
    crf: Optional[int] = 23
    preset: Optional[str] = "medium"
    profile: Optional[str] = None
    level: Optional[str] = None
    pixel_format: Optional[str] = "yuv420p"
    keyframe_interval: Optional[int] = None
    b_frames: Optional[int] = None
    refs: Optional[int] = None
    tune: Optional[str] = None
    video_bitrate: Optional[str] = None
    audio_codec: str = "aac"
    audio_bitrate: Optional[str] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    audio_profile: Optional[str] = None
    audio_compression_level: Optional[int] = None

    @staticmethod
    def h264(crf: int = 23, preset: str = "medium") -> "EncoderProfile":
        """
        H.264 encoder profile for standard video output.

        Args:
            crf: Constant Rate Factor (lower = higher quality)
            preset: Encoding preset (ultrafast, superfast, veryfast, faster, fast, medium, slow, slower, veryslow)

        Returns:
            H.264 encoder profile
        """
        return EncoderProfile(video_codec="libx264", crf=crf, preset=preset)

    @staticmethod
    def h265(crf: int = 28, preset: str = "medium") -> "EncoderProfile":
        """
        H.265/HEVC encoder profile for smaller files at similar quality.

        Args:
            crf: Constant Rate Factor
            preset: Encoding preset

        Returns:
            H.265 encoder profile
        """
        return EncoderProfile(video_codec="libx265", crf=crf, preset=preset)

    @staticmethod
    def vp9(crf: int = 32) -> "EncoderProfile":
        """
        VP9 encoder profile for web-optimized video.

        Args:
            crf: Constant Rate Factor

        Returns:
            VP9 encoder profile
        """
        return EncoderProfile(
            video_codec="libvpx-vp9",
            crf=crf,
            preset=None,
            video_bitrate="0",  # CRF mode
            audio_codec="libopus",
        )

    @staticmethod
    def prores() -> "EncoderProfile":
        """ProRes 422 HQ profile for editing workflows."""
        return EncoderProfile(
            video_codec="prores_ks",
            crf=None,
            preset=None,
            profile="3",
            pixel_format="yuv422p10le",
            audio_codec="pcm_s16le",
        )

    @staticmethod
    def hardware(
        accel: Union[HardwareAcceleration, str], bitrate: str = "5M"
    ) -> "EncoderProfile":
        """
        Hardware H.264 encoder for an acceleration family.

        Hardware encoders ignore CRF, so a target bitrate is used instead.
        """
        accel = HardwareAcceleration(accel)
        return EncoderProfile(
            video_codec=accel.h264_encoder,
            crf=None,
            preset=None,
            video_bitrate=bitrate,
        )

    @staticmethod
    def for_quality(quality: Union[Quality, str]) -> "EncoderProfile":
        """H.264 profile for a quality tier (low, medium, high, ultra)."""
        crf, preset = _QUALITY_SETTINGS[Quality(quality)]
        return EncoderProfile.h264(crf=crf, preset=preset)

    @staticmethod
    def preset_names() -> List[str]:
        return sorted(_PRESETS)

    @staticmethod
    def from_preset(name: str) -> "EncoderProfile":
        """
        Named codec preset.

        Args:
            name: One of archival, streaming, mobile, youtube, tiktok, instagram

        Returns:
            Encoder profile for the preset

        Raises:
            ConstructionError: If the preset is unknown
        """
        try:
            return _PRESETS[name]
        except KeyError:
            raise ConstructionError(
                f"Unknown codec preset '{name}'. Available: {', '.join(sorted(_PRESETS))}"
            ) from None

    def with_video(self, codec: Optional[str] = None, **options) -> "EncoderProfile":
        """Return a copy with a different video codec and/or video options."""
        update = dict(options)
        if codec is not None:
            update["video_codec"] = codec
        return EncoderProfile(**{**self.model_dump(), **update})

    def with_audio(self, codec: Optional[str] = None, **options) -> "EncoderProfile":
        """Return a copy with a different audio codec and/or audio options."""
        update = dict(options)
        if codec is not None:
            update["audio_codec"] = codec
        return EncoderProfile(**{**self.model_dump(), **update})

    def args(self, out_path: str, audio: bool = True) -> List[str]:
        """
        Generate FFmpeg arguments for this encoder profile.

        Args:
            out_path: Output file path
            audio: Include the audio codec options (False for outputs without audio)

        Returns:
            List of FFmpeg arguments, output path last
        """
        args = ["-c:v", self.video_codec]
        if self.preset:
            args.extend(["-preset", self.preset])
        if self.crf is not None:
            args.extend(["-crf", str(self.crf)])
        if self.profile:
            args.extend(["-profile:v", self.profile])
        if self.level:
            args.extend(["-level", self.level])
        if self.pixel_format:
            args.extend(["-pix_fmt", self.pixel_format])
        if self.keyframe_interval is not None:
            args.extend(["-g", str(self.keyframe_interval)])
        if self.b_frames is not None:
            args.extend(["-bf", str(self.b_frames)])
        if self.refs is not None:
            args.extend(["-refs", str(self.refs)])
        if self.tune:
            args.extend(["-tune", self.tune])
        if self.video_bitrate:
            args.extend(["-b:v", self.video_bitrate])

        if audio:
            args.extend(self._audio_args())

        # Add output path
        args.append(out_path)

        return args

    def _audio_args(self) -> List[str]:
        args = ["-c:a", self.audio_codec]
        if self.audio_bitrate:
            args.extend(["-b:a", self.audio_bitrate])
        if self.sample_rate is not None:
            args.extend(["-ar", str(self.sample_rate)])
        if self.channels is not None:
            args.extend(["-ac", str(self.channels)])
        if self.audio_profile:
            args.extend(["-profile:a", self.audio_profile])
        if self.audio_compression_level is not None:
            args.extend(["-compression_level", str(self.audio_compression_level)])
        return args


_QUALITY_SETTINGS = {
    Quality.LOW: (28, "fast"),
    Quality.MEDIUM: (23, "medium"),
    Quality.HIGH: (18, "medium"),
    Quality.ULTRA: (15, "slow"),
}

_PRESETS: Dict[str, EncoderProfile] = {
    "archival": EncoderProfile(
        preset="slow",
        crf=18,
        profile="high",
        level="5.1",
        tune="film",
        audio_codec="flac",
        audio_compression_level=8,
    ),
    "streaming": EncoderProfile(
        preset="veryfast",
        crf=23,
        profile="main",
        level="4.0",
        keyframe_interval=48,
        tune="zerolatency",
        audio_bitrate="128k",
        sample_rate=44100,
        channels=2,
        audio_profile="aac_low",
    ),
    "mobile": EncoderProfile(
        preset="faster",
        crf=28,
        profile="baseline",
        level="3.1",
        refs=1,
        audio_bitrate="96k",
        channels=2,
    ),
    "youtube": EncoderProfile(
        preset="slow",
        crf=18,
        profile="high",
        keyframe_interval=60,
        b_frames=2,
        audio_bitrate="192k",
        sample_rate=48000,
    ),
    "tiktok": EncoderProfile(
        preset="medium",
        crf=23,
        profile="high",
        level="4.1",
        audio_bitrate="128k",
        sample_rate=44100,
    ),
    "instagram": EncoderProfile(
        preset="medium",
        crf=23,
        profile="main",
        level="4.0",
        audio_bitrate="128k",
        sample_rate=44100,
    ),
}
