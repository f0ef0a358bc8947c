"""Core types and enums for the mediatimeline package."""

from enum import Enum


class LayerKind(str, Enum):
    """Kind of content a layer carries."""

    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    TEXT = "text"
    FILTER = "filter"


class StreamType(str, Enum):
    """Stream an effect operates on."""

    VIDEO = "video"
    AUDIO = "audio"


class Anchor(str, Enum):
    """Anchor positions for overlays and text."""

    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def from_keyword(cls, value: str) -> "Anchor":
        """Look up an anchor by name, accepting ``top``/``bottom`` shorthands."""
        key = value.strip().lower().replace("_", "-")
        key = _ANCHOR_ALIASES.get(key, key)
        return cls(key)


_ANCHOR_ALIASES = {
    "top": "top-center",
    "bottom": "bottom-center",
    "left": "center-left",
    "right": "center-right",
    "middle": "center",
}


class BackgroundScale(str, Enum):
    """How a replacement background is fitted to the canvas."""

    FIT = "fit"  # Letterbox inside the canvas
    FILL = "fill"  # Cover the canvas, crop overflow
    STRETCH = "stretch"  # Ignore aspect ratio
    CROP = "crop"  # Center crop without scaling


class Quality(str, Enum):
    """Quality tiers mapped to encoder settings."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ULTRA = "ultra"


class HardwareAcceleration(str, Enum):
    """Hardware decode acceleration families."""

    AUTO = "auto"
    NVIDIA = "nvidia"
    INTEL = "intel"
    AMD = "amd"
    APPLE = "apple"

    @property
    def hwaccel(self) -> str:
        """Value passed to the engine's ``-hwaccel`` flag."""
        return _HWACCEL_NAMES[self.value]

    @property
    def h264_encoder(self) -> str:
        """Matching hardware H.264 encoder name."""
        return _HWACCEL_ENCODERS[self.value]


_HWACCEL_NAMES = {
    "auto": "auto",
    "nvidia": "cuda",
    "intel": "qsv",
    "amd": "d3d11va",
    "apple": "videotoolbox",
}

_HWACCEL_ENCODERS = {
    "auto": "libx264",
    "nvidia": "h264_nvenc",
    "intel": "h264_qsv",
    "amd": "h264_amf",
    "apple": "h264_videotoolbox",
}


class TransitionType(str, Enum):
    """Transition styles between clips or for text entrances."""

    NONE = "none"
    FADE = "fade"
    DISSOLVE = "dissolve"
    SLIDE = "slide"
    PUSH = "push"
    COVER = "cover"
    REVEAL = "reveal"
    WIPE = "wipe"
    ZOOM = "zoom"
    IRIS = "iris"
    MATRIX = "matrix"
    CUBE = "cube"
    FLIP = "flip"
    MORPH = "morph"
    PARTICLE = "particle"
    GLITCH = "glitch"
    BURN = "burn"


class Direction(str, Enum):
    """Direction for directional transitions."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Easing(str, Enum):
    """Easing curves for animated parameters."""

    LINEAR = "linear"
    EASE_IN = "ease-in"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"


class Platform(str, Enum):
    """Publishing platforms with aspect ratio expectations."""

    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
