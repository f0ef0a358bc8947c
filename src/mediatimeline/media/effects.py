"""
Pipeable effect helpers.

Each helper returns a function from Timeline to Timeline, for use with
``Timeline.pipe``::

    timeline.pipe(fade_in(1.0)).pipe(compose(grayscale(), vignette()))
"""

from functools import reduce
from typing import Callable, Optional

from .timeline import Timeline

TimelineFn = Callable[[Timeline], Timeline]


def _present(**params):
    return {k: v for k, v in params.items() if v is not None}


def _filter(effect: str, **params) -> TimelineFn:
    present = _present(**params)

    def apply(timeline: Timeline) -> Timeline:
        return timeline.add_filter(effect, present)

    return apply


def compose(*fns: TimelineFn) -> TimelineFn:
    """Chain helpers left to right into a single helper."""

    def apply(timeline: Timeline) -> Timeline:
        return reduce(lambda t, fn: t.pipe(fn), fns, timeline)

    return apply


# Fades


def fade_in(duration: float = 1.0, color: Optional[str] = None) -> TimelineFn:
    return _filter("fade", type="in", start=0, duration=duration, color=color)


def fade_out(duration: float = 1.0, color: Optional[str] = None) -> TimelineFn:
    """Fade out over the last ``duration`` seconds of the timeline."""

    def apply(timeline: Timeline) -> Timeline:
        start = max(0.0, timeline.get_duration() - duration)
        return timeline.add_filter(
            "fade", _present(type="out", start=start, duration=duration, color=color)
        )

    return apply


# Color


def brightness(value: float) -> TimelineFn:
    """-1.0 to 1.0, 0 leaves the image unchanged."""
    return _filter("brightness", value=value)


def contrast(value: float) -> TimelineFn:
    return _filter("contrast", value=value)


def saturation(value: float) -> TimelineFn:
    """0 (gray) to 3.0."""
    return _filter("saturation", value=value)


def hue(degrees: float, saturation: Optional[float] = None) -> TimelineFn:
    return _filter("hue", degrees=degrees, saturation=saturation)


def gamma(value: float) -> TimelineFn:
    return _filter("gamma", value=value)


def grayscale() -> TimelineFn:
    return _filter("grayscale")


def sepia() -> TimelineFn:
    return _filter("sepia")


def invert() -> TimelineFn:
    return _filter("invert")


# Texture


def blur(radius: float = 5) -> TimelineFn:
    return _filter("blur", radius=radius)


def sharpen(amount: float = 1.0) -> TimelineFn:
    return _filter("sharpen", amount=amount)


def vignette(angle: str = "PI/4") -> TimelineFn:
    return _filter("vignette", angle=angle)


def noise(strength: float = 10) -> TimelineFn:
    return _filter("noise", strength=strength)


def denoise(strength: float = 4) -> TimelineFn:
    return _filter("denoise", strength=strength)


def stabilize() -> TimelineFn:
    return _filter("stabilize")


# Geometry and time


def rotate(degrees: float) -> TimelineFn:
    return _filter("rotate", degrees=degrees)


def flip(direction: str = "horizontal") -> TimelineFn:
    """Mirror the picture; direction is ``horizontal`` or ``vertical``."""
    if direction not in ("horizontal", "vertical"):
        raise ValueError(f"Flip direction must be 'horizontal' or 'vertical', got {direction!r}")
    return _filter("hflip" if direction == "horizontal" else "vflip")


def speed(factor: float) -> TimelineFn:
    return _filter("speed", factor=factor)


def reverse() -> TimelineFn:
    return _filter("reverse")


def chromakey(
    color: str = "#00FF00", similarity: float = 0.4, blend: float = 0.1
) -> TimelineFn:
    return _filter("chromakey", color=color, similarity=similarity, blend=blend)


# Audio


def volume(value: float) -> TimelineFn:
    return _filter("volume", value=value)


def audio_fade(kind: str = "in", duration: float = 1.0, start: float = 0) -> TimelineFn:
    return _filter("afade", type=kind, start=start, duration=duration)


# Looks


def vintage() -> TimelineFn:
    return compose(sepia(), vignette(), noise(8), contrast(1.1))


def cinematic() -> TimelineFn:
    return compose(contrast(1.2), saturation(0.85), vignette("PI/5"))


def dreamlike() -> TimelineFn:
    return compose(blur(2), brightness(0.08), saturation(1.3))


def noir() -> TimelineFn:
    return compose(grayscale(), contrast(1.4), vignette("PI/3"), noise(12))


def social_media_optimized() -> TimelineFn:
    """Punchier colors and a touch of sharpening for small screens."""
    return compose(saturation(1.15), contrast(1.05), sharpen(0.8))
