"""Effect registry: named effects mapped to filter-node builders."""

from typing import Any, Callable, Dict, List, Mapping, Optional
from pydantic import BaseModel

from ..core.errors import UnknownEffectError
from ..core.types import StreamType
from .filtergraph import FilterNode, quote

EffectBuilder = Callable[[Mapping[str, Any]], List[FilterNode]]


class EffectDefinition(BaseModel):
    """A registered effect and the stream it applies to."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    name: str
    build: EffectBuilder
    stream: StreamType = StreamType.VIDEO
    description: str = ""
    # Applied to the base clip before overlays and text rather than to the
    # finished composite
    base_stage: bool = False


class EffectRegistry:
    """Immutable table of effects; ``with_effect`` returns an extended copy."""

    def __init__(self, effects: Optional[Mapping[str, EffectDefinition]] = None):
        self._effects: Dict[str, EffectDefinition] = dict(effects or {})

    def __contains__(self, name: str) -> bool:
        return name in self._effects

    def names(self) -> List[str]:
        return sorted(self._effects)

    def get(self, name: str, layer_index: Optional[int] = None) -> EffectDefinition:
        """
        Look up an effect by name.

        Args:
            name: Effect name
            layer_index: Index of the layer asking, used in the error message

        Returns:
            The effect definition

        Raises:
            UnknownEffectError: If no effect with that name is registered
        """
        try:
            return self._effects[name]
        except KeyError:
            raise UnknownEffectError(name, layer_index) from None

    def build(
        self, name: str, params: Mapping[str, Any], layer_index: Optional[int] = None
    ) -> List[FilterNode]:
        return self.get(name, layer_index).build(params)

    def with_effect(
        self,
        name: str,
        build: EffectBuilder,
        stream: StreamType = StreamType.VIDEO,
        description: str = "",
        base_stage: bool = False,
    ) -> "EffectRegistry":
        """Return a new registry that also knows ``name``."""
        effects = dict(self._effects)
        effects[name] = EffectDefinition(
            name=name,
            build=build,
            stream=stream,
            description=description,
            base_stage=base_stage,
        )
        return EffectRegistry(effects)


# Built-in effects. Numeric parameters are passed through unchecked; the
# documented ranges are what the engine accepts.


def _fade(p: Mapping[str, Any]) -> List[FilterNode]:
    """t: in|out, start: seconds, duration: seconds, color: fade color."""
    return [
        FilterNode.of(
            "fade",
            t=p.get("type", "in"),
            st=p.get("start", 0),
            d=p.get("duration", 1),
            color=p.get("color"),
        )
    ]


def _eq(key: str, default: float) -> EffectBuilder:
    def build(p: Mapping[str, Any]) -> List[FilterNode]:
        return [FilterNode.of("eq", **{key: p.get("value", default)})]

    return build


def _hue(p: Mapping[str, Any]) -> List[FilterNode]:
    """degrees: hue rotation, saturation: -10 to 10."""
    return [FilterNode.of("hue", h=p.get("degrees", p.get("value", 0)), s=p.get("saturation"))]


def _blur(p: Mapping[str, Any]) -> List[FilterNode]:
    """radius: box blur radius (0 or more)."""
    return [FilterNode.of("boxblur", p.get("radius", p.get("value", 5)))]


def _gblur(p: Mapping[str, Any]) -> List[FilterNode]:
    """sigma: gaussian blur strength (0 to 1024)."""
    return [FilterNode.of("gblur", sigma=p.get("sigma", p.get("value", 1)))]


def _sharpen(p: Mapping[str, Any]) -> List[FilterNode]:
    """amount: -2 to 5, 0 leaves the image unchanged."""
    return [FilterNode.of("unsharp", 5, 5, p.get("amount", p.get("value", 1.0)))]


def _grayscale(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of(
            "colorchannelmixer", 0.3, 0.4, 0.3, 0, 0.3, 0.4, 0.3, 0, 0.3, 0.4, 0.3
        )
    ]


def _sepia(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of(
            "colorchannelmixer",
            0.393, 0.769, 0.189, 0,
            0.349, 0.686, 0.168, 0,
            0.272, 0.534, 0.131,
        )
    ]


def _invert(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("negate")]


def _vignette(p: Mapping[str, Any]) -> List[FilterNode]:
    """angle: lens angle expression, 0 to PI/2."""
    return [FilterNode.of("vignette", angle=p.get("angle", "PI/4"))]


def _noise(p: Mapping[str, Any]) -> List[FilterNode]:
    """strength: 0 to 100."""
    return [FilterNode.of("noise", alls=p.get("strength", 10), allf=p.get("flags", "t+u"))]


_MIXER_KEYS = ("rr", "rg", "rb", "ra", "gr", "gg", "gb", "ga", "br", "bg", "bb", "ba", "aa")


def _colorchannelmixer(p: Mapping[str, Any]) -> List[FilterNode]:
    """rr..aa: channel weights, -2 to 2."""
    return [FilterNode.of("colorchannelmixer", **{k: p[k] for k in _MIXER_KEYS if k in p})]


def _zoompan(p: Mapping[str, Any]) -> List[FilterNode]:
    """z/x/y: expressions, d: frames, s: WxH, fps: output rate. ``raw`` passes through."""
    if "raw" in p:
        return [FilterNode.of("zoompan", p["raw"])]
    exprs = {k: quote(str(p[k])) for k in ("z", "x", "y") if k in p}
    return [FilterNode.of("zoompan", **exprs, d=p.get("d"), s=p.get("s"), fps=p.get("fps"))]


def _rotate(p: Mapping[str, Any]) -> List[FilterNode]:
    """degrees: clockwise rotation."""
    degrees = p.get("degrees", p.get("angle", 0))
    return [FilterNode.of("rotate", f"{degrees}*PI/180", fillcolor=p.get("fill_color"))]


def _hflip(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("hflip")]


def _vflip(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("vflip")]


def _speed(p: Mapping[str, Any]) -> List[FilterNode]:
    """factor: playback speed multiplier (greater than 0)."""
    return [FilterNode.of("setpts", f"PTS/{p.get('factor', p.get('value', 1))}")]


def _reverse(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("reverse")]


def _crop(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of("crop", p["width"], p["height"], p.get("x", 0), p.get("y", 0))
    ]


def _scale(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("scale", p.get("width", -1), p.get("height", -1))]


def _pad(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of(
            "pad",
            p["width"],
            p["height"],
            p.get("x", "(ow-iw)/2"),
            p.get("y", "(oh-ih)/2"),
            color=p.get("color"),
        )
    ]


def _chromakey(p: Mapping[str, Any]) -> List[FilterNode]:
    """similarity: 0.01 to 1, blend: 0 to 1."""
    color = str(p.get("color", "#00FF00"))
    if not color.lower().startswith("0x"):
        color = "0x" + color.lstrip("#")
    return [
        FilterNode.of(
            "chromakey",
            color=color,
            similarity=p.get("similarity", 0.4),
            blend=p.get("blend", 0.1),
        )
    ]


def _denoise(p: Mapping[str, Any]) -> List[FilterNode]:
    """strength: hqdn3d luma spatial strength (0 or more)."""
    return [FilterNode.of("hqdn3d", p.get("strength", 4))]


def _stabilize(p: Mapping[str, Any]) -> List[FilterNode]:
    return [FilterNode.of("deshake")]


def _volume(p: Mapping[str, Any]) -> List[FilterNode]:
    """value: gain multiplier, 1.0 unchanged."""
    return [FilterNode.of("volume", p.get("value", 1.0))]


def _afade(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of(
            "afade",
            t=p.get("type", "in"),
            st=p.get("start", 0),
            d=p.get("duration", 1),
        )
    ]


def _atempo(p: Mapping[str, Any]) -> List[FilterNode]:
    """value: 0.5 to 100."""
    return [FilterNode.of("atempo", p.get("value", 1.0))]


def _aecho(p: Mapping[str, Any]) -> List[FilterNode]:
    return [
        FilterNode.of(
            "aecho",
            p.get("in_gain", 0.8),
            p.get("out_gain", 0.9),
            p.get("delays", 1000),
            p.get("decays", 0.3),
        )
    ]


def _pass_filter(name: str) -> EffectBuilder:
    def build(p: Mapping[str, Any]) -> List[FilterNode]:
        return [FilterNode.of(name, f=p.get("frequency", p.get("value")))]

    return build


_VIDEO_EFFECTS = {
    "fade": (_fade, "Fade in or out"),
    "brightness": (_eq("brightness", 0), "Brightness, -1 to 1"),
    "contrast": (_eq("contrast", 1), "Contrast, -1000 to 1000"),
    "saturation": (_eq("saturation", 1), "Saturation, 0 to 3"),
    "gamma": (_eq("gamma", 1), "Gamma, 0.1 to 10"),
    "hue": (_hue, "Hue rotation"),
    "blur": (_blur, "Box blur"),
    "gblur": (_gblur, "Gaussian blur"),
    "sharpen": (_sharpen, "Unsharp mask"),
    "grayscale": (_grayscale, "Desaturate"),
    "sepia": (_sepia, "Sepia tone"),
    "invert": (_invert, "Invert colors"),
    "vignette": (_vignette, "Darken edges"),
    "noise": (_noise, "Film grain"),
    "colorchannelmixer": (_colorchannelmixer, "Channel mixing"),
    "zoompan": (_zoompan, "Zoom and pan"),
    "rotate": (_rotate, "Rotate by degrees"),
    "hflip": (_hflip, "Mirror horizontally"),
    "vflip": (_vflip, "Mirror vertically"),
    "speed": (_speed, "Change playback speed"),
    "reverse": (_reverse, "Play backwards"),
    "crop": (_crop, "Crop rectangle"),
    "scale": (_scale, "Resize"),
    "pad": (_pad, "Pad to size"),
    "chromakey": (_chromakey, "Key out a color"),
    "denoise": (_denoise, "Reduce noise"),
    "stabilize": (_stabilize, "Reduce camera shake"),
}

_AUDIO_EFFECTS = {
    "volume": (_volume, "Gain"),
    "afade": (_afade, "Audio fade in or out"),
    "atempo": (_atempo, "Audio tempo"),
    "aecho": (_aecho, "Echo"),
    "lowpass": (_pass_filter("lowpass"), "Low-pass filter"),
    "highpass": (_pass_filter("highpass"), "High-pass filter"),
}


_BASE_STAGE_EFFECTS = {"zoompan"}


def _builtin_registry() -> EffectRegistry:
    effects = {}
    for table, stream in ((_VIDEO_EFFECTS, StreamType.VIDEO), (_AUDIO_EFFECTS, StreamType.AUDIO)):
        for name, (build, description) in table.items():
            effects[name] = EffectDefinition(
                name=name,
                build=build,
                stream=stream,
                description=description,
                base_stage=name in _BASE_STAGE_EFFECTS,
            )
    return EffectRegistry(effects)


_DEFAULT_REGISTRY = _builtin_registry()


def default_registry() -> EffectRegistry:
    """
    Get the built-in effect registry.

    Returns:
        Shared EffectRegistry instance (immutable, safe to share)
    """
    return _DEFAULT_REGISTRY
