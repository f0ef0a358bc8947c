"""Layer model: immutable records for timed, positioned content."""

from typing import Annotated, Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..core.types import Anchor, BackgroundScale, LayerKind
from .transitions import TransitionSpec

MODEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}

# Duration assumed for a layer that was given no explicit duration. Text and
# images default to a short on-screen window; video and audio assume a 30s
# clip because their real length is only known to the external engine.
DEFAULT_DURATIONS: Dict[LayerKind, float] = {
    LayerKind.TEXT: 5.0,
    LayerKind.IMAGE: 5.0,
    LayerKind.VIDEO: 30.0,
    LayerKind.AUDIO: 30.0,
    LayerKind.FILTER: 0.0,
}


# Position variants


class NamedPosition(BaseModel):
    """Placement at a named anchor of the canvas, inset by a margin."""

    model_config = MODEL_CONFIG

    kind: Literal["named"] = "named"
    anchor: Anchor
    margin: Optional[float] = None


class PercentPosition(BaseModel):
    """Placement as percentages (0-100) of the canvas size."""

    model_config = MODEL_CONFIG

    kind: Literal["percent"] = "percent"
    x: float
    y: float
    anchor: Optional[Anchor] = None


class AbsolutePosition(BaseModel):
    """Placement in pixels or as raw engine expressions."""

    model_config = MODEL_CONFIG

    kind: Literal["absolute"] = "absolute"
    x: Union[int, float, str]
    y: Union[int, float, str]
    anchor: Optional[Anchor] = None


class RawPosition(BaseModel):
    """Unrecognised descriptor passed through to the engine untouched."""

    model_config = MODEL_CONFIG

    kind: Literal["raw"] = "raw"
    value: str


Position = Annotated[
    Union[NamedPosition, PercentPosition, AbsolutePosition, RawPosition],
    Field(discriminator="kind"),
]

_POSITION_TYPES = (NamedPosition, PercentPosition, AbsolutePosition, RawPosition)


def _anchor_or_none(value: Any) -> Optional[Anchor]:
    if value is None or isinstance(value, Anchor):
        return value
    try:
        return Anchor.from_keyword(str(value))
    except ValueError:
        return None


def _percent_value(value: Any) -> Optional[float]:
    if isinstance(value, str) and value.strip().endswith("%"):
        try:
            return float(value.strip()[:-1])
        except ValueError:
            return None
    return None


def _coordinate(value: Any) -> Union[int, float, str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    if text.endswith("px"):
        try:
            return float(text[:-2])
        except ValueError:
            return text
    return text


def parse_position(value: Any) -> Optional[Position]:
    """
    Normalize a user-facing placement descriptor into a Position variant.

    Accepts Position models, anchor names (``"center"``, ``"top-right"``,
    ``"bottom"``), ``(x, y)`` pairs and ``{"x": ..., "y": ..., "anchor": ...}``
    dicts. A bare ``"50%"`` string places both axes at that percentage and
    ``"10% 90%"`` gives x then y. Coordinates may be numbers, ``"50%"``,
    ``"120px"`` or engine expressions. Anything unrecognised becomes a
    RawPosition; this never raises.

    Args:
        value: Placement descriptor or None

    Returns:
        Position variant, or None when no position was given
    """
    if value is None:
        return None
    if isinstance(value, _POSITION_TYPES):
        return value
    if isinstance(value, Anchor):
        return NamedPosition(anchor=value)
    if isinstance(value, str):
        try:
            return NamedPosition(anchor=Anchor.from_keyword(value))
        except ValueError:
            pass
        return _percent_string(value) or RawPosition(value=value)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return _point(value[0], value[1], None)
    if isinstance(value, dict):
        if value.get("kind") in ("named", "percent", "absolute", "raw"):
            try:
                return _position_from_document(value)
            except ValueError:
                return RawPosition(value=str(value))
        if "x" in value and "y" in value:
            return _point(value["x"], value["y"], _anchor_or_none(value.get("anchor")))
        if "anchor" in value:
            anchor = _anchor_or_none(value["anchor"])
            if anchor is not None:
                return NamedPosition(anchor=anchor, margin=value.get("margin"))
    return RawPosition(value=str(value))


def _percent_string(value: str) -> Optional[PercentPosition]:
    # "50%" places both axes; "10% 90%" gives x then y
    parts = value.split()
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2:
        return None
    x, y = (_percent_value(part) for part in parts)
    if x is None or y is None:
        return None
    return PercentPosition(x=x, y=y)


def _point(x: Any, y: Any, anchor: Optional[Anchor]) -> Position:
    px, py = _percent_value(x), _percent_value(y)
    if px is not None and py is not None:
        return PercentPosition(x=px, y=py, anchor=anchor)
    return AbsolutePosition(x=_coordinate(x), y=_coordinate(y), anchor=anchor)


def _position_from_document(value: Dict[str, Any]) -> Position:
    kind = value["kind"]
    model = {
        "named": NamedPosition,
        "percent": PercentPosition,
        "absolute": AbsolutePosition,
        "raw": RawPosition,
    }[kind]
    return model.model_validate(value)


# Kind-specific settings


class TextStyle(BaseModel):
    """Rendering attributes for text layers."""

    model_config = MODEL_CONFIG

    font_size: float = 24
    font_family: Optional[str] = None
    color: str = "white"
    background_color: Optional[str] = None
    background_padding: Optional[int] = None
    stroke_color: Optional[str] = None
    stroke_width: Optional[float] = None
    shadow_color: Optional[str] = None
    shadow_x: Optional[int] = None
    shadow_y: Optional[int] = None

    def merged(self, overrides: Optional["StyleLike"]) -> "TextStyle":
        """Return a copy with the explicitly set fields of ``overrides`` applied."""
        if overrides is None:
            return self
        if isinstance(overrides, TextStyle):
            changes = overrides.model_dump(exclude_unset=True)
        else:
            changes = TextStyle.model_validate(overrides).model_dump(exclude_unset=True)
        return TextStyle(**{**self.model_dump(), **changes})


StyleLike = Union[TextStyle, Dict[str, Any]]


def coerce_style(value: Optional[StyleLike]) -> Optional[TextStyle]:
    if value is None or isinstance(value, TextStyle):
        return value
    return TextStyle.model_validate(value)


class AudioSettings(BaseModel):
    """Per-layer audio processing for audio layers."""

    model_config = MODEL_CONFIG

    volume: Optional[float] = None
    fade_in: Optional[float] = Field(default=None, ge=0)
    fade_out: Optional[float] = Field(default=None, ge=0)
    trim_start: Optional[float] = Field(default=None, ge=0)
    trim_end: Optional[float] = Field(default=None, ge=0)
    tempo: Optional[float] = None
    lowpass: Optional[float] = None
    highpass: Optional[float] = None
    loop: Union[bool, int] = False

    @field_validator("loop")
    @classmethod
    def validate_loop(cls, v):
        """Reject negative loop counts."""
        if not isinstance(v, bool) and v < 0:
            raise ValueError(f"Loop count must be >= 0, got {v}")
        return v

    @property
    def loop_count(self) -> int:
        """Loop count for the engine (-1 loops forever)."""
        if self.loop is True:
            return -1
        if self.loop is False:
            return 0
        return self.loop


class VisualSettings(BaseModel):
    """Sizing, opacity and persistence for video and image layers."""

    model_config = MODEL_CONFIG

    width: Optional[int] = None
    height: Optional[int] = None
    scale: Optional[float] = None
    opacity: Optional[float] = None
    mute: bool = False
    persistent: bool = False


class ChromaKey(BaseModel):
    """Chroma-key settings for a foreground layer and its replacement background."""

    model_config = MODEL_CONFIG

    color: str = "#00FF00"
    similarity: float = 0.4
    blend: float = 0.1
    yuv: bool = False
    background: str
    background_type: Literal["image", "video"] = "image"
    background_scale: BackgroundScale = BackgroundScale.FILL
    background_loop: bool = False
    audio_mix: Literal["foreground", "background", "both", "none"] = "foreground"

    @property
    def engine_color(self) -> str:
        """Key color in the engine's ``0xRRGGBB`` form (malformed values pass through)."""
        if self.color.lower().startswith("0x"):
            return self.color
        return "0x" + self.color.lstrip("#")


# Layer


class Layer(BaseModel):
    """One timed, positioned piece of content or effect within a Timeline."""

    model_config = MODEL_CONFIG

    kind: LayerKind
    source: Optional[str] = None
    effect: Optional[str] = None
    start_time: float = Field(default=0.0, ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    position: Optional[Position] = None
    style: Optional[TextStyle] = None
    audio: Optional[AudioSettings] = None
    visual: Optional[VisualSettings] = None
    chroma_key: Optional[ChromaKey] = None
    transition: Optional[TransitionSpec] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_source(self):
        """Filter layers name an effect; every other kind needs a source."""
        if self.kind == LayerKind.FILTER:
            if not self.effect:
                raise ValueError("Filter layers require an effect name")
            if self.source is not None:
                raise ValueError("Filter layers cannot have a source")
        elif self.source is None:
            raise ValueError(f"{self.kind.value.capitalize()} layers require a source")
        return self

    @property
    def is_visual(self) -> bool:
        return self.kind in (LayerKind.VIDEO, LayerKind.IMAGE)

    @property
    def is_persistent(self) -> bool:
        return bool(self.visual and self.visual.persistent)

    def effective_duration(self) -> float:
        """Explicit duration, or the kind's entry in DEFAULT_DURATIONS."""
        if self.duration is not None:
            return self.duration
        return DEFAULT_DURATIONS[self.kind]

    def end_time(self) -> float:
        return self.start_time + self.effective_duration()

    def shifted(self, offset: float) -> "Layer":
        """Return a copy starting ``offset`` seconds later."""
        if not offset:
            return self
        return self.model_copy(update={"start_time": self.start_time + offset})
