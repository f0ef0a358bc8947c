"""Immutable Timeline: layers plus global options, built through copy-on-write calls."""

import math
import os
import re
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..core.errors import ConstructionError
from ..core.types import (
    Anchor,
    BackgroundScale,
    Easing,
    HardwareAcceleration,
    LayerKind,
    Platform,
    Quality,
)
from .captions import (
    CAPTION_PRESETS,
    DEFAULT_CAPTION_STYLE,
    HIGHLIGHT_PRESETS,
    CaptionInput,
    HighlightStyle,
    SubtitleEntry,
    caption_layers,
    format_srt,
    parse_srt,
    word_highlight_layers,
)
from .encoders import EncoderProfile
from .layers import (
    MODEL_CONFIG,
    AudioSettings,
    ChromaKey,
    Layer,
    NamedPosition,
    StyleLike,
    TextStyle,
    VisualSettings,
    coerce_style,
    parse_position,
)
from .pan_zoom import ZoomFrame, ken_burns_params, pan_zoom_params
from .transitions import TransitionSpec, coerce_transition


class Size(BaseModel):
    """Output size in pixels."""

    model_config = MODEL_CONFIG

    width: int = Field(gt=0)
    height: int = Field(gt=0)


class TrimWindow(BaseModel):
    """Output time window."""

    model_config = MODEL_CONFIG

    start: float = Field(ge=0)
    end: Optional[float] = None

    @model_validator(mode="after")
    def validate_window(self):
        """End must come after start."""
        if self.end is not None and self.end <= self.start:
            raise ValueError(f"Trim end ({self.end}) must be after start ({self.start})")
        return self


class CropRect(BaseModel):
    """Output crop rectangle."""

    model_config = MODEL_CONFIG

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    x: int = 0
    y: int = 0


class GlobalOptions(BaseModel):
    """Render settings that apply to the whole timeline."""

    model_config = MODEL_CONFIG

    resolution: Optional[Size] = None
    frame_rate: Optional[float] = Field(default=None, gt=0)
    aspect_ratio: Optional[str] = None
    duration: Optional[float] = Field(default=None, ge=0)
    trim: Optional[TrimWindow] = None
    crop: Optional[CropRect] = None
    encoder: Optional[EncoderProfile] = None
    hardware_acceleration: Optional[HardwareAcceleration] = None
    transition: Optional[TransitionSpec] = None


class PlatformValidation(BaseModel):
    """Outcome of checking a timeline against a platform's expectations."""

    model_config = {"frozen": True}

    platform: Platform
    is_valid: bool
    warnings: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()


PLATFORM_ASPECT_RATIOS = {
    Platform.TIKTOK: "9:16",
    Platform.INSTAGRAM: "1:1",
    Platform.YOUTUBE: "16:9",
    Platform.TWITTER: "16:9",
    Platform.LINKEDIN: "16:9",
}

PLATFORM_MAX_DURATIONS = {
    Platform.TIKTOK: 600.0,
    Platform.INSTAGRAM: 90.0,
    Platform.TWITTER: 140.0,
    Platform.LINKEDIN: 600.0,
}

GREEN_SCREEN_PRESETS: Dict[str, Dict[str, Any]] = {
    "reaction": {"similarity": 0.4, "blend": 0.1, "scale": BackgroundScale.FILL},
    "weather": {"similarity": 0.4, "blend": 0.1, "scale": BackgroundScale.FIT},
    "gaming": {"similarity": 0.45, "blend": 0.1, "scale": BackgroundScale.FILL},
    "educational": {"similarity": 0.35, "blend": 0.1, "scale": BackgroundScale.FIT},
    "news": {"similarity": 0.3, "blend": 0.05, "scale": BackgroundScale.FILL},
    "comedy": {"similarity": 0.5, "blend": 0.15, "scale": BackgroundScale.STRETCH},
    "custom": {"similarity": 0.4, "blend": 0.1, "scale": BackgroundScale.FILL},
}

VIDEO_EXTENSIONS = {".mp4", ".mov", ".webm", ".mkv", ".avi", ".m4v", ".gif"}

_ASPECT_RATIO = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[:/x]\s*(\d+(?:\.\d+)?)\s*$")


def _construct(model, **fields):
    """Build a pydantic model, reporting bad builder input as ConstructionError."""
    try:
        return model(**fields)
    except ValidationError as e:
        raise ConstructionError(str(e)) from e


def _optional_settings(model, **fields):
    present = {k: v for k, v in fields.items() if v is not None and v is not False}
    return _construct(model, **present) if present else None


class _LayerChain:
    """Append-only persistent list; appending shares the existing chain."""

    __slots__ = ("parent", "layer", "size", "_items")

    def __init__(self, parent: Optional["_LayerChain"], layer: Optional[Layer]):
        self.parent = parent
        self.layer = layer
        self.size = 0 if parent is None else parent.size + 1
        self._items: Optional[Tuple[Layer, ...]] = () if parent is None else None

    def append(self, layer: Layer) -> "_LayerChain":
        return _LayerChain(self, layer)

    def extend(self, layers: Iterable[Layer]) -> "_LayerChain":
        chain = self
        for layer in layers:
            chain = chain.append(layer)
        return chain

    def items(self) -> Tuple[Layer, ...]:
        if self._items is None:
            pending = []
            node = self
            while node._items is None:
                pending.append(node.layer)
                node = node.parent
            # Memoized; the content of a chain node never changes
            self._items = node._items + tuple(reversed(pending))
        return self._items


_EMPTY_CHAIN = _LayerChain(None, None)


class Timeline:
    """
    Immutable, ordered collection of layers plus global render options.

    Every builder method returns a new Timeline and leaves the receiver
    untouched, so timelines can be branched and shared freely.
    """

    def __init__(
        self,
        layers: Iterable[Layer] = (),
        global_options: Optional[GlobalOptions] = None,
    ):
        """
        Initialize timeline.

        Args:
            layers: Initial layers in insertion order
            global_options: Render settings (defaults to none set)
        """
        self._chain = _EMPTY_CHAIN.extend(layers)
        self._options = global_options or GlobalOptions()

    @classmethod
    def _derive(cls, chain: _LayerChain, options: GlobalOptions) -> "Timeline":
        timeline = cls.__new__(cls)
        timeline._chain = chain
        timeline._options = options
        return timeline

    # Accessors
    @property
    def layers(self) -> Tuple[Layer, ...]:
        return self._chain.items()

    @property
    def global_options(self) -> GlobalOptions:
        return self._options

    def get_layers(self) -> Tuple[Layer, ...]:
        return self.layers

    def __len__(self) -> int:
        return self._chain.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timeline):
            return NotImplemented
        return self.layers == other.layers and self._options == other._options

    __hash__ = None

    def __repr__(self) -> str:
        return f"Timeline(layers={len(self)}, duration={self.get_duration():g})"

    # Internal copy-on-write helpers
    def _with_layer(self, layer: Layer) -> "Timeline":
        return self._derive(self._chain.append(layer), self._options)

    def _with_layers(self, layers: Iterable[Layer]) -> "Timeline":
        return self._derive(self._chain.extend(layers), self._options)

    def _with_options(self, **changes) -> "Timeline":
        fields = {name: getattr(self._options, name) for name in GlobalOptions.model_fields}
        fields.update(changes)
        return self._derive(self._chain, _construct(GlobalOptions, **fields))

    # Layers
    def add_video(
        self,
        source: str,
        *,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        position: Any = None,
        volume: Optional[float] = None,
        mute: bool = False,
        width: Optional[int] = None,
        height: Optional[int] = None,
        scale: Optional[float] = None,
        opacity: Optional[float] = None,
        transition: Any = None,
    ) -> "Timeline":
        """
        Add a video layer.

        The first video layer is the base of the composition; later ones are
        overlaid at their position from ``start_time`` on.

        Args:
            source: Video file path
            start_time: When the layer starts in the timeline (seconds)
            duration: How long it plays (seconds, None = whole clip)
            position: Placement descriptor for overlaid videos
            volume: Audio gain for this video's soundtrack
            mute: Leave this video's audio out of the mix
            width: Target width in pixels
            height: Target height in pixels
            scale: Scale factor relative to the source size
            opacity: Opacity from 0.0 to 1.0
            transition: Transition spec or preset name

        Returns:
            New Timeline with the layer appended
        """
        layer = _construct(
            Layer,
            kind=LayerKind.VIDEO,
            source=source,
            start_time=start_time,
            duration=duration,
            position=parse_position(position),
            audio=_optional_settings(AudioSettings, volume=volume),
            visual=_optional_settings(
                VisualSettings,
                width=width,
                height=height,
                scale=scale,
                opacity=opacity,
                mute=mute,
            ),
            transition=coerce_transition(transition),
        )
        return self._with_layer(layer)

    def add_audio(
        self,
        source: str,
        *,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        volume: Optional[float] = None,
        fade_in: Optional[float] = None,
        fade_out: Optional[float] = None,
        trim_start: Optional[float] = None,
        trim_end: Optional[float] = None,
        tempo: Optional[float] = None,
        lowpass: Optional[float] = None,
        highpass: Optional[float] = None,
        loop: Union[bool, int] = False,
    ) -> "Timeline":
        """
        Add an audio layer mixed with the other audio sources.

        Args:
            source: Audio file path
            start_time: Delay before the audio starts (seconds)
            duration: Cut the audio after this many seconds
            volume: Gain multiplier
            fade_in: Fade-in length (seconds)
            fade_out: Fade-out length (seconds)
            trim_start: Offset into the source to start from
            trim_end: Offset into the source to stop at
            tempo: Playback tempo multiplier
            lowpass: Low-pass cutoff frequency (Hz)
            highpass: High-pass cutoff frequency (Hz)
            loop: True to loop forever, or a number of extra repetitions

        Returns:
            New Timeline with the layer appended

        Raises:
            ConstructionError: If the loop count is negative
        """
        layer = _construct(
            Layer,
            kind=LayerKind.AUDIO,
            source=source,
            start_time=start_time,
            duration=duration,
            audio=_construct(
                AudioSettings,
                volume=volume,
                fade_in=fade_in,
                fade_out=fade_out,
                trim_start=trim_start,
                trim_end=trim_end,
                tempo=tempo,
                lowpass=lowpass,
                highpass=highpass,
                loop=loop,
            ),
        )
        return self._with_layer(layer)

    def add_image(
        self,
        source: str,
        *,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        position: Any = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        scale: Optional[float] = None,
        opacity: Optional[float] = None,
        persistent: bool = False,
        transition: Any = None,
    ) -> "Timeline":
        """
        Add an image layer.

        Args:
            source: Image file path
            start_time: When the image appears (seconds)
            duration: How long it stays (seconds, default 5)
            position: Placement descriptor
            width: Target width in pixels
            height: Target height in pixels
            scale: Scale factor relative to the source size
            opacity: Opacity from 0.0 to 1.0
            persistent: Show for the whole timeline (watermarks, logos)
            transition: Transition spec or preset name

        Returns:
            New Timeline with the layer appended
        """
        layer = _construct(
            Layer,
            kind=LayerKind.IMAGE,
            source=source,
            start_time=start_time,
            duration=duration,
            position=parse_position(position),
            visual=_optional_settings(
                VisualSettings,
                width=width,
                height=height,
                scale=scale,
                opacity=opacity,
                persistent=persistent,
            ),
            transition=coerce_transition(transition),
        )
        return self._with_layer(layer)

    def add_text(
        self,
        text: str,
        *,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        position: Any = None,
        style: Optional[StyleLike] = None,
        transition: Any = None,
    ) -> "Timeline":
        """
        Add a text layer drawn over the video.

        Args:
            text: Text to draw
            start_time: When the text appears (seconds)
            duration: How long it stays (seconds, default 5)
            position: Placement descriptor (default centered)
            style: TextStyle or dict of style fields
            transition: Transition spec or preset name; fades animate opacity

        Returns:
            New Timeline with the layer appended
        """
        layer = _construct(
            Layer,
            kind=LayerKind.TEXT,
            source=text,
            start_time=start_time,
            duration=duration,
            position=parse_position(position),
            style=self._style(style),
            transition=coerce_transition(transition),
        )
        return self._with_layer(layer)

    def add_filter(
        self, effect: str, params: Optional[Dict[str, Any]] = None
    ) -> "Timeline":
        """
        Add a named effect from the effect registry.

        Unknown names are accepted here and rejected when the timeline is
        compiled, so custom registries can supply them.

        Args:
            effect: Effect name (e.g. "brightness", "blur", "volume")
            params: Effect parameters

        Returns:
            New Timeline with the filter layer appended
        """
        layer = _construct(
            Layer, kind=LayerKind.FILTER, effect=effect, params=dict(params or {})
        )
        return self._with_layer(layer)

    @staticmethod
    def _style(style: Optional[StyleLike]) -> Optional[TextStyle]:
        try:
            return coerce_style(style)
        except ValidationError as e:
            raise ConstructionError(str(e)) from e

    # Global options
    def trim(self, start: float, end: Optional[float] = None) -> "Timeline":
        """Restrict the output to ``start``..``end`` seconds."""
        return self._with_options(trim=_construct(TrimWindow, start=start, end=end))

    def scale(self, width: int, height: int) -> "Timeline":
        """Scale the final output to ``width`` x ``height``."""
        return self._with_options(resolution=_construct(Size, width=width, height=height))

    def set_resolution(self, width: int, height: int) -> "Timeline":
        return self.scale(width, height)

    def crop(self, width: int, height: int, x: int = 0, y: int = 0) -> "Timeline":
        """Crop the final output to a rectangle."""
        return self._with_options(
            crop=_construct(CropRect, width=width, height=height, x=x, y=y)
        )

    def set_aspect_ratio(self, ratio: str) -> "Timeline":
        """
        Crop the output to an aspect ratio such as ``"16:9"`` or ``"9:16"``.

        Raises:
            ConstructionError: If the ratio is not ``W:H`` with positive numbers
        """
        match = _ASPECT_RATIO.match(str(ratio))
        if not match or float(match.group(1)) <= 0 or float(match.group(2)) <= 0:
            raise ConstructionError(f"Invalid aspect ratio: {ratio!r}")
        return self._with_options(aspect_ratio=f"{match.group(1)}:{match.group(2)}")

    def set_frame_rate(self, fps: float) -> "Timeline":
        return self._with_options(frame_rate=fps)

    def set_duration(self, seconds: float) -> "Timeline":
        """Set an explicit output duration, overriding the layer-derived one."""
        return self._with_options(duration=seconds)

    def set_encoder(self, encoder: EncoderProfile) -> "Timeline":
        return self._with_options(encoder=encoder)

    def _encoder(self) -> EncoderProfile:
        return self._options.encoder or EncoderProfile.h264()

    def set_video_codec(self, codec: str, **options) -> "Timeline":
        """Change the video codec, keeping other encoder settings."""
        try:
            encoder = self._encoder().with_video(codec, **options)
        except ValidationError as e:
            raise ConstructionError(str(e)) from e
        return self._with_options(encoder=encoder)

    def set_audio_codec(self, codec: str, **options) -> "Timeline":
        """Change the audio codec, keeping other encoder settings."""
        try:
            encoder = self._encoder().with_audio(codec, **options)
        except ValidationError as e:
            raise ConstructionError(str(e)) from e
        return self._with_options(encoder=encoder)

    def set_quality(self, quality: Union[Quality, str]) -> "Timeline":
        """Use the H.264 settings of a quality tier (low, medium, high, ultra)."""
        try:
            quality = Quality(quality)
        except ValueError:
            raise ConstructionError(f"Unknown quality: {quality!r}") from None
        return self._with_options(encoder=EncoderProfile.for_quality(quality))

    def use_codec_preset(self, name: str) -> "Timeline":
        """Use a named codec preset (archival, streaming, mobile, ...)."""
        return self._with_options(encoder=EncoderProfile.from_preset(name))

    def set_hardware_acceleration(
        self, accel: Union[HardwareAcceleration, str, None]
    ) -> "Timeline":
        """Request hardware-accelerated decoding (None turns it off)."""
        if accel is not None:
            try:
                accel = HardwareAcceleration(accel)
            except ValueError:
                raise ConstructionError(
                    f"Unknown hardware acceleration: {accel!r}"
                ) from None
        return self._with_options(hardware_acceleration=accel)

    def set_transition(self, transition: Any) -> "Timeline":
        """Join consecutive clips with a transition (spec, type or preset name)."""
        try:
            spec = coerce_transition(transition)
        except ValidationError as e:
            raise ConstructionError(str(e)) from e
        return self._with_options(transition=spec)

    # Composition
    def concat(self, *others: "Timeline") -> "Timeline":
        """
        Append other timelines after this one.

        Each timeline's layers are shifted by the duration accumulated so
        far; global options of the receiver are kept.

        Raises:
            ConstructionError: If no timelines are given
        """
        if not others:
            raise ConstructionError("concat() needs at least one timeline")
        result = self
        for other in others:
            if not isinstance(other, Timeline):
                raise ConstructionError(f"Cannot concat {type(other).__name__}")
            offset = result.get_duration()
            result = result._with_layers(layer.shifted(offset) for layer in other.layers)
        return result

    @classmethod
    def concat_all(cls, timelines: Sequence["Timeline"]) -> "Timeline":
        """Concatenate a non-empty sequence of timelines in order."""
        if not timelines:
            raise ConstructionError("concat_all() needs at least one timeline")
        first, *rest = timelines
        return first.concat(*rest) if rest else first

    def merge(self, other: "Timeline") -> "Timeline":
        """Add another timeline's layers without shifting them."""
        return self._with_layers(other.layers)

    def pipe(self, fn: Callable[..., "Timeline"], *args, **kwargs) -> "Timeline":
        """Apply ``fn(timeline, *args, **kwargs)`` and return its result."""
        result = fn(self, *args, **kwargs)
        if not isinstance(result, Timeline):
            raise ConstructionError(
                f"pipe() function must return a Timeline, got {type(result).__name__}"
            )
        return result

    # Duration
    def get_duration(self) -> float:
        """
        Get the output duration in seconds.

        An explicit duration wins. Otherwise the latest end time over all
        timed layers (filters and persistent images do not count), cut down
        by the trim window when one is set. Empty timelines last 0 seconds.
        """
        if self._options.duration is not None:
            return self._options.duration

        ends = [
            layer.end_time()
            for layer in self.layers
            if layer.kind != LayerKind.FILTER and not layer.is_persistent
        ]
        total = max(ends) if ends else 0.0

        trim = self._options.trim
        if trim is not None:
            end = trim.end if trim.end is not None else total
            total = max(0.0, end - trim.start)
        return total

    @property
    def duration(self) -> float:
        return self.get_duration()

    # Convenience builders
    def add_watermark(
        self,
        source: str,
        position: Any = Anchor.BOTTOM_RIGHT,
        *,
        opacity: Optional[float] = None,
        scale: Optional[float] = None,
        margin: float = 20,
    ) -> "Timeline":
        """Overlay an image for the whole timeline at a corner, inset by ``margin``."""
        placement = parse_position(position)
        if isinstance(placement, NamedPosition) and placement.margin is None:
            placement = NamedPosition(anchor=placement.anchor, margin=margin)
        return self.add_image(
            source, position=placement, opacity=opacity, scale=scale, persistent=True
        )

    def add_picture_in_picture(
        self,
        source: str,
        position: Any = Anchor.BOTTOM_RIGHT,
        *,
        scale: float = 0.25,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        mute: bool = True,
    ) -> "Timeline":
        """Overlay a scaled-down video in a corner."""
        return self.add_video(
            source,
            start_time=start_time,
            duration=duration,
            position=position,
            scale=scale,
            mute=mute,
        )

    def add_slideshow(
        self,
        images: Sequence[str],
        duration_per_slide: float = 3.0,
        *,
        start_time: float = 0.0,
        transition: Any = None,
    ) -> "Timeline":
        """
        Show images one after another.

        Args:
            images: Image paths in display order
            duration_per_slide: Seconds per image
            start_time: When the first slide appears
            transition: Optional transition between slides

        Returns:
            New Timeline with one image layer per slide
        """
        if not images:
            raise ConstructionError("add_slideshow() needs at least one image")
        result = self
        for i, image in enumerate(images):
            result = result.add_image(
                image,
                start_time=start_time + i * duration_per_slide,
                duration=duration_per_slide,
            )
        if transition is not None:
            result = result.set_transition(transition)
        return result

    # Captions and subtitles
    def add_captions(
        self,
        captions: Sequence[CaptionInput],
        *,
        style: Optional[StyleLike] = None,
        preset: Optional[str] = None,
        position: Any = None,
        transition: Any = None,
        start_delay: float = 0.0,
        overlap: float = 0.1,
        words_per_minute: float = 200,
    ) -> "Timeline":
        """
        Add timed captions.

        Plain strings are shown back to back for their reading time; dicts
        with ``start``/``duration`` (or ``end``) and SubtitleEntry values
        keep their own timing.

        Args:
            captions: Caption texts or timed caption records
            style: Style overrides on top of the preset or default style
            preset: instagram, tiktok, youtube, linkedin or pinterest
            position: Placement (defaults to the preset's, else bottom)
            transition: Transition for each caption
            start_delay: When the first automatically timed caption starts
            overlap: Fraction of each caption overlapped by the next
            words_per_minute: Reading speed for automatic timing

        Returns:
            New Timeline with one text layer per caption
        """
        base_style, anchor = DEFAULT_CAPTION_STYLE, Anchor.BOTTOM_CENTER
        if preset is not None:
            if preset not in CAPTION_PRESETS:
                raise ConstructionError(
                    f"Unknown caption preset '{preset}'. "
                    f"Available: {', '.join(sorted(CAPTION_PRESETS))}"
                )
            base_style, anchor = CAPTION_PRESETS[preset]
        try:
            merged = base_style.merged(style)
            layers = caption_layers(
                captions,
                style=merged,
                position=parse_position(position if position is not None else anchor),
                transition=coerce_transition(transition),
                start_delay=start_delay,
                overlap=overlap,
                words_per_minute=words_per_minute,
            )
        except ValidationError as e:
            raise ConstructionError(str(e)) from e
        return self._with_layers(layers)

    def add_word_highlighting(
        self,
        text: str,
        *,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        preset: str = "tiktok",
        position: Any = None,
        words_per_second: float = 2.5,
        **style_overrides,
    ) -> "Timeline":
        """
        Add karaoke-style captions that highlight each word in turn.

        Args:
            text: Phrase to display
            start_time: When the phrase appears
            duration: Phrase length (default: paced by ``words_per_second``)
            preset: tiktok, instagram, youtube, karaoke or typewriter
            position: Placement of the phrase block (default centered)
            words_per_second: Speaking pace
            **style_overrides: HighlightStyle fields to override

        Returns:
            New Timeline with two text layers per word
        """
        if preset not in HIGHLIGHT_PRESETS:
            raise ConstructionError(
                f"Unknown highlight preset '{preset}'. "
                f"Available: {', '.join(sorted(HIGHLIGHT_PRESETS))}"
            )
        if words_per_second <= 0:
            raise ConstructionError("words_per_second must be positive")
        base = HIGHLIGHT_PRESETS[preset]
        style = _construct(HighlightStyle, **{**base.model_dump(), **style_overrides})
        layers = word_highlight_layers(
            text,
            start_time,
            duration,
            style=style,
            position=parse_position(position),
            words_per_second=words_per_second,
        )
        return self._with_layers(layers)

    def add_subtitles(
        self,
        subtitles: Union[str, Sequence[SubtitleEntry]],
        *,
        style: Optional[StyleLike] = None,
        position: Any = Anchor.BOTTOM_CENTER,
        strict: bool = False,
    ) -> "Timeline":
        """
        Import subtitles as timed text layers.

        Args:
            subtitles: SRT document text or parsed entries
            style: Style overrides on top of the default caption style
            position: Placement (default bottom center)
            strict: Reject malformed SRT blocks instead of skipping them

        Returns:
            New Timeline with one text layer per cue
        """
        entries = parse_srt(subtitles, strict=strict) if isinstance(subtitles, str) else list(subtitles)
        return self.add_captions(entries, style=style, position=position)

    def to_srt(self, line_ending: str = "\n") -> str:
        """Export text layers as an SRT document, ordered by start time."""
        texts = sorted(
            (
                (layer.start_time, i, layer)
                for i, layer in enumerate(self.layers)
                if layer.kind == LayerKind.TEXT
            ),
            key=lambda item: (item[0], item[1]),
        )
        entries = [
            SubtitleEntry(
                index=n,
                start=layer.start_time,
                end=layer.end_time(),
                text=layer.source,
            )
            for n, (_, _, layer) in enumerate(texts, 1)
        ]
        return format_srt(entries, line_ending=line_ending)

    # Green screen
    def add_green_screen_with_image_background(
        self,
        foreground: str,
        background: str,
        *,
        chroma_key: str = "#00FF00",
        similarity: float = 0.4,
        blend: float = 0.1,
        yuv: bool = False,
        background_scale: Union[BackgroundScale, str] = BackgroundScale.FILL,
        start_time: float = 0.0,
        duration: Optional[float] = None,
        position: Any = None,
    ) -> "Timeline":
        """
        Key out a color from a video and place it over an image.

        Similarity, blend and color are passed to the engine unchecked.

        Args:
            foreground: Video shot against a flat color
            background: Replacement background image
            chroma_key: Color to remove (``#RRGGBB``)
            similarity: Color distance treated as key, 0.01 to 1
            blend: Edge softness, 0 to 1
            yuv: Compare colors in YUV space
            background_scale: fit, fill, stretch or crop
            start_time: When the composite starts
            duration: Composite length
            position: Placement when the composite is not the base layer

        Returns:
            New Timeline with the keyed layer appended
        """
        return self._green_screen(
            foreground,
            chroma=dict(
                color=chroma_key,
                similarity=similarity,
                blend=blend,
                yuv=yuv,
                background=background,
                background_type="image",
                background_scale=background_scale,
            ),
            start_time=start_time,
            duration=duration,
            position=position,
        )

    def add_green_screen_with_video_background(
        self,
        foreground: str,
        background: str,
        *,
        chroma_key: str = "#00FF00",
        similarity: float = 0.4,
        blend: float = 0.1,
        yuv: bool = False,
        background_scale: Union[BackgroundScale, str] = BackgroundScale.FILL,
        background_loop: bool = False,
        audio_mix: str = "foreground",
        start_time: float = 0.0,
        duration: Optional[float] = None,
        position: Any = None,
    ) -> "Timeline":
        """
        Key out a color from a video and place it over another video.

        Args:
            foreground: Video shot against a flat color
            background: Replacement background video
            chroma_key: Color to remove (``#RRGGBB``)
            similarity: Color distance treated as key, 0.01 to 1
            blend: Edge softness, 0 to 1
            yuv: Compare colors in YUV space
            background_scale: fit, fill, stretch or crop
            background_loop: Loop the background to cover the foreground
            audio_mix: foreground, background, both or none
            start_time: When the composite starts
            duration: Composite length
            position: Placement when the composite is not the base layer

        Returns:
            New Timeline with the keyed layer appended
        """
        return self._green_screen(
            foreground,
            chroma=dict(
                color=chroma_key,
                similarity=similarity,
                blend=blend,
                yuv=yuv,
                background=background,
                background_type="video",
                background_scale=background_scale,
                background_loop=background_loop,
                audio_mix=audio_mix,
            ),
            start_time=start_time,
            duration=duration,
            position=position,
        )

    def add_green_screen_meme(
        self,
        foreground: str,
        background: str,
        preset: str = "reaction",
        *,
        intensity: Optional[str] = None,
        professional: bool = False,
        chroma_key: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> "Timeline":
        """
        Green-screen composite tuned for a meme style.

        The background type (image or video) is picked from its file
        extension.

        Args:
            foreground: Video shot against a green screen
            background: Replacement image or video
            preset: reaction, weather, gaming, educational, news, comedy or custom
            intensity: "low" or "high" keying strength
            professional: Tighter keying with letterboxed background (weather)
            chroma_key: Key color (custom preset, default green)
            duration: Composite length

        Returns:
            New Timeline with the keyed layer appended
        """
        if preset not in GREEN_SCREEN_PRESETS:
            raise ConstructionError(
                f"Unknown green screen preset '{preset}'. "
                f"Available: {', '.join(sorted(GREEN_SCREEN_PRESETS))}"
            )
        settings = dict(GREEN_SCREEN_PRESETS[preset])
        if preset == "weather" and professional:
            settings.update(similarity=0.3, blend=0.05, scale=BackgroundScale.FIT)
        if intensity == "high":
            settings["similarity"] = 0.5
        elif intensity == "low":
            settings["similarity"] = 0.3
        elif intensity is not None:
            raise ConstructionError(f"Unknown intensity: {intensity!r}")

        extension = os.path.splitext(background)[1].lower()
        is_video = extension in VIDEO_EXTENSIONS
        return self._green_screen(
            foreground,
            chroma=dict(
                color=chroma_key or "#00FF00",
                similarity=settings["similarity"],
                blend=settings["blend"],
                background=background,
                background_type="video" if is_video else "image",
                background_scale=settings["scale"],
                background_loop=is_video,
            ),
            start_time=0.0,
            duration=duration,
            position=None,
        )

    def _green_screen(
        self,
        foreground: str,
        chroma: Dict[str, Any],
        start_time: float,
        duration: Optional[float],
        position: Any,
    ) -> "Timeline":
        layer = _construct(
            Layer,
            kind=LayerKind.VIDEO,
            source=foreground,
            start_time=start_time,
            duration=duration,
            position=parse_position(position),
            chroma_key=_construct(ChromaKey, **chroma),
        )
        return self._with_layer(layer)

    # Motion
    def add_pan_zoom(
        self,
        start: Optional[ZoomFrame] = None,
        end: Optional[ZoomFrame] = None,
        *,
        duration: float = 5.0,
        easing: Union[Easing, str] = Easing.EASE_IN_OUT,
        fps: int = 25,
    ) -> "Timeline":
        """Animate zoom and focus of the base clip from ``start`` to ``end``."""
        if duration <= 0:
            raise ConstructionError("Pan/zoom duration must be positive")
        params = pan_zoom_params(
            start or ZoomFrame(),
            end or ZoomFrame(zoom=1.5),
            duration,
            easing,
            self._output_size(),
            fps,
        )
        return self.add_filter("zoompan", params)

    def add_ken_burns(
        self,
        focus: Union[Anchor, str] = Anchor.CENTER,
        *,
        start_zoom: float = 1.0,
        end_zoom: float = 1.3,
        duration: float = 5.0,
        easing: Union[Easing, str] = Easing.EASE_IN_OUT,
    ) -> "Timeline":
        """Slow zoom toward ``focus`` over ``duration`` seconds."""
        if duration <= 0:
            raise ConstructionError("Ken Burns duration must be positive")
        try:
            params = ken_burns_params(
                focus, start_zoom, end_zoom, duration, easing, self._output_size()
            )
        except ValueError as e:
            raise ConstructionError(str(e)) from e
        return self.add_filter("zoompan", params)

    def _output_size(self) -> Tuple[int, int]:
        size = self._options.resolution
        return (size.width, size.height) if size else (1920, 1080)

    # Platform checks
    def validate_for_platform(self, platform: Union[Platform, str]) -> PlatformValidation:
        """
        Check aspect ratio and length against a platform's expectations.

        Args:
            platform: tiktok, instagram, youtube, twitter or linkedin

        Returns:
            Validation result with warnings, errors and suggestions

        Raises:
            ConstructionError: If the platform is unknown
        """
        try:
            platform = Platform(platform)
        except ValueError:
            raise ConstructionError(
                f"Unknown platform: {platform!r}. "
                f"Available: {', '.join(p.value for p in Platform)}"
            ) from None

        warnings: List[str] = []
        errors: List[str] = []
        suggestions: List[str] = []
        expected = PLATFORM_ASPECT_RATIOS[platform]

        actual = self._options.aspect_ratio
        if actual is None and self._options.resolution is not None:
            size = self._options.resolution
            divisor = math.gcd(size.width, size.height)
            actual = f"{size.width // divisor}:{size.height // divisor}"

        if actual is None:
            warnings.append(f"No aspect ratio set; {platform.value} expects {expected}")
            suggestions.append(f"Call set_aspect_ratio('{expected}')")
        elif _ratio_value(actual) != _ratio_value(expected):
            errors.append(
                f"Aspect ratio {actual} does not match {platform.value} ({expected})"
            )
            suggestions.append(f"Call set_aspect_ratio('{expected}')")

        max_duration = PLATFORM_MAX_DURATIONS.get(platform)
        duration = self.get_duration()
        if max_duration is not None and duration > max_duration:
            warnings.append(
                f"Duration {duration:g}s exceeds the {platform.value} limit of {max_duration:g}s"
            )
            suggestions.append(f"Call trim(0, {max_duration:g})")

        if not len(self):
            warnings.append("Timeline has no layers")

        return PlatformValidation(
            platform=platform,
            is_valid=not errors,
            warnings=tuple(warnings),
            errors=tuple(errors),
            suggestions=tuple(suggestions),
        )

    # Output
    def compile(
        self,
        output_path: str,
        encoder: Optional[EncoderProfile] = None,
        executable: str = "ffmpeg",
    ):
        """Compile to a CompiledCommand (argument list plus string form)."""
        from .compiler import CommandCompiler

        return CommandCompiler(executable=executable).compile(self, output_path, encoder)

    def get_command(
        self,
        output_path: str,
        encoder: Optional[EncoderProfile] = None,
        executable: str = "ffmpeg",
    ) -> str:
        """
        Generate the engine command without executing it.

        Args:
            output_path: Destination file
            encoder: Encoder override (default: timeline encoder, else H.264)
            executable: Engine executable name

        Returns:
            Shell-ready command string
        """
        return self.compile(output_path, encoder, executable).to_string()

    def render(self, output_path: str, ctx=None, check: bool = True, timeout=None):
        """
        Compile and execute the timeline.

        Args:
            output_path: Destination file
            ctx: Media context (default: the process-wide default context)
            check: Raise EngineError when the engine fails
            timeout: Seconds before the engine is stopped

        Returns:
            ExecutionResult with the engine's exit code and output
        """
        from .context import default_context
        from .executor import Executor

        ctx = ctx or default_context()
        command = self.compile(output_path, executable=ctx.ffmpeg)
        return Executor(ctx).run(command, check=check, timeout=timeout)

    # Serialization
    def to_dict(self) -> Dict[str, Any]:
        from .serialization import timeline_to_dict

        return timeline_to_dict(self)

    def to_json(self, indent: Optional[int] = None) -> str:
        from .serialization import timeline_to_json

        return timeline_to_json(self, indent=indent)

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "Timeline":
        from .serialization import timeline_from_dict

        return timeline_from_dict(document)

    @classmethod
    def from_json(cls, text: str) -> "Timeline":
        from .serialization import timeline_from_json

        return timeline_from_json(text)


def _ratio_value(ratio: str) -> float:
    match = _ASPECT_RATIO.match(ratio)
    if not match:
        return float("nan")
    return round(float(match.group(1)) / float(match.group(2)), 4)
