"""Captions, word highlighting and SRT subtitle interchange."""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from pydantic import BaseModel, Field, model_validator

from ..core.errors import ConstructionError
from ..core.types import Anchor, LayerKind
from .layers import (
    MODEL_CONFIG,
    AbsolutePosition,
    Layer,
    NamedPosition,
    Position,
    TextStyle,
)
from .positions import PositionTarget, resolve_position
from .transitions import TransitionSpec

logger = logging.getLogger(__name__)


# SRT


class SubtitleEntry(BaseModel):
    """One subtitle cue: index, start and end in seconds, and text."""

    model_config = MODEL_CONFIG

    index: int
    start: float = Field(ge=0)
    end: float = Field(ge=0)
    text: str

    @model_validator(mode="after")
    def validate_window(self):
        """End must not precede start."""
        if self.end < self.start:
            raise ValueError(f"Subtitle {self.index} ends before it starts")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start


_TIMESTAMP = r"(\d{1,2}):(\d{2}):(\d{2})[,.](\d{1,3})"
_TIMING_LINE = re.compile(rf"^\s*{_TIMESTAMP}\s*-->\s*{_TIMESTAMP}")


def parse_timestamp(value: str) -> float:
    """Parse ``HH:MM:SS,mmm`` (or with ``.``) into seconds."""
    match = re.fullmatch(_TIMESTAMP, value.strip())
    if not match:
        raise ConstructionError(f"Invalid SRT timestamp: {value!r}")
    h, m, s, ms = match.groups()
    return int(h) * 3600 + int(m) * 60 + int(s) + int(ms.ljust(3, "0")) / 1000


def format_timestamp(seconds: float) -> str:
    """Format seconds as an SRT ``HH:MM:SS,mmm`` timestamp."""
    total_ms = int(round(max(seconds, 0) * 1000))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def _timing_seconds(groups: Sequence[str]) -> float:
    h, m, s, ms = groups
    return int(h) * 3600 + int(m) * 60 + int(s) + int(ms.ljust(3, "0")) / 1000


def parse_srt(
    content: str, strict: bool = False, preserve_empty: bool = False
) -> List[SubtitleEntry]:
    """
    Parse SRT subtitle text.

    Tolerates a byte-order mark, CRLF line endings, a missing index line and
    ``.`` as the millisecond separator. Malformed blocks are skipped with a
    warning unless ``strict`` is set.

    Args:
        content: SRT document text
        strict: Raise on the first malformed block instead of skipping it
        preserve_empty: Keep cues whose text is empty

    Returns:
        Parsed entries in document order

    Raises:
        ConstructionError: In strict mode, when a block cannot be parsed
    """
    text = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    entries: List[SubtitleEntry] = []

    for block_number, block in enumerate(re.split(r"\n\s*\n", text.strip()), 1):
        lines = [line.rstrip() for line in block.split("\n")]
        if not lines or not any(lines):
            continue

        if lines[0].strip().isdigit():
            index = int(lines[0].strip())
            timing, body = (lines[1] if len(lines) > 1 else ""), lines[2:]
        else:
            index = len(entries) + 1
            timing, body = lines[0], lines[1:]

        match = _TIMING_LINE.match(timing)
        if not match:
            if strict:
                raise ConstructionError(
                    f"Malformed SRT block {block_number}: {timing!r}"
                )
            logger.warning(f"Skipping malformed SRT block {block_number}: {timing!r}")
            continue

        start = _timing_seconds(match.groups()[:4])
        end = _timing_seconds(match.groups()[4:])
        cue_text = "\n".join(body).strip()
        if not cue_text and not preserve_empty:
            continue
        if end < start:
            if strict:
                raise ConstructionError(
                    f"SRT block {block_number} ends before it starts"
                )
            logger.warning(f"Skipping SRT block {block_number}: end before start")
            continue

        entries.append(SubtitleEntry(index=index, start=start, end=end, text=cue_text))

    return entries


def format_srt(
    entries: Sequence[SubtitleEntry], line_ending: str = "\n", bom: bool = False
) -> str:
    """
    Render entries as an SRT document.

    Args:
        entries: Cues to write, in order
        line_ending: ``"\\n"`` or ``"\\r\\n"``
        bom: Prefix a UTF-8 byte-order mark

    Returns:
        SRT document text
    """
    blocks = []
    for entry in entries:
        body = line_ending.join(entry.text.split("\n"))
        blocks.append(
            f"{entry.index}{line_ending}"
            f"{format_timestamp(entry.start)} --> {format_timestamp(entry.end)}"
            f"{line_ending}{body}{line_ending}"
        )
    document = line_ending.join(blocks)
    return ("\ufeff" + document) if bom else document


# Caption timing


def reading_duration(
    text: str,
    words_per_minute: float = 200,
    minimum: float = 1.0,
    maximum: float = 10.0,
) -> float:
    """On-screen time for a caption: reading time plus half a second, clamped."""
    words = len(text.split())
    seconds = words / words_per_minute * 60 + 0.5
    return min(max(seconds, minimum), maximum)


def staggered_timings(
    texts: Sequence[str],
    start_delay: float = 0.0,
    overlap: float = 0.1,
    words_per_minute: float = 200,
) -> List[Tuple[float, float]]:
    """
    Compute back-to-back caption windows.

    Each caption starts before the previous one ends by ``overlap`` times
    the previous caption's duration.

    Returns:
        ``(start, duration)`` pairs, one per text
    """
    timings = []
    current = start_delay
    for text in texts:
        duration = reading_duration(text, words_per_minute)
        timings.append((current, duration))
        current = current + duration - duration * overlap
    return timings


# Caption styles

DEFAULT_CAPTION_STYLE = TextStyle(
    font_size=32, color="#ffffff", stroke_color="#000000", stroke_width=2
)

CAPTION_PRESETS: Dict[str, Tuple[TextStyle, Anchor]] = {
    "instagram": (
        TextStyle(font_size=48, color="#ffffff", stroke_color="#000000", stroke_width=3),
        Anchor.BOTTOM_CENTER,
    ),
    "tiktok": (
        TextStyle(font_size=56, color="#ffffff", stroke_color="#000000", stroke_width=4),
        Anchor.CENTER,
    ),
    "youtube": (
        TextStyle(
            font_size=40,
            color="#ffffff",
            background_color="rgba(0,0,0,0.7)",
            background_padding=10,
        ),
        Anchor.BOTTOM_CENTER,
    ),
    "linkedin": (
        TextStyle(
            font_size=36,
            color="#ffffff",
            background_color="#0A66C2",
            background_padding=8,
        ),
        Anchor.BOTTOM_CENTER,
    ),
    "pinterest": (
        TextStyle(font_size=44, color="#ffffff", stroke_color="#E60023", stroke_width=2),
        Anchor.TOP_CENTER,
    ),
}


CaptionInput = Union[str, SubtitleEntry, Dict[str, Any]]


def caption_layers(
    captions: Sequence[CaptionInput],
    style: Optional[TextStyle] = None,
    position: Optional[Position] = None,
    transition: Optional[TransitionSpec] = None,
    start_delay: float = 0.0,
    overlap: float = 0.1,
    words_per_minute: float = 200,
) -> List[Layer]:
    """
    Build text layers for a list of captions.

    Plain strings are timed automatically with ``staggered_timings``.
    Dicts may carry ``start`` with ``duration`` or ``end``; SubtitleEntry
    values keep their own window.
    """
    texts = [_caption_text(c) for c in captions]
    auto = staggered_timings(texts, start_delay, overlap, words_per_minute)
    style = style or DEFAULT_CAPTION_STYLE

    layers = []
    for caption, text, (auto_start, auto_duration) in zip(captions, texts, auto):
        start, duration = auto_start, auto_duration
        if isinstance(caption, SubtitleEntry):
            start, duration = caption.start, caption.duration
        elif isinstance(caption, dict) and "start" in caption:
            start = float(caption["start"])
            if "duration" in caption:
                duration = float(caption["duration"])
            elif "end" in caption:
                duration = float(caption["end"]) - start
        layers.append(
            Layer(
                kind=LayerKind.TEXT,
                source=text,
                start_time=start,
                duration=duration,
                position=position,
                style=style,
                transition=transition,
            )
        )
    return layers


def _caption_text(caption: CaptionInput) -> str:
    if isinstance(caption, str):
        return caption
    if isinstance(caption, SubtitleEntry):
        return caption.text
    if isinstance(caption, dict) and "text" in caption:
        return str(caption["text"])
    raise ConstructionError(f"Caption must be text, a dict with 'text', or a SubtitleEntry: {caption!r}")


# Word highlighting


class WordTiming(BaseModel):
    """When a single word is spoken."""

    model_config = {"frozen": True}

    word: str
    start: float
    end: float


class HighlightStyle(BaseModel):
    """Look of word-by-word highlighted captions."""

    model_config = MODEL_CONFIG

    font_size: float = 48
    base_color: str = "#cccccc"
    highlight_color: str = "#ffff00"
    stroke_color: Optional[str] = "#000000"
    stroke_width: Optional[float] = 2
    highlight_background: Optional[str] = None
    words_per_line: int = Field(default=5, ge=0)
    line_spacing: float = 1.2
    word_spacing: float = 120


HIGHLIGHT_PRESETS: Dict[str, HighlightStyle] = {
    "tiktok": HighlightStyle(font_size=56, highlight_color="#ffff00", words_per_line=3),
    "instagram": HighlightStyle(
        font_size=48, highlight_color="#ff3b5c", words_per_line=4
    ),
    "youtube": HighlightStyle(
        font_size=40,
        highlight_color="#ffffff",
        highlight_background="#ff0000",
        words_per_line=6,
    ),
    "karaoke": HighlightStyle(
        font_size=52, base_color="#ffffff", highlight_color="#00e5ff", words_per_line=5
    ),
    "typewriter": HighlightStyle(
        font_size=44,
        base_color="#00000000",
        highlight_color="#ffffff",
        stroke_color=None,
        stroke_width=None,
        words_per_line=0,
    ),
}


def word_timings(
    text: str, start: float, duration: float, words_per_second: float = 2.5
) -> List[WordTiming]:
    """Evenly paced word windows, capped at the end of the phrase."""
    end_limit = start + duration
    timings = []
    for i, word in enumerate(text.split()):
        word_start = min(start + i / words_per_second, end_limit)
        word_end = min(word_start + 1 / words_per_second, end_limit)
        timings.append(WordTiming(word=word, start=word_start, end=word_end))
    return timings


def group_lines(words: Sequence[WordTiming], words_per_line: int = 5) -> List[List[WordTiming]]:
    """Split words into lines; ``words_per_line`` of 0 keeps a single line."""
    if words_per_line <= 0:
        return [list(words)] if words else []
    return [list(words[i : i + words_per_line]) for i in range(0, len(words), words_per_line)]


def _offset(expr: str, delta: float) -> str:
    if not delta:
        return expr
    sign = "+" if delta > 0 else "-"
    return f"{expr}{sign}{abs(round(delta, 3)):g}"


def word_highlight_layers(
    text: str,
    start: float,
    duration: Optional[float] = None,
    style: Optional[HighlightStyle] = None,
    position: Optional[Position] = None,
    words_per_second: float = 2.5,
) -> List[Layer]:
    """
    Build text layers that highlight each word as it is spoken.

    Every word gets a base layer for the whole phrase window and a
    highlight layer for its own window, laid out on a grid of lines around
    the resolved position.
    """
    style = style or HIGHLIGHT_PRESETS["tiktok"]
    words = text.split()
    if duration is None:
        duration = len(words) / words_per_second
    timings = word_timings(text, start, duration, words_per_second)
    lines = group_lines(timings, style.words_per_line)

    anchor = position if position is not None else NamedPosition(anchor=Anchor.CENTER)
    resolved = resolve_position(anchor, PositionTarget.TEXT)
    base_x = resolved.x if resolved.raw is None else "(w-text_w)/2"
    base_y = resolved.y if resolved.raw is None else "(h-text_h)/2"

    base_style = TextStyle(
        font_size=style.font_size,
        color=style.base_color,
        stroke_color=style.stroke_color,
        stroke_width=style.stroke_width,
    )
    highlight_style = TextStyle(
        font_size=style.font_size,
        color=style.highlight_color,
        stroke_color=style.stroke_color,
        stroke_width=style.stroke_width,
        background_color=style.highlight_background,
    )

    layers = []
    line_height = style.font_size * style.line_spacing
    for line_no, line in enumerate(lines):
        dy = (line_no - (len(lines) - 1) / 2) * line_height
        for word_no, timing in enumerate(line):
            dx = (word_no - (len(line) - 1) / 2) * style.word_spacing
            word_position = AbsolutePosition(
                x=_offset(base_x, dx), y=_offset(base_y, dy)
            )
            layers.append(
                Layer(
                    kind=LayerKind.TEXT,
                    source=timing.word,
                    start_time=start,
                    duration=duration,
                    position=word_position,
                    style=base_style,
                )
            )
            layers.append(
                Layer(
                    kind=LayerKind.TEXT,
                    source=timing.word,
                    start_time=timing.start,
                    duration=timing.end - timing.start,
                    position=word_position,
                    style=highlight_style,
                )
            )
    return layers
