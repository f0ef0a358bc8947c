"""Resolve placement descriptors into filter-graph coordinate expressions."""

import re
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel

from ..core.types import Anchor
from .filtergraph import ArgValue, format_number, quote
from .layers import (
    AbsolutePosition,
    NamedPosition,
    PercentPosition,
    Position,
    RawPosition,
)


class PositionTarget(str, Enum):
    """Filter whose coordinate variables an expression is written against."""

    TEXT = "text"  # drawtext: w, h, text_w, text_h
    OVERLAY = "overlay"  # overlay: W, H, w, h


# (canvas width, canvas height, content width, content height)
_VARIABLES = {
    PositionTarget.TEXT: ("w", "h", "text_w", "text_h"),
    PositionTarget.OVERLAY: ("W", "H", "w", "h"),
}

DEFAULT_MARGINS = {
    PositionTarget.TEXT: 50,
    PositionTarget.OVERLAY: 20,
}

# anchor -> (column, row)
_ANCHOR_GRID = {
    Anchor.TOP_LEFT: ("left", "top"),
    Anchor.TOP_CENTER: ("center", "top"),
    Anchor.TOP_RIGHT: ("right", "top"),
    Anchor.CENTER_LEFT: ("left", "center"),
    Anchor.CENTER: ("center", "center"),
    Anchor.CENTER_RIGHT: ("right", "center"),
    Anchor.BOTTOM_LEFT: ("left", "bottom"),
    Anchor.BOTTOM_CENTER: ("center", "bottom"),
    Anchor.BOTTOM_RIGHT: ("right", "bottom"),
}


class ResolvedPosition(BaseModel):
    """Concrete ``x``/``y`` expressions, or a raw passthrough value."""

    model_config = {"frozen": True}

    x: Optional[str] = None
    y: Optional[str] = None
    raw: Optional[str] = None

    def args(self) -> Tuple[Tuple[Optional[str], ArgValue], ...]:
        """Filter arguments for this position."""
        if self.raw is not None:
            return ((None, self.raw),)
        return (("x", quote(self.x)), ("y", quote(self.y)))

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        return f"x={quote(self.x)}:y={quote(self.y)}"


def _edge(align: str, outer: str, inner: str, margin: str) -> str:
    if align == "center":
        return f"({outer}-{inner})/2"
    if align in ("left", "top"):
        return margin
    if margin == "0":
        return f"{outer}-{inner}"
    return f"{outer}-{inner}-{margin}"


def _axis(value: Union[int, float, str], outer: str) -> str:
    if isinstance(value, (int, float)):
        return format_number(value)
    text = value.strip()
    if text.endswith("%"):
        try:
            return f"({outer}*{format_number(float(text[:-1]) / 100)})"
        except ValueError:
            return text
    match = re.fullmatch(r"(-?\d+(?:\.\d+)?)px", text)
    if match:
        return format_number(float(match.group(1)))
    return text


def _anchored(expr: str, align: str, inner: str) -> str:
    """Shift a point so the content is aligned to it rather than starting at it."""
    if align == "center":
        return f"({expr}-{inner}/2)"
    if align in ("right", "bottom"):
        return f"({expr}-{inner})"
    return expr


def resolve_position(
    position: Optional[Position],
    target: PositionTarget,
    margin: Optional[float] = None,
) -> ResolvedPosition:
    """
    Translate a Position into coordinate expressions for a filter.

    Named anchors resolve to centering and edge formulas inset by a margin
    (50px for text, 20px for overlays unless given). Percentages resolve
    against the canvas size. Numbers pass through; strings are treated as
    engine expressions. Unknown descriptors pass through raw.

    Args:
        position: Position variant, or None for centered
        target: Which filter's variables to use
        margin: Override for the named-anchor margin

    Returns:
        Resolved position
    """
    canvas_w, canvas_h, content_w, content_h = _VARIABLES[target]

    if position is None:
        position = NamedPosition(anchor=Anchor.CENTER)

    if isinstance(position, RawPosition):
        return ResolvedPosition(raw=position.value)

    if isinstance(position, NamedPosition):
        if position.margin is not None:
            m = position.margin
        elif margin is not None:
            m = margin
        else:
            m = DEFAULT_MARGINS[target]
        m_expr = format_number(m)
        column, row = _ANCHOR_GRID[position.anchor]
        return ResolvedPosition(
            x=_edge(column, canvas_w, content_w, m_expr),
            y=_edge(row, canvas_h, content_h, m_expr),
        )

    if isinstance(position, PercentPosition):
        x = f"({canvas_w}*{format_number(position.x / 100)})"
        y = f"({canvas_h}*{format_number(position.y / 100)})"
    elif isinstance(position, AbsolutePosition):
        x = _axis(position.x, canvas_w)
        y = _axis(position.y, canvas_h)
    else:
        return ResolvedPosition(raw=str(position))

    if position.anchor is not None:
        column, row = _ANCHOR_GRID[position.anchor]
        x = _anchored(x, column, content_w)
        y = _anchored(y, row, content_h)
    return ResolvedPosition(x=x, y=y)


_RGBA = re.compile(
    r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*([\d.]+)\s*)?\)",
    re.IGNORECASE,
)


def normalize_color(value: str) -> str:
    """
    Convert CSS-style colors to the engine's color syntax.

    ``rgb(r,g,b)`` and ``rgba(r,g,b,a)`` become ``0xRRGGBB`` / ``0xRRGGBB@a``.
    Hex values and color names pass through, as does anything unrecognised.
    """
    match = _RGBA.fullmatch(value.strip())
    if not match:
        return value
    r, g, b, alpha = match.groups()
    hex_color = "0x" + "".join(f"{min(int(c), 255):02X}" for c in (r, g, b))
    if alpha is None:
        return hex_color
    return f"{hex_color}@{format_number(float(alpha))}"
