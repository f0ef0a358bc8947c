"""Pan/zoom and Ken Burns motion built on the engine's zoompan filter."""

from typing import Any, Dict, Optional, Tuple, Union
from pydantic import BaseModel, Field

from ..core.types import Anchor, Easing
from .filtergraph import format_number

DEFAULT_SIZE = (1920, 1080)
DEFAULT_FPS = 25


class ZoomFrame(BaseModel):
    """Zoom level and focus point (fractions of the frame, 0.5 is the middle)."""

    model_config = {"frozen": True}

    zoom: float = Field(default=1.0, gt=0)
    x: float = 0.5
    y: float = 0.5


def easing_expression(easing: Union[Easing, str], progress: str) -> str:
    """
    Engine expression mapping linear progress (0 to 1) through an easing curve.

    Args:
        easing: Easing curve
        progress: Expression evaluating to the linear progress

    Returns:
        Eased progress expression
    """
    easing = Easing(easing)
    p = progress
    if easing == Easing.LINEAR:
        return p
    if easing == Easing.EASE_IN:
        return f"({p})*({p})"
    if easing == Easing.EASE_OUT:
        return f"(1-(1-{p})*(1-{p}))"
    return f"if(lt({p},0.5),2*({p})*({p}),1-pow(-2*({p})+2,2)/2)"


def _interpolate(start: float, end: float, eased: str) -> str:
    if start == end:
        return format_number(start)
    return f"{format_number(start)}+({format_number(end - start)})*{eased}"


def pan_zoom_params(
    start: ZoomFrame,
    end: ZoomFrame,
    duration: float,
    easing: Union[Easing, str] = Easing.EASE_IN_OUT,
    size: Tuple[int, int] = DEFAULT_SIZE,
    fps: int = DEFAULT_FPS,
) -> Dict[str, Any]:
    """
    Build zoompan parameters animating from one frame to another.

    Progress is measured in output frames (``on``), so the motion is
    independent of the input frame rate.

    Args:
        start: Starting zoom and focus
        end: Ending zoom and focus
        duration: Length of the motion in seconds
        easing: Easing curve
        size: Output size in pixels
        fps: Output frame rate

    Returns:
        Parameters for the ``zoompan`` effect
    """
    frames = max(1, int(round(duration * fps)))
    eased = easing_expression(easing, f"min(on/{frames},1)")
    return {
        "z": _interpolate(start.zoom, end.zoom, eased),
        "x": f"iw*({_interpolate(start.x, end.x, eased)})-(iw/zoom/2)",
        "y": f"ih*({_interpolate(start.y, end.y, eased)})-(ih/zoom/2)",
        "d": 1,
        "s": f"{size[0]}x{size[1]}",
        "fps": fps,
    }


# Focus points for Ken Burns drift toward a named anchor
_FOCUS = {"left": 0.35, "top": 0.35, "center": 0.5, "right": 0.65, "bottom": 0.65}


def focus_point(anchor: Union[Anchor, str]) -> Tuple[float, float]:
    """Fractional focus point for an anchor name."""
    anchor = anchor if isinstance(anchor, Anchor) else Anchor.from_keyword(anchor)
    if anchor == Anchor.CENTER:
        return 0.5, 0.5
    parts = anchor.value.split("-")
    row, column = parts[0], parts[1]
    return _FOCUS[column], _FOCUS[row]


def ken_burns_params(
    focus: Union[Anchor, str] = Anchor.CENTER,
    start_zoom: float = 1.0,
    end_zoom: float = 1.3,
    duration: float = 5.0,
    easing: Union[Easing, str] = Easing.EASE_IN_OUT,
    size: Optional[Tuple[int, int]] = None,
    fps: int = DEFAULT_FPS,
) -> Dict[str, Any]:
    """Slow zoom from the middle of the frame toward ``focus``."""
    x, y = focus_point(focus)
    return pan_zoom_params(
        ZoomFrame(zoom=start_zoom),
        ZoomFrame(zoom=end_zoom, x=x, y=y),
        duration,
        easing,
        size or DEFAULT_SIZE,
        fps,
    )
