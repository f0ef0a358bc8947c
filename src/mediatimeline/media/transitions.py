"""Transition descriptors and their filter-graph renderings."""

import logging
from typing import Any, Dict, List, Optional, Sequence
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..core.types import Direction, Easing, TransitionType
from .filtergraph import FilterNode, format_number

logger = logging.getLogger(__name__)


class TransitionSpec(BaseModel):
    """A transition: type, duration and optional direction, easing and params."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    type: TransitionType = TransitionType.FADE
    duration: float = Field(default=1.0, ge=0)
    direction: Optional[Direction] = None
    easing: Easing = Easing.EASE_IN_OUT
    params: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_none(self) -> bool:
        return self.type == TransitionType.NONE or self.duration == 0


# xfade transition names; directional types get a direction suffix
_XFADE_NAMES = {
    TransitionType.FADE: "fade",
    TransitionType.DISSOLVE: "dissolve",
    TransitionType.SLIDE: "slide",
    TransitionType.PUSH: "slide",
    TransitionType.COVER: "cover",
    TransitionType.REVEAL: "reveal",
    TransitionType.WIPE: "wipe",
    TransitionType.ZOOM: "zoomin",
    TransitionType.IRIS: "circleopen",
    TransitionType.MATRIX: "pixelize",
    TransitionType.GLITCH: "pixelize",
    TransitionType.CUBE: "squeezeh",
    TransitionType.FLIP: "squeezev",
    TransitionType.MORPH: "distance",
    TransitionType.PARTICLE: "dissolve",
    TransitionType.BURN: "fadeblack",
    TransitionType.NONE: "fade",
}

_DIRECTIONAL = {
    TransitionType.SLIDE,
    TransitionType.PUSH,
    TransitionType.COVER,
    TransitionType.REVEAL,
    TransitionType.WIPE,
}


def xfade_name(spec: TransitionSpec) -> str:
    """Return the engine's ``xfade`` transition name for a spec."""
    name = _XFADE_NAMES[spec.type]
    if spec.type in _DIRECTIONAL:
        name += (spec.direction or Direction.LEFT).value
    return name


def xfade_node(spec: TransitionSpec, offset: float) -> FilterNode:
    """Build the ``xfade`` node joining two clips at ``offset`` seconds."""
    return FilterNode.of(
        "xfade",
        transition=xfade_name(spec),
        duration=spec.duration,
        offset=offset,
    )


def xfade_offsets(durations: Sequence[float], transition_duration: float) -> List[float]:
    """
    Compute xfade offsets for a sequence of clips.

    Each offset is the length of the output accumulated so far minus the
    transition duration, so consecutive clips overlap by exactly that much.

    Args:
        durations: Clip durations in playback order
        transition_duration: Overlap between consecutive clips

    Returns:
        One offset per join (``len(durations) - 1`` values)
    """
    if not durations:
        return []
    offsets = []
    accumulated = durations[0]
    for duration in durations[1:]:
        offset = max(0.0, accumulated - transition_duration)
        offsets.append(offset)
        accumulated = offset + duration
    return offsets


def text_alpha_expression(
    spec: TransitionSpec, start: float, end: float
) -> Optional[str]:
    """Build a drawtext ``alpha`` expression that fades text in and out."""
    if spec.is_none or spec.type not in (TransitionType.FADE, TransitionType.DISSOLVE):
        return None
    d = format_number(spec.duration)
    s = format_number(start)
    e = format_number(end)
    return f"if(lt(t,{s}+{d}),(t-{s})/{d},if(gt(t,{e}-{d}),({e}-t)/{d},1))"


TRANSITION_PRESETS: Dict[str, TransitionSpec] = {
    "smooth": TransitionSpec(type=TransitionType.FADE, duration=1.0),
    "quick": TransitionSpec(
        type=TransitionType.FADE, duration=0.3, easing=Easing.EASE_OUT
    ),
    "dramatic": TransitionSpec(
        type=TransitionType.FADE, duration=2.0, easing=Easing.EASE_IN
    ),
    "slide-show": TransitionSpec(
        type=TransitionType.SLIDE, duration=0.8, direction=Direction.LEFT
    ),
    "professional": TransitionSpec(type=TransitionType.DISSOLVE, duration=0.6),
    "creative": TransitionSpec(type=TransitionType.ZOOM, duration=1.2),
    "retro": TransitionSpec(
        type=TransitionType.WIPE, duration=0.7, direction=Direction.RIGHT
    ),
    "tech": TransitionSpec(
        type=TransitionType.GLITCH, duration=0.5, easing=Easing.LINEAR
    ),
    "matrix": TransitionSpec(type=TransitionType.MATRIX, duration=1.5),
}


def transition_preset(name: str) -> TransitionSpec:
    """Look up a named preset, falling back to ``smooth`` for unknown names."""
    spec = TRANSITION_PRESETS.get(name)
    if spec is None:
        logger.debug(f"Unknown transition preset '{name}', using 'smooth'")
        return TRANSITION_PRESETS["smooth"]
    return spec


def coerce_transition(value: Any) -> Optional[TransitionSpec]:
    """Accept a spec, a preset name, a type name or a dict of spec fields."""
    if value is None or isinstance(value, TransitionSpec):
        return value
    if isinstance(value, TransitionType):
        return TransitionSpec(type=value)
    if isinstance(value, str):
        if value in TRANSITION_PRESETS:
            return TRANSITION_PRESETS[value]
        try:
            return TransitionSpec(type=TransitionType(value))
        except ValueError:
            return transition_preset(value)
    return TransitionSpec.model_validate(value)
