"""Core module for mediatimeline."""

from .types import (
    LayerKind,
    StreamType,
    Anchor,
    BackgroundScale,
    Quality,
    HardwareAcceleration,
    TransitionType,
    Direction,
    Easing,
    Platform,
)
from .errors import (
    TimelineError,
    ConstructionError,
    SerializationError,
    UnknownEffectError,
    EffectParameterError,
    EngineError,
)

__all__ = [
    "LayerKind",
    "StreamType",
    "Anchor",
    "BackgroundScale",
    "Quality",
    "HardwareAcceleration",
    "TransitionType",
    "Direction",
    "Easing",
    "Platform",
    "TimelineError",
    "ConstructionError",
    "SerializationError",
    "UnknownEffectError",
    "EffectParameterError",
    "EngineError",
]
