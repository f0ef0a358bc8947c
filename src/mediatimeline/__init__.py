"""mediatimeline - Describe media compositions as immutable timelines and compile them to FFmpeg commands."""

from .__version__ import __version__
from .media import (
    Timeline,
    Layer,
    TextStyle,
    TransitionSpec,
    EncoderProfile,
    CommandCompiler,
    CompiledCommand,
    EffectRegistry,
    default_registry,
    SubtitleEntry,
    ZoomFrame,
    MediaContext,
    Executor,
    ExecutionResult,
    default_context,
    set_default_context,
    effects,
)
from .core import (
    LayerKind,
    Anchor,
    BackgroundScale,
    Quality,
    HardwareAcceleration,
    TransitionType,
    Direction,
    Easing,
    Platform,
    TimelineError,
    ConstructionError,
    SerializationError,
    UnknownEffectError,
    EffectParameterError,
    EngineError,
)


__all__ = [
    "__version__",
    "Timeline",
    "Layer",
    "TextStyle",
    "TransitionSpec",
    "EncoderProfile",
    "CommandCompiler",
    "CompiledCommand",
    "EffectRegistry",
    "default_registry",
    "SubtitleEntry",
    "ZoomFrame",
    "MediaContext",
    "Executor",
    "ExecutionResult",
    "default_context",
    "set_default_context",
    "effects",
    "LayerKind",
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
