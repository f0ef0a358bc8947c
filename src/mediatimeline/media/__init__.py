"""Media module for timeline composition and command compilation."""

from .layers import (
    Layer,
    NamedPosition,
    PercentPosition,
    AbsolutePosition,
    RawPosition,
    TextStyle,
    AudioSettings,
    VisualSettings,
    ChromaKey,
    DEFAULT_DURATIONS,
    parse_position,
)
from .positions import PositionTarget, resolve_position, normalize_color
from .filtergraph import FilterNode, FilterChain, FilterGraph
from .registry import EffectDefinition, EffectRegistry, default_registry
from .transitions import TransitionSpec, transition_preset
from .encoders import EncoderProfile
from .captions import SubtitleEntry, parse_srt, format_srt
from .pan_zoom import ZoomFrame
from .timeline import Timeline, GlobalOptions, PlatformValidation
from .compiler import CommandCompiler, CompiledCommand
from .serialization import (
    timeline_to_dict,
    timeline_from_dict,
    timeline_to_json,
    timeline_from_json,
)
from .context import MediaContext, default_context, set_default_context
from .executor import Executor, ExecutionResult
from . import effects

__all__ = [
    "Layer",
    "NamedPosition",
    "PercentPosition",
    "AbsolutePosition",
    "RawPosition",
    "TextStyle",
    "AudioSettings",
    "VisualSettings",
    "ChromaKey",
    "DEFAULT_DURATIONS",
    "parse_position",
    "PositionTarget",
    "resolve_position",
    "normalize_color",
    "FilterNode",
    "FilterChain",
    "FilterGraph",
    "EffectDefinition",
    "EffectRegistry",
    "default_registry",
    "TransitionSpec",
    "transition_preset",
    "EncoderProfile",
    "SubtitleEntry",
    "parse_srt",
    "format_srt",
    "ZoomFrame",
    "Timeline",
    "GlobalOptions",
    "PlatformValidation",
    "CommandCompiler",
    "CompiledCommand",
    "timeline_to_dict",
    "timeline_from_dict",
    "timeline_to_json",
    "timeline_from_json",
    "MediaContext",
    "default_context",
    "set_default_context",
    "Executor",
    "ExecutionResult",
    "effects",
]
