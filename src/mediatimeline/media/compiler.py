"""Compile a Timeline into an ordered FFmpeg argument list."""

import logging
import shlex
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel

from ..core.errors import EffectParameterError
from ..core.types import BackgroundScale, LayerKind, StreamType, TransitionType
from .encoders import EncoderProfile
from .filtergraph import (
    FilterChain,
    FilterGraph,
    FilterNode,
    escape_text,
    format_number,
    quote,
)
from .layers import DEFAULT_DURATIONS, Layer, TextStyle
from .positions import PositionTarget, normalize_color, resolve_position
from .registry import EffectDefinition, EffectRegistry, default_registry
from .transitions import TransitionSpec, text_alpha_expression, xfade_node, xfade_offsets

DEFAULT_CANVAS_SIZE = (1920, 1080)
DEFAULT_FPS = 30

# aloop needs a finite buffer size; this covers any practical clip length
_AUDIO_LOOP_SIZE = 2000000000
_VIDEO_LOOP_SIZE = 32767

_FONT_FILE_SUFFIXES = (".ttf", ".otf", ".ttc", ".woff")


class CompiledCommand(BaseModel):
    """A compiled engine invocation."""

    model_config = {"frozen": True}

    argv: Tuple[str, ...]
    output_path: str
    inputs: Tuple[str, ...] = ()
    filter_graph: Optional[str] = None

    def to_string(self) -> str:
        """Shell-quoted command line."""
        return shlex.join(self.argv)

    def __str__(self) -> str:
        return self.to_string()


def background_scale_nodes(
    mode: BackgroundScale, size: Optional[Tuple[int, int]] = None
) -> List[FilterNode]:
    """
    Filter nodes fitting a replacement background to the canvas.

    Args:
        mode: fit (letterbox), fill (cover and crop), stretch or crop
        size: Canvas size; None keeps the input size (``iw:ih``)

    Returns:
        Nodes implementing the scaling formula
    """
    w, h = size if size else ("iw", "ih")
    mode = BackgroundScale(mode)
    if mode == BackgroundScale.FIT:
        return [
            FilterNode.of("scale", w, h, force_original_aspect_ratio="decrease"),
            FilterNode.of("pad", w, h, "(ow-iw)/2", "(oh-ih)/2"),
        ]
    if mode == BackgroundScale.FILL:
        return [
            FilterNode.of("scale", w, h, force_original_aspect_ratio="increase"),
            FilterNode.of("crop", w, h),
        ]
    if mode == BackgroundScale.STRETCH:
        return [FilterNode.of("scale", w, h)]
    return [FilterNode.of("crop", w, h, "(iw-ow)/2", "(ih-oh)/2")]


def _normalize_nodes(width: int, height: int, fps: float) -> List[FilterNode]:
    """Letterbox a clip to the canvas so clips can be joined."""
    return [
        FilterNode.of("scale", width, height, force_original_aspect_ratio="decrease"),
        FilterNode.of("pad", width, height, "(ow-iw)/2", "(oh-ih)/2"),
        FilterNode.of("setsar", 1),
        FilterNode.of("fps", fps),
    ]


def _between(start: float, end: float) -> str:
    return f"between(t,{format_number(start)},{format_number(end)})"


def _map_label(label: str, optional: bool = False) -> str:
    # Raw input streams ("0:v") map without brackets; graph outputs need them
    if ":" in label:
        return f"{label}?" if optional else label
    return f"[{label}]"


class _Compilation:
    """Working state for compiling one timeline."""

    def __init__(self, timeline, registry: EffectRegistry):
        self.layers: Tuple[Layer, ...] = timeline.layers
        self.options = timeline.global_options
        self.registry = registry
        self.duration: float = timeline.get_duration()
        # Inputs sit on the untrimmed timeline; -ss skips into them
        trim = self.options.trim
        self.extent: float = self.duration + (trim.start if trim is not None else 0.0)

        self.input_args: List[str] = []
        self.input_paths: List[str] = []
        self.video_inputs: Dict[int, int] = {}
        self.background_inputs: Dict[int, int] = {}
        self.audio_inputs: Dict[int, int] = {}
        self.canvas_input: Optional[int] = None

        self.chains: List[FilterChain] = []
        self.effects: Dict[int, EffectDefinition] = {}
        self.consumed: Set[int] = set()
        # Layer index -> timeline offset of its soundtrack when not start_time
        self.audio_offsets: Dict[int, float] = {}

    @property
    def size(self) -> Tuple[int, int]:
        resolution = self.options.resolution
        if resolution is None:
            return DEFAULT_CANVAS_SIZE
        return resolution.width, resolution.height

    @property
    def fps(self) -> float:
        return self.options.frame_rate or DEFAULT_FPS

    def _chain(self, inputs: List[str], nodes: List[FilterNode], output: str) -> str:
        self.chains.append(
            FilterChain(inputs=tuple(inputs), nodes=tuple(nodes), outputs=(output,))
        )
        return output

    def _add_input(self, path: str, *options: str) -> int:
        self.input_args.extend(options)
        self.input_args.extend(["-i", path])
        self.input_paths.append(path)
        return len(self.input_paths) - 1

    # Stage 0: effect lookup
    def resolve_effects(self) -> None:
        for i, layer in enumerate(self.layers):
            if layer.kind == LayerKind.FILTER:
                self.effects[i] = self.registry.get(layer.effect, i)

    def _effect_nodes(self, i: int, definition: EffectDefinition) -> List[FilterNode]:
        try:
            return definition.build(self.layers[i].params)
        except KeyError as e:
            raise EffectParameterError(definition.name, i, f"missing parameter {e}") from e
        except (TypeError, ValueError) as e:
            raise EffectParameterError(definition.name, i, str(e)) from e

    # Stage 1: inputs
    def declare_inputs(self) -> None:
        for i, layer in enumerate(self.layers):
            if not layer.is_visual:
                continue

            if layer.kind == LayerKind.IMAGE:
                self.video_inputs[i] = self._add_input(
                    layer.source,
                    "-loop",
                    "1",
                    "-t",
                    format_number(self._image_duration(layer)),
                )
            else:
                self.video_inputs[i] = self._add_input(layer.source)

            # Keyed layers declare their background right after the foreground
            chroma = layer.chroma_key
            if chroma is not None:
                if chroma.background_type == "image":
                    seconds = layer.duration if layer.duration is not None else self.extent
                    self.background_inputs[i] = self._add_input(
                        chroma.background,
                        "-loop",
                        "1",
                        "-t",
                        format_number(seconds or DEFAULT_DURATIONS[LayerKind.IMAGE]),
                    )
                else:
                    self.background_inputs[i] = self._add_input(chroma.background)

        if not self.video_inputs and self._needs_canvas():
            width, height = self.size
            seconds = self.extent or 1
            self.canvas_input = self._add_input(
                f"color=c=black:s={width}x{height}"
                f":r={format_number(self.fps)}:d={format_number(seconds)}",
                "-f",
                "lavfi",
            )

        for i, layer in enumerate(self.layers):
            if layer.kind == LayerKind.AUDIO:
                self.audio_inputs[i] = self._add_input(layer.source)

    def _image_duration(self, layer: Layer) -> float:
        seconds = self.extent if layer.is_persistent else layer.effective_duration()
        return seconds if seconds > 0 else DEFAULT_DURATIONS[LayerKind.IMAGE]

    def _needs_canvas(self) -> bool:
        if not self.layers:
            return True
        for i, layer in enumerate(self.layers):
            if layer.kind == LayerKind.TEXT:
                return True
            if layer.kind == LayerKind.FILTER and self.effects[i].stream == StreamType.VIDEO:
                return True
        return False

    # Stage 2: base stream
    def build_base(self) -> Optional[str]:
        if not self.video_inputs:
            if self.canvas_input is None:
                return None
            return f"{self.canvas_input}:v"

        clips = [
            i
            for i in self.video_inputs
            if not self.layers[i].is_persistent and self.layers[i].chroma_key is None
        ]
        clips.sort(key=lambda i: (self.layers[i].start_time, i))

        transition = self.options.transition
        if transition is not None and not transition.is_none and len(clips) >= 2:
            return self._xfade_sequence(clips, transition)

        if len(clips) >= 2 and self._back_to_back(clips):
            return self._concat_sequence(clips)

        videos = [i for i in self.video_inputs if self.layers[i].kind == LayerKind.VIDEO]
        images = [i for i in self.video_inputs if not self.layers[i].is_persistent]
        first = (videos or images or list(self.video_inputs))[0]
        self.consumed.add(first)
        self.audio_offsets[first] = 0.0
        if self.layers[first].chroma_key is not None:
            return self._keyed(first, self.layers[first])
        return f"{self.video_inputs[first]}:v"

    def _back_to_back(self, clips: List[int]) -> bool:
        for a, b in zip(clips, clips[1:]):
            if abs(self.layers[b].start_time - self.layers[a].end_time()) > 1e-6:
                return False
        return True

    def _sequence_clip(self, i: int) -> str:
        """Cut a clip to its duration and normalize it to the canvas."""
        layer = self.layers[i]
        width, height = self.size
        nodes = []
        if layer.kind == LayerKind.VIDEO and layer.duration is not None:
            nodes.append(FilterNode.of("trim", duration=layer.duration))
            nodes.append(FilterNode.of("setpts", "PTS-STARTPTS"))
        nodes.extend(_normalize_nodes(width, height, self.fps))
        self.consumed.add(i)
        return self._chain([f"{self.video_inputs[i]}:v"], nodes, f"v{i}")

    def _xfade_sequence(self, clips: List[int], transition: TransitionSpec) -> str:
        labels = [self._sequence_clip(i) for i in clips]

        offsets = xfade_offsets(
            [self.layers[i].effective_duration() for i in clips], transition.duration
        )
        current = labels[0]
        self.audio_offsets[clips[0]] = 0.0
        for k, (i, label, offset) in enumerate(zip(clips[1:], labels[1:], offsets), 1):
            current = self._chain([current, label], [xfade_node(transition, offset)], f"x{k}")
            self.audio_offsets[i] = offset
        return current

    def _concat_sequence(self, clips: List[int]) -> str:
        labels = [self._sequence_clip(i) for i in clips]
        return self._chain(
            labels, [FilterNode.of("concat", n=len(labels), v=1, a=0)], "base"
        )

    def _keyed(self, i: int, layer: Layer) -> str:
        """Key the foreground, scale the background, composite: in that order."""
        chroma = layer.chroma_key
        key = self._chain(
            [f"{self.video_inputs[i]}:v"],
            [
                FilterNode.of(
                    "chromakey",
                    color=chroma.engine_color,
                    similarity=chroma.similarity,
                    blend=chroma.blend,
                    yuv=True if chroma.yuv else None,
                )
            ],
            f"key{i}",
        )

        looping = chroma.background_loop and chroma.background_type == "video"
        nodes = []
        if looping:
            nodes.append(FilterNode.of("loop", loop=-1, size=_VIDEO_LOOP_SIZE))
        nodes.extend(background_scale_nodes(chroma.background_scale, self.options.resolution and self.size))
        background = self._chain([f"{self.background_inputs[i]}:v"], nodes, f"bg{i}")

        overlay = FilterNode.of("overlay", 0, 0, shortest=1 if looping else None)
        return self._chain([background, key], [overlay], f"gs{i}")

    def apply_base_effects(self, current: Optional[str]) -> Optional[str]:
        if current is None:
            return None
        for i, definition in self.effects.items():
            if definition.stream == StreamType.VIDEO and definition.base_stage:
                current = self._chain(
                    [current], self._effect_nodes(i, definition), f"bfx{i}"
                )
        return current

    # Stage 3: overlays, text and video effects
    def apply_layers(self, current: Optional[str]) -> Optional[str]:
        if current is None:
            return None
        for i, layer in enumerate(self.layers):
            if i in self.consumed:
                continue
            if layer.is_visual:
                current = self._overlay(current, i, layer)
            elif layer.kind == LayerKind.TEXT:
                current = self._chain([current], [self._drawtext(layer)], f"t{i}")

        for i, definition in self.effects.items():
            if definition.stream == StreamType.VIDEO and not definition.base_stage:
                current = self._chain(
                    [current], self._effect_nodes(i, definition), f"fx{i}"
                )
        return current

    def _overlay(self, current: str, i: int, layer: Layer) -> str:
        if layer.chroma_key is not None:
            source = self._keyed(i, layer)
        else:
            source = f"{self.video_inputs[i]}:v"

        nodes = self._transform_nodes(layer)
        if nodes:
            source = self._chain([source], nodes, f"ov{i}")

        resolved = resolve_position(layer.position, PositionTarget.OVERLAY)
        args = resolved.args() + (("eof_action", "pass"),)
        enable = self._overlay_enable(layer)
        if enable:
            args += (("enable", quote(enable)),)
        return self._chain([current, source], [FilterNode(name="overlay", args=args)], f"o{i}")

    def _transform_nodes(self, layer: Layer) -> List[FilterNode]:
        """Timing shift, sizing, opacity and fades for an overlaid layer."""
        nodes = []
        if layer.start_time > 0 and not layer.is_persistent:
            nodes.append(FilterNode.of("setpts", "PTS-STARTPTS"))
            nodes.append(FilterNode.of("setpts", f"PTS+{format_number(layer.start_time)}/TB"))

        visual = layer.visual
        if visual is not None:
            if visual.width or visual.height:
                nodes.append(FilterNode.of("scale", visual.width or -1, visual.height or -1))
            elif visual.scale is not None:
                factor = format_number(visual.scale)
                nodes.append(FilterNode.of("scale", f"iw*{factor}", f"ih*{factor}"))

        fades = self._fade_nodes(layer)
        opacity = visual.opacity if visual is not None else None
        if opacity is not None or fades:
            nodes.append(FilterNode.of("format", "rgba"))
        if opacity is not None:
            nodes.append(FilterNode.of("colorchannelmixer", aa=opacity))
        nodes.extend(fades)
        return nodes

    def _fade_nodes(self, layer: Layer) -> List[FilterNode]:
        spec = layer.transition
        if spec is None or spec.is_none:
            return []
        if spec.type not in (TransitionType.FADE, TransitionType.DISSOLVE):
            return []
        start = layer.start_time
        nodes = [FilterNode.of("fade", t="in", st=start, d=spec.duration, alpha=1)]
        if layer.duration is not None or layer.kind == LayerKind.IMAGE:
            fade_out = max(start, layer.end_time() - spec.duration)
            nodes.append(FilterNode.of("fade", t="out", st=fade_out, d=spec.duration, alpha=1))
        return nodes

    def _overlay_enable(self, layer: Layer) -> Optional[str]:
        if layer.is_persistent:
            return None
        if layer.kind == LayerKind.IMAGE or layer.duration is not None:
            return _between(layer.start_time, layer.end_time())
        if layer.start_time > 0:
            return f"gte(t,{format_number(layer.start_time)})"
        return None

    def _drawtext(self, layer: Layer) -> FilterNode:
        style = layer.style or TextStyle()
        args = [("text", f"'{escape_text(layer.source)}'")]

        if style.font_family:
            family = style.font_family
            key = "fontfile" if "/" in family or family.lower().endswith(_FONT_FILE_SUFFIXES) else "font"
            args.append((key, f"'{family}'"))
        args.append(("fontsize", style.font_size))
        args.append(("fontcolor", normalize_color(style.color)))
        args.extend(resolve_position(layer.position, PositionTarget.TEXT).args())

        if style.background_color:
            args.append(("box", 1))
            args.append(("boxcolor", normalize_color(style.background_color)))
            padding = style.background_padding
            args.append(("boxborderw", 5 if padding is None else padding))
        if style.stroke_width is not None:
            args.append(("borderw", style.stroke_width))
        if style.stroke_color:
            args.append(("bordercolor", normalize_color(style.stroke_color)))
        if style.shadow_color:
            args.append(("shadowcolor", normalize_color(style.shadow_color)))
        if style.shadow_x is not None:
            args.append(("shadowx", style.shadow_x))
        if style.shadow_y is not None:
            args.append(("shadowy", style.shadow_y))

        start, end = layer.start_time, layer.end_time()
        if layer.transition is not None:
            alpha = text_alpha_expression(layer.transition, start, end)
            if alpha:
                args.append(("alpha", quote(alpha)))
        args.append(("enable", quote(_between(start, end))))
        return FilterNode(name="drawtext", args=tuple(args))

    # Stage 4: global transforms
    def apply_global(self, current: Optional[str]) -> Optional[str]:
        if current is None:
            return None
        options = self.options

        if options.aspect_ratio:
            num, den = (float(part) for part in options.aspect_ratio.split(":"))
            ratio = format_number(round(num / den, 6))
            current = self._chain(
                [current],
                [
                    FilterNode.of(
                        "crop",
                        quote(f"if(gt(a,{ratio}),ih*{ratio},iw)"),
                        quote(f"if(gt(a,{ratio}),ih,iw/{ratio})"),
                    ),
                    FilterNode.of("setsar", 1),
                ],
                "aspect",
            )

        if options.resolution is not None:
            current = self._chain(
                [current],
                [FilterNode.of("scale", options.resolution.width, options.resolution.height)],
                "scaled",
            )

        if options.crop is not None:
            rect = options.crop
            current = self._chain(
                [current],
                [FilterNode.of("crop", rect.width, rect.height, rect.x, rect.y)],
                "cropped",
            )
        return current

    # Stage 5: audio
    def build_audio(self) -> Optional[str]:
        sources: List[str] = []
        for i, layer in enumerate(self.layers):
            if layer.kind == LayerKind.VIDEO:
                sources.extend(self._video_audio(i, layer))
            elif layer.kind == LayerKind.AUDIO:
                sources.append(self._audio_layer(i, layer))

        if not sources:
            current = None
        elif len(sources) == 1:
            current = sources[0]
        else:
            current = self._chain(
                sources,
                [FilterNode.of("amix", inputs=len(sources), duration="longest")],
                "aout",
            )

        for i, definition in self.effects.items():
            if definition.stream == StreamType.AUDIO and current is not None:
                current = self._chain(
                    [current], self._effect_nodes(i, definition), f"afx{i}"
                )
        return current

    def _video_audio(self, i: int, layer: Layer) -> List[str]:
        if layer.visual is not None and layer.visual.mute:
            return []

        chroma = layer.chroma_key
        mix = chroma.audio_mix if chroma is not None else "foreground"
        streams = []
        if mix in ("foreground", "both"):
            streams.append((f"{self.video_inputs[i]}:a", f"va{i}"))
        if (
            mix in ("background", "both")
            and chroma is not None
            and chroma.background_type == "video"
        ):
            streams.append((f"{self.background_inputs[i]}:a", f"ba{i}"))

        offset = self.audio_offsets.get(i, layer.start_time)
        volume = layer.audio.volume if layer.audio is not None else None
        labels = []
        for label, output in streams:
            nodes = []
            if layer.duration is not None:
                nodes.append(FilterNode.of("atrim", duration=layer.duration))
            if offset > 0:
                delay_ms = int(round(offset * 1000))
                nodes.append(FilterNode.of("adelay", f"{delay_ms}|{delay_ms}"))
            if volume is not None:
                nodes.append(FilterNode.of("volume", volume))
            labels.append(self._chain([label], nodes, output) if nodes else label)
        return labels

    def _audio_layer(self, i: int, layer: Layer) -> str:
        settings = layer.audio
        nodes = []
        if settings is not None:
            if settings.trim_start is not None or settings.trim_end is not None:
                nodes.append(
                    FilterNode.of("atrim", start=settings.trim_start, end=settings.trim_end)
                )
                nodes.append(FilterNode.of("asetpts", "PTS-STARTPTS"))
            if settings.loop_count:
                nodes.append(
                    FilterNode.of("aloop", loop=settings.loop_count, size=_AUDIO_LOOP_SIZE)
                )
            if settings.volume is not None:
                nodes.append(FilterNode.of("volume", settings.volume))
            if settings.fade_in:
                nodes.append(FilterNode.of("afade", t="in", st=0, d=settings.fade_in))
            if settings.fade_out:
                length = self._audio_length(layer)
                nodes.append(
                    FilterNode.of(
                        "afade",
                        t="out",
                        st=max(0.0, length - settings.fade_out),
                        d=settings.fade_out,
                    )
                )
            if settings.tempo is not None:
                nodes.append(FilterNode.of("atempo", settings.tempo))
            if settings.lowpass is not None:
                nodes.append(FilterNode.of("lowpass", f=settings.lowpass))
            if settings.highpass is not None:
                nodes.append(FilterNode.of("highpass", f=settings.highpass))

        if layer.duration is not None:
            nodes.append(FilterNode.of("atrim", duration=layer.duration))
        if layer.start_time > 0:
            delay_ms = int(round(layer.start_time * 1000))
            nodes.append(FilterNode.of("adelay", f"{delay_ms}|{delay_ms}"))

        label = f"{self.audio_inputs[i]}:a"
        return self._chain([label], nodes, f"a{i}") if nodes else label

    def _audio_length(self, layer: Layer) -> float:
        """Length of the processed audio layer, measured on the timeline."""
        if layer.duration is not None:
            return layer.duration
        settings = layer.audio
        loops = settings.loop_count if settings is not None else 0
        if loops < 0:
            # Forever loops run until the output ends
            return max(0.0, self.extent - layer.start_time)
        if settings is not None and settings.trim_end is not None:
            return (settings.trim_end - (settings.trim_start or 0)) * (loops + 1)
        return layer.effective_duration()

    # Output-side timing
    def timing_args(self) -> List[str]:
        options = self.options
        args = []
        if options.trim is not None:
            args.extend(["-ss", format_number(options.trim.start)])

        if options.duration is not None:
            args.extend(["-t", format_number(options.duration)])
        elif options.trim is not None and options.trim.end is not None:
            args.extend(["-t", format_number(options.trim.end - options.trim.start)])
        elif self._loops_forever():
            args.extend(["-t", format_number(self.duration)])
        return args

    def _loops_forever(self) -> bool:
        for layer in self.layers:
            if layer.audio is not None and layer.kind == LayerKind.AUDIO and layer.audio.loop_count < 0:
                return True
            if layer.chroma_key is not None and layer.chroma_key.background_loop:
                return True
        return False


class CommandCompiler:
    """Turns a Timeline into an engine command."""

    def __init__(
        self,
        executable: str = "ffmpeg",
        registry: Optional[EffectRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize compiler.

        Args:
            executable: Engine executable placed first in the command
            registry: Effect registry for filter layers (default: built-ins)
            logger: Logger instance for debugging
        """
        self.executable = executable
        self.registry = registry or default_registry()
        self.logger = logger or logging.getLogger(__name__)

    def compile(
        self,
        timeline,
        output_path: str,
        encoder: Optional[EncoderProfile] = None,
    ) -> CompiledCommand:
        """
        Compile a timeline into an argument list.

        The argument order is fixed: executable, hardware acceleration,
        inputs, filter graph, stream maps, timing, frame rate, encoder
        options, overwrite flag and finally the output path.

        Args:
            timeline: Timeline to compile
            output_path: Destination file
            encoder: Encoder override (default: timeline encoder, else H.264)

        Returns:
            Compiled command

        Raises:
            UnknownEffectError: If a filter layer names an unregistered effect
            EffectParameterError: If an effect's parameters are missing or malformed
        """
        options = timeline.global_options
        encoder = encoder or options.encoder or EncoderProfile.h264()
        build = _Compilation(timeline, self.registry)

        build.resolve_effects()
        build.declare_inputs()
        video = build.apply_base_effects(build.build_base())
        video = build.apply_global(build.apply_layers(video))
        audio = build.build_audio()

        graph = FilterGraph(chains=tuple(build.chains))

        argv = [self.executable]
        if options.hardware_acceleration is not None:
            argv.extend(["-hwaccel", options.hardware_acceleration.hwaccel])
        argv.extend(build.input_args)

        if not graph.is_empty:
            argv.extend(["-filter_complex", graph.render()])

        # Explicit maps whenever the default stream selection could pick wrong
        if not graph.is_empty or len(build.input_paths) > 1:
            if video is not None:
                argv.extend(["-map", _map_label(video)])
            if audio is not None:
                argv.extend(["-map", _map_label(audio, optional=True)])
        if audio is None:
            argv.append("-an")

        argv.extend(build.timing_args())
        if options.frame_rate is not None:
            argv.extend(["-r", format_number(options.frame_rate)])

        encoder_args = encoder.args(output_path, audio=audio is not None)
        argv.extend(encoder_args[:-1])  # All except output path
        argv.append("-y")
        argv.append(encoder_args[-1])

        self._log_duration_info(options, build.duration)
        self.logger.debug(
            f"Compiled {len(build.input_paths)} inputs and {len(build.chains)} filter chains"
        )

        return CompiledCommand(
            argv=tuple(argv),
            output_path=output_path,
            inputs=tuple(build.input_paths),
            filter_graph=None if graph.is_empty else graph.render(),
        )

    def _log_duration_info(self, options, duration: float) -> None:
        if options.duration is not None:
            self.logger.info(f"Using explicit duration: {duration:.1f}s")
        elif options.trim is not None:
            self.logger.info(f"Using trimmed duration: {duration:.1f}s")
        else:
            self.logger.info(f"Using layer-derived duration: {duration:.1f}s")
