"""Tests for transitions and pan/zoom motion."""

import pytest
from pydantic import ValidationError
from mediatimeline import Anchor, Direction, TransitionSpec, TransitionType
from mediatimeline.media.pan_zoom import (
    ZoomFrame,
    easing_expression,
    focus_point,
    ken_burns_params,
    pan_zoom_params,
)
from mediatimeline.media.transitions import (
    TRANSITION_PRESETS,
    coerce_transition,
    text_alpha_expression,
    transition_preset,
    xfade_name,
    xfade_node,
    xfade_offsets,
)


class TestTransitionSpec:
    """Test transition descriptors."""

    def test_defaults(self):
        """Test the default transition is a one-second fade."""
        spec = TransitionSpec()
        assert spec.type == TransitionType.FADE
        assert spec.duration == 1.0
        assert not spec.is_none

    def test_none(self):
        """Test type none and zero duration both disable a transition."""
        assert TransitionSpec(type=TransitionType.NONE).is_none
        assert TransitionSpec(duration=0).is_none

    def test_negative_duration(self):
        """Test negative durations are rejected."""
        with pytest.raises(ValidationError):
            TransitionSpec(duration=-0.5)


class TestXfade:
    """Test clip-to-clip transitions."""

    def test_names(self):
        """Test xfade names with and without direction."""
        assert xfade_name(TransitionSpec(type=TransitionType.SLIDE)) == "slideleft"
        assert (
            xfade_name(TransitionSpec(type=TransitionType.WIPE, direction=Direction.UP))
            == "wipeup"
        )
        assert xfade_name(TransitionSpec(type=TransitionType.ZOOM)) == "zoomin"
        assert xfade_name(TransitionSpec(type=TransitionType.IRIS)) == "circleopen"

    def test_node(self):
        """Test the rendered xfade node."""
        node = xfade_node(TransitionSpec(type=TransitionType.DISSOLVE, duration=0.5), 4.5)
        assert node.render() == "xfade=transition=dissolve:duration=0.5:offset=4.5"

    def test_offsets(self):
        """Test offsets accumulate the output length minus the overlap."""
        assert xfade_offsets([5, 5, 5], 1) == [4, 8]
        assert xfade_offsets([3, 2], 0.5) == [2.5]
        assert xfade_offsets([5], 1) == []
        assert xfade_offsets([], 1) == []

    def test_offsets_never_negative(self):
        """Test short clips clamp the offset at zero."""
        assert xfade_offsets([0.5, 2], 1) == [0.0]


class TestTextAlpha:
    """Test text fade expressions."""

    def test_fade(self):
        """Test fade in and out over the text window."""
        spec = TransitionSpec(type=TransitionType.FADE, duration=1)
        assert text_alpha_expression(spec, 2, 5) == (
            "if(lt(t,2+1),(t-2)/1,if(gt(t,5-1),(5-t)/1,1))"
        )

    def test_non_fading_types(self):
        """Test types other than fade and dissolve do not animate text."""
        assert text_alpha_expression(TransitionSpec(type=TransitionType.SLIDE), 0, 3) is None
        assert text_alpha_expression(TransitionSpec(duration=0), 0, 3) is None


class TestPresets:
    """Test named presets and coercion."""

    def test_known_presets(self):
        """Test preset values."""
        assert transition_preset("quick").duration == 0.3
        assert transition_preset("retro").direction == Direction.RIGHT
        assert set(TRANSITION_PRESETS) >= {"smooth", "dramatic", "professional", "matrix"}

    def test_unknown_preset_falls_back(self):
        """Test unknown preset names fall back to smooth."""
        assert transition_preset("sparkly") == TRANSITION_PRESETS["smooth"]

    def test_coerce(self):
        """Test the accepted transition forms."""
        assert coerce_transition(None) is None
        assert coerce_transition("professional").type == TransitionType.DISSOLVE
        assert coerce_transition("cube").type == TransitionType.CUBE
        assert coerce_transition(TransitionType.BURN).type == TransitionType.BURN
        assert coerce_transition("sparkly") == TRANSITION_PRESETS["smooth"]
        assert coerce_transition({"type": "push", "duration": 2}).duration == 2

        spec = TransitionSpec(duration=3)
        assert coerce_transition(spec) is spec


class TestPanZoom:
    """Test zoompan parameter generation."""

    def test_easing_expressions(self):
        """Test easing curves wrap the progress expression."""
        assert easing_expression("linear", "p") == "p"
        assert easing_expression("ease-in", "p") == "(p)*(p)"
        assert easing_expression("ease-out", "p") == "(1-(1-p)*(1-p))"
        assert easing_expression("ease-in-out", "p").startswith("if(lt(p,0.5),")

    def test_linear_zoom(self):
        """Test a linear zoom over four seconds at 25 fps."""
        params = pan_zoom_params(
            ZoomFrame(), ZoomFrame(zoom=2), 4, "linear", (1280, 720), 25
        )
        assert params == {
            "z": "1+(1)*min(on/100,1)",
            "x": "iw*(0.5)-(iw/zoom/2)",
            "y": "ih*(0.5)-(ih/zoom/2)",
            "d": 1,
            "s": "1280x720",
            "fps": 25,
        }

    def test_pan(self):
        """Test panning interpolates the focus point."""
        params = pan_zoom_params(
            ZoomFrame(zoom=1.5, x=0.25), ZoomFrame(zoom=1.5, x=0.75), 2, "linear", fps=10
        )
        assert params["z"] == "1.5"
        assert params["x"] == "iw*(0.25+(0.5)*min(on/20,1))-(iw/zoom/2)"

    def test_zoom_must_be_positive(self):
        """Test zero zoom is rejected."""
        with pytest.raises(ValidationError):
            ZoomFrame(zoom=0)

    def test_focus_points(self):
        """Test anchors map to focus fractions."""
        assert focus_point(Anchor.CENTER) == (0.5, 0.5)
        assert focus_point("top-left") == (0.35, 0.35)
        assert focus_point("right") == (0.65, 0.5)
        assert focus_point("bottom") == (0.5, 0.65)

    def test_ken_burns(self):
        """Test Ken Burns zooms toward the focus point."""
        params = ken_burns_params("bottom-right", 1.0, 1.2, 2, "linear")
        assert params["z"] == "1+(0.2)*min(on/50,1)"
        assert params["x"] == "iw*(0.5+(0.15)*min(on/50,1))-(iw/zoom/2)"
        assert params["s"] == "1920x1080"
