"""Tests for placement descriptors and layer records."""

import pytest
from pydantic import ValidationError
from mediatimeline import Anchor, LayerKind
from mediatimeline.media import (
    AbsolutePosition,
    AudioSettings,
    ChromaKey,
    Layer,
    NamedPosition,
    PercentPosition,
    PositionTarget,
    RawPosition,
    TextStyle,
    normalize_color,
    parse_position,
    resolve_position,
)


class TestParsePosition:
    """Test descriptor normalization."""

    def test_none(self):
        """Test no descriptor means no position."""
        assert parse_position(None) is None

    def test_anchor_names_and_aliases(self):
        """Test anchor names, enum values and shorthands."""
        assert parse_position("top-right") == NamedPosition(anchor=Anchor.TOP_RIGHT)
        assert parse_position("bottom") == NamedPosition(anchor=Anchor.BOTTOM_CENTER)
        assert parse_position("LEFT") == NamedPosition(anchor=Anchor.CENTER_LEFT)
        assert parse_position(Anchor.CENTER) == NamedPosition(anchor=Anchor.CENTER)

    def test_points(self):
        """Test pairs become percent or absolute positions."""
        assert parse_position(("50%", "25%")) == PercentPosition(x=50, y=25)
        assert parse_position(("120px", 40)) == AbsolutePosition(x=120.0, y=40)
        assert parse_position([10, "main_h-100"]) == AbsolutePosition(x=10, y="main_h-100")

    def test_percentage_strings(self):
        """Test a bare percentage places both axes and a pair gives x then y."""
        assert parse_position("50%") == PercentPosition(x=50, y=50)
        assert parse_position(" 25% ") == PercentPosition(x=25, y=25)
        assert parse_position("10% 90%") == PercentPosition(x=10, y=90)
        assert parse_position("50% bottom") == RawPosition(value="50% bottom")
        assert parse_position("10% 20% 30%") == RawPosition(value="10% 20% 30%")

    def test_dicts(self):
        """Test dict descriptors with and without a kind."""
        assert parse_position({"x": "50%", "y": "50%", "anchor": "center"}) == PercentPosition(
            x=50, y=50, anchor=Anchor.CENTER
        )
        assert parse_position({"anchor": "top-left", "margin": 10}) == NamedPosition(
            anchor=Anchor.TOP_LEFT, margin=10
        )
        assert parse_position({"kind": "named", "anchor": "bottom-right"}) == NamedPosition(
            anchor=Anchor.BOTTOM_RIGHT
        )

    def test_unrecognised_passes_through(self):
        """Test anything unrecognised becomes a raw position instead of raising."""
        assert parse_position("somewhere odd") == RawPosition(value="somewhere odd")
        assert isinstance(parse_position(42), RawPosition)
        assert isinstance(parse_position({"kind": "named", "anchor": "nowhere"}), RawPosition)


class TestResolvePosition:
    """Test coordinate expressions."""

    def test_default_is_centered(self):
        """Test a missing position centers the content."""
        text = resolve_position(None, PositionTarget.TEXT)
        overlay = resolve_position(None, PositionTarget.OVERLAY)

        assert (text.x, text.y) == ("(w-text_w)/2", "(h-text_h)/2")
        assert overlay.render() == "x=(W-w)/2:y=(H-h)/2"

    def test_named_margins(self):
        """Test text and overlays use different default margins."""
        text = resolve_position(NamedPosition(anchor=Anchor.TOP_LEFT), PositionTarget.TEXT)
        overlay = resolve_position(
            NamedPosition(anchor=Anchor.BOTTOM_RIGHT), PositionTarget.OVERLAY
        )

        assert (text.x, text.y) == ("50", "50")
        assert (overlay.x, overlay.y) == ("W-w-20", "H-h-20")

    def test_margin_overrides(self):
        """Test explicit and zero margins."""
        flush = resolve_position(
            NamedPosition(anchor=Anchor.BOTTOM_RIGHT, margin=0), PositionTarget.OVERLAY
        )
        custom = resolve_position(
            NamedPosition(anchor=Anchor.TOP_CENTER), PositionTarget.TEXT, margin=10
        )

        assert (flush.x, flush.y) == ("W-w", "H-h")
        assert (custom.x, custom.y) == ("(w-text_w)/2", "10")

    def test_percent(self):
        """Test percentages resolve against the canvas size."""
        resolved = resolve_position(PercentPosition(x=50, y=25), PositionTarget.TEXT)
        assert (resolved.x, resolved.y) == ("(w*0.5)", "(h*0.25)")

    def test_percent_anchored(self):
        """Test an anchor aligns the content to the point."""
        resolved = resolve_position(
            PercentPosition(x=50, y=100, anchor=Anchor.BOTTOM_CENTER), PositionTarget.OVERLAY
        )
        assert (resolved.x, resolved.y) == ("((W*0.5)-w/2)", "((H*1)-h)")

    def test_absolute(self):
        """Test numbers and expressions pass through."""
        resolved = resolve_position(
            AbsolutePosition(x=12.5, y="main_h-overlay_h"), PositionTarget.OVERLAY
        )
        assert (resolved.x, resolved.y) == ("12.5", "main_h-overlay_h")

    def test_expression_with_comma_is_quoted(self):
        """Test expressions containing commas are quoted as arguments."""
        resolved = resolve_position(
            AbsolutePosition(x="if(gt(t,2),10,20)", y=0), PositionTarget.TEXT
        )
        assert resolved.args() == (("x", "'if(gt(t,2),10,20)'"), ("y", "0"))

    def test_raw(self):
        """Test raw positions are emitted as a single positional argument."""
        resolved = resolve_position(RawPosition(value="10:20"), PositionTarget.OVERLAY)
        assert resolved.args() == ((None, "10:20"),)
        assert resolved.render() == "10:20"


class TestNormalizeColor:
    """Test color conversion."""

    def test_css_colors(self):
        """Test rgb() and rgba() become engine hex colors."""
        assert normalize_color("rgb(0,128,255)") == "0x0080FF"
        assert normalize_color("rgba(255, 0, 0, 0.5)") == "0xFF0000@0.5"

    def test_passthrough(self):
        """Test hex values, names and unknown values are unchanged."""
        assert normalize_color("#ffffff") == "#ffffff"
        assert normalize_color("yellow") == "yellow"
        assert normalize_color("rgb(bad)") == "rgb(bad)"


class TestLayer:
    """Test the layer record."""

    def test_source_rules(self):
        """Test filter layers need an effect and other kinds need a source."""
        with pytest.raises(ValidationError):
            Layer(kind=LayerKind.FILTER)
        with pytest.raises(ValidationError):
            Layer(kind=LayerKind.FILTER, effect="blur", source="a.mp4")
        with pytest.raises(ValidationError):
            Layer(kind=LayerKind.VIDEO)

    def test_default_durations(self):
        """Test per-kind default durations."""
        assert Layer(kind=LayerKind.TEXT, source="Hi").effective_duration() == 5
        assert Layer(kind=LayerKind.IMAGE, source="a.png").effective_duration() == 5
        assert Layer(kind=LayerKind.VIDEO, source="a.mp4").effective_duration() == 30
        assert Layer(kind=LayerKind.FILTER, effect="blur").effective_duration() == 0

    def test_shifted(self):
        """Test shifting returns a moved copy."""
        layer = Layer(kind=LayerKind.TEXT, source="Hi", start_time=1)

        assert layer.shifted(0) is layer
        assert layer.shifted(2.5).start_time == 3.5
        assert layer.start_time == 1

    def test_frozen(self):
        """Test layers cannot be changed in place."""
        layer = Layer(kind=LayerKind.TEXT, source="Hi")
        with pytest.raises(ValidationError):
            layer.start_time = 4

    def test_camel_case_dump(self):
        """Test documents use camelCase keys."""
        layer = Layer(kind=LayerKind.TEXT, source="Hi", start_time=1)
        dumped = layer.model_dump(by_alias=True, exclude_none=True)

        assert dumped["startTime"] == 1
        assert "start_time" not in dumped

    def test_audio_loop(self):
        """Test loop flags map to engine loop counts."""
        assert AudioSettings(loop=True).loop_count == -1
        assert AudioSettings().loop_count == 0
        assert AudioSettings(loop=3).loop_count == 3
        with pytest.raises(ValidationError):
            AudioSettings(loop=-2)

    def test_chroma_engine_color(self):
        """Test key colors are converted to 0x form without validation."""
        assert ChromaKey(background="bg.jpg").engine_color == "0x00FF00"
        assert ChromaKey(background="bg.jpg", color="0xABCDEF").engine_color == "0xABCDEF"
        assert ChromaKey(background="bg.jpg", color="green").engine_color == "0xgreen"

    def test_style_merge(self):
        """Test only explicitly set override fields are applied."""
        base = TextStyle(font_size=32, color="white", stroke_width=2)
        merged = base.merged({"color": "red"})

        assert merged.font_size == 32
        assert merged.color == "red"
        assert merged.stroke_width == 2
        assert base.merged(None) is base
