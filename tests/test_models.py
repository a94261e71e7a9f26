"""Tests for the value types in models.py and colour parsing in utils.py."""
from __future__ import annotations

import math

import pytest
from PyQt6.QtGui import QColor

from errors import RangeError, ValidationError
from models import ArrowShape, ArrowStyle, ArrowType, EdgeStyle
from utils import parse_color, qcolor_to_hex


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TestArrowType:
    @pytest.mark.parametrize("raw, expected", [
        ("start", ArrowType.START),
        ("Stop", ArrowType.STOP),
        (" BOTH ", ArrowType.BOTH),
        (ArrowType.BOTH, ArrowType.BOTH),
    ])
    def test_coerce(self, raw, expected):
        assert ArrowType.coerce(raw) is expected

    @pytest.mark.parametrize("raw", ["middle", "", None, 1])
    def test_coerce_rejects(self, raw):
        with pytest.raises(ValidationError):
            ArrowType.coerce(raw)


class TestEdgeStyle:
    @pytest.mark.parametrize("raw, expected", [
        ("none", EdgeStyle.NONE),
        ("-", EdgeStyle.SOLID),
        ("--", EdgeStyle.DASHED),
        (":", EdgeStyle.DOTTED),
        ("-.", EdgeStyle.DASHDOT),
        ("Dashed", EdgeStyle.DASHED),
    ])
    def test_coerce(self, raw, expected):
        assert EdgeStyle.coerce(raw) is expected

    def test_coerce_rejects(self):
        with pytest.raises(ValidationError):
            EdgeStyle.coerce("wavy")


# ---------------------------------------------------------------------------
# ArrowShape validation
# ---------------------------------------------------------------------------


class TestArrowShape:
    @pytest.mark.parametrize("angle", [0, 90, 95, -10, math.nan])
    def test_point_angle_out_of_range(self, angle):
        with pytest.raises(RangeError):
            ArrowShape().updated(point_angle=angle)

    @pytest.mark.parametrize("ratio", [-0.1, 1.1])
    def test_point_ratio_out_of_range(self, ratio):
        with pytest.raises(RangeError):
            ArrowShape().updated(point_ratio=ratio)

    def test_valid_values_accepted(self):
        shape = ArrowShape().updated(point_angle=45, point_ratio=0.5)
        assert shape.point_angle == 45.0
        assert shape.point_ratio == 0.5

    @pytest.mark.parametrize("field_name", ["width", "length"])
    def test_negative_sizes_rejected(self, field_name):
        with pytest.raises(RangeError):
            ArrowShape().updated(**{field_name: -1})

    def test_zero_sizes_accepted(self):
        shape = ArrowShape().updated(width=0, length=0)
        assert shape.width == 0.0 and shape.length == 0.0

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            ArrowShape().updated(width="wide")
        with pytest.raises(ValidationError):
            ArrowShape().updated(length=True)

    def test_unknown_parameter_rejected(self):
        with pytest.raises(ValidationError):
            ArrowShape().updated(height=3)

    def test_failed_update_leaves_original(self):
        shape = ArrowShape()
        with pytest.raises(RangeError):
            shape.updated(width=10, point_ratio=2)
        assert shape.width == 1.5

    def test_range_error_is_validation_error(self):
        assert issubclass(RangeError, ValidationError)
        assert issubclass(ValidationError, ValueError)

    def test_from_settings_defaults(self):
        shape = ArrowShape.from_settings()
        assert shape == ArrowShape(1.5, 24.0, 36.0, 0.7, ArrowType.START)


# ---------------------------------------------------------------------------
# ArrowStyle
# ---------------------------------------------------------------------------


class TestArrowStyle:
    def test_defaults_from_settings(self):
        style = ArrowStyle.from_settings()
        assert style.to_dict() == {
            "edge_alpha": 1.0,
            "edge_width": 0.5,
            "edge_style": "none",
            "edge_color": "#000000",
            "face_alpha": 1.0,
            "face_color": "#000000",
            "filled": True,
        }

    def test_unfilled_has_transparent_face(self):
        style = ArrowStyle.from_settings().updated(filled=False, face_alpha=0.8)
        assert style.face_alpha == 0.8
        assert style.effective_face_alpha == 0.0

    @pytest.mark.parametrize("attr, value", [
        ("edge_alpha", 1.5),
        ("face_alpha", -0.2),
        ("edge_width", -1),
    ])
    def test_ranges(self, attr, value):
        with pytest.raises(RangeError):
            ArrowStyle.from_settings().updated(**{attr: value})

    def test_filled_must_be_bool(self):
        with pytest.raises(ValidationError):
            ArrowStyle.from_settings().updated(filled="yes")

    def test_bad_colour(self):
        with pytest.raises(ValidationError):
            ArrowStyle.from_settings().updated(face_color="not-a-colour")


# ---------------------------------------------------------------------------
# Colour parsing
# ---------------------------------------------------------------------------


class TestParseColor:
    @pytest.mark.parametrize("raw, hex_value", [
        ("black", "#000000"),
        ("k", "#000000"),
        ("r", "#FF0000"),
        ("#12AB34", "#12AB34"),
        ((0.0, 0.0, 1.0), "#0000FF"),
        (QColor(10, 20, 30), "#0A141E"),
    ])
    def test_accepted(self, raw, hex_value):
        assert qcolor_to_hex(parse_color(raw)) == hex_value

    def test_hex_with_alpha(self):
        c = parse_color("#11223380")
        assert c.alpha() == 0x80

    @pytest.mark.parametrize("raw", ["#12", "nocolour", (2.0, 0, 0), (0, 0), 5, None])
    def test_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_color(raw)

    def test_returns_copy(self):
        original = QColor("red")
        parsed = parse_color(original)
        parsed.setAlpha(0)
        assert original.alpha() == 255


# ---------------------------------------------------------------------------
# Defaults from a bad settings file
# ---------------------------------------------------------------------------


class TestInvalidStoredDefaults:
    def test_shape_falls_back_per_field(self, isolated_settings, caplog):
        isolated_settings.settings.arrow.point_angle = 95.0
        isolated_settings.settings.arrow.arrow_type = "sideways"
        isolated_settings.settings.arrow.length = 40.0

        shape = ArrowShape.from_settings()

        assert shape.point_angle == 36.0
        assert shape.arrow_type is ArrowType.START
        assert shape.length == 40.0
        assert "arrow.point_angle" in caplog.text
        assert "arrow.arrow_type" in caplog.text

    def test_style_falls_back_per_field(self, isolated_settings, caplog):
        isolated_settings.settings.style.edge_alpha = 3.0
        isolated_settings.settings.style.filled = "yes"
        isolated_settings.settings.style.face_color = "r"

        style = ArrowStyle.from_settings()

        assert style.edge_alpha == 1.0
        assert style.filled is True
        assert qcolor_to_hex(style.face_color) == "#FF0000"
        assert "style.edge.alpha" in caplog.text
        assert "style.face.filled" in caplog.text
