"""
models.py

Value types for the arrow annotation: head placement, outline style, shape
parameters and presentation attributes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, Dict

from PyQt6.QtGui import QColor

from errors import RangeError, ValidationError
from settings import get_settings
from utils import parse_color, qcolor_to_hex

log = logging.getLogger(__name__)


# ----------------------------
# Enumerations
# ----------------------------

class ArrowType(str, Enum):
    """Which end(s) of the anchor segment carry a head.

    START draws the shaft base on ``start`` and the head on ``stop``;
    STOP is the reverse; BOTH puts a head on each anchor.
    """
    START = "start"
    STOP = "stop"
    BOTH = "both"

    @classmethod
    def coerce(cls, value: Any) -> "ArrowType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(
            f"arrow_type must be one of {[m.value for m in cls]}, got {value!r}"
        )


# Line-spec shorthands accepted for EdgeStyle
_EDGE_STYLE_ALIASES: Dict[str, str] = {
    "-": "solid",
    "--": "dashed",
    ":": "dotted",
    "-.": "dashdot",
}


class EdgeStyle(str, Enum):
    """Outline stroke pattern."""
    NONE = "none"
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    DASHDOT = "dashdot"

    @classmethod
    def coerce(cls, value: Any) -> "EdgeStyle":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _EDGE_STYLE_ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                pass
        raise ValidationError(
            f"edge_style must be one of {[m.value for m in cls]} "
            f"or {list(_EDGE_STYLE_ALIASES)}, got {value!r}"
        )


# ----------------------------
# Validation helpers
# ----------------------------

def _number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}") from None


def _non_negative(value: Any, name: str) -> float:
    v = _number(value, name)
    if not v >= 0.0:  # also rejects NaN
        raise RangeError(f"{name} must be >= 0, got {v}")
    return v


def _unit_interval(value: Any, name: str) -> float:
    v = _number(value, name)
    if not 0.0 <= v <= 1.0:
        raise RangeError(f"{name} must lie in [0, 1], got {v}")
    return v


def _open_angle(value: Any, name: str) -> float:
    v = _number(value, name)
    if not 0.0 < v < 90.0:
        raise RangeError(f"{name} must lie in the open interval (0, 90), got {v}")
    return v


def _boolean(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a bool, got {value!r}")
    return value


def _setting(check: Callable[[Any, str], Any], value: Any, key: str, default: Any) -> Any:
    """Validate a stored default; an invalid one is logged and replaced by ``default``."""
    try:
        return check(value, key)
    except ValidationError as e:
        log.warning("Ignoring invalid setting %s (%s); using %r", key, e, default)
        return default


# ----------------------------
# Shape parameters
# ----------------------------

@dataclass(frozen=True)
class ArrowShape:
    """Device-space proportions of the arrow.

    ``width`` is the full shaft width and ``length`` the length of each head
    side, both in pixels.  ``point_angle`` is the full opening angle of the
    head in degrees; ``point_ratio`` blends the head base from a sharp notch
    (0) to a straight cut at wing height (1).
    """
    width: float = 1.5
    length: float = 24.0
    point_angle: float = 36.0
    point_ratio: float = 0.7
    arrow_type: ArrowType = ArrowType.START

    @classmethod
    def create(cls, width: Any, length: Any, point_angle: Any, point_ratio: Any,
               arrow_type: Any) -> "ArrowShape":
        """Validate and normalize raw values into an ArrowShape.

        Raises:
            RangeError: For out-of-range numbers.
            ValidationError: For non-numeric values or an unknown arrow type.
        """
        return cls(
            width=_non_negative(width, "width"),
            length=_non_negative(length, "length"),
            point_angle=_open_angle(point_angle, "point_angle"),
            point_ratio=_unit_interval(point_ratio, "point_ratio"),
            arrow_type=ArrowType.coerce(arrow_type),
        )

    @classmethod
    def from_settings(cls) -> "ArrowShape":
        """Shape from the ``[arrow]`` table.

        Each invalid entry falls back to the built-in default with a warning,
        so a bad settings file never blocks arrow creation.
        """
        s = get_settings().settings.arrow
        d = cls()
        return cls(
            width=_setting(_non_negative, s.width, "arrow.width", d.width),
            length=_setting(_non_negative, s.length, "arrow.length", d.length),
            point_angle=_setting(_open_angle, s.point_angle, "arrow.point_angle", d.point_angle),
            point_ratio=_setting(_unit_interval, s.point_ratio, "arrow.point_ratio", d.point_ratio),
            arrow_type=_setting(lambda v, _k: ArrowType.coerce(v), s.arrow_type,
                                "arrow.arrow_type", d.arrow_type),
        )

    def updated(self, **changes: Any) -> "ArrowShape":
        """Return a validated copy with ``changes`` applied; self is untouched."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValidationError(f"unknown shape parameter(s): {sorted(unknown)}")
        merged = replace(self, **changes) if changes else self
        return ArrowShape.create(
            merged.width, merged.length, merged.point_angle,
            merged.point_ratio, merged.arrow_type,
        )

    @property
    def half_angle_rad(self) -> float:
        return math.radians(self.point_angle / 2.0)


# ----------------------------
# Presentation attributes
# ----------------------------

@dataclass(frozen=True)
class ArrowStyle:
    """Outline and fill attributes; they never influence the polygon."""
    edge_alpha: float = 1.0
    edge_width: float = 0.5
    edge_style: EdgeStyle = EdgeStyle.NONE
    edge_color: QColor = field(default_factory=lambda: QColor("black"))
    face_alpha: float = 1.0
    face_color: QColor = field(default_factory=lambda: QColor("black"))
    filled: bool = True

    @classmethod
    def create(cls, edge_alpha: Any, edge_width: Any, edge_style: Any, edge_color: Any,
               face_alpha: Any, face_color: Any, filled: Any) -> "ArrowStyle":
        """Validate and normalize raw values into an ArrowStyle."""
        return cls(
            edge_alpha=_unit_interval(edge_alpha, "edge_alpha"),
            edge_width=_non_negative(edge_width, "edge_width"),
            edge_style=EdgeStyle.coerce(edge_style),
            edge_color=parse_color(edge_color, "edge_color"),
            face_alpha=_unit_interval(face_alpha, "face_alpha"),
            face_color=parse_color(face_color, "face_color"),
            filled=_boolean(filled, "filled"),
        )

    @classmethod
    def from_settings(cls) -> "ArrowStyle":
        """Style from the ``[style]`` tables; invalid entries fall back like ArrowShape's."""
        s = get_settings().settings.style
        d = cls()
        return cls(
            edge_alpha=_setting(_unit_interval, s.edge_alpha, "style.edge.alpha", d.edge_alpha),
            edge_width=_setting(_non_negative, s.edge_width, "style.edge.width", d.edge_width),
            edge_style=_setting(lambda v, _k: EdgeStyle.coerce(v), s.edge_style,
                                "style.edge.style", d.edge_style),
            edge_color=_setting(parse_color, s.edge_color, "style.edge.color", d.edge_color),
            face_alpha=_setting(_unit_interval, s.face_alpha, "style.face.alpha", d.face_alpha),
            face_color=_setting(parse_color, s.face_color, "style.face.color", d.face_color),
            filled=_setting(_boolean, s.filled, "style.face.filled", d.filled),
        )

    def updated(self, **changes: Any) -> "ArrowStyle":
        """Return a validated copy with ``changes`` applied; self is untouched."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValidationError(f"unknown style attribute(s): {sorted(unknown)}")
        merged = replace(self, **changes) if changes else self
        return ArrowStyle.create(
            merged.edge_alpha, merged.edge_width, merged.edge_style, merged.edge_color,
            merged.face_alpha, merged.face_color, merged.filled,
        )

    @property
    def effective_face_alpha(self) -> float:
        """Face alpha pushed to the surface; an unfilled arrow is see-through."""
        return self.face_alpha if self.filled else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict with hex colours."""
        return {
            "edge_alpha": self.edge_alpha,
            "edge_width": self.edge_width,
            "edge_style": self.edge_style.value,
            "edge_color": qcolor_to_hex(self.edge_color),
            "face_alpha": self.face_alpha,
            "face_color": qcolor_to_hex(self.face_color),
            "filled": self.filled,
        }
