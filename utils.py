"""
utils.py

Colour helpers shared by the arrow model and its render surface.
"""

from __future__ import annotations

from typing import Any, Dict

from PyQt6.QtGui import QColor

from errors import ValidationError


# Single-letter colour codes accepted alongside SVG colour names
SHORT_COLOR_NAMES: Dict[str, str] = {
    "k": "black",
    "w": "white",
    "r": "red",
    "g": "green",
    "b": "blue",
    "c": "cyan",
    "m": "magenta",
    "y": "yellow",
}


def qcolor_to_hex(c: QColor, include_alpha: bool = False) -> str:
    """
    Convert a QColor to a hex string.

    Args:
        c: The QColor to convert
        include_alpha: If True, include alpha channel as 4th byte

    Returns:
        Hex string like "#RRGGBB" or "#RRGGBBAA"
    """
    if include_alpha:
        return "#{:02X}{:02X}{:02X}{:02X}".format(c.red(), c.green(), c.blue(), c.alpha())
    return "#{:02X}{:02X}{:02X}".format(c.red(), c.green(), c.blue())


def _hex_to_qcolor(s: str) -> QColor:
    """Parse "#RRGGBB" / "#RRGGBBAA"; returns an invalid QColor on failure."""
    s = s.strip()
    if s.startswith("#"):
        s = s[1:]
    try:
        if len(s) == 6:
            return QColor(int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
        if len(s) == 8:
            return QColor(int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16), int(s[6:8], 16))
    except ValueError:
        pass
    return QColor()


def parse_color(value: Any, name: str = "color") -> QColor:
    """
    Parse a user supplied colour into a QColor.

    Accepts a QColor, a hex string ("#RRGGBB" or "#RRGGBBAA"), an SVG colour
    name ("black", "steelblue"), a single-letter code ("k", "r", ...), or an
    RGB(A) sequence of floats in [0, 1].

    Args:
        value: The colour to parse
        name: Parameter name used in the error message

    Returns:
        A valid QColor (a copy, never the caller's instance)

    Raises:
        ValidationError: If the value cannot be interpreted as a colour.
    """
    if isinstance(value, QColor):
        if not value.isValid():
            raise ValidationError(f"{name}: invalid QColor")
        return QColor(value)

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("#"):
            color = _hex_to_qcolor(text)
        else:
            color = QColor(SHORT_COLOR_NAMES.get(text.lower(), text.lower()))
        if not color.isValid():
            raise ValidationError(f"{name}: unknown colour {value!r}")
        return color

    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        try:
            channels = [float(v) for v in value]
        except (TypeError, ValueError):
            raise ValidationError(f"{name}: colour channels must be numbers, got {value!r}") from None
        if any(not 0.0 <= ch <= 1.0 for ch in channels):
            raise ValidationError(f"{name}: colour channels must lie in [0, 1], got {value!r}")
        return QColor.fromRgbF(*channels)

    raise ValidationError(f"{name}: unsupported colour value {value!r}")
