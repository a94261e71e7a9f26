"""
canvas package

PyQt6 arrow annotation sized in pixels and anchored in model space, plus the
debouncer and host views it works with.
"""

from canvas.arrow import Arrow2D, GeometryState
from canvas.arrow_geometry import ArrowPolygon, build_arrow_polygon
from canvas.debounce import Debouncer
from canvas.mapping import AxisMapping, IdentityMapping
from canvas.surface import ArrowPatchItem
from canvas.view import PlotView

__all__ = [
    "Arrow2D",
    "GeometryState",
    "ArrowPolygon",
    "build_arrow_polygon",
    "Debouncer",
    "AxisMapping",
    "IdentityMapping",
    "ArrowPatchItem",
    "PlotView",
]
