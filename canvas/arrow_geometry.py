"""
canvas/arrow_geometry.py

Device-space construction of the arrow polygon.

The arrow is first laid out in a local frame where the shaft runs along +Y
with its base on the origin, then rotated and translated onto the two device
anchors.  Everything here is in pixels; the caller maps anchors in and
vertices out of model space.

Single head (START / STOP), local frame, indices in brackets:

                 [6] tip (0, d)
                 /\\
                /  \\
               /    \\
         [4] wing  wing [5]
              [2]--[3]      <- notch pair, height set by point_ratio
               |    |
               |    |
              [0]--[1]      <- shaft base (+-width/2, 0)

Both heads: a mirrored head replaces the shaft base, tips at (0, 0) and (0, d).
"""

from __future__ import annotations

import math
from typing import NamedTuple, Tuple

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QTransform

from models import ArrowShape, ArrowType


class ArrowPolygon(NamedTuple):
    """Vertices plus the closed walk over them that outlines the arrow."""
    vertices: Tuple[QPointF, ...]
    boundary_order: Tuple[int, ...]


# Closed walks; the first index is repeated at the end to close the outline.
SINGLE_HEAD_ORDER: Tuple[int, ...] = (3, 1, 0, 2, 4, 6, 5, 3)
DOUBLE_HEAD_ORDER: Tuple[int, ...] = (3, 5, 7, 9, 8, 6, 4, 2, 0, 1, 3)


def _head_heights(shape: ArrowShape, tip_y: float, direction: float) -> Tuple[float, float, float]:
    """Wing x, wing y and notch y of a head whose tip sits at (0, tip_y).

    ``direction`` is +1 for a head pointing along +Y, -1 for one pointing
    along -Y.
    """
    half_angle = shape.half_angle_rad
    half_width = shape.width / 2.0

    wing_x = shape.length * math.sin(half_angle)
    wing_y = tip_y - direction * shape.length * math.cos(half_angle)

    # Where the tip-to-wing edge crosses the shaft edge x = width/2.
    sharp_y = tip_y - direction * half_width / math.tan(half_angle)

    notch_y = shape.point_ratio * wing_y + (1.0 - shape.point_ratio) * sharp_y
    return wing_x, wing_y, notch_y


def local_arrow_outline(distance: float, shape: ArrowShape) -> ArrowPolygon:
    """Arrow laid out along +Y with its base at the origin and far tip at (0, distance)."""
    half_width = shape.width / 2.0

    if shape.arrow_type is ArrowType.BOTH:
        b_wing_x, b_wing_y, b_notch_y = _head_heights(shape, 0.0, -1.0)
        t_wing_x, t_wing_y, t_notch_y = _head_heights(shape, distance, 1.0)
        vertices = (
            QPointF(0.0, 0.0),
            QPointF(b_wing_x, b_wing_y),
            QPointF(-b_wing_x, b_wing_y),
            QPointF(half_width, b_notch_y),
            QPointF(-half_width, b_notch_y),
            QPointF(half_width, t_notch_y),
            QPointF(-half_width, t_notch_y),
            QPointF(t_wing_x, t_wing_y),
            QPointF(-t_wing_x, t_wing_y),
            QPointF(0.0, distance),
        )
        return ArrowPolygon(vertices, DOUBLE_HEAD_ORDER)

    wing_x, wing_y, notch_y = _head_heights(shape, distance, 1.0)
    vertices = (
        QPointF(-half_width, 0.0),
        QPointF(half_width, 0.0),
        QPointF(-half_width, notch_y),
        QPointF(half_width, notch_y),
        QPointF(-wing_x, wing_y),
        QPointF(wing_x, wing_y),
        QPointF(0.0, distance),
    )
    return ArrowPolygon(vertices, SINGLE_HEAD_ORDER)


def placement_transform(p0: QPointF, p1: QPointF, arrow_type: ArrowType) -> QTransform:
    """Rotation + translation taking the local frame onto the device anchors.

    START and BOTH put the local origin on ``p0`` so the far tip lands on
    ``p1``; STOP turns the shape around and puts the origin on ``p1``.
    """
    v = p1 - p0
    theta = math.degrees(math.atan2(v.y(), v.x())) - 90.0
    origin = p0
    if arrow_type is ArrowType.STOP:
        theta += 180.0
        origin = p1

    transform = QTransform()
    transform.translate(origin.x(), origin.y())
    transform.rotate(theta)
    return transform


def build_arrow_polygon(p0: QPointF, p1: QPointF, shape: ArrowShape) -> ArrowPolygon:
    """Build the arrow polygon in device space between anchors ``p0`` and ``p1``."""
    v = p1 - p0
    distance = math.hypot(v.x(), v.y())
    local = local_arrow_outline(distance, shape)
    transform = placement_transform(p0, p1, shape.arrow_type)
    return ArrowPolygon(
        tuple(transform.map(p) for p in local.vertices),
        local.boundary_order,
    )
