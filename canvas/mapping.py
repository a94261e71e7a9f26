"""
canvas/mapping.py

Coordinate-mapping hosts that are not a QGraphicsView.

A host maps model-space points (data coordinates) to device pixels and back,
and announces when that mapping changes:

    map_to_device(QPointF) -> QPointF
    map_to_model(QPointF) -> QPointF
    viewChanged            (signal, pan / zoom / resize)
    xLimitsChanged         (signal, optional)
    yLimitsChanged         (signal, optional)

``canvas.view.PlotView`` offers the same interface for a QGraphicsView.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from PyQt6.QtCore import QObject, QPointF, pyqtSignal

from debug_trace import trace
from errors import ValidationError


class IdentityMapping(QObject):
    """Model space and device space coincide.  ``notify()`` emits viewChanged."""

    viewChanged = pyqtSignal()

    def map_to_device(self, point: QPointF) -> QPointF:
        return QPointF(point)

    def map_to_model(self, point: QPointF) -> QPointF:
        return QPointF(point)

    def notify(self) -> None:
        self.viewChanged.emit()


class AxisMapping(QObject):
    """
    Data coordinates of a 2D plot: axis limits mapped onto a pixel viewport.

    Each axis is linear or logarithmic (base 10).  Device y grows downwards,
    so ``y_limits[1]`` sits at the top edge (pixel row 0).

    Args:
        x_limits: (min, max) of the horizontal axis.
        y_limits: (min, max) of the vertical axis.
        size: Viewport (width, height) in pixels.
        x_log: Logarithmic horizontal axis.
        y_log: Logarithmic vertical axis.
    """

    viewChanged = pyqtSignal()
    xLimitsChanged = pyqtSignal(float, float)
    yLimitsChanged = pyqtSignal(float, float)

    def __init__(self, x_limits: Tuple[float, float] = (0.0, 1.0),
                 y_limits: Tuple[float, float] = (0.0, 1.0),
                 size: Tuple[float, float] = (640.0, 480.0),
                 x_log: bool = False, y_log: bool = False,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._x_log = x_log
        self._y_log = y_log
        self._x_limits = self._check_limits(x_limits, x_log, "x")
        self._y_limits = self._check_limits(y_limits, y_log, "y")
        self._size = self._check_size(size)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _check_limits(limits, log_scale: bool, axis: str) -> Tuple[float, float]:
        try:
            lo, hi = (float(v) for v in limits)
        except (TypeError, ValueError):
            raise ValidationError(f"{axis} limits must be two numbers, got {limits!r}") from None
        if not lo < hi:
            raise ValidationError(f"{axis} limits must satisfy min < max, got ({lo}, {hi})")
        if log_scale and lo <= 0.0:
            raise ValidationError(f"{axis} limits of a log axis must be positive, got ({lo}, {hi})")
        return lo, hi

    @staticmethod
    def _check_size(size) -> Tuple[float, float]:
        try:
            w, h = (float(v) for v in size)
        except (TypeError, ValueError):
            raise ValidationError(f"size must be two numbers, got {size!r}") from None
        if not (w > 0.0 and h > 0.0):
            raise ValidationError(f"size must be positive, got ({w}, {h})")
        return w, h

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def x_limits(self) -> Tuple[float, float]:
        return self._x_limits

    @property
    def y_limits(self) -> Tuple[float, float]:
        return self._y_limits

    @property
    def size(self) -> Tuple[float, float]:
        return self._size

    def set_x_limits(self, lo: float, hi: float) -> None:
        self._x_limits = self._check_limits((lo, hi), self._x_log, "x")
        trace(f"x limits -> {self._x_limits}", "VIEW")
        self.xLimitsChanged.emit(*self._x_limits)
        self.viewChanged.emit()

    def set_y_limits(self, lo: float, hi: float) -> None:
        self._y_limits = self._check_limits((lo, hi), self._y_log, "y")
        trace(f"y limits -> {self._y_limits}", "VIEW")
        self.yLimitsChanged.emit(*self._y_limits)
        self.viewChanged.emit()

    def resize(self, width: float, height: float) -> None:
        self._size = self._check_size((width, height))
        trace(f"viewport size -> {self._size}", "VIEW")
        self.viewChanged.emit()

    # ------------------------------------------------------------------
    # Axis scale helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _forward(value: float, log_scale: bool) -> float:
        return math.log10(value) if log_scale else value

    def _check_domain(self, point: QPointF) -> None:
        if (self._x_log and not point.x() > 0.0) or (self._y_log and not point.y() > 0.0):
            raise ValidationError(
                f"({point.x()}, {point.y()}) is not positive on a log axis and has no pixel position")

    @staticmethod
    def _inverse(value: float, log_scale: bool) -> float:
        return 10.0 ** value if log_scale else value

    def _axis_to_fraction(self, value: float, limits: Tuple[float, float], log_scale: bool) -> float:
        lo = self._forward(limits[0], log_scale)
        hi = self._forward(limits[1], log_scale)
        return (self._forward(value, log_scale) - lo) / (hi - lo)

    def _fraction_to_axis(self, frac: float, limits: Tuple[float, float], log_scale: bool) -> float:
        lo = self._forward(limits[0], log_scale)
        hi = self._forward(limits[1], log_scale)
        return self._inverse(lo + frac * (hi - lo), log_scale)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def map_to_device(self, point: QPointF) -> QPointF:
        """Data point -> pixel.

        Raises:
            ValidationError: For a coordinate <= 0 on a log axis.
        """
        self._check_domain(point)
        w, h = self._size
        fx = self._axis_to_fraction(point.x(), self._x_limits, self._x_log)
        fy = self._axis_to_fraction(point.y(), self._y_limits, self._y_log)
        return QPointF(fx * w, (1.0 - fy) * h)

    def map_to_model(self, point: QPointF) -> QPointF:
        w, h = self._size
        x = self._fraction_to_axis(point.x() / w, self._x_limits, self._x_log)
        y = self._fraction_to_axis(1.0 - point.y() / h, self._y_limits, self._y_log)
        return QPointF(x, y)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def pan(self, dx_px: float, dy_px: float) -> None:
        """Shift the visible window by a pixel offset (content moves with the cursor)."""
        w, h = self._size
        if dx_px:
            lo = self._fraction_to_axis(-dx_px / w, self._x_limits, self._x_log)
            hi = self._fraction_to_axis(1.0 - dx_px / w, self._x_limits, self._x_log)
            self._x_limits = (lo, hi)
            self.xLimitsChanged.emit(lo, hi)
        if dy_px:
            lo = self._fraction_to_axis(dy_px / h, self._y_limits, self._y_log)
            hi = self._fraction_to_axis(1.0 + dy_px / h, self._y_limits, self._y_log)
            self._y_limits = (lo, hi)
            self.yLimitsChanged.emit(lo, hi)
        if dx_px or dy_px:
            self.viewChanged.emit()

    def zoom(self, factor: float, center: Optional[QPointF] = None) -> None:
        """Zoom by ``factor`` (> 1 zooms in) about a model-space point.

        The center defaults to the middle of the viewport and keeps its pixel
        position.
        """
        if not factor > 0.0:
            raise ValidationError(f"zoom factor must be > 0, got {factor}")
        if center is None:
            w, h = self._size
            center = self.map_to_model(QPointF(w / 2.0, h / 2.0))
        else:
            self._check_domain(center)

        def _scaled(limits, value, log_scale):
            lo = self._forward(limits[0], log_scale)
            hi = self._forward(limits[1], log_scale)
            c = self._forward(value, log_scale)
            return (self._inverse(c + (lo - c) / factor, log_scale),
                    self._inverse(c + (hi - c) / factor, log_scale))

        self._x_limits = _scaled(self._x_limits, center.x(), self._x_log)
        self._y_limits = _scaled(self._y_limits, center.y(), self._y_log)
        trace(f"zoom x{factor} -> x {self._x_limits}, y {self._y_limits}", "VIEW")
        self.xLimitsChanged.emit(*self._x_limits)
        self.yLimitsChanged.emit(*self._y_limits)
        self.viewChanged.emit()
