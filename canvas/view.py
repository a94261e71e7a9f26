"""
canvas/view.py

QGraphicsView host that reports pan/zoom/resize to pixel-sized annotations.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QGraphicsScene, QGraphicsView

from debug_trace import trace
from settings import get_settings


class PlotView(QGraphicsView):
    """
    Graphics view exposing the host-view mapping interface.

    Model space is scene coordinates, device space is viewport pixels.

    Signals:
    - viewChanged: zoom (wheel or zoom_* methods), scroll and resize
    - xLimitsChanged / yLimitsChanged: horizontal / vertical scroll moves

    Navigation:
    - Mouse wheel zooms about the cursor
    - Left-drag pans (ScrollHandDrag)
    """

    viewChanged = pyqtSignal()
    xLimitsChanged = pyqtSignal()
    yLimitsChanged = pyqtSignal()

    def __init__(self, scene: QGraphicsScene, parent=None):
        super().__init__(scene, parent)
        self.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)

        self.horizontalScrollBar().valueChanged.connect(self._on_horizontal_scroll)
        self.verticalScrollBar().valueChanged.connect(self._on_vertical_scroll)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def map_to_device(self, point: QPointF) -> QPointF:
        """Scene point -> viewport pixel, without integer rounding."""
        return self.viewportTransform().map(QPointF(point))

    def map_to_model(self, point: QPointF) -> QPointF:
        """Viewport pixel -> scene point."""
        inverse, invertible = self.viewportTransform().inverted()
        if not invertible:
            trace("viewport transform not invertible", "VIEW")
            return QPointF(point)
        return inverse.map(QPointF(point))

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def _on_horizontal_scroll(self, _value: int):
        self.xLimitsChanged.emit()
        self.viewChanged.emit()

    def _on_vertical_scroll(self, _value: int):
        self.yLimitsChanged.emit()
        self.viewChanged.emit()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.viewChanged.emit()

    def wheelEvent(self, event):
        """Zoom with mouse wheel."""
        delta = event.angleDelta().y()
        # Zoom factor from settings. Default: 1.15 (15% per scroll step)
        zoom_factor = get_settings().settings.view.wheel_factor
        factor = zoom_factor if delta > 0 else 1 / zoom_factor
        self.scale(factor, factor)
        self.viewChanged.emit()

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom_fit(self, margin: float = 20.0):
        """Fit all items (the scene rect when there are none) plus a margin in scene units."""
        rect = self.scene().itemsBoundingRect()
        if rect.isEmpty():
            rect = self.scene().sceneRect()
        if rect.isEmpty():
            return
        self.zoom_to(rect.adjusted(-margin, -margin, margin, margin))

    def zoom_to(self, rect: QRectF):
        """Zoom so that a scene rectangle fills the view.  Empty rects are ignored."""
        if rect.isEmpty():
            return
        self.fitInView(rect, Qt.AspectRatioMode.KeepAspectRatio)
        self.viewChanged.emit()

    def zoom_reset(self):
        """Reset zoom to 100% (1:1 scale)."""
        self.resetTransform()
        self.viewChanged.emit()

    def zoom_in(self):
        """Zoom in by the configured factor."""
        zoom_factor = get_settings().settings.view.wheel_factor
        self.scale(zoom_factor, zoom_factor)
        self.viewChanged.emit()

    def zoom_out(self):
        """Zoom out by the configured factor."""
        zoom_factor = get_settings().settings.view.wheel_factor
        self.scale(1 / zoom_factor, 1 / zoom_factor)
        self.viewChanged.emit()
