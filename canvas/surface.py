"""
canvas/surface.py

Filled/stroked path item that displays an arrow polygon.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from PyQt6 import sip
from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QBrush, QColor, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsPathItem

from debug_trace import trace
from models import EdgeStyle


_PEN_STYLES = {
    EdgeStyle.NONE: Qt.PenStyle.NoPen,
    EdgeStyle.SOLID: Qt.PenStyle.SolidLine,
    EdgeStyle.DASHED: Qt.PenStyle.DashLine,
    EdgeStyle.DOTTED: Qt.PenStyle.DotLine,
    EdgeStyle.DASHDOT: Qt.PenStyle.DashDotLine,
}


def _with_alpha(color: QColor, alpha: float) -> QColor:
    c = QColor(color)
    c.setAlphaF(max(0.0, min(1.0, alpha)))
    return c


class ArrowPatchItem(QGraphicsPathItem):
    """
    Path item fed with a vertex list and a boundary walk over it.

    Vertices and boundary order are set separately.  The painter path is
    rebuilt only when every index of the walk is valid for the current vertex
    list, so either setter may be called first when the vertex count changes.

    The item does not own its listeners: ``destroy()`` removes it from its
    scene and notifies every registered destroyed callback exactly once.
    Being removed from its scene by someone else counts as destruction.
    Qt deleting the C++ item (``scene.clear()``, scene deletion) sends no
    notification, so ``is_destroyed()`` also reports a deleted wrapper and
    owners are expected to check it before touching the item.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._vertices: List[QPointF] = []
        self._order: List[int] = []
        self._destroyed_callbacks: List[Callable[[], None]] = []
        self._destroyed = False

        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setBrush(QBrush(QColor("black")))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def vertices(self) -> List[QPointF]:
        return [QPointF(p) for p in self._vertices]

    def boundary_order(self) -> List[int]:
        return list(self._order)

    def set_vertices(self, points: Sequence[QPointF]) -> None:
        self._vertices = [QPointF(p) for p in points]
        self._rebuild_path()

    def set_boundary_order(self, indices: Sequence[int]) -> None:
        self._order = [int(i) for i in indices]
        self._rebuild_path()

    def _rebuild_path(self) -> None:
        n = len(self._vertices)
        if not self._order or any(i < 0 or i >= n for i in self._order):
            trace(f"path rebuild deferred: order {self._order} vs {n} vertices", "SURFACE")
            return

        path = QPainterPath()
        path.moveTo(self._vertices[self._order[0]])
        for i in self._order[1:]:
            path.lineTo(self._vertices[i])
        path.closeSubpath()
        self.setPath(path)

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    def set_style(self, edge_alpha: float, edge_width: float, edge_style: EdgeStyle,
                  edge_color: QColor, face_alpha: float, face_color: QColor) -> None:
        """Apply outline and fill.  Edge width is in device pixels."""
        pen = QPen(_with_alpha(edge_color, edge_alpha))
        pen.setWidthF(edge_width)
        pen.setCosmetic(True)
        pen.setStyle(_PEN_STYLES[EdgeStyle(edge_style)])
        pen.setJoinStyle(Qt.PenJoinStyle.MiterJoin)
        self.setPen(pen)
        self.setBrush(QBrush(_with_alpha(face_color, face_alpha)))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add_destroyed_callback(self, callback: Callable[[], None]) -> None:
        if callback not in self._destroyed_callbacks:
            self._destroyed_callbacks.append(callback)

    def remove_destroyed_callback(self, callback: Callable[[], None]) -> None:
        if callback in self._destroyed_callbacks:
            self._destroyed_callbacks.remove(callback)

    def is_destroyed(self) -> bool:
        return self._destroyed or sip.isdeleted(self)

    def itemChange(self, change, value):
        if (change == QGraphicsItem.GraphicsItemChange.ItemSceneHasChanged
                and value is None and not self._destroyed):
            trace("arrow surface removed from its scene", "SURFACE")
            self.destroy()
        return super().itemChange(change, value)

    def destroy(self) -> None:
        """Detach from the scene and notify listeners.  Idempotent.

        Safe to call after Qt has deleted the C++ item; only the callbacks
        run then.
        """
        if self._destroyed:
            return
        self._destroyed = True
        if not sip.isdeleted(self):
            scene = self.scene()
            if scene is not None:
                scene.removeItem(self)
        callbacks, self._destroyed_callbacks = self._destroyed_callbacks, []
        for callback in callbacks:
            callback()
        trace("arrow surface destroyed", "SURFACE")
