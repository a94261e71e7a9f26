"""Tests for ArrowPatchItem in canvas/surface.py."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QGraphicsScene

from canvas.surface import ArrowPatchItem
from models import EdgeStyle

SQUARE = [QPointF(0, 0), QPointF(10, 0), QPointF(10, 10), QPointF(0, 10)]


def test_path_follows_boundary_order():
    item = ArrowPatchItem()
    item.set_vertices(SQUARE)
    item.set_boundary_order([0, 1, 2, 3, 0])
    rect = item.path().boundingRect()
    assert (rect.width(), rect.height()) == (10.0, 10.0)


def test_out_of_range_order_is_deferred_until_vertices_arrive():
    item = ArrowPatchItem()
    item.set_vertices(SQUARE[:2])
    item.set_boundary_order([0, 1, 2, 3, 0])
    assert item.path().isEmpty()

    item.set_vertices(SQUARE)
    assert not item.path().isEmpty()
    assert item.boundary_order() == [0, 1, 2, 3, 0]


def test_shrinking_vertices_keeps_last_valid_path():
    item = ArrowPatchItem()
    item.set_vertices(SQUARE)
    item.set_boundary_order([0, 1, 2, 3, 0])
    before = item.path()
    item.set_vertices(SQUARE[:3])
    assert item.path() == before


def test_accessors_return_copies():
    item = ArrowPatchItem()
    item.set_vertices(SQUARE)
    item.vertices()[0].setX(99)
    assert item.vertices()[0] == QPointF(0, 0)


@pytest.mark.parametrize("edge_style, pen_style", [
    (EdgeStyle.NONE, Qt.PenStyle.NoPen),
    (EdgeStyle.SOLID, Qt.PenStyle.SolidLine),
    (EdgeStyle.DASHED, Qt.PenStyle.DashLine),
    (EdgeStyle.DOTTED, Qt.PenStyle.DotLine),
    (EdgeStyle.DASHDOT, Qt.PenStyle.DashDotLine),
])
def test_edge_styles(edge_style, pen_style):
    item = ArrowPatchItem()
    item.set_style(1.0, 1.5, edge_style, QColor("red"), 1.0, QColor("black"))
    assert item.pen().style() == pen_style


def test_style_alphas_do_not_modify_input_colours():
    edge, face = QColor("red"), QColor("blue")
    item = ArrowPatchItem()
    item.set_style(0.5, 1.0, EdgeStyle.SOLID, edge, 0.0, face)
    assert item.pen().color().alphaF() == pytest.approx(0.5, abs=0.01)
    assert item.brush().color().alpha() == 0
    assert edge.alpha() == 255 and face.alpha() == 255


def test_destroy_removes_from_scene_and_notifies_once():
    scene = QGraphicsScene()
    item = ArrowPatchItem()
    scene.addItem(item)
    calls = []
    item.add_destroyed_callback(lambda: calls.append("a"))

    item.destroy()
    item.destroy()

    assert calls == ["a"]
    assert item.is_destroyed()
    assert item.scene() is None


def test_removed_callback_not_called():
    item = ArrowPatchItem()
    calls = []

    def cb():
        calls.append(1)

    item.add_destroyed_callback(cb)
    item.add_destroyed_callback(cb)
    item.remove_destroyed_callback(cb)
    item.destroy()
    assert calls == []


def test_scene_clear_marks_item_destroyed():
    scene = QGraphicsScene()
    item = ArrowPatchItem()
    scene.addItem(item)
    scene.clear()
    assert item.is_destroyed()


def test_destroy_after_qt_deletion_still_notifies():
    scene = QGraphicsScene()
    item = ArrowPatchItem()
    scene.addItem(item)
    calls = []
    item.add_destroyed_callback(lambda: calls.append("gone"))
    scene.clear()

    item.destroy()

    assert calls == ["gone"]


def test_removal_from_scene_counts_as_destruction():
    scene = QGraphicsScene()
    item = ArrowPatchItem()
    scene.addItem(item)
    calls = []
    item.add_destroyed_callback(lambda: calls.append("removed"))

    scene.removeItem(item)

    assert calls == ["removed"]
    assert item.is_destroyed()
