"""
canvas/arrow.py

Arrow annotation anchored in model space and sized in device pixels.

The polygon is built in device space from the two projected anchors (see
``canvas.arrow_geometry``) and mapped back into model space, so the arrow
keeps its on-screen proportions under pan and zoom.  Rebuilding needs the
host's current mapping, so shape edits and view changes are coalesced by a
position debouncer; style edits go through a separate style debouncer.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from PyQt6.QtCore import QPointF
from PyQt6.QtWidgets import QGraphicsScene

from canvas.arrow_geometry import ArrowPolygon, build_arrow_polygon
from canvas.debounce import Debouncer
from canvas.surface import ArrowPatchItem
from debug_trace import trace, trace_call
from errors import ArrowError, ValidationError
from models import ArrowShape, ArrowStyle, ArrowType
from settings import get_settings

log = logging.getLogger(__name__)

PointLike = Union[QPointF, Sequence[float]]

# Host signals, in order of preference.  The per-axis pair is only used when
# the host has no viewChanged signal.
_VIEW_SIGNAL = "viewChanged"
_LIMIT_SIGNALS = ("xLimitsChanged", "yLimitsChanged")


class GeometryState(Enum):
    """Whether the committed polygon matches the current parameters."""
    CLEAN = "clean"
    DIRTY = "dirty"
    SCHEDULED = "scheduled"


def _to_point(value: PointLike, name: str) -> QPointF:
    if isinstance(value, QPointF):
        x, y = value.x(), value.y()
    else:
        try:
            x, y = (float(v) for v in value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be a QPointF or an (x, y) pair, got {value!r}") from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValidationError(f"{name} must be finite, got ({x}, {y})")
    return QPointF(x, y)


def _shape_property(name: str, doc: str) -> property:
    def getter(self: "Arrow2D"):
        return getattr(self._shape, name)

    def setter(self: "Arrow2D", value):
        self.set_shape_params(**{name: value})

    return property(getter, setter, doc=doc)


def _style_property(name: str, doc: str) -> property:
    def getter(self: "Arrow2D"):
        return getattr(self._style, name)

    def setter(self: "Arrow2D", value):
        self.set_style(**{name: value})

    return property(getter, setter, doc=doc)


class Arrow2D:
    """
    Directional arrow between two model-space anchors.

    Args:
        start: Model-space anchor of the shaft base (for ``arrow_type="start"``).
        stop: Model-space anchor the arrow points to (for ``arrow_type="start"``).
        host_view: Coordinate-mapping host (``PlotView``, ``AxisMapping``,
            ``IdentityMapping`` or anything exposing ``map_to_device``,
            ``map_to_model`` and a ``viewChanged`` signal).  Not owned.
        scene: Scene receiving the arrow item.  Defaults to
            ``host_view.scene()`` when the host has one.
        position_delay_ms / style_delay_ms: Debounce delays; default from settings.

    Every other keyword defaults to the ``[arrow]`` and ``[style]`` settings
    when left as None.

    Raises:
        RangeError: For out-of-range numeric parameters.
        ValidationError: For unknown enum values, bad colours, bad anchors or
            a host without the mapping functions.

    The arrow owns its item and debouncers; call ``dispose()`` (or use it as a
    context manager) to release them.
    """

    width = _shape_property("width", "Shaft width in pixels.")
    length = _shape_property("length", "Head side length in pixels.")
    point_angle = _shape_property("point_angle", "Full head angle in degrees, (0, 90).")
    point_ratio = _shape_property("point_ratio", "Head base blend, 0 = sharp, 1 = flat.")
    arrow_type = _shape_property("arrow_type", "Which end(s) carry a head.")

    edge_alpha = _style_property("edge_alpha", "Outline opacity, [0, 1].")
    edge_width = _style_property("edge_width", "Outline width in pixels.")
    edge_style = _style_property("edge_style", "Outline stroke pattern.")
    edge_color = _style_property("edge_color", "Outline colour.")
    face_alpha = _style_property("face_alpha", "Fill opacity, [0, 1].")
    face_color = _style_property("face_color", "Fill colour.")
    filled = _style_property("filled", "Whether the interior is painted.")

    def __init__(self, start: PointLike, stop: PointLike, *, host_view: Any,
                 width: Optional[float] = None,
                 length: Optional[float] = None,
                 point_angle: Optional[float] = None,
                 point_ratio: Optional[float] = None,
                 edge_alpha: Optional[float] = None,
                 edge_width: Optional[float] = None,
                 edge_style: Optional[str] = None,
                 edge_color: Any = None,
                 face_alpha: Optional[float] = None,
                 face_color: Any = None,
                 filled: Optional[bool] = None,
                 arrow_type: Union[ArrowType, str, None] = None,
                 scene: Optional[QGraphicsScene] = None,
                 position_delay_ms: Optional[int] = None,
                 style_delay_ms: Optional[int] = None):
        # Validate everything before acquiring any resource.
        for attr in ("map_to_device", "map_to_model"):
            if not callable(getattr(host_view, attr, None)):
                raise ValidationError(f"host_view must provide {attr}(point)")

        self._host = host_view
        self._start = _to_point(start, "start")
        self._stop = _to_point(stop, "stop")

        shape_changes = _given(width=width, length=length, point_angle=point_angle,
                               point_ratio=point_ratio, arrow_type=arrow_type)
        style_changes = _given(edge_alpha=edge_alpha, edge_width=edge_width,
                               edge_style=edge_style, edge_color=edge_color,
                               face_alpha=face_alpha, face_color=face_color, filled=filled)
        self._shape = ArrowShape.from_settings().updated(**shape_changes)
        self._style = ArrowStyle.from_settings().updated(**style_changes)

        delays = get_settings().settings.debounce
        if position_delay_ms is None:
            position_delay_ms = delays.position_delay_ms
        if style_delay_ms is None:
            style_delay_ms = delays.style_delay_ms

        self._polygon = ArrowPolygon((), ())
        self._geometry_state = GeometryState.DIRTY
        self._style_pending = False
        self._connected_signals: List[Any] = []
        self._disposed = False

        self._position_debouncer = Debouncer(position_delay_ms)
        self._style_debouncer = Debouncer(style_delay_ms)
        self._item = ArrowPatchItem()

        try:
            if scene is None and callable(getattr(host_view, "scene", None)):
                scene = host_view.scene()
            if scene is not None:
                scene.addItem(self._item)
            self._item.add_destroyed_callback(self._on_surface_destroyed)
            self._subscribe_to_host()

            self.compute_geometry()
            self.apply_geometry_to_surface()
            self.apply_style_to_surface()
        except Exception:
            self.dispose()
            raise

        trace(f"arrow created {self._start} -> {self._stop} ({self._shape.arrow_type.value})", "GEOM")

    # ------------------------------------------------------------------
    # Context management
    # ------------------------------------------------------------------

    def __enter__(self) -> "Arrow2D":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def host_view(self) -> Any:
        return self._host

    @property
    def item(self) -> ArrowPatchItem:
        """The render-surface item owned by this arrow."""
        return self._item

    @property
    def shape(self) -> ArrowShape:
        return self._shape

    @property
    def style(self) -> ArrowStyle:
        return self._style

    @property
    def polygon(self) -> ArrowPolygon:
        """Last committed (vertices, boundary_order), model space."""
        return self._polygon

    @property
    def vertices(self) -> List[QPointF]:
        return [QPointF(p) for p in self._polygon.vertices]

    @property
    def boundary_order(self) -> List[int]:
        return list(self._polygon.boundary_order)

    @property
    def geometry_state(self) -> GeometryState:
        return self._geometry_state

    @property
    def style_pending(self) -> bool:
        return self._style_pending

    @property
    def position_debouncer(self) -> Debouncer:
        return self._position_debouncer

    @property
    def style_debouncer(self) -> Debouncer:
        return self._style_debouncer

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    @property
    def start(self) -> QPointF:
        return QPointF(self._start)

    @start.setter
    def start(self, value: PointLike) -> None:
        self.set_anchors(value, self._stop)

    @property
    def stop(self) -> QPointF:
        return QPointF(self._stop)

    @stop.setter
    def stop(self, value: PointLike) -> None:
        self.set_anchors(self._start, value)

    def set_anchors(self, start: PointLike, stop: PointLike) -> None:
        """Move both anchors (model space) and schedule a rebuild.

        Raises:
            ValidationError: For a malformed anchor, or one the host cannot
                map (e.g. a non-positive value on a log axis).
        """
        self._ensure_alive()
        new_start = _to_point(start, "start")
        new_stop = _to_point(stop, "stop")
        self._host.map_to_device(new_start)
        self._host.map_to_device(new_stop)
        self._start, self._stop = new_start, new_stop
        self._schedule_geometry()

    # ------------------------------------------------------------------
    # Shape and style
    # ------------------------------------------------------------------

    def set_shape_params(self, width: Optional[float] = None, length: Optional[float] = None,
                         point_angle: Optional[float] = None, point_ratio: Optional[float] = None,
                         arrow_type: Union[ArrowType, str, None] = None) -> None:
        """Update any subset of the shape parameters and schedule a rebuild.

        Nothing is stored if any value is rejected.
        """
        self._ensure_alive()
        self._shape = self._shape.updated(**_given(
            width=width, length=length, point_angle=point_angle,
            point_ratio=point_ratio, arrow_type=arrow_type,
        ))
        self._schedule_geometry()

    def set_style(self, edge_alpha: Optional[float] = None, edge_width: Optional[float] = None,
                  edge_style: Optional[str] = None, edge_color: Any = None,
                  face_alpha: Optional[float] = None, face_color: Any = None,
                  filled: Optional[bool] = None) -> None:
        """Update any subset of the style attributes and schedule a repaint.

        Style never touches the polygon.  Nothing is stored if any value is
        rejected.
        """
        self._ensure_alive()
        self._style = self._style.updated(**_given(
            edge_alpha=edge_alpha, edge_width=edge_width, edge_style=edge_style,
            edge_color=edge_color, face_alpha=face_alpha, face_color=face_color,
            filled=filled,
        ))
        self._schedule_style()

    # ------------------------------------------------------------------
    # Host view
    # ------------------------------------------------------------------

    def on_host_view_changed(self, *_args) -> None:
        """Pan/zoom/resize happened on the host; rebuild once it settles."""
        if self._disposed or self._release_if_surface_gone():
            return
        self._schedule_geometry()

    def _subscribe_to_host(self) -> None:
        names = (_VIEW_SIGNAL,) if hasattr(self._host, _VIEW_SIGNAL) else _LIMIT_SIGNALS
        for name in names:
            signal = getattr(self._host, name, None)
            if signal is None:
                continue
            signal.connect(self.on_host_view_changed)
            self._connected_signals.append(signal)
        if not self._connected_signals:
            log.warning("Host %r has no change signals; the arrow only follows its own edits",
                        type(self._host).__name__)

    def _unsubscribe_from_host(self) -> None:
        signals, self._connected_signals = self._connected_signals, []
        for signal in signals:
            try:
                signal.disconnect(self.on_host_view_changed)
            except (TypeError, RuntimeError):
                # Already disconnected, or the host's C++ object is gone.
                trace("host signal already disconnected", "GEOM")

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _schedule_geometry(self) -> None:
        self._geometry_state = GeometryState.DIRTY
        self._position_debouncer.trigger(self.compute_geometry, self.apply_geometry_to_surface)
        self._geometry_state = GeometryState.SCHEDULED

    def _schedule_style(self) -> None:
        self._style_pending = True
        self._style_debouncer.trigger(self.apply_style_to_surface, self._mark_style_applied)

    def _mark_style_applied(self) -> None:
        self._style_pending = False

    def refresh(self) -> None:
        """Run any pending geometry and style work now."""
        self._position_debouncer.flush()
        self._style_debouncer.flush()

    # ------------------------------------------------------------------
    # Debounced work
    # ------------------------------------------------------------------

    @trace_call("GEOM")
    def compute_geometry(self) -> ArrowPolygon:
        """Rebuild the polygon from the current anchors, shape and host mapping.

        The result replaces ``polygon`` in a single assignment.
        """
        p0 = self._host.map_to_device(self._start)
        p1 = self._host.map_to_device(self._stop)
        device = build_arrow_polygon(p0, p1, self._shape)
        vertices = tuple(self._host.map_to_model(p) for p in device.vertices)

        self._polygon = ArrowPolygon(vertices, device.boundary_order)
        if self._position_debouncer.is_pending():
            self._geometry_state = GeometryState.SCHEDULED
        else:
            self._geometry_state = GeometryState.CLEAN
        return self._polygon

    def apply_geometry_to_surface(self) -> None:
        """Push the committed polygon to the item."""
        if self._release_if_surface_gone():
            return
        polygon = self._polygon
        self._item.set_vertices(polygon.vertices)
        self._item.set_boundary_order(polygon.boundary_order)

    def apply_style_to_surface(self) -> None:
        """Push the style attributes to the item."""
        if self._release_if_surface_gone():
            return
        s = self._style
        self._item.set_style(s.edge_alpha, s.edge_width, s.edge_style, s.edge_color,
                             s.effective_face_alpha, s.face_color)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise ArrowError("arrow has been disposed")

    def _release_if_surface_gone(self) -> bool:
        """Dispose when Qt deleted the item behind our back (e.g. scene.clear())."""
        if not self._item.is_destroyed():
            return False
        if not self._disposed:
            trace("surface deleted by Qt, disposing arrow", "GEOM")
            self.dispose()
        return True

    def _on_surface_destroyed(self) -> None:
        trace("surface destroyed externally, disposing arrow", "GEOM")
        self.dispose()

    def dispose(self) -> None:
        """Cancel pending work, detach from the host, release the item.  Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._position_debouncer.dispose()
        self._style_debouncer.dispose()
        self._unsubscribe_from_host()
        self._item.remove_destroyed_callback(self._on_surface_destroyed)
        self._item.destroy()
        trace("arrow disposed", "GEOM")


def _given(**values: Any) -> Dict[str, Any]:
    """Drop the arguments left as None."""
    return {k: v for k, v in values.items() if v is not None}
