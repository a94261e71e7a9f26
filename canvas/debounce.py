"""
canvas/debounce.py

Trailing-edge debouncer built on a single-shot QTimer.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from PyQt6.QtCore import QObject, Qt, QTimer

from debug_trace import trace, trace_exception
from errors import InvalidActionError, RangeError

log = logging.getLogger(__name__)

# Default quiet period in milliseconds
DEFAULT_DELAY_MS = 100

Action = Callable[[], object]


class Debouncer(QObject):
    """
    Coalesce bursts of calls into one execution after a quiet period.

    Every ``trigger(*actions)`` call stops the running timer, replaces the
    pending actions and starts the timer again.  When ``delay`` milliseconds
    pass without a new trigger, the actions of the *last* call run once, in
    order.  Earlier bursts are discarded, never queued.

    Usage:
        self._debounce = Debouncer(200)

        def on_view_changed(self):
            self._debounce.trigger(self.recompute, self.repaint)

    Changing ``delay`` only affects the next trigger; a timer that is already
    running keeps its remaining wait.
    """

    def __init__(self, delay_ms: int = DEFAULT_DELAY_MS, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._delay_ms = self._check_delay(delay_ms)
        self._actions: Tuple[Action, ...] = ()
        self._disposed = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)

    @staticmethod
    def _check_delay(delay_ms) -> int:
        try:
            value = int(delay_ms)
        except (TypeError, ValueError):
            raise RangeError(f"delay must be a whole number of milliseconds, got {delay_ms!r}") from None
        if value < 0:
            raise RangeError(f"delay must be >= 0, got {value}")
        return value

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def delay(self) -> int:
        """Quiet period in milliseconds applied to the next trigger."""
        return self._delay_ms

    @delay.setter
    def delay(self, delay_ms: int) -> None:
        self.set_delay(delay_ms)

    def set_delay(self, delay_ms: int) -> None:
        # QTimer.setInterval() would restart a running timer, so the value is
        # only handed to QTimer.start() on the next trigger.
        self._delay_ms = self._check_delay(delay_ms)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def trigger(self, *actions: Action) -> None:
        """Replace the pending actions and restart the quiet period.

        Raises:
            InvalidActionError: If any action is not callable.  The pending
                burst and the timer are left untouched in that case.
        """
        for i, action in enumerate(actions):
            if not callable(action):
                raise InvalidActionError(f"action #{i} is not callable: {action!r}")

        if self._disposed:
            trace("trigger ignored on disposed debouncer", "DEBOUNCE")
            return

        if self._timer.isActive():
            self._timer.stop()
        self._actions = tuple(actions)
        self._timer.start(self._delay_ms)
        trace(f"armed {len(self._actions)} action(s) for {self._delay_ms} ms", "TRIGGER")

    def is_pending(self) -> bool:
        """True while a burst is waiting for its quiet period to end."""
        return self._timer.isActive()

    def cancel(self) -> None:
        """Drop the pending burst without running it."""
        self._timer.stop()
        self._actions = ()

    def flush(self) -> None:
        """Run the pending burst now, if any.  Exceptions propagate."""
        if not self._timer.isActive():
            return
        self._timer.stop()
        self._run_actions()

    def dispose(self) -> None:
        """Cancel any pending burst; nothing fires afterwards.  Idempotent."""
        if self._disposed:
            return
        self.cancel()
        self._disposed = True
        trace("debouncer disposed", "DEBOUNCE")

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Firing
    # ------------------------------------------------------------------

    def _run_actions(self) -> None:
        actions, self._actions = self._actions, ()
        trace(f"firing {len(actions)} action(s)", "DEBOUNCE")
        for action in actions:
            action()

    def _on_timeout(self) -> None:
        if self._disposed:
            return
        try:
            self._run_actions()
        except Exception:
            # Raising out of a Qt slot aborts the application.
            log.exception("Debounced action failed; remaining actions of this burst skipped")
            trace_exception("Debounced action failed")
