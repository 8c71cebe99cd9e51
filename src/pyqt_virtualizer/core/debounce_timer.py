"""Reusable trailing debounce timer."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.
    A delay of 0 defers the handler to the next event loop turn, which is how
    the scroll-to-index retry waits for layout to settle.

    Usage:
        self._debounce = DebounceTimer(delay_ms=150, handler=self._on_scroll_end)

        def on_offset_changed(self, offset):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @delay_ms.setter
    def delay_ms(self, value: int) -> None:
        self._delay_ms = max(0, int(value))

    def is_active(self) -> bool:
        """Return True while a trigger is pending."""
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Trigger debounce; restarts the timer."""
        if self._timer is not None:
            self._timer.stop()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending trigger."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()

    def _fire(self):
        self._timer = None
        self._handler()
