"""Scroll offset, direction and the debounced ``is_scrolling`` flag."""

import logging
from typing import Callable, Optional

from pyqt_virtualizer.core.debounce_timer import DebounceTimer

from .types import ScrollDirection

logger = logging.getLogger(__name__)


class ScrollStateTracker:
    """
    Tracks the scroll position reported by the offset observer.

    ``is_scrolling`` turns on with every offset change and turns off
    ``delay_ms`` after the last one. ``adjustments`` accumulates the size
    corrections issued for items above the viewport until the next offset
    change lands.
    """

    def __init__(self, initial_offset: float, delay_ms: int, on_change: Callable[[], None]):
        self.offset = initial_offset
        self.direction: Optional[ScrollDirection] = None
        self.is_scrolling = False
        self.adjustments: float = 0
        self._on_change = on_change
        self._debounce = DebounceTimer(delay_ms=delay_ms, handler=self._on_scroll_end)

    @property
    def debounce(self) -> DebounceTimer:
        return self._debounce

    def handle_offset(self, offset: float, delay_ms: int) -> bool:
        """Apply an offset notification. Returns False when nothing changed."""
        if offset == self.offset:
            return False

        self._debounce.cancel()
        self.is_scrolling = True
        self.direction = ScrollDirection.FORWARD if offset > self.offset else ScrollDirection.BACKWARD
        self.offset = offset
        self.adjustments = 0

        self._on_change()

        self._debounce.delay_ms = delay_ms
        self._debounce.trigger()
        return True

    def add_adjustment(self, delta: float) -> float:
        """Accumulate a correction and return the running total."""
        self.adjustments += delta
        return self.adjustments

    def cancel(self) -> None:
        self._debounce.cancel()

    def _on_scroll_end(self) -> None:
        self.is_scrolling = False
        self.direction = None
        self._on_change()
