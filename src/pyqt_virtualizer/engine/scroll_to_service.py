"""Offset, index and relative scroll requests."""

import logging
from typing import TYPE_CHECKING, Optional, Tuple, Union

from pyqt_virtualizer.core.debounce_timer import DebounceTimer

from .types import ScrollAlignment, ScrollBehavior, VirtualItem

if TYPE_CHECKING:
    from .virtualizer import Virtualizer

logger = logging.getLogger(__name__)

# --- Module-level constants ---
MAX_SCROLL_TO_INDEX_RETRIES = 50   # Deferred rechecks before scroll_to_index gives up

AlignmentLike = Union[ScrollAlignment, str]
BehaviorLike = Optional[Union[ScrollBehavior, str]]


def approx_equal(a: float, b: float) -> bool:
    return abs(a - b) < 1


class ScrollToService:
    """
    Turns scroll requests into scroll executor calls.

    With dynamic sizes, ``scroll_to_index`` cannot trust the first target:
    items between here and there may still be estimates. It re-checks on the
    next event loop turn and scrolls again until the target offset stops
    moving.
    """

    def __init__(self, virtualizer: "Virtualizer"):
        self._virtualizer = virtualizer
        self._retry = DebounceTimer(delay_ms=0, handler=self._recheck_scroll_to_index)
        self._pending: Optional[Tuple[int, ScrollAlignment, BehaviorLike, int]] = None

    @property
    def retry_timer(self) -> DebounceTimer:
        return self._retry

    def cancel(self) -> None:
        self._retry.cancel()
        self._pending = None

    def _rejects_smooth(self, behavior: BehaviorLike) -> bool:
        if behavior is not None and ScrollBehavior(behavior) is ScrollBehavior.SMOOTH \
                and self._virtualizer.remeasure.is_dynamic:
            logger.warning("The `smooth` scroll behavior is not supported with dynamic size.")
            return True
        return False

    def get_offset_for_alignment(self, to_offset: float, align: AlignmentLike) -> float:
        virtualizer = self._virtualizer
        size = virtualizer.get_size()
        scroll_offset = virtualizer.scroll_offset
        align = ScrollAlignment(align)

        if align is ScrollAlignment.AUTO:
            if to_offset <= scroll_offset:
                align = ScrollAlignment.START
            elif to_offset >= scroll_offset + size:
                align = ScrollAlignment.END
            else:
                align = ScrollAlignment.START

        if align is ScrollAlignment.END:
            to_offset = to_offset - size
        elif align is ScrollAlignment.CENTER:
            to_offset = to_offset - size / 2

        max_offset = virtualizer.get_total_size() - size
        return max(min(max_offset, to_offset), 0)

    def scroll_to_offset(
        self,
        to_offset: float,
        align: AlignmentLike = ScrollAlignment.START,
        behavior: BehaviorLike = None,
    ) -> None:
        if self._rejects_smooth(behavior):
            return

        self._virtualizer._scroll_to_offset(
            self.get_offset_for_alignment(to_offset, align), adjustments=None, behavior=behavior
        )

    def _offset_for_item(self, measurement: VirtualItem, align: ScrollAlignment) -> float:
        options = self._virtualizer.options
        if align is ScrollAlignment.END:
            to_offset = measurement.end + options.scroll_padding_end
        else:
            to_offset = measurement.start - options.scroll_padding_start
        return self.get_offset_for_alignment(to_offset, align)

    def scroll_to_index(
        self,
        index: int,
        align: AlignmentLike = ScrollAlignment.AUTO,
        behavior: BehaviorLike = None,
        _attempt: int = 0,
    ) -> None:
        virtualizer = self._virtualizer
        options = virtualizer.options

        self.cancel()

        if options.count <= 0:
            logger.debug("scroll_to_index ignored: collection is empty")
            return

        index = max(0, min(index, options.count - 1))

        is_dynamic = virtualizer.remeasure.is_dynamic
        if self._rejects_smooth(behavior):
            return

        measurement = virtualizer.get_measurements()[index]
        align = ScrollAlignment(align)

        if align is ScrollAlignment.AUTO:
            size = virtualizer.get_size()
            scroll_offset = virtualizer.scroll_offset
            if measurement.end >= scroll_offset + size - options.scroll_padding_end:
                align = ScrollAlignment.END
            elif measurement.start <= scroll_offset + options.scroll_padding_start:
                align = ScrollAlignment.START
            else:
                return

        virtualizer._scroll_to_offset(
            self._offset_for_item(measurement, align), adjustments=None, behavior=behavior
        )

        if is_dynamic:
            self._pending = (index, align, behavior, _attempt)
            self._retry.trigger()

    def _recheck_scroll_to_index(self) -> None:
        if self._pending is None:
            return
        index, align, behavior, attempt = self._pending
        self._pending = None

        virtualizer = self._virtualizer
        measurements = virtualizer.get_measurements()
        if index >= len(measurements):
            return

        if virtualizer.remeasure.is_key_tracked(virtualizer.options.get_item_key(index)):
            to_offset = self._offset_for_item(measurements[index], align)
            if approx_equal(to_offset, virtualizer.scroll_offset):
                return

        if attempt + 1 >= MAX_SCROLL_TO_INDEX_RETRIES:
            logger.debug(f"Giving up scroll_to_index({index}) after {attempt + 1} attempts")
            return

        logger.debug(f"Retrying scroll_to_index({index}), attempt {attempt + 1}")
        self.scroll_to_index(index, align=align, behavior=behavior, _attempt=attempt + 1)

    def scroll_by(self, delta: float, behavior: BehaviorLike = None) -> None:
        if self._rejects_smooth(behavior):
            return

        virtualizer = self._virtualizer
        virtualizer._scroll_to_offset(virtualizer.scroll_offset + delta, adjustments=None, behavior=behavior)
