"""
The Virtualizer: which items of a long scrollable collection to realize.

Derivation pipeline (each node a :class:`Memo`)::

    get_measurements ──> calculate_range ──> _get_indexes ──> get_virtual_items
                              │
                              └──(+ is_scrolling)──> _maybe_notify ──> on_change

``_maybe_notify`` is separate from the range node on purpose: the range may
be recomputed without changing value, and consumers are only told when the
visible range or the scrolling flag actually changed.
"""

import logging
from typing import Any, List, Optional

from pyqt_virtualizer.core.memo import Memo
from pyqt_virtualizer.protocols import Teardown

from .measurement_store import MeasurementStore
from .options import VirtualizerOptions, resolve_options
from .range_calculator import calculate_range
from .remeasure_controller import RemeasureController
from .scroll_state import ScrollStateTracker
from .scroll_to_service import AlignmentLike, BehaviorLike, ScrollToService
from .types import CalculatedRange, Range, Rect, ScrollAlignment, ScrollDirection, VirtualItem

logger = logging.getLogger(__name__)


class Virtualizer:
    """
    Windowing engine for a list of N items of estimated or measured size.

    Usage:
        virtualizer = Virtualizer(
            count=10_000,
            get_scroll_element=lambda: scroll_area,
            estimate_size=lambda index: 32,
            on_change=lambda v: list_view.relayout(v.get_virtual_items()),
        )
        virtualizer.mount()
        ...
        virtualizer.unmount()

    Every option may also be passed as a ready :class:`VirtualizerOptions`.
    """

    def __init__(self, options: Optional[VirtualizerOptions] = None, **overrides: Any):
        self.options: VirtualizerOptions = resolve_options(options, overrides)
        self.scroll_element: Any = None
        self.scroll_rect: Rect = self.options.initial_rect
        self.range = CalculatedRange(0, 0)
        self._unsubs: List[Optional[Teardown]] = []
        self._mounted = False

        self.measurement_store = MeasurementStore(self)
        self.measurement_store.seed(self.options.initial_measurements_cache)
        self.scroll_state = ScrollStateTracker(
            initial_offset=self.options.initial_offset,
            delay_ms=self.options.scrolling_delay,
            on_change=lambda: self._maybe_notify(),
        )
        self.remeasure = RemeasureController(self)
        self._scroll_to = ScrollToService(self)

        debug = self._debug_enabled
        self.get_measurements = self.measurement_store.get_measurements

        self.calculate_range = Memo(
            lambda: (self.get_measurements(), self.get_size(), self.scroll_offset),
            self._calculate_range,
            key="calculate_range",
            debug=debug,
        )
        self._maybe_notify = Memo(
            lambda: (*self.calculate_range(), self.is_scrolling),
            lambda *_: self.notify(),
            key="maybe_notify",
            debug=debug,
            initial_deps=(*self.range, self.is_scrolling),
        )
        self._get_indexes = Memo(
            lambda: (
                self.options.range_extractor,
                self.calculate_range(),
                self.options.overscan,
                self.options.count,
            ),
            lambda range_extractor, range_, overscan, count: range_extractor(
                Range(range_.start_index, range_.end_index, overscan, count)
            ),
            key="get_indexes",
            debug=debug,
        )
        self.get_virtual_items = Memo(
            lambda: (self._get_indexes(), self.get_measurements()),
            lambda indexes, measurements: [measurements[i] for i in indexes],
            key="get_virtual_items",
            debug=debug,
        )

        self._maybe_notify()

    # ========== STATE ==========

    @property
    def scroll_offset(self) -> float:
        return self.scroll_state.offset

    @property
    def scroll_direction(self) -> Optional[ScrollDirection]:
        return self.scroll_state.direction

    @property
    def is_scrolling(self) -> bool:
        return self.scroll_state.is_scrolling

    @property
    def measurements_cache(self) -> List[VirtualItem]:
        return self.measurement_store.measurements_cache

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def get_size(self) -> float:
        """Viewport extent along the scroll axis."""
        return self.scroll_rect.extent(self.options.horizontal)

    def set_options(self, options: Optional[VirtualizerOptions] = None, **overrides: Any) -> None:
        """Replace the options snapshot (merged onto defaults, not onto the previous one)."""
        self.options = resolve_options(options, overrides)
        logger.debug(f"Virtualizer options replaced (count={self.options.count})")

    def _debug_enabled(self) -> bool:
        return self.options.debug

    def notify(self) -> None:
        self.options.on_change(self)

    def _calculate_range(self, measurements, outer_size, scroll_offset) -> CalculatedRange:
        self.range = calculate_range(measurements, outer_size, scroll_offset)
        return self.range

    # ========== LIFECYCLE ==========

    def mount(self) -> None:
        """Start observing rendered items and attach the scroll element observers."""
        if not self._mounted:
            self._mounted = True
            self.remeasure.observe_all()
        self.will_update()

    def unmount(self) -> None:
        """Detach every observer and cancel pending timers."""
        if self._mounted:
            self._mounted = False
            self.remeasure.disconnect()
        self._cleanup()
        self.scroll_state.cancel()
        self._scroll_to.cancel()

    def will_update(self) -> None:
        """Re-resolve the scroll element and re-attach observers when it changed."""
        scroll_element = self.options.get_scroll_element()
        if self.scroll_element is scroll_element:
            return

        self._cleanup()
        self.scroll_element = scroll_element
        logger.debug(f"Attaching virtualizer to {type(scroll_element).__name__}")

        self._scroll_to_offset(self.scroll_offset, adjustments=None, behavior=None)

        self._unsubs.append(self.options.observe_element_rect(self, self._on_rect))
        self._unsubs.append(self.options.observe_element_offset(self, self._on_offset))

    def _cleanup(self) -> None:
        for unsub in self._unsubs:
            if unsub is not None:
                unsub()
        self._unsubs = []
        self.scroll_element = None

    def _on_rect(self, rect: Rect) -> None:
        self.scroll_rect = rect
        self._maybe_notify()

    def _on_offset(self, offset: float) -> None:
        self.scroll_state.handle_offset(offset, self.options.scrolling_delay)

    # ========== MEASUREMENT ==========

    def index_from_element(self, element: Any) -> int:
        """Logical index of a rendered item, or -1 when the element carries none."""
        attribute_name = self.options.index_attribute
        raw_index = self.options.read_index_attribute(element, attribute_name)

        if raw_index is None or raw_index == "":
            logger.warning(f"Missing attribute name '{attribute_name}={{index}}' on measured element.")
            return -1

        try:
            return int(raw_index)
        except (TypeError, ValueError):
            logger.warning(f"Invalid '{attribute_name}' value {raw_index!r} on measured element.")
            return -1

    def measure_element(self, element: Any) -> None:
        """Synchronously measure a rendered item (also starts observing it)."""
        if element is None:
            return
        self.remeasure.measure(element, sync=True)

    def measure(self) -> None:
        """Drop every measured size so all items are re-estimated."""
        self.measurement_store.clear()
        self.notify()

    def get_total_size(self) -> float:
        count = self.options.count
        if count > 0:
            end = self.get_measurements()[count - 1].end
        else:
            end = self.options.padding_start
        return end - self.options.scroll_margin + self.options.padding_end

    # ========== SCROLLING ==========

    def get_offset_for_alignment(self, to_offset: float, align: AlignmentLike) -> float:
        return self._scroll_to.get_offset_for_alignment(to_offset, align)

    def scroll_to_offset(
        self,
        to_offset: float,
        align: AlignmentLike = ScrollAlignment.START,
        behavior: BehaviorLike = None,
    ) -> None:
        """Scroll to ``to_offset`` aligned by ``align`` (start, center, end, auto).

        ``behavior`` is None or one of auto, instant, smooth. Smooth is
        rejected with a warning once any item has been measured.
        """
        self._scroll_to.scroll_to_offset(to_offset, align=align, behavior=behavior)

    def scroll_to_index(
        self,
        index: int,
        align: AlignmentLike = ScrollAlignment.AUTO,
        behavior: BehaviorLike = None,
    ) -> None:
        """Scroll item ``index`` into view; ``align`` and ``behavior`` as in :meth:`scroll_to_offset`."""
        self._scroll_to.scroll_to_index(index, align=align, behavior=behavior)

    def scroll_by(self, delta: float, behavior: BehaviorLike = None) -> None:
        """Scroll relative to the current offset; ``behavior`` as in :meth:`scroll_to_offset`."""
        self._scroll_to.scroll_by(delta, behavior=behavior)

    def _scroll_to_offset(self, offset: float, *, adjustments: Optional[float], behavior: BehaviorLike) -> None:
        self.options.scroll_to_fn(offset, adjustments=adjustments, behavior=behavior, instance=self)
