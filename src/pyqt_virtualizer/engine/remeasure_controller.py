"""Feeds real item sizes back into the measurement store.

When an item above the viewport turns out larger or smaller than its
estimate, everything below it shifts. The controller compensates by
re-issuing the current offset plus the accumulated delta, so the item the
user is looking at stays where it was.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from pyqt_virtualizer.protocols import ItemResizeObserver

from .types import Key

if TYPE_CHECKING:
    from .virtualizer import Virtualizer

logger = logging.getLogger(__name__)


@dataclass
class TrackedElement:
    """The element currently observed for one item key."""

    element: Any
    skipped_first_async: bool = False


class RemeasureController:
    """
    Per-key element bookkeeping plus delta handling.

    Each key is either unobserved (absent from ``tracked``) or observed
    through exactly one element. Swapping or detaching the element always
    pairs the state change with the matching observe/unobserve call.
    """

    def __init__(self, virtualizer: "Virtualizer"):
        self._virtualizer = virtualizer
        self.tracked: Dict[Key, TrackedElement] = {}
        self._item_observer: Optional[ItemResizeObserver] = None
        self._item_observer_created = False

    @property
    def is_dynamic(self) -> bool:
        """True once any rendered item is being measured."""
        return bool(self.tracked)

    def is_key_tracked(self, key: Key) -> bool:
        return key in self.tracked

    def item_observer(self) -> Optional[ItemResizeObserver]:
        if not self._item_observer_created:
            self._item_observer_created = True
            self._item_observer = self._virtualizer.options.create_item_observer(self._on_item_resized)
        return self._item_observer

    def observe_all(self) -> None:
        observer = self.item_observer()
        if observer is None:
            return
        for tracked in self.tracked.values():
            observer.observe(tracked.element)

    def disconnect(self) -> None:
        if self._item_observer is not None:
            self._item_observer.disconnect()

    def _on_item_resized(self, element: Any) -> None:
        self.measure(element, sync=False)

    def measure(self, element: Any, sync: bool) -> None:
        virtualizer = self._virtualizer
        options = virtualizer.options
        store = virtualizer.measurement_store

        index = virtualizer.index_from_element(element)
        item = store.get_item(index)
        if item is None:
            return

        tracked = self.tracked.get(item.key)
        observer = self.item_observer()

        if not options.is_element_connected(element):
            if observer is not None:
                observer.unobserve(element)
            if tracked is not None and tracked.element is element:
                del self.tracked[item.key]
                logger.debug(f"Stopped tracking detached element for key {item.key!r}")
            return

        if tracked is None or tracked.element is not element:
            if tracked is not None and observer is not None:
                observer.unobserve(tracked.element)
            if observer is not None:
                observer.observe(element)
            self.tracked[item.key] = TrackedElement(element)
        elif not sync and not tracked.skipped_first_async:
            tracked.skipped_first_async = True
            return

        measured_size = options.measure_element(element, virtualizer)
        cached_size = store.cached_size(item.key)
        item_size = cached_size if cached_size is not None else item.size

        delta = measured_size - item_size
        if delta == 0:
            return

        if item.start < virtualizer.scroll_offset:
            adjustments = virtualizer.scroll_state.add_adjustment(delta)
            logger.debug(f"Scroll correction for index {index}: delta={delta}, adjustments={adjustments}")
            virtualizer._scroll_to_offset(virtualizer.scroll_offset, adjustments=adjustments, behavior=None)

        store.set_size(index, item.key, measured_size)
        virtualizer.notify()
