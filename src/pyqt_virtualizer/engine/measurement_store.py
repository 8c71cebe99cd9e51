"""Ordered item extents derived from measured or estimated sizes."""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from pyqt_virtualizer.core.memo import Memo

from .types import Key, VirtualItem

if TYPE_CHECKING:
    from .virtualizer import Virtualizer

logger = logging.getLogger(__name__)


class MeasurementStore:
    """
    Owns the size cache and the measurement list built from it.

    The size cache maps item keys to the last real size observed. It is
    replaced (never mutated) on every write so the measurement memo sees the
    change. Rebuilds are partial: measurements below the lowest index
    invalidated since the previous rebuild are kept as-is.
    """

    def __init__(self, virtualizer: "Virtualizer"):
        self._virtualizer = virtualizer
        self.measurements_cache: List[VirtualItem] = []
        self.item_size_cache: Dict[Key, float] = {}
        self._pending_indexes: List[int] = []
        self._layout_deps = None

        self.get_measurements = Memo(
            lambda: (
                self._options.count,
                self._options.padding_start,
                self._options.scroll_margin,
                self._options.get_item_key,
                self.item_size_cache,
            ),
            self._build,
            key="get_measurements",
            debug=lambda: self._options.debug,
        )

    @property
    def _options(self):
        return self._virtualizer.options

    def seed(self, items) -> None:
        """Restore measurements and sizes captured from a previous mount."""
        self.measurements_cache = list(items)
        self.item_size_cache = {item.key: item.size for item in self.measurements_cache}

    def cached_size(self, key: Key) -> Optional[float]:
        return self.item_size_cache.get(key)

    def get_item(self, index: int) -> Optional[VirtualItem]:
        """Measurement from the last rebuild, or None for an unknown index."""
        if 0 <= index < len(self.measurements_cache):
            return self.measurements_cache[index]
        return None

    def set_size(self, index: int, key: Key, size: float) -> None:
        """Record a measured size and invalidate measurements from ``index`` on."""
        self._pending_indexes.append(index)
        self.item_size_cache = {**self.item_size_cache, key: size}

    def clear(self) -> None:
        """Forget every measured size, forcing re-estimation."""
        self._pending_indexes = []
        self.item_size_cache = {}

    def _build(self, count, padding_start, scroll_margin, get_item_key, item_size_cache) -> List[VirtualItem]:
        layout_deps = (padding_start, scroll_margin, get_item_key)
        if self._pending_indexes and layout_deps == self._layout_deps:
            first_dirty = min(self._pending_indexes)
        else:
            first_dirty = 0
        self._pending_indexes = []
        self._layout_deps = layout_deps

        estimate_size = self._options.estimate_size
        measurements = self.measurements_cache[:first_dirty]

        for i in range(len(measurements), count):
            key = get_item_key(i)
            start = measurements[i - 1].end if i > 0 else padding_start + scroll_margin
            measured_size = item_size_cache.get(key)
            size = measured_size if measured_size is not None else estimate_size(i)
            measurements.append(VirtualItem(index=i, start=start, size=size, end=start + size, key=key))

        del measurements[count:]
        self.measurements_cache = measurements
        return measurements
