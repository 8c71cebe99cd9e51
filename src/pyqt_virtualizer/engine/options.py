"""Per-instance Virtualizer options.

An options snapshot is immutable: replacing it (``Virtualizer.set_options``)
always merges the new overrides onto the defaults below, never onto the
previous snapshot. Derived state picks up the change through the
dependency memos, not through explicit resets.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, List, Optional, Sequence

from pyqt_virtualizer.core.exceptions import VirtualizerOptionsError
from pyqt_virtualizer.protocols import (
    ElementConnectivity,
    ElementMeasurer,
    ItemObserverFactory,
    OffsetObserver,
    ScrollExecutor,
    SizeObserver,
)
from pyqt_virtualizer.widgets.qt_strategies import (
    WidgetResizeObserver,
    element_scroll,
    measure_element,
    observe_element_offset,
    observe_element_rect,
    widget_index_property,
    widget_is_connected,
)

from .range_calculator import default_key_extractor, default_range_extractor
from .types import Key, Range, Rect, VirtualItem

logger = logging.getLogger(__name__)

REQUIRED_OPTIONS = ("count", "get_scroll_element", "estimate_size")


def _noop_on_change(instance) -> None:
    pass


@dataclass(frozen=True)
class VirtualizerOptions:
    """Configuration snapshot of a Virtualizer.

    Attributes:
        count: Number of items in the collection
        get_scroll_element: Returns the current scroll element (or None)
        estimate_size: Size estimate for an item that was never measured
        scroll_to_fn: Executes a scroll command
        observe_element_rect: Observes the viewport size
        observe_element_offset: Observes the scroll offset
        measure_element: Measures a rendered item along the axis
        is_element_connected: Detects items removed from the live tree
        create_item_observer: Builds the per-item resize observer
        read_index_attribute: Reads ``index_attribute`` from a rendered item
        on_change: Called with the instance whenever consumers should re-render
        debug: Log recompute timings of every derivation node
        initial_rect: Viewport size used until the size observer reports
        overscan: Extra items realized on each side of the visible range
        horizontal: Scroll along x instead of y
        padding_start: Space before the first item
        padding_end: Space after the last item
        scroll_padding_start: Inset applied when aligning to the start
        scroll_padding_end: Inset applied when aligning to the end
        initial_offset: Scroll offset before the offset observer reports
        get_item_key: Maps an index to a stable key for the size cache
        range_extractor: Turns the visible range into the indices to realize
        scroll_margin: Offset of the list inside its scroll element
        scrolling_delay: Milliseconds of inactivity before ``is_scrolling`` clears
        index_attribute: Name of the property carrying an item's index
        initial_measurements_cache: Measurements restored from a previous mount
    """

    count: int
    get_scroll_element: Callable[[], Any]
    estimate_size: Callable[[int], float]
    scroll_to_fn: ScrollExecutor = element_scroll
    observe_element_rect: SizeObserver = observe_element_rect
    observe_element_offset: OffsetObserver = observe_element_offset
    measure_element: ElementMeasurer = measure_element
    is_element_connected: ElementConnectivity = widget_is_connected
    create_item_observer: ItemObserverFactory = WidgetResizeObserver
    read_index_attribute: Callable[[Any, str], Any] = widget_index_property
    on_change: Callable[[Any], None] = _noop_on_change
    debug: bool = False
    initial_rect: Rect = Rect(0, 0)
    overscan: int = 1
    horizontal: bool = False
    padding_start: float = 0
    padding_end: float = 0
    scroll_padding_start: float = 0
    scroll_padding_end: float = 0
    initial_offset: float = 0
    get_item_key: Callable[[int], Key] = default_key_extractor
    range_extractor: Callable[[Range], List[int]] = default_range_extractor
    scroll_margin: float = 0
    scrolling_delay: int = 150
    index_attribute: str = "data-index"
    initial_measurements_cache: Sequence[VirtualItem] = ()


OPTION_NAMES = frozenset(f.name for f in fields(VirtualizerOptions))


def build_options(**overrides: Any) -> VirtualizerOptions:
    """
    Merge overrides onto the defaults.

    Overrides set to None count as unset and are stripped first, so the
    default applies.

    Raises:
        VirtualizerOptionsError: on unknown keys or missing required keys
    """
    unknown = sorted(set(overrides) - OPTION_NAMES)
    if unknown:
        raise VirtualizerOptionsError(f"Unknown virtualizer options: {', '.join(unknown)}")

    clean = {name: value for name, value in overrides.items() if value is not None}

    missing = [name for name in REQUIRED_OPTIONS if name not in clean]
    if missing:
        raise VirtualizerOptionsError(f"Missing required virtualizer options: {', '.join(missing)}")

    stripped = len(overrides) - len(clean)
    if stripped:
        logger.debug(f"Stripped {stripped} unset option override(s)")

    return VirtualizerOptions(**clean)


def resolve_options(options: Optional[VirtualizerOptions], overrides: dict) -> VirtualizerOptions:
    """Accept either a ready snapshot or keyword overrides (not both)."""
    if options is not None:
        if overrides:
            raise VirtualizerOptionsError("Pass either a VirtualizerOptions snapshot or keyword options, not both")
        return options
    return build_options(**overrides)
