"""
Virtualization engine.

Measurement store, range calculation, scroll state, remeasure correction
and scroll-to orchestration, wired together by :class:`Virtualizer`.
"""

# types must load before options: the default Qt strategies import them
from .types import (
    Key,
    VirtualItem,
    Rect,
    Range,
    CalculatedRange,
    ScrollDirection,
    ScrollAlignment,
    ScrollBehavior,
)
from .range_calculator import (
    calculate_range,
    find_nearest_binary_search,
    default_range_extractor,
    default_key_extractor,
)
from .options import VirtualizerOptions, build_options
from .measurement_store import MeasurementStore
from .scroll_state import ScrollStateTracker
from .remeasure_controller import RemeasureController, TrackedElement
from .scroll_to_service import MAX_SCROLL_TO_INDEX_RETRIES, ScrollToService, approx_equal
from .virtualizer import Virtualizer

__all__ = [
    "Key",
    "VirtualItem",
    "Rect",
    "Range",
    "CalculatedRange",
    "ScrollDirection",
    "ScrollAlignment",
    "ScrollBehavior",
    "calculate_range",
    "find_nearest_binary_search",
    "default_range_extractor",
    "default_key_extractor",
    "VirtualizerOptions",
    "build_options",
    "MeasurementStore",
    "ScrollStateTracker",
    "RemeasureController",
    "TrackedElement",
    "ScrollToService",
    "approx_equal",
    "MAX_SCROLL_TO_INDEX_RETRIES",
    "Virtualizer",
]
