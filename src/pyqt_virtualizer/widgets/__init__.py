"""
Default PyQt6 strategies.

Adapter glue between a Virtualizer and a live widget tree: viewport and
offset observation on a QAbstractScrollArea, scrolling, item measurement
and per-item resize observation.
"""

from .qt_strategies import (
    observe_element_rect,
    observe_window_rect,
    observe_element_offset,
    element_scroll,
    measure_element,
    widget_index_property,
    widget_is_connected,
    WidgetResizeObserver,
)

__all__ = [
    "observe_element_rect",
    "observe_window_rect",
    "observe_element_offset",
    "element_scroll",
    "measure_element",
    "widget_index_property",
    "widget_is_connected",
    "WidgetResizeObserver",
]
