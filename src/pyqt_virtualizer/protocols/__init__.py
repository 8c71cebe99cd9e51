"""
Collaborator protocol definitions.

Narrow, single-method contracts through which the engine reaches the
toolkit: size and offset observation, scroll execution, element
measurement, connectivity probing and per-item resize observation.
"""

from .strategies import (
    Teardown,
    SizeObserver,
    OffsetObserver,
    ScrollExecutor,
    ElementMeasurer,
    ElementConnectivity,
    ItemResizeObserver,
    ItemObserverFactory,
)

__all__ = [
    "Teardown",
    "SizeObserver",
    "OffsetObserver",
    "ScrollExecutor",
    "ElementMeasurer",
    "ElementConnectivity",
    "ItemResizeObserver",
    "ItemObserverFactory",
]
