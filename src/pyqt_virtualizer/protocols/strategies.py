"""Collaborator protocols injected into a Virtualizer.

The engine never touches a widget tree directly. Everything it needs from
the toolkit goes through one of these narrow callables, all replaceable via
:class:`pyqt_virtualizer.engine.VirtualizerOptions`. Defaults for PyQt6
live in :mod:`pyqt_virtualizer.widgets.qt_strategies`.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

if TYPE_CHECKING:
    from pyqt_virtualizer.engine.types import Rect, ScrollBehavior
    from pyqt_virtualizer.engine.virtualizer import Virtualizer

Teardown = Callable[[], None]


class SizeObserver(Protocol):
    """Observes the viewport size of the scroll element.

    Must invoke ``on_size_change`` once immediately with the current size,
    then on every subsequent change.
    """

    def __call__(self, instance: "Virtualizer", on_size_change: Callable[["Rect"], None]) -> Optional[Teardown]:
        ...


class OffsetObserver(Protocol):
    """Observes the scroll offset along the configured axis.

    Must invoke ``on_offset_change`` once immediately with the current
    offset, then on every change.
    """

    def __call__(self, instance: "Virtualizer", on_offset_change: Callable[[float], None]) -> Optional[Teardown]:
        ...


class ScrollExecutor(Protocol):
    """Performs a scroll to ``offset + adjustments``."""

    def __call__(
        self,
        offset: float,
        *,
        adjustments: Optional[float],
        behavior: Optional["ScrollBehavior"],
        instance: "Virtualizer",
    ) -> None:
        ...


class ElementMeasurer(Protocol):
    """Returns a rendered element's extent along the configured axis."""

    def __call__(self, element: Any, instance: "Virtualizer") -> float:
        ...


class ElementConnectivity(Protocol):
    """Returns False once an element has left the live tree."""

    def __call__(self, element: Any) -> bool:
        ...


class ItemResizeObserver(Protocol):
    """Observes size changes of individual rendered items.

    Created once per Virtualizer through ``create_item_observer(callback)``;
    ``callback(element)`` is delivered as an asynchronous measurement.
    """

    def observe(self, element: Any) -> None:
        ...

    def unobserve(self, element: Any) -> None:
        ...

    def disconnect(self) -> None:
        ...


ItemObserverFactory = Callable[[Callable[[Any], None]], Optional[ItemResizeObserver]]
