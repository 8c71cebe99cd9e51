"""
Default PyQt6 collaborators for a Virtualizer.

The scroll element is a ``QAbstractScrollArea`` (``QScrollArea``,
``QListView``, ...). Rendered items are ``QWidget`` instances carrying their
logical index in a dynamic property (``widget.setProperty("data-index", i)``).
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional

from PyQt6 import sip
from PyQt6.QtCore import QAbstractAnimation, QEasingCurve, QEvent, QObject, QPropertyAnimation, Qt, QTimer
from PyQt6.QtWidgets import QAbstractScrollArea, QScrollBar, QWidget

from pyqt_virtualizer.engine.types import Rect, ScrollBehavior

if TYPE_CHECKING:
    from pyqt_virtualizer.engine.virtualizer import Virtualizer

logger = logging.getLogger(__name__)

# --- Module-level constants ---
SMOOTH_SCROLL_DURATION_MS = 250   # Length of the animated scroll for behavior="smooth"


def _is_alive(obj: Optional[QObject]) -> bool:
    return obj is not None and not sip.isdeleted(obj)


def _scroll_bar(scroll_element: QAbstractScrollArea, horizontal: bool) -> QScrollBar:
    return scroll_element.horizontalScrollBar() if horizontal else scroll_element.verticalScrollBar()


def _viewport(scroll_element: QWidget) -> QWidget:
    if isinstance(scroll_element, QAbstractScrollArea):
        return scroll_element.viewport()
    return scroll_element


class _EventCallbackFilter(QObject):
    """Forwards selected events of the watched objects to a callback."""

    def __init__(self, callback: Callable[[QObject], None], event_types: Iterable[QEvent.Type], parent=None):
        super().__init__(parent)
        self._callback = callback
        self._event_types = frozenset(event_types)

    def eventFilter(self, watched, event):
        if event.type() in self._event_types:
            self._callback(watched)
        return False


def _observe_widget_rect(widget: QWidget, on_rect: Callable[[Rect], None]) -> Callable[[], None]:
    def report(watched):
        size = watched.size()
        on_rect(Rect(size.width(), size.height()))

    event_filter = _EventCallbackFilter(report, (QEvent.Type.Resize,))
    report(widget)
    widget.installEventFilter(event_filter)

    def teardown():
        if _is_alive(widget):
            widget.removeEventFilter(event_filter)

    return teardown


def observe_element_rect(instance: "Virtualizer", cb: Callable[[Rect], None]) -> Optional[Callable[[], None]]:
    """Report the scroll area's viewport size now and on every resize."""
    if not _is_alive(instance.scroll_element):
        return None
    return _observe_widget_rect(_viewport(instance.scroll_element), cb)


def observe_window_rect(instance: "Virtualizer", cb: Callable[[Rect], None]) -> Optional[Callable[[], None]]:
    """Report the top-level window size, skipping resizes that leave the scroll axis unchanged."""
    if not _is_alive(instance.scroll_element):
        return None

    previous = Rect(-1, -1)

    def on_rect(rect: Rect):
        nonlocal previous
        if rect.extent(instance.options.horizontal) != previous.extent(instance.options.horizontal):
            cb(rect)
        previous = rect

    return _observe_widget_rect(instance.scroll_element.window(), on_rect)


def observe_element_offset(instance: "Virtualizer", cb: Callable[[float], None]) -> Optional[Callable[[], None]]:
    """Report the axis scrollbar value now and whenever it changes."""
    if not _is_alive(instance.scroll_element):
        return None

    scroll_bar = _scroll_bar(instance.scroll_element, instance.options.horizontal)

    def on_value_changed(value: int):
        cb(value)

    cb(scroll_bar.value())
    scroll_bar.valueChanged.connect(on_value_changed)

    def teardown():
        if _is_alive(scroll_bar):
            scroll_bar.valueChanged.disconnect(on_value_changed)

    return teardown


def element_scroll(
    offset: float,
    *,
    adjustments: Optional[float] = None,
    behavior: Optional[ScrollBehavior] = None,
    instance: "Virtualizer",
) -> None:
    """Move the axis scrollbar to ``offset + adjustments``."""
    if not _is_alive(instance.scroll_element):
        return

    scroll_bar = _scroll_bar(instance.scroll_element, instance.options.horizontal)
    to_offset = round(offset + (adjustments or 0))

    if behavior is not None and ScrollBehavior(behavior) is ScrollBehavior.SMOOTH:
        logger.debug(f"Animating scroll from {scroll_bar.value()} to {to_offset}")
        animation = QPropertyAnimation(scroll_bar, b"value", scroll_bar)
        animation.setDuration(SMOOTH_SCROLL_DURATION_MS)
        animation.setStartValue(scroll_bar.value())
        animation.setEndValue(to_offset)
        animation.setEasingCurve(QEasingCurve.Type.OutCubic)
        animation.start(QAbstractAnimation.DeletionPolicy.DeleteWhenStopped)
        return

    scroll_bar.setValue(to_offset)


def measure_element(element: QWidget, instance: "Virtualizer") -> int:
    size = element.size()
    return round(size.width() if instance.options.horizontal else size.height())


def widget_index_property(element: QObject, attribute_name: str) -> Any:
    """Read the index property; None when unset or the widget is gone."""
    if not _is_alive(element):
        return None
    return element.property(attribute_name)


def widget_is_connected(element: QWidget) -> bool:
    """False once the widget is deleted, orphaned or explicitly hidden."""
    if not _is_alive(element) or element.parent() is None:
        return False
    # Unshown children also report isHidden(); only an explicit hide() detaches
    return not (element.isHidden() and element.testAttribute(Qt.WidgetAttribute.WA_WState_ExplicitShowHide))


class WidgetResizeObserver:
    """
    Per-item resize observer for rendered item widgets.

    Installs one event filter on each observed widget and reports resizes,
    hides and reparenting to ``callback(widget)``. Observing a widget also
    posts one initial report on the next event loop turn; the Virtualizer
    skips that first report and treats the rest as asynchronous
    measurements. Deleted widgets are dropped lazily.
    """

    OBSERVED_EVENTS = (QEvent.Type.Resize, QEvent.Type.Hide, QEvent.Type.ParentChange)

    def __init__(self, callback: Callable[[QWidget], None]):
        self._callback = callback
        self._observed: Dict[int, QWidget] = {}
        self._event_filter = _EventCallbackFilter(self._on_event, self.OBSERVED_EVENTS)

    def observed_widgets(self):
        self._prune()
        return list(self._observed.values())

    def _prune(self) -> None:
        for key, widget in list(self._observed.items()):
            if not _is_alive(widget):
                del self._observed[key]

    def observe(self, widget: QWidget) -> None:
        self._prune()
        if id(widget) in self._observed or not _is_alive(widget):
            return
        self._observed[id(widget)] = widget
        widget.installEventFilter(self._event_filter)
        QTimer.singleShot(0, lambda: self._report_initial(widget))

    def _report_initial(self, widget: QWidget) -> None:
        if _is_alive(widget) and self._observed.get(id(widget)) is widget:
            self._callback(widget)

    def unobserve(self, widget: QWidget) -> None:
        if self._observed.pop(id(widget), None) is None:
            return
        if _is_alive(widget):
            widget.removeEventFilter(self._event_filter)

    def disconnect(self) -> None:
        for widget in list(self._observed.values()):
            self.unobserve(widget)

    def _on_event(self, watched) -> None:
        if id(watched) in self._observed:
            self._callback(watched)
