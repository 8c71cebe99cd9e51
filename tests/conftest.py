"""pytest configuration and fixtures for pyqt-virtualizer tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


class FakeScrollElement:
    """Stands in for a scroll area: a viewport size, an offset and observers."""

    def __init__(self, width=300, height=500, offset=0):
        self.width = width
        self.height = height
        self.offset = offset
        self.size_callbacks = []
        self.offset_callbacks = []
        self.scroll_calls = []

    def set_offset(self, offset):
        if offset == self.offset:
            return
        self.offset = offset
        for cb in list(self.offset_callbacks):
            cb(offset)

    def resize(self, width, height):
        from pyqt_virtualizer.engine import Rect

        self.width = width
        self.height = height
        for cb in list(self.size_callbacks):
            cb(Rect(width, height))


class FakeItem:
    """A rendered item: its index property, real size and liveness."""

    def __init__(self, index, size, connected=True):
        self.attrs = {"data-index": index} if index is not None else {}
        self.size = size
        self.connected = connected


class FakeItemObserver:
    def __init__(self, callback):
        self.callback = callback
        self.observed = []
        self.disconnected = 0

    def observe(self, element):
        if element not in self.observed:
            self.observed.append(element)

    def unobserve(self, element):
        if element in self.observed:
            self.observed.remove(element)

    def disconnect(self):
        self.disconnected += 1
        self.observed.clear()

    def fire(self, element):
        self.callback(element)


def fake_observe_rect(instance, cb):
    from pyqt_virtualizer.engine import Rect

    element = instance.scroll_element
    if element is None:
        return None
    element.size_callbacks.append(cb)
    cb(Rect(element.width, element.height))
    return lambda: element.size_callbacks.remove(cb)


def fake_observe_offset(instance, cb):
    element = instance.scroll_element
    if element is None:
        return None
    element.offset_callbacks.append(cb)
    cb(element.offset)
    return lambda: element.offset_callbacks.remove(cb)


def fake_scroll(offset, *, adjustments=None, behavior=None, instance):
    element = instance.scroll_element
    if element is None:
        return
    element.scroll_calls.append((offset, adjustments, behavior))
    element.set_offset(offset + (adjustments or 0))


@pytest.fixture
def scroll_element():
    return FakeScrollElement()


@pytest.fixture
def make_virtualizer(qapp, scroll_element):
    """Factory building a Virtualizer wired to fake collaborators."""
    from pyqt_virtualizer import Virtualizer

    created = []

    def factory(mount=True, **overrides):
        observers = []
        changes = []

        def create_item_observer(callback):
            observer = FakeItemObserver(callback)
            observers.append(observer)
            return observer

        options = dict(
            count=1000,
            get_scroll_element=lambda: scroll_element,
            estimate_size=lambda index: 50,
            scroll_to_fn=fake_scroll,
            observe_element_rect=fake_observe_rect,
            observe_element_offset=fake_observe_offset,
            measure_element=lambda element, instance: element.size,
            is_element_connected=lambda element: element.connected,
            create_item_observer=create_item_observer,
            read_index_attribute=lambda element, name: element.attrs.get(name),
            on_change=lambda instance: changes.append(instance.range),
        )
        options.update(overrides)
        virtualizer = Virtualizer(**options)
        virtualizer.changes = changes
        virtualizer.item_observers = observers
        if mount:
            virtualizer.mount()
        created.append(virtualizer)
        return virtualizer

    yield factory

    for virtualizer in created:
        virtualizer.unmount()
