"""Tests for remeasurement: scroll correction and element bookkeeping."""

import logging

from conftest import FakeItem


def test_resize_above_viewport_keeps_visible_item_anchored(make_virtualizer, scroll_element):
    """Test a resized item above the viewport shifts the offset by exactly the delta."""
    virtualizer = make_virtualizer()
    scroll_element.set_offset(1000)
    visible = virtualizer.get_measurements()[20]
    apparent_before = virtualizer.scroll_offset - visible.start

    virtualizer.measure_element(FakeItem(index=5, size=80))

    assert virtualizer.scroll_offset == 1030
    assert scroll_element.scroll_calls[-1] == (1000, 30, None)
    visible_after = virtualizer.get_measurements()[20]
    assert visible_after.start == visible.start + 30
    assert virtualizer.scroll_offset - visible_after.start == apparent_before


def test_resize_below_offset_does_not_scroll(make_virtualizer, scroll_element):
    virtualizer = make_virtualizer()
    scroll_element.set_offset(1000)
    calls_before = len(scroll_element.scroll_calls)

    virtualizer.measure_element(FakeItem(index=25, size=10))

    assert len(scroll_element.scroll_calls) == calls_before
    assert virtualizer.scroll_offset == 1000
    assert virtualizer.get_measurements()[25].size == 10


def test_corrections_accumulate_until_offset_lands(make_virtualizer, scroll_element):
    issued = []

    def deferred_scroll(offset, *, adjustments=None, behavior=None, instance):
        issued.append((offset, adjustments))

    virtualizer = make_virtualizer(scroll_to_fn=deferred_scroll)
    scroll_element.set_offset(1000)

    virtualizer.measure_element(FakeItem(index=5, size=80))
    virtualizer.measure_element(FakeItem(index=6, size=70))

    assert issued[-2:] == [(1000, 30), (1000, 50)]
    assert virtualizer.scroll_state.adjustments == 50

    scroll_element.set_offset(1050)
    assert virtualizer.scroll_state.adjustments == 0


def test_size_change_always_notifies(make_virtualizer):
    virtualizer = make_virtualizer()
    virtualizer.changes.clear()

    virtualizer.measure_element(FakeItem(index=3, size=64))

    assert len(virtualizer.changes) == 1


def test_unchanged_size_is_noop(make_virtualizer):
    virtualizer = make_virtualizer()
    store_cache = virtualizer.measurement_store.item_size_cache
    virtualizer.changes.clear()

    virtualizer.measure_element(FakeItem(index=3, size=50))

    assert virtualizer.changes == []
    assert virtualizer.measurement_store.item_size_cache is store_cache
    assert virtualizer.remeasure.is_dynamic


def test_missing_index_logs_warning(make_virtualizer, caplog):
    virtualizer = make_virtualizer()
    caplog.set_level(logging.WARNING)

    virtualizer.measure_element(FakeItem(index=None, size=90))

    assert "Missing attribute name 'data-index={index}'" in caplog.text
    assert virtualizer.index_from_element(FakeItem(index=None, size=90)) == -1
    assert not virtualizer.remeasure.is_dynamic


def test_non_numeric_index_is_invalid(make_virtualizer, caplog):
    virtualizer = make_virtualizer()
    caplog.set_level(logging.WARNING)

    assert virtualizer.index_from_element(FakeItem(index="row-3", size=10)) == -1
    assert "row-3" in caplog.text


def test_string_index_is_parsed(make_virtualizer):
    virtualizer = make_virtualizer()
    assert virtualizer.index_from_element(FakeItem(index="12", size=10)) == 12


def test_stale_index_is_silently_ignored(make_virtualizer, caplog):
    virtualizer = make_virtualizer(count=10)
    caplog.set_level(logging.DEBUG)
    virtualizer.changes.clear()

    virtualizer.measure_element(FakeItem(index=50, size=90))

    assert virtualizer.changes == []
    assert not virtualizer.remeasure.is_dynamic
    assert "WARNING" not in [record.levelname for record in caplog.records]


def test_measure_element_none_is_ignored(make_virtualizer):
    virtualizer = make_virtualizer()
    virtualizer.measure_element(None)
    assert not virtualizer.remeasure.is_dynamic


class TestElementTracking:
    def test_first_async_observation_is_skipped_once(self, make_virtualizer):
        virtualizer = make_virtualizer()
        observer = virtualizer.item_observers[0]
        item = FakeItem(index=2, size=50)
        virtualizer.measure_element(item)

        item.size = 90
        observer.fire(item)
        assert virtualizer.get_measurements()[2].size == 50

        observer.fire(item)
        assert virtualizer.get_measurements()[2].size == 90

    def test_sync_measurement_is_never_skipped(self, make_virtualizer):
        virtualizer = make_virtualizer()
        item = FakeItem(index=2, size=50)
        virtualizer.measure_element(item)

        item.size = 75
        virtualizer.measure_element(item)

        assert virtualizer.get_measurements()[2].size == 75

    def test_new_element_measured_from_async_observation(self, make_virtualizer):
        virtualizer = make_virtualizer()
        observer = virtualizer.item_observers[0]

        observer.fire(FakeItem(index=4, size=65))

        assert virtualizer.get_measurements()[4].size == 65

    def test_swapping_element_moves_observation(self, make_virtualizer):
        virtualizer = make_virtualizer()
        observer = virtualizer.item_observers[0]
        first = FakeItem(index=1, size=50)
        second = FakeItem(index=1, size=50)

        virtualizer.measure_element(first)
        virtualizer.measure_element(second)

        assert observer.observed == [second]
        assert virtualizer.remeasure.tracked[1].element is second

    def test_detached_element_is_untracked_but_size_kept(self, make_virtualizer):
        virtualizer = make_virtualizer()
        observer = virtualizer.item_observers[0]
        item = FakeItem(index=1, size=70)
        virtualizer.measure_element(item)

        item.connected = False
        observer.fire(item)

        assert observer.observed == []
        assert not virtualizer.remeasure.is_dynamic
        assert virtualizer.measurement_store.cached_size(1) == 70

    def test_detaching_stale_element_keeps_current_one(self, make_virtualizer):
        virtualizer = make_virtualizer()
        stale = FakeItem(index=1, size=50)
        current = FakeItem(index=1, size=50)
        virtualizer.measure_element(stale)
        virtualizer.measure_element(current)

        stale.connected = False
        virtualizer.measure_element(stale)

        assert virtualizer.remeasure.tracked[1].element is current

    def test_remount_reobserves_tracked_elements(self, make_virtualizer):
        virtualizer = make_virtualizer()
        observer = virtualizer.item_observers[0]
        item = FakeItem(index=3, size=50)
        virtualizer.measure_element(item)

        virtualizer.unmount()
        assert observer.observed == []

        virtualizer.mount()
        assert observer.observed == [item]
