"""Tests for core utilities."""

import logging

import pytest
from PyQt6.QtTest import QTest


def test_debounce_timer_fires_once_after_inactivity(qapp):
    """Test DebounceTimer restarts on each trigger and fires once."""
    from pyqt_virtualizer.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=20, handler=lambda: called.append(1))

    timer.trigger()
    timer.trigger()
    assert timer.is_active()
    assert called == []

    QTest.qWait(100)
    assert called == [1]
    assert not timer.is_active()


def test_debounce_timer_cancel_and_force(qapp):
    """Test cancel drops the pending call and force fires immediately."""
    from pyqt_virtualizer.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=20, handler=lambda: called.append(1))

    timer.trigger()
    timer.cancel()
    QTest.qWait(60)
    assert called == []

    timer.trigger()
    timer.force()
    assert called == [1]
    assert not timer.is_active()


def test_debounce_timer_delay_is_clamped():
    from pyqt_virtualizer.core import DebounceTimer

    timer = DebounceTimer(delay_ms=150, handler=lambda: None)
    timer.delay_ms = -5
    assert timer.delay_ms == 0


def test_memo_recomputes_only_on_changed_deps():
    """Test Memo returns the cached object while dependencies are unchanged."""
    from pyqt_virtualizer.core import Memo

    state = {"a": 1, "items": [1, 2]}
    calls = []

    def compute(a, items):
        calls.append((a, items))
        return [a, len(items)]

    memo = Memo(lambda: (state["a"], state["items"]), compute)

    first = memo()
    assert memo() is first
    assert len(calls) == 1

    state["a"] = 2
    second = memo()
    assert second == [2, 2]
    assert len(calls) == 2

    # Equal contents, different list object: compared by identity
    state["items"] = [1, 2]
    memo()
    assert len(calls) == 3


def test_memo_initial_deps_suppress_first_compute():
    from pyqt_virtualizer.core import Memo

    calls = []
    memo = Memo(lambda: (0, 0, False), lambda *deps: calls.append(deps), initial_deps=(0, 0, False))

    memo()
    assert calls == []


@pytest.mark.parametrize(
    "previous, current, expected",
    [
        (None, (1,), True),
        ((1, 2), (1, 2), False),
        ((1, 2), (1, 2.0), False),
        ((1, 2), (1, 3), True),
        ((1,), (1, 2), True),
        (("a", None), ("a", None), False),
    ],
)
def test_deps_changed(previous, current, expected):
    from pyqt_virtualizer.core import deps_changed

    assert deps_changed(previous, current) is expected


def test_memo_debug_logs_timing(caplog):
    """Test a debug-enabled Memo reports its recompute time on the performance logger."""
    from pyqt_virtualizer.core import Memo, get_virtualizer_config

    logger_name = get_virtualizer_config().performance_logger_name
    caplog.set_level(logging.DEBUG, logger=logger_name)

    memo = Memo(lambda: (1,), lambda a: a, key="calculate_range", debug=lambda: True)
    memo()

    assert any(
        record.name == logger_name and record.getMessage().startswith("calculate_range:")
        for record in caplog.records
    )


def test_virtualizer_config_set_and_get():
    from pyqt_virtualizer.core import VirtualizerConfig, get_virtualizer_config, set_virtualizer_config
    from pyqt_virtualizer.core import config as config_module

    assert get_virtualizer_config().performance_logger_name == "pyqt_virtualizer.performance"

    custom = VirtualizerConfig(performance_threshold_ms=5.0)
    previous = config_module._virtualizer_config
    try:
        set_virtualizer_config(custom)
        assert get_virtualizer_config() is custom
    finally:
        config_module._virtualizer_config = previous
