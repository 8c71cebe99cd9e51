"""Dependency-tracked memoization for derived values.

Each :class:`Memo` stores the dependency tuple and result of its last
computation. Calling it re-reads the dependencies and recomputes only when
the new tuple differs element-wise from the stored one; otherwise the cached
result object is returned unchanged.

Element comparison is shallow: scalars compare by value, everything else
(lists, dicts, callables, named tuples) by identity. Producers of container
dependencies therefore replace the container instead of mutating it.
"""

from typing import Any, Callable, Generic, Optional, Sequence, Tuple, TypeVar

from pyqt_virtualizer.core.config import get_virtualizer_config
from pyqt_virtualizer.core.performance_monitor import timer

T = TypeVar("T")

_SCALAR_TYPES = (int, float, str, bytes, bool, type(None))


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    return isinstance(a, _SCALAR_TYPES) and isinstance(b, _SCALAR_TYPES) and a == b


def deps_changed(previous: Optional[Sequence[Any]], current: Sequence[Any]) -> bool:
    """Return True when the dependency tuples differ (shallow, per element)."""
    if previous is None or len(previous) != len(current):
        return True
    return any(not _same(a, b) for a, b in zip(previous, current))


class Memo(Generic[T]):
    """
    A single node of the derivation graph.

    Usage:
        self.get_range = Memo(
            lambda: (self.get_measurements(), self.get_size(), self.scroll_offset),
            lambda measurements, size, offset: calculate_range(measurements, size, offset),
            key="calculate_range",
            debug=lambda: self.options.debug,
        )
        current = self.get_range()  # recomputes only when a dependency changed
    """

    def __init__(
        self,
        get_deps: Callable[[], Sequence[Any]],
        compute: Callable[..., T],
        *,
        key: str = "memo",
        debug: Optional[Callable[[], bool]] = None,
        initial_deps: Optional[Sequence[Any]] = None,
    ):
        self._get_deps = get_deps
        self._compute = compute
        self.key = key
        self._debug = debug
        self._deps: Optional[Tuple[Any, ...]] = tuple(initial_deps) if initial_deps is not None else None
        self._result: Optional[T] = None

    @property
    def deps(self) -> Optional[Tuple[Any, ...]]:
        return self._deps

    def __call__(self) -> T:
        deps = tuple(self._get_deps())
        if not deps_changed(self._deps, deps):
            return self._result

        self._deps = deps
        if self._debug is not None and self._debug():
            threshold_ms = get_virtualizer_config().performance_threshold_ms
            with timer(self.key, threshold_ms=threshold_ms, log_args=True, deps=len(deps)):
                self._result = self._compute(*deps)
        else:
            self._result = self._compute(*deps)
        return self._result
