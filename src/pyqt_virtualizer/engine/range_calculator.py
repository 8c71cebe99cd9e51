"""Visible range calculation and the default range/key extractors."""

from typing import Callable, List, Sequence

from .types import CalculatedRange, Key, Range, VirtualItem


def default_key_extractor(index: int) -> Key:
    return index


def default_range_extractor(range_: Range) -> List[int]:
    """Expand the visible range by the overscan margin, clamped to valid indices."""
    start = max(range_.start_index - range_.overscan, 0)
    end = min(range_.end_index + range_.overscan, range_.count - 1)
    return list(range(start, end + 1))


def find_nearest_binary_search(
    low: int,
    high: int,
    get_current_value: Callable[[int], float],
    value: float,
) -> int:
    """
    Binary search over a non-decreasing sequence.

    Returns the index holding ``value`` exactly when there is one, otherwise
    the index just before the insertion point, floored at 0.
    """
    while low <= high:
        middle = (low + high) // 2
        current_value = get_current_value(middle)

        if current_value < value:
            low = middle + 1
        elif current_value > value:
            high = middle - 1
        else:
            return middle

    return low - 1 if low > 0 else 0


def calculate_range(
    measurements: Sequence[VirtualItem],
    outer_size: float,
    scroll_offset: float,
) -> CalculatedRange:
    """
    Find the items intersecting ``[scroll_offset, scroll_offset + outer_size]``.

    The start index comes from a binary search over item starts; the end
    index from a forward scan, which only walks the items on screen.
    An empty measurement list yields ``(0, 0)`` without indexing.
    """
    last_index = len(measurements) - 1
    start_index = find_nearest_binary_search(
        0, last_index, lambda i: measurements[i].start, scroll_offset
    )
    end_index = start_index

    while end_index < last_index and measurements[end_index].end < scroll_offset + outer_size:
        end_index += 1

    return CalculatedRange(start_index, end_index)
