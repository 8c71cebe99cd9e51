"""Value types shared by the virtualization engine."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Union

Key = Union[int, str]


class ScrollDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class ScrollAlignment(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"
    AUTO = "auto"


class ScrollBehavior(str, Enum):
    """Accepted ``behavior`` values. Only ``smooth`` animates."""

    AUTO = "auto"
    INSTANT = "instant"
    SMOOTH = "smooth"


@dataclass(frozen=True)
class VirtualItem:
    """Extent of one item along the scroll axis. ``end == start + size``."""

    index: int
    start: float
    size: float
    end: float
    key: Key


@dataclass(frozen=True)
class Rect:
    width: float = 0
    height: float = 0

    def extent(self, horizontal: bool) -> float:
        return self.width if horizontal else self.height


@dataclass(frozen=True)
class Range:
    """Input handed to a range extractor."""

    start_index: int
    end_index: int
    overscan: int
    count: int


class CalculatedRange(NamedTuple):
    """Indices of the first and last item intersecting the viewport."""

    start_index: int
    end_index: int
