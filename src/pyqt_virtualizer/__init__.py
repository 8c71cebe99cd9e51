"""
pyqt-virtualizer: list and grid windowing for PyQt6.

Computes, for a scrollable collection of N items of estimated or measured
size, the minimal window of items that must be realized to cover the
viewport, and keeps the visible content anchored while real sizes replace
estimates.

Architecture:
- Tier 1 (Core): Debounce timer, dependency memo, timing logs, config
- Tier 2 (Protocols): Collaborator contracts the engine calls into
- Tier 3 (Engine): Measurement store, range calculation, scroll state,
  remeasure correction, scroll-to orchestration, Virtualizer
- Tier 4 (Widgets): Default PyQt6 strategies for QAbstractScrollArea

Key Features:
- Incremental measurement with partial rebuild from the first resized item
- Binary search + bounded scan range calculation
- Scroll correction for items resized above the viewport
- Memoized derivation graph that notifies only on real range changes
"""

__version__ = "0.1.0"

# engine before widgets: the Qt strategies import engine types
from .engine import (
    Virtualizer,
    VirtualizerOptions,
    VirtualItem,
    Range,
    Rect,
    ScrollAlignment,
    ScrollBehavior,
    ScrollDirection,
    default_range_extractor,
    default_key_extractor,
)
from .core import VirtualizerConfig, set_virtualizer_config, get_virtualizer_config, VirtualizerOptionsError

__all__ = [
    "__version__",
    "Virtualizer",
    "VirtualizerOptions",
    "VirtualItem",
    "Range",
    "Rect",
    "ScrollAlignment",
    "ScrollBehavior",
    "ScrollDirection",
    "default_range_extractor",
    "default_key_extractor",
    "VirtualizerConfig",
    "set_virtualizer_config",
    "get_virtualizer_config",
    "VirtualizerOptionsError",
]
