"""
Core utilities.

Toolkit-level helpers with no virtualization logic: the PyQt6 debounce
timer, the dependency memo used by the derivation pipeline, timing logs,
library-wide configuration and exceptions.
"""

from .debounce_timer import DebounceTimer
from .memo import Memo, deps_changed
from .config import VirtualizerConfig, set_virtualizer_config, get_virtualizer_config
from .exceptions import VirtualizerOptionsError

__all__ = [
    "DebounceTimer",
    "Memo",
    "deps_changed",
    "VirtualizerConfig",
    "set_virtualizer_config",
    "get_virtualizer_config",
    "VirtualizerOptionsError",
]
