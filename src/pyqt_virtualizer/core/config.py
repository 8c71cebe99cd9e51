"""Library-wide configuration for pyqt-virtualizer.

Provides hooks for applications to route the virtualizer's timing logs.
Per-instance behavior lives in :class:`pyqt_virtualizer.engine.VirtualizerOptions`.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class VirtualizerConfig:
    """Base configuration shared by every Virtualizer instance.

    Attributes:
        performance_logger_name: Logger receiving derivation timings when an
            instance runs with ``debug=True``
        log_dir: Directory for the timing log file (no file handler when None)
        performance_log_filename: File name of the timing log inside log_dir
        performance_threshold_ms: Only timings at or above this are logged
    """

    performance_logger_name: str = "pyqt_virtualizer.performance"
    log_dir: Optional[str] = None
    performance_log_filename: str = "performance.log"
    performance_threshold_ms: float = 0.0


# Global config instance (set by application)
_virtualizer_config: Optional[VirtualizerConfig] = None


def set_virtualizer_config(config: VirtualizerConfig) -> None:
    """Set the global virtualizer configuration.

    Args:
        config: VirtualizerConfig instance
    """
    global _virtualizer_config
    _virtualizer_config = config


def get_virtualizer_config() -> VirtualizerConfig:
    """Get the current virtualizer configuration.

    Returns:
        Current VirtualizerConfig or default if not set
    """
    if _virtualizer_config is None:
        return VirtualizerConfig()
    return _virtualizer_config
