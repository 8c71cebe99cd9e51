"""Performance monitoring utilities for pyqt-virtualizer.

Provides the context manager the derivation pipeline uses to time each
recompute when a Virtualizer runs with ``debug=True``.
"""

import time
import logging
from contextlib import contextmanager
from pathlib import Path

from pyqt_virtualizer.core.config import get_virtualizer_config

# Create performance logger
_config = get_virtualizer_config()
perf_logger = logging.getLogger(_config.performance_logger_name)
perf_logger.setLevel(logging.DEBUG)

# File handler only when the application configured a log directory
if _config.log_dir:
    perf_log_file = Path(_config.log_dir) / _config.performance_log_filename
    perf_log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(perf_log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    perf_logger.addHandler(file_handler)

# Also log to console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.DEBUG)
console_handler.setFormatter(logging.Formatter(
    '⏱️  %(message)s'
))
perf_logger.addHandler(console_handler)


@contextmanager
def timer(operation_name: str, threshold_ms: float = 0.0, log_args: bool = False, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes longer than this (in milliseconds)
        log_args: Whether to log kwargs in the message
        **kwargs: Additional context to include in log message

    Example:
        with timer("getMeasurements", threshold_ms=1.0, log_args=True, count=1000):
            measurements = rebuild()
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if log_args and kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"

            perf_logger.debug(msg)
