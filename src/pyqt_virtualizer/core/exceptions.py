"""Virtualizer exceptions."""


class VirtualizerOptionsError(ValueError):
    """Raised when a Virtualizer is configured with missing or unknown options."""
