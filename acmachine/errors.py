"""Exceptions raised by drivers and their helpers."""


class DriverError(RuntimeError):
    """A driver-level failure (as opposed to an error returned by the provider API)."""
