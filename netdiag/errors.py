"""Exceptions raised by netdiag."""


class SnapshotError(ValueError):
    """A snapshot document could not be read or has no usable node records."""
