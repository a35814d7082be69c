from __future__ import annotations


class ScanError(Exception):
    """Base class for everything the scanner raises on purpose."""


class InvalidConfig(ScanError, ValueError):
    pass


class InvalidRange(InvalidConfig):
    pass


class InvalidAddress(ScanError, ValueError):
    pass


class DispatchError(ScanError):
    """
    Raised by a scan when a target could not be produced.
    The underlying InvalidAddress is available as __cause__.
    """


class LimiterError(ScanError, RuntimeError):
    pass
