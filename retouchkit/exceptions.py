"""
Exception hierarchy for RetouchKit.

Validation and decode errors are recoverable and surfaced to the caller.
Allocation errors abort the current operation only; the previously
committed raster is never touched.
"""


class RetouchError(Exception):
    """Base exception for raster and masking operations."""
    pass


class ValidationError(RetouchError, ValueError):
    """Raised when caller-supplied input is rejected (bad sizes, empty mask, ...)."""
    pass


class DecodeError(RetouchError):
    """Raised when a payload cannot be decoded as a raster image."""
    pass


class AllocationError(RetouchError):
    """Raised when an output buffer of the required size cannot be allocated."""
    pass
