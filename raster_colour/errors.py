# raster_colour/errors.py
"""
Exception types raised by raster_colour.

Only construction problems and unsupported accessors surface to callers.
Metadata parse failures and empty range scans are absorbed and reported as
None by the modules that encounter them.
"""


class RasterColourError(Exception):
    """Base exception for raster_colour."""


class ConfigurationError(RasterColourError, ValueError):
    """Raised when an object is built from invalid arguments."""


class UnsupportedOperationError(RasterColourError, NotImplementedError):
    """Raised by accessors that cannot be answered from a packed pixel."""


__all__ = [
    "RasterColourError",
    "ConfigurationError",
    "UnsupportedOperationError",
]
