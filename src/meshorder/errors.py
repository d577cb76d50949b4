"""
Exception types raised by MeshOrder.

All errors are caller contract violations detected before any work is
done. Nothing is retried.
"""


class MeshOrderError(Exception):
    """Base class for MeshOrder errors."""
    pass


class InvalidInput(MeshOrderError, ValueError):
    """Raised when an index stream is malformed or references missing vertices."""
    pass


class ConfigurationError(MeshOrderError, ValueError):
    """Raised when optimizer configuration values are out of range."""
    pass
