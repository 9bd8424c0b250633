"""
Error kinds raised by the CI kernel.

Each class derives from the builtin exception that already describes the
concern, so callers can catch either the specific kind or the builtin one:

- InvalidConfigurationError: bad input detected before any numerical work
- DimensionOverflowError: the problem is too large to address
- ConvergenceError: an iterative solve hit its iteration cap
"""


class InvalidConfigurationError(ValueError):
    """Raised for incompatible dimensions or malformed constructor arguments."""


class DimensionOverflowError(OverflowError):
    """Raised when a Fock space dimension does not fit in the address type."""


class ConvergenceError(RuntimeError):
    """Raised when an iterative solver exceeds its maximum number of iterations."""
