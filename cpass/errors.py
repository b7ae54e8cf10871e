"""
Error hierarchy for the cpass password generator.
"""


class CpassError(Exception):
    """Base class for every error raised by cpass."""


class ValidationError(CpassError, ValueError):
    """Generator parameters are out of range or inconsistent."""


class EntropySourceError(CpassError):
    """The secure randomness source could not produce bytes."""


class InternalInvariantError(CpassError):
    """An internal bound was exceeded. Indicates a bug, not bad input."""
