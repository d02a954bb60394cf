"""
Domain-specific exception hierarchy for the free slot finder.
"""


class SlotError(Exception):
    """Base class for all application-level errors."""


class ValidationError(SlotError, ValueError):
    """Raised when required input is missing, empty or has the wrong shape."""


class ParseError(SlotError, ValueError):
    """Raised when a timestamp or numeric field cannot be interpreted."""
