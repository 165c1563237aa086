"""
Exception hierarchy for payprep.

Only EmptyPoolError is allowed to escape attempt construction; every other
condition in the engine degrades to a defined default.
"""


class PayPrepError(Exception):
    """Base class for all payprep errors."""


class EmptyPoolError(PayPrepError):
    """No enabled content is available to build an attempt from."""

    def __init__(self, message: str = "No questions available. Enable more content packs."):
        super().__init__(message)


class ContentError(PayPrepError):
    """The content index or a pack file could not be read."""


class EmptySequenceError(PayPrepError, ValueError):
    """Raised when picking from an empty sequence."""
