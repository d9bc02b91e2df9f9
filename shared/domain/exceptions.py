"""
Domain Exceptions

Every error the dispatch core raises is recoverable by the caller:
- ValidationError: missing/invalid request fields, unknown driver or vehicle
- ConflictError: double booking, offline driver, illegal state transition
- NotFoundError: unknown confirmation number, username or plate

None of them leave partial state behind.
"""


class DomainError(Exception):
    """Base class for all dispatch domain errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when a request is incomplete or references unknown resources."""


class ConflictError(DomainError):
    """Raised when a request clashes with the current schedule or state."""

    def __init__(self, message: str, reason: str = ''):
        super().__init__(message)
        self.reason = reason or message


class NotFoundError(DomainError):
    """Raised when the referenced entity does not exist."""
