# src/trcalc/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions. None of them is fatal to the
calculator: every caller in the application layer degrades to a safe default.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class RateFetchError(DomainError):
    """Raised when a rate provider cannot deliver a rate table."""
    pass


class InvalidSettingError(DomainError):
    """Raised when a settings change is not allowed (e.g. USD as target)."""
    pass


class StorageError(DomainError):
    """Raised when a persisted record cannot be written."""
    pass
