"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
infrastructure failures without leaking infrastructure details.
Business rule outcomes are returned as result enums (see ports),
not raised.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class StorageError(RegistrationError):
    """Storage backend unavailable or failed mid-operation."""

    pass


class DeliveryError(RegistrationError):
    """Email transport failed to deliver a message."""

    pass


class DirectoryError(RegistrationError):
    """User directory rejected an account (duplicate, weak password, ...)."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)
