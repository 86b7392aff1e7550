"""Errors raised by the identity provider and document store backends."""

from __future__ import annotations


class NotesClientError(Exception):
    """Base class for every error this package raises."""


class AuthError(NotesClientError):
    """The identity provider rejected or could not complete a request.

    ``code`` is the provider's error code (``EMAIL_EXISTS``,
    ``INVALID_LOGIN_CREDENTIALS``, ...) or ``NETWORK_ERROR`` when the
    request never got an answer.
    """

    def __init__(self, code: str, message: str = "") -> None:
        self.code = code
        self.message = message or code
        super().__init__(f"{code}: {self.message}" if message else code)


class StoreError(NotesClientError):
    """A document store operation failed."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class ConfigurationError(NotesClientError):
    """Required settings are missing."""
