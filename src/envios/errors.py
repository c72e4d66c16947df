from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class StoreUnavailableError(Exception):
    """Raised when the counter store cannot complete an atomic update.

    The counter is left unchanged; callers may retry.
    """

    def __init__(self, message: str = "Counter store unavailable") -> None:
        super().__init__(message)


class InvalidTypeError(ValueError):
    """Raised when an identifier is encoded with a type outside its family."""
