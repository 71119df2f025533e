from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class AuthenticationError(UserError):
    """Raised when the request carries no authenticated principal."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class TokenGenerationError(Exception):
    """Raised when the OS random source cannot produce a session token.

    This is an environment failure, not a user error, and must not be retried.
    """
