"""Exceptions for accounts app."""

from server.apps.api.exceptions import ConflictError, UnauthorizedError


class InvalidTokenError(UnauthorizedError):
    """Raised when a bearer token is missing, malformed or expired."""

    default_message = 'Invalid token'


class InvalidCredentialsError(UnauthorizedError):
    """Raised when e-mail and password do not match an active user."""

    default_message = 'Invalid credentials'


class EmailAlreadyRegisteredError(ConflictError):
    """Raised on signup with an e-mail that already has an account."""

    default_message = 'Email already registered'
