"""Error taxonomy of the JSON API.

Each error carries the HTTP status it is rendered with by
:class:`server.apps.api.middleware.ApiExceptionMiddleware`.
"""

from typing import ClassVar


class ApiError(Exception):
    """Base class for errors returned to API clients."""

    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = 'Server error'

    def __init__(self, message: str | None = None) -> None:
        """Initialize ApiError.

        Args:
            message: Client-facing message, class default when omitted.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(ApiError):
    """Request is well-formed but cannot be applied (400)."""

    status_code = 400
    default_message = 'Bad request'


class UnauthorizedError(ApiError):
    """Credential is missing or invalid (401)."""

    status_code = 401
    default_message = 'Unauthorized'


class NotFoundError(ApiError):
    """Resource is absent or not owned by the caller (404)."""

    status_code = 404
    default_message = 'Not found'


class ConflictError(ApiError):
    """Resource with the same identity already exists (409)."""

    status_code = 409
    default_message = 'Conflict'


class PayloadTooLargeError(ApiError):
    """Request body cannot be accepted (413)."""

    status_code = 413
    default_message = 'Payload too large'


class UnimplementedError(ApiError):
    """Operation is not available in this deployment (501)."""

    status_code = 501
    default_message = 'Not implemented'
