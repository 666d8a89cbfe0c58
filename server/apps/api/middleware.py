"""Middleware rendering API exceptions as JSON responses."""

import logging
from collections.abc import Callable
from typing import Final, final

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import HttpRequest, HttpResponse, JsonResponse

from server.apps.api.exceptions import ApiError

_API_PREFIX: Final = '/api/'
_INTERNAL_ERROR_MESSAGE: Final = 'Internal server error'

logger = logging.getLogger(__name__)


@final
class ApiExceptionMiddleware:
    """Turn exceptions raised by API views into JSON error responses.

    - ``ApiError`` subclasses use their own status and message
    - Django ``ValidationError`` becomes 400 with field-level detail
    - Model ``DoesNotExist`` becomes 404
    - Anything else is logged and answered with a generic 500

    Requests outside ``/api/`` keep Django's default handling.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize the middleware.

        Args:
            get_response: Next handler in the middleware chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Pass the request through unchanged."""
        return self.get_response(request)

    def process_exception(
        self,
        request: HttpRequest,
        exception: Exception,
    ) -> HttpResponse | None:
        """Render an exception raised by a view.

        Args:
            request: Request being handled.
            exception: Exception raised by the view.

        Returns:
            JSON error response, or None to let Django handle it.
        """
        if not request.path.startswith(_API_PREFIX):
            return None

        if isinstance(exception, ApiError):
            logger.info(
                '%s %s -> %d: %s',
                request.method,
                request.path,
                exception.status_code,
                exception.message,
            )
            return JsonResponse(
                {'message': exception.message},
                status=exception.status_code,
            )

        if isinstance(exception, ValidationError):
            return JsonResponse(
                {
                    'message': 'Validation failed',
                    'errors': _validation_details(exception),
                },
                status=400,
            )

        if isinstance(exception, ObjectDoesNotExist):
            return JsonResponse({'message': 'Not found'}, status=404)

        logger.exception(
            'Unhandled error in %s %s',
            request.method,
            request.path,
        )
        return JsonResponse({'message': _INTERNAL_ERROR_MESSAGE}, status=500)


def _validation_details(error: ValidationError) -> dict[str, list[str]]:
    """Flatten a ValidationError into field -> messages mapping.

    Errors not bound to a field are reported under ``__all__``.
    """
    if hasattr(error, 'error_dict'):
        return error.message_dict
    return {'__all__': error.messages}
