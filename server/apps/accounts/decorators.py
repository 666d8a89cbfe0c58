"""Access gate for API views."""

import functools
import logging
from collections.abc import Callable
from typing import Any, Final

from django.contrib.auth import get_user_model
from django.http import HttpRequest, HttpResponse

from server.apps.accounts.exceptions import InvalidTokenError
from server.apps.accounts.logic.token_operations import verify_token
from server.apps.api.exceptions import NotFoundError, UnauthorizedError

_BEARER_PREFIX: Final = 'Bearer '

User = get_user_model()
logger = logging.getLogger(__name__)

_View = Callable[..., HttpResponse]


def token_required(view: _View) -> _View:
    """Require a valid bearer token and expose its user as ``request.user``.

    Raises ``UnauthorizedError`` for a missing or invalid token and
    ``NotFoundError`` when the token's user no longer exists.
    """
    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        request.user = resolve_user(request)
        return view(request, *args, **kwargs)

    return wrapper


def resolve_user(request: HttpRequest) -> Any:
    """Resolve the user identified by the request's bearer token.

    Args:
        request: Incoming request.

    Returns:
        Active user the token was issued to.

    Raises:
        UnauthorizedError: If the Authorization header is missing.
        InvalidTokenError: If the token fails verification.
        NotFoundError: If the user is gone or deactivated.
    """
    header = request.headers.get('Authorization', '')
    if not header.startswith(_BEARER_PREFIX):
        raise UnauthorizedError()

    token = header[len(_BEARER_PREFIX):].strip()
    if not token:
        raise InvalidTokenError()

    user_id = verify_token(token)
    user = User.objects.filter(pk=user_id, is_active=True).first()
    if user is None:
        logger.warning('Token subject not found: %d', user_id)
        raise NotFoundError('User not found')
    return user
