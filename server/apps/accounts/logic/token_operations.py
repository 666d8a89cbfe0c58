"""Stateless bearer tokens (JWT) for API authentication.

Tokens carry the user id as subject and expire a fixed number of
days after issuance. Nothing is stored server-side, so there is no
revocation: logging out means discarding the token on the client.
"""

import logging
from datetime import timedelta
from typing import Any

from django.conf import settings
from django.utils import timezone
from jose import JWTError, jwt

from server.apps.accounts.exceptions import InvalidTokenError

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def _signing_key() -> str:
    return settings.JWT_SECRET_KEY or settings.SECRET_KEY


def issue_token(user: _User) -> str:
    """Issue a signed bearer token for the user.

    Args:
        user: Authenticated user.

    Returns:
        Encoded JWT.
    """
    issued_at = timezone.now()
    claims = {
        'sub': str(user.pk),
        'iat': int(issued_at.timestamp()),
        'exp': int(
            (issued_at + timedelta(days=settings.JWT_EXPIRATION_DAYS)).timestamp(),
        ),
    }
    logger.debug('Issued token for user %d', user.pk)
    return jwt.encode(claims, _signing_key(), algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """Verify a bearer token and return its subject.

    Args:
        token: Encoded JWT.

    Returns:
        ID of the user the token was issued to.

    Raises:
        InvalidTokenError: If signature, expiry or subject is invalid.
    """
    try:
        claims = jwt.decode(
            token,
            _signing_key(),
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as error:
        logger.info('Rejected bearer token: %s', error)
        raise InvalidTokenError() from error

    subject = claims.get('sub')
    try:
        return int(subject)
    except (TypeError, ValueError) as error:
        logger.warning('Bearer token has invalid subject: %r', subject)
        raise InvalidTokenError() from error
