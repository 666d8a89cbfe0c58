"""Business logic for signup, login and user projection."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from server.apps.accounts.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
)
from server.apps.accounts.logic.token_operations import issue_token
from server.apps.accounts.models import normalize_email
from server.apps.files.logic.quota_operations import get_usage

# User type for Django's dynamic user model
_User = Any

User = get_user_model()
logger = logging.getLogger(__name__)


def signup(name: str, email: str, password: str) -> tuple[str, _User]:
    """Create an account and sign it in.

    Args:
        name: Display name.
        email: Login e-mail, unique regardless of case.
        password: Raw password.

    Returns:
        Tuple of (bearer token, created user).

    Raises:
        EmailAlreadyRegisteredError: If the e-mail is taken.
    """
    email = normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        logger.info('Signup rejected, e-mail already registered: %s', email)
        raise EmailAlreadyRegisteredError()

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
            )
    except IntegrityError as error:
        # Concurrent signup with the same e-mail
        raise EmailAlreadyRegisteredError() from error

    logger.info('User signed up: %s (ID: %d)', user.email, user.pk)
    return issue_token(user), user


def login(email: str, password: str) -> tuple[str, _User]:
    """Authenticate by e-mail and password.

    Args:
        email: Login e-mail, any case.
        password: Raw password.

    Returns:
        Tuple of (bearer token, user).

    Raises:
        InvalidCredentialsError: If no active user matches.
    """
    user = User.objects.filter(email__iexact=normalize_email(email)).first()
    if user is None or not user.is_active or not user.check_password(password):
        logger.warning('Failed login for: %s', email)
        raise InvalidCredentialsError()

    logger.info('User logged in: %s', user.email)
    return issue_token(user), user


def public_user(user: _User) -> dict[str, Any]:
    """Public projection of a user.

    The credential hash is never included and the storage limit
    is always the effective one.

    Args:
        user: User to project.

    Returns:
        JSON-serializable dictionary.
    """
    usage = get_usage(user)
    return {
        'id': user.pk,
        'name': user.name,
        'email': user.email,
        'storageLimitBytes': usage.limit_bytes,
        'usedStorageBytes': usage.used_bytes,
        'createdAt': user.date_joined.isoformat(),
    }
