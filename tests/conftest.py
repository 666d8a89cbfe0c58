"""Shared fixtures for all tests."""

import pytest
from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.test import Client

from server.apps.accounts.logic.token_operations import issue_token

User = get_user_model()

_STATICFILES_STORAGE = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}


@pytest.fixture(autouse=True)
def local_storage(settings, tmp_path):
    """Point the local storage backend at a per-test directory.

    Returns:
        Default storage rooted at a temporary directory.
    """
    settings.STORAGES = {
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.LocalFileStorage',
            'OPTIONS': {'location': str(tmp_path.joinpath('uploads'))},
        },
        'staticfiles': _STATICFILES_STORAGE,
    }
    return default_storage


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        email='test@example.com',
        password='testpass123',
        name='Test User',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        email='other@example.com',
        password='testpass123',
        name='Other User',
    )


@pytest.fixture
def auth_client(user):
    """Django test client sending the user's bearer token.

    Returns:
        Client authenticated as ``user``.
    """
    return Client(headers={'Authorization': f'Bearer {issue_token(user)}'})
