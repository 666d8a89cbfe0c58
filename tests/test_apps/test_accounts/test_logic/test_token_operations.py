"""Tests for bearer token issuance and verification."""

from datetime import timedelta

import pytest
from django.utils import timezone
from jose import jwt

from server.apps.accounts.exceptions import InvalidTokenError
from server.apps.accounts.logic.token_operations import issue_token, verify_token


@pytest.mark.django_db
def test_issue_and_verify(user):
    """Test a fresh token verifies to its user."""
    token = issue_token(user)

    assert verify_token(token) == user.pk


@pytest.mark.django_db
def test_token_expires_after_configured_days(user, settings):
    """Test the expiry claim honours the configured lifetime."""
    settings.JWT_SECRET_KEY = 'test-secret'
    settings.JWT_EXPIRATION_DAYS = 7

    claims = jwt.get_unverified_claims(issue_token(user))

    lifetime = claims['exp'] - claims['iat']
    assert lifetime == int(timedelta(days=7).total_seconds())
    assert claims['sub'] == str(user.pk)


@pytest.mark.django_db
def test_expired_token_rejected(user, settings):
    """Test tokens past their expiry are rejected."""
    settings.JWT_EXPIRATION_DAYS = -1
    token = issue_token(user)

    with pytest.raises(InvalidTokenError):
        verify_token(token)


@pytest.mark.django_db
def test_token_signed_with_other_key_rejected(user, settings):
    """Test tokens signed with a different key are rejected."""
    settings.JWT_SECRET_KEY = 'first-secret'
    token = issue_token(user)
    settings.JWT_SECRET_KEY = 'second-secret'

    with pytest.raises(InvalidTokenError):
        verify_token(token)


def test_malformed_token_rejected():
    """Test garbage is rejected."""
    with pytest.raises(InvalidTokenError):
        verify_token('not.a.token')


def test_token_with_invalid_subject_rejected(settings):
    """Test a validly signed token with a non-numeric subject is rejected."""
    settings.JWT_SECRET_KEY = 'test-secret'
    token = jwt.encode(
        {
            'sub': 'someone',
            'exp': int((timezone.now() + timedelta(days=1)).timestamp()),
        },
        'test-secret',
        algorithm='HS256',
    )

    with pytest.raises(InvalidTokenError):
        verify_token(token)
