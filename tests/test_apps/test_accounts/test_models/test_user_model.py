"""Tests for User model."""

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

User = get_user_model()


@pytest.mark.django_db
def test_create_user_normalizes_email():
    """Test e-mail is stored trimmed and lower-cased."""
    user = User.objects.create_user(' Bob@Example.COM ', 'secret1', name='Bob')

    assert user.email == 'bob@example.com'
    assert str(user) == 'bob@example.com'
    assert user.is_active
    assert not user.is_staff


def test_create_user_requires_email():
    """Test e-mail is mandatory."""
    with pytest.raises(ValueError, match='email'):
        User.objects.create_user('', 'secret1')


@pytest.mark.django_db
def test_create_superuser():
    """Test superusers get admin flags."""
    admin = User.objects.create_superuser('admin@example.com', 'secret1', name='Admin')

    assert admin.is_staff
    assert admin.is_superuser


@pytest.mark.django_db
def test_get_by_natural_key_case_insensitive(user):
    """Test lookup by e-mail ignores case."""
    assert User.objects.get_by_natural_key('TEST@EXAMPLE.COM') == user


@pytest.mark.django_db
def test_email_unique(user):
    """Test e-mail is unique."""
    with pytest.raises(IntegrityError), transaction.atomic():
        User.objects.create_user('test@example.com', 'secret1', name='Copy')
