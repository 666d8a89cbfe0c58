"""Database models for accounts app."""

from typing import ClassVar, Final, final, override

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone

_NAME_MAX_LENGTH: Final = 150


class UserManager(BaseUserManager['User']):
    """Manager creating users identified by e-mail."""

    use_in_migrations = True

    def create_user(
        self,
        email: str,
        password: str | None = None,
        **extra_fields: object,
    ) -> 'User':
        """Create and save a regular user.

        Args:
            email: Login e-mail (stored lower-cased).
            password: Raw password, hashed before saving.
            extra_fields: Other model fields.

        Returns:
            Created User instance.
        """
        if not email:
            raise ValueError('Users must have an email address')

        user = self.model(email=normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        email: str,
        password: str | None = None,
        **extra_fields: object,
    ) -> 'User':
        """Create and save a superuser for the admin site."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email: str) -> 'User':
        """Look users up by e-mail regardless of case."""
        return self.get(email__iexact=email)


def normalize_email(email: str) -> str:
    """Normalize e-mail for storage and comparison.

    Args:
        email: E-mail as typed by the user.

    Returns:
        Trimmed, lower-cased e-mail.
    """
    return email.strip().lower()


@final
class User(AbstractBaseUser, PermissionsMixin):
    """Account owning files, folders and a storage quota.

    Identified by a unique, case-insensitive e-mail. Storage usage
    is tracked in the related ``UserQuota`` (``user.quota``).
    """

    email = models.EmailField(unique=True)

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    EMAIL_FIELD = 'email'
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: ClassVar[list[str]] = ['name']

    class Meta:
        """Model metadata."""

        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-date_joined']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.email
