"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_STORED_NAME_MAX_LENGTH: Final = 512
_MIME_TYPE_MAX_LENGTH: Final = 255
_DRIVER_MAX_LENGTH: Final = 16

# Name of the implicit top-level folder
ROOT_FOLDER: Final = 'root'


class StorageDriver(models.TextChoices):
    """Storage backend variants that can hold file bytes."""

    LOCAL = 'local', 'Local filesystem'
    S3 = 's3', 'S3-compatible object store'


@final
class File(models.Model):
    """Metadata of an uploaded file.

    Bytes live in the storage backend under ``stored_name``, which
    never changes. ``original_name`` is the user-visible name and can
    be renamed. ``folder`` holds the *name* of the containing folder
    (not a foreign key), so renaming a folder rewrites this field on
    every matching file.
    """

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    original_name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        db_index=True,
        help_text='Display name, may be renamed',
    )

    stored_name = models.CharField(
        max_length=_STORED_NAME_MAX_LENGTH,
        unique=True,
        editable=False,
        help_text='Location of the bytes in the storage backend',
    )

    # Quota accounting relies on this never changing after upload
    size_bytes = models.BigIntegerField(
        editable=False,
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type declared on upload',
    )

    folder = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        default=ROOT_FOLDER,
        db_index=True,
        help_text='Name of the containing folder',
    )

    storage_driver = models.CharField(
        max_length=_DRIVER_MAX_LENGTH,
        choices=StorageDriver.choices,
        default=StorageDriver.LOCAL,
        help_text='Backend that stored the bytes',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize folder listing queries
            models.Index(
                fields=['user', 'folder'],
                name='files_user_folder_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['user', '-created_at'],
                name='files_user_recent_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}:{self.folder}/{self.original_name}'


@final
class Folder(models.Model):
    """Named container of files, scoped to one user and one parent.

    Folders form a shallow tree addressed by name: ``parent`` is the
    name of the parent folder, ``root`` for top-level folders.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    parent = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        default=ROOT_FOLDER,
        help_text='Name of the parent folder',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            # No two sibling folders share a name
            models.UniqueConstraint(
                fields=['user', 'name', 'parent'],
                name='folders_user_name_parent_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}:{self.parent}/{self.name}'


# Default quota: 2 GB in bytes
DEFAULT_QUOTA_BYTES: Final = 2 * 1024 * 1024 * 1024


@final
class UserQuota(models.Model):
    """Storage quota for a user.

    Tracks user's storage limit and current usage. ``used_bytes``
    equals the sum of ``size_bytes`` over the user's files.

    The stored limit is a floor-protected value: the effective limit
    is never lower than ``DEFAULT_STORAGE_LIMIT_BYTES`` even when
    ``quota_bytes`` is stored as 0.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quota',
        primary_key=True,
    )

    quota_bytes = models.BigIntegerField(
        default=DEFAULT_QUOTA_BYTES,
        help_text='Storage quota limit in bytes',
    )

    used_bytes = models.BigIntegerField(
        default=0,
        help_text='Currently used storage in bytes',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'User Quota'  # type: ignore[mutable-override]
        verbose_name_plural = 'User Quotas'  # type: ignore[mutable-override]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=models.Q(quota_bytes__gte=0),
                name='quota_bytes_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(used_bytes__gte=0),
                name='used_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}: {self.used_bytes}/{self.quota_bytes}'
