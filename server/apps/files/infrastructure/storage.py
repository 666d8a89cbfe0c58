"""Storage backends holding uploaded file bytes.

Two variants share the same adapter surface (``StoredBytesMixin``):
- ``LocalFileStorage``: files on the local filesystem
- ``S3FileStorage``: S3-compatible object store via django-storages

The active variant is ``STORAGES['default']``, chosen by ``STORAGE_DRIVER``.
"""

import logging
from typing import Any, ClassVar, final, override

from django.core.files.base import File as DjangoFile
from django.core.files.storage import FileSystemStorage
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import StoredFileMissingError
from server.apps.files.models import StorageDriver

logger = logging.getLogger(__name__)


class StoredBytesMixin:
    """Adapter operations shared by all file storage backends.

    Adds to a Django storage:
    - Logging of writes and deletes
    - Transaction rollback support for failed DB operations
    - Reads that fail with ``StoredFileMissingError`` for absent bytes
    - Best-effort cleanup that never raises
    """

    driver: ClassVar[str]

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If the backend write fails.
        """
        try:
            logger.info('Uploading file to %s storage: %s', self.driver, name)
            saved_name = super().save(name, content, max_length)  # type: ignore[misc]
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file with error handling and logging.

        Deleting a missing file is not an error.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If the backend delete fails.
        """
        try:
            logger.info('Deleting file from %s storage: %s', self.driver, name)
            super().delete(name)  # type: ignore[misc]
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def open_for_read(self, name: str) -> DjangoFile:
        """Open stored bytes for streaming.

        Args:
            name: Storage path of the file.

        Returns:
            Open binary file handle; the caller must close it.

        Raises:
            StoredFileMissingError: If nothing is stored under ``name``.
        """
        if not self.exists(name):  # type: ignore[attr-defined]
            logger.warning('File missing from %s storage: %s', self.driver, name)
            raise StoredFileMissingError()

        try:
            return self.open(name, 'rb')  # type: ignore[attr-defined]
        except FileNotFoundError as error:
            # Removed between exists() and open()
            logger.warning('File vanished from storage: %s', name)
            raise StoredFileMissingError() from error

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        This method is called when a database transaction fails (or the
        upload is rejected) after the bytes were already stored.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the DB rollback has already occurred.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The file stays in storage but not in database
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def discard(self, name: str) -> None:
        """Remove bytes of a deleted file record, best-effort.

        Args:
            name: Storage path of file to delete.
        """
        try:
            if self.exists(name):  # type: ignore[attr-defined]
                self.delete(name)
            else:
                logger.warning(
                    'File not found in storage (already deleted?): %s',
                    name,
                )
        except Exception:
            # DB delete already succeeded, bytes become orphaned
            logger.exception(
                'Failed to delete file from storage (orphaned): %s',
                name,
            )


@final
class LocalFileStorage(StoredBytesMixin, FileSystemStorage):
    """Local filesystem storage rooted at ``UPLOAD_DIR``."""

    driver = StorageDriver.LOCAL


@final
class S3FileStorage(StoredBytesMixin, S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with the shared adapter
    operations of ``StoredBytesMixin``.
    """

    driver = StorageDriver.S3
