"""Exceptions for files app."""

from server.apps.api.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    UnimplementedError,
)


class QuotaExceededError(PayloadTooLargeError):
    """Raised when upload would exceed user's storage quota."""

    def __init__(
        self,
        quota_bytes: int,
        used_bytes: int,
        required_bytes: int,
    ) -> None:
        """Initialize QuotaExceededError.

        Args:
            quota_bytes: Effective quota limit in bytes.
            used_bytes: Currently used bytes.
            required_bytes: Bytes needed for the operation.
        """
        self.quota_bytes = quota_bytes
        self.used_bytes = used_bytes
        self.required_bytes = required_bytes

        available = max(0, quota_bytes - used_bytes)
        super().__init__(
            f'Storage quota exceeded: need {required_bytes} bytes, '
            f'only {available} bytes available '
            f'(quota: {quota_bytes}, used: {used_bytes})',
        )


class FolderNotEmptyError(BadRequestError):
    """Raised when deleting a folder that still holds files or folders."""

    default_message = 'Folder not empty'


class FolderNameConflictError(ConflictError):
    """Raised when a sibling folder already has the requested name."""

    default_message = 'Folder name already exists'


class StoredFileMissingError(NotFoundError):
    """Raised when a file record points at bytes the backend doesn't have."""

    default_message = 'File not found in storage'


class StorageDriverUnavailableError(UnimplementedError):
    """Raised when a file was stored by a backend this deployment doesn't use."""

    def __init__(self, driver: str) -> None:
        """Initialize StorageDriverUnavailableError.

        Args:
            driver: Storage driver tag of the file record.
        """
        self.driver = driver
        super().__init__(
            f'Reading files stored with the {driver!r} driver '
            'is not implemented in this deployment',
        )
