"""Business logic for file operations."""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, BinaryIO, Final, NamedTuple

from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from server.apps.files.exceptions import StorageDriverUnavailableError
from server.apps.files.infrastructure.metadata import (
    generate_stored_name,
    resolve_mime_type,
    with_original_extension,
)
from server.apps.files.logic.quota_operations import (
    UsageSnapshot,
    decrement_usage,
    get_usage,
    reserve_usage,
)
from server.apps.files.models import ROOT_FOLDER, File

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import StoredBytesMixin

# User type for Django's dynamic user model
_User = Any

_DEFAULT_PAGE_LIMIT: Final = 50
_MAX_PAGE_LIMIT: Final = 200
_STREAM_CHUNK_SIZE: Final = 64 * 1024

logger = logging.getLogger(__name__)


class FilePage(NamedTuple):
    """One page of a file listing with the owner's current usage."""

    items: list[File]
    total: int
    page: int
    limit: int
    usage: UsageSnapshot


def _get_storage() -> 'StoredBytesMixin':
    """Get the configured default storage backend.

    Returns:
        Storage instance selected by ``STORAGE_DRIVER``.
    """
    return default_storage  # type: ignore[return-value]


def normalize_folder(folder: str | None) -> str:
    """Trim a folder name, blank means the root folder.

    Args:
        folder: Folder name as supplied by the client.

    Returns:
        Folder name to store.
    """
    return (folder or '').strip() or ROOT_FOLDER


def _parse_positive_int(raw_value: Any, field: str, default: int) -> int:
    if raw_value is None or raw_value == '':
        return default
    try:
        parsed = int(raw_value)
    except (TypeError, ValueError) as error:
        raise ValidationError(
            {field: ['Must be a positive integer']},
        ) from error
    if parsed < 1:
        raise ValidationError({field: ['Must be a positive integer']})
    return parsed


def get_user_file(user: _User, file_id: int) -> File:
    """Get a file owned by the user.

    Files of other users are reported as missing, so existence
    is never leaked.

    Args:
        user: Owner of the file.
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If file not found or not owned by user.
    """
    return File.objects.get(id=file_id, user=user)


def list_files(
    user: _User,
    search: str | None = None,
    folder: str | None = None,
    page: Any = None,
    limit: Any = None,
) -> FilePage:
    """List the user's files, newest first, one page at a time.

    Args:
        user: Owner of files.
        search: Case-insensitive substring of the display name. Matched
            literally: wildcard characters have no special meaning.
        folder: Exact folder name to filter by.
        page: 1-based page number (default 1).
        limit: Page size (default 50, capped at 200).

    Returns:
        FilePage with items, total count, paging and usage snapshot.

    Raises:
        ValidationError: If page or limit is not a positive integer.
    """
    page_number = _parse_positive_int(page, 'page', 1)
    page_limit = min(
        _parse_positive_int(limit, 'limit', _DEFAULT_PAGE_LIMIT),
        _MAX_PAGE_LIMIT,
    )

    files = File.objects.filter(user=user)
    if folder:
        files = files.filter(folder=folder)
    if search:
        # icontains escapes LIKE wildcards, user text is matched literally
        files = files.filter(original_name__icontains=search)

    offset = (page_number - 1) * page_limit
    items = list(files[offset:offset + page_limit])

    logger.debug(
        'Listed %d files for user %d (folder=%r, search=%r, page=%d)',
        len(items),
        user.pk,
        folder,
        search,
        page_number,
    )

    return FilePage(
        items=items,
        total=files.count(),
        page=page_number,
        limit=page_limit,
        usage=get_usage(user),
    )


def store_upload(file_obj: BinaryIO | DjangoFile, original_name: str) -> str:
    """Write received bytes to storage under a fresh unique name.

    Args:
        file_obj: File-like object to store.
        original_name: Name the file was uploaded with.

    Returns:
        Storage name the bytes were saved under.
    """
    storage = _get_storage()
    return storage.save(generate_stored_name(original_name), file_obj)


def register_upload(  # noqa: WPS211
    user: _User,
    folder: str | None,
    original_name: str,
    stored_name: str,
    mime_type: str,
    size_bytes: int,
) -> File:
    """Admit already-stored bytes against quota and record the file.

    Quota reservation and record creation happen in one transaction.
    If either fails (e.g. quota exceeded), the stored bytes are deleted
    from storage (rollback) and the error propagates.

    Args:
        user: Owner of the file.
        folder: Containing folder name, blank means root.
        original_name: Display name.
        stored_name: Storage name returned by ``store_upload``.
        mime_type: MIME type to record.
        size_bytes: Size of the stored bytes.

    Returns:
        Created File instance.

    Raises:
        QuotaExceededError: If the upload would exceed quota.
    """
    storage = _get_storage()
    try:
        with transaction.atomic():
            reserve_usage(user, size_bytes)
            file_instance = File.objects.create(
                user=user,
                original_name=original_name,
                stored_name=stored_name,
                size_bytes=size_bytes,
                mime_type=mime_type,
                folder=normalize_folder(folder),
                storage_driver=storage.driver,
            )
    except Exception:
        logger.warning(
            'Upload registration failed, rolling back storage upload: %s',
            stored_name,
        )
        storage.rollback_upload(stored_name)
        raise

    logger.info(
        'File record created: %s (ID: %d, %d bytes, user %d)',
        stored_name,
        file_instance.id,
        size_bytes,
        user.pk,
    )
    return file_instance


def upload_file(
    user: _User,
    uploaded_file: UploadedFile,
    folder: str | None = None,
) -> File:
    """Upload file to storage and create database record.

    Transaction safety: Upload to storage first, then reserve quota and
    create DB record. If that fails, the uploaded file is deleted from
    storage (rollback).

    Args:
        user: Owner of the file.
        uploaded_file: File received in the request.
        folder: Containing folder name, blank means root.

    Returns:
        Created File instance.

    Raises:
        QuotaExceededError: If the upload would exceed quota.
    """
    original_name = uploaded_file.name or 'file'
    mime_type = resolve_mime_type(uploaded_file.content_type, original_name)

    stored_name = store_upload(uploaded_file, original_name)
    return register_upload(
        user,
        folder,
        original_name=original_name,
        stored_name=stored_name,
        mime_type=mime_type,
        size_bytes=uploaded_file.size,
    )


def open_file(user: _User, file_id: int) -> tuple[File, DjangoFile]:
    """Open a user's file for download or preview.

    Args:
        user: Owner of the file.
        file_id: ID of the file.

    Returns:
        Tuple of (File record, open binary handle). The caller must
        close the handle.

    Raises:
        File.DoesNotExist: If file not found or not owned by user.
        StorageDriverUnavailableError: If the file was stored by a
            backend this deployment doesn't use.
        StoredFileMissingError: If the bytes are missing from storage.
    """
    file_instance = get_user_file(user, file_id)
    storage = _get_storage()

    if file_instance.storage_driver != storage.driver:
        logger.warning(
            'File %d stored with %s, active driver is %s',
            file_instance.id,
            file_instance.storage_driver,
            storage.driver,
        )
        raise StorageDriverUnavailableError(file_instance.storage_driver)

    handle = storage.open_for_read(file_instance.stored_name)
    logger.debug('Opened file for reading: %s', file_instance.stored_name)
    return file_instance, handle


def iter_file_chunks(
    handle: DjangoFile,
    name: str,
    chunk_size: int = _STREAM_CHUNK_SIZE,
) -> Iterator[bytes]:
    """Stream file content chunk by chunk.

    The handle is closed when streaming completes, fails, or the
    consumer closes the generator (client disconnect). Once streaming
    has started the response status is already sent, so read errors
    are logged and end the stream.

    Args:
        handle: Open binary file handle.
        name: Storage name, for logging.
        chunk_size: Bytes per chunk.

    Yields:
        Chunks of file content.
    """
    try:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            yield chunk
    except Exception:
        logger.exception('Error while streaming file: %s', name)
    finally:
        handle.close()


def delete_file(user: _User, file_id: int) -> None:
    """Delete file record and release its quota.

    The record deletion and quota release are committed together and
    are the source of truth. Stored bytes are removed afterwards by the
    post_delete signal handler in signals.py, best-effort.

    Args:
        user: Owner of the file.
        file_id: ID of file to delete.

    Raises:
        File.DoesNotExist: If file not found or not owned by user.
    """
    file_instance = get_user_file(user, file_id)
    size_bytes = file_instance.size_bytes

    logger.info(
        'Deleting file: ID=%d, path=%s',
        file_id,
        file_instance.stored_name,
    )

    try:
        with transaction.atomic():
            file_instance.delete()
            decrement_usage(user, size_bytes)
    except Exception:
        logger.exception('Failed to delete file from database: ID=%d', file_id)
        raise

    logger.info('File record deleted from database: ID=%d', file_id)


def rename_file(user: _User, file_id: int, new_name: str) -> File:
    """Change the display name of a file.

    Keeps the original extension when the new name has none.
    Stored bytes are not touched.

    Args:
        user: Owner of the file.
        file_id: ID of file to rename.
        new_name: Requested display name.

    Returns:
        Updated File instance.

    Raises:
        ValidationError: If the name is blank.
        File.DoesNotExist: If file not found or not owned by user.
    """
    trimmed = (new_name or '').strip()
    if not trimmed:
        raise ValidationError({'name': ['File name required']})

    file_instance = get_user_file(user, file_id)
    old_name = file_instance.original_name
    file_instance.original_name = with_original_extension(trimmed, old_name)
    file_instance.save(update_fields=['original_name', 'modified_at'])

    logger.info(
        'File renamed: ID=%d, %s -> %s',
        file_id,
        old_name,
        file_instance.original_name,
    )
    return file_instance
