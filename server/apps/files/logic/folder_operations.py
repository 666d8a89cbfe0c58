"""Business logic for folder operations.

Folders are addressed by name: a File points at its folder through
``File.folder`` and a Folder at its parent through ``Folder.parent``.
"""

import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from server.apps.files.exceptions import (
    FolderNameConflictError,
    FolderNotEmptyError,
)
from server.apps.files.logic.file_operations import normalize_folder
from server.apps.files.models import File, Folder

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def _clean_name(name: str | None) -> str:
    trimmed = (name or '').strip()
    if not trimmed:
        raise ValidationError({'name': ['Folder name required']})
    return trimmed


def _sibling_exists(
    user: _User,
    name: str,
    parent: str,
    exclude_id: int | None = None,
) -> bool:
    siblings = Folder.objects.filter(user=user, name=name, parent=parent)
    if exclude_id is not None:
        siblings = siblings.exclude(id=exclude_id)
    return siblings.exists()


def list_folders(user: _User) -> QuerySet[Folder]:
    """List all folders of the user, newest first.

    Args:
        user: Owner of folders.

    Returns:
        QuerySet of Folder objects.
    """
    return Folder.objects.filter(user=user).order_by('-created_at', '-id')


def create_folder(
    user: _User,
    name: str | None,
    parent: str | None = None,
) -> Folder:
    """Create a folder under the given parent.

    Args:
        user: Owner of the folder.
        name: Folder name, trimmed before use.
        parent: Parent folder name, blank means root.

    Returns:
        Created Folder instance.

    Raises:
        ValidationError: If the name is blank.
        FolderNameConflictError: If a sibling already has this name.
    """
    folder_name = _clean_name(name)
    parent_name = normalize_folder(parent)

    if _sibling_exists(user, folder_name, parent_name):
        logger.info(
            'Folder already exists for user %d: %s/%s',
            user.pk,
            parent_name,
            folder_name,
        )
        raise FolderNameConflictError()

    try:
        with transaction.atomic():
            folder = Folder.objects.create(
                user=user,
                name=folder_name,
                parent=parent_name,
            )
    except IntegrityError as error:
        # Concurrent create of the same sibling
        raise FolderNameConflictError() from error

    logger.info(
        'Folder created: %s/%s (ID: %d, user %d)',
        parent_name,
        folder_name,
        folder.id,
        user.pk,
    )
    return folder


def rename_folder(user: _User, folder_id: int, new_name: str | None) -> Folder:
    """Rename a folder and move its files along.

    Files reference folders by name, so every file of this user in
    the old folder is updated to the new name. Both updates run in
    one transaction.

    Args:
        user: Owner of the folder.
        folder_id: ID of folder to rename.
        new_name: Requested name, trimmed before use.

    Returns:
        Updated Folder instance.

    Raises:
        ValidationError: If the name is blank.
        Folder.DoesNotExist: If folder not found or not owned by user.
        FolderNameConflictError: If a sibling already has this name.
    """
    folder_name = _clean_name(new_name)
    folder = Folder.objects.get(id=folder_id, user=user)

    if _sibling_exists(user, folder_name, folder.parent, exclude_id=folder.id):
        raise FolderNameConflictError()

    previous_name = folder.name
    try:
        with transaction.atomic():
            folder.name = folder_name
            folder.save(update_fields=['name'])
            moved_count = File.objects.filter(
                user=user,
                folder=previous_name,
            ).update(folder=folder_name)
    except IntegrityError as error:
        raise FolderNameConflictError() from error

    logger.info(
        'Folder renamed: %s -> %s (ID: %d), moved %d files',
        previous_name,
        folder_name,
        folder.id,
        moved_count,
    )
    return folder


def delete_folder(user: _User, folder_id: int) -> None:
    """Delete an empty folder.

    A folder is empty when no file of the user is in it and no
    folder of the user has it as parent. Nothing is cascaded.

    Args:
        user: Owner of the folder.
        folder_id: ID of folder to delete.

    Raises:
        Folder.DoesNotExist: If folder not found or not owned by user.
        FolderNotEmptyError: If the folder holds files or subfolders.
    """
    folder = Folder.objects.get(id=folder_id, user=user)

    has_files = File.objects.filter(user=user, folder=folder.name).exists()
    has_subfolders = Folder.objects.filter(
        user=user,
        parent=folder.name,
    ).exists()
    if has_files or has_subfolders:
        logger.info(
            'Refusing to delete non-empty folder %d (files=%s, subfolders=%s)',
            folder.id,
            has_files,
            has_subfolders,
        )
        raise FolderNotEmptyError()

    folder.delete()
    logger.info('Folder deleted: %s (ID: %d)', folder.name, folder_id)
