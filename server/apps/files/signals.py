"""Signal handlers for files app."""

import functools
import logging

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.files.models import File

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=File)
def delete_file_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete stored bytes when a File record is deleted.

    This signal handler ensures that when a File record is deleted
    (via API, admin, ORM or any other method), the bytes in storage
    are also cleaned up once the deletion is committed.

    Cleanup is best-effort: failures are logged, never raised, so
    metadata and quota stay the source of truth.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.
    """
    if instance.storage_driver != default_storage.driver:
        logger.warning(
            'Not deleting %s: stored with %s, active driver is %s',
            instance.stored_name,
            instance.storage_driver,
            default_storage.driver,
        )
        return

    logger.info(
        'Scheduling storage cleanup after DB delete: %s',
        instance.stored_name,
    )
    transaction.on_commit(
        functools.partial(default_storage.discard, instance.stored_name),
    )
