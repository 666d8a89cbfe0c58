"""JSON representations of files app models."""

from typing import Any

from server.apps.files.logic.file_operations import FilePage
from server.apps.files.models import File, Folder


def serialize_file(file_instance: File) -> dict[str, Any]:
    """Public JSON representation of a file record."""
    return {
        'id': file_instance.id,
        'originalName': file_instance.original_name,
        'storedName': file_instance.stored_name,
        'sizeBytes': file_instance.size_bytes,
        'mimeType': file_instance.mime_type,
        'folder': file_instance.folder,
        'storageDriver': file_instance.storage_driver,
        'createdAt': file_instance.created_at.isoformat(),
        'updatedAt': file_instance.modified_at.isoformat(),
    }


def serialize_folder(folder: Folder) -> dict[str, Any]:
    """Public JSON representation of a folder."""
    return {
        'id': folder.id,
        'name': folder.name,
        'parent': folder.parent,
        'createdAt': folder.created_at.isoformat(),
    }


def serialize_file_page(page: FilePage) -> dict[str, Any]:
    """Public JSON representation of a file listing page."""
    return {
        'items': [serialize_file(file_instance) for file_instance in page.items],
        'total': page.total,
        'page': page.page,
        'limit': page.limit,
        'usage': page.usage.to_dict(),
    }
