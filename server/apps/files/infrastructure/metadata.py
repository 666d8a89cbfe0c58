"""Metadata helpers for uploaded files."""

import mimetypes
import uuid
from pathlib import Path
from typing import Final

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def guess_mime_type(filename: str) -> str | None:
    """Guess MIME type from the filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg'), None if unknown.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type


def resolve_mime_type(declared: str | None, filename: str) -> str:
    """Pick the MIME type to store or serve for a file.

    Falls back from the declared type to an extension guess
    and then to ``application/octet-stream``.

    Args:
        declared: MIME type supplied by the client or stored on record.
        filename: Filename used for the guess.

    Returns:
        MIME type string.
    """
    if declared:
        return declared
    return guess_mime_type(filename) or _DEFAULT_MIME_TYPE


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension with dot (e.g., '.pdf'), case preserved.
        Returns empty string if no extension.
    """
    return Path(filename).suffix


def generate_stored_name(original_name: str) -> str:
    """Generate a collision-free storage name for an upload.

    A random UUID keeps names unique regardless of what users call
    their files; the original extension is kept for convenience.

    Args:
        original_name: Name the file was uploaded with.

    Returns:
        Storage name (e.g., '3f2a...9c.pdf').
    """
    return f'{uuid.uuid4().hex}{get_file_extension(original_name).lower()}'


def with_original_extension(new_name: str, original_name: str) -> str:
    """Keep the original extension when a rename omits one.

    Example: ('report', 'report.pdf') -> 'report.pdf',
    ('report.txt', 'report.pdf') -> 'report.txt'

    Args:
        new_name: Requested display name.
        original_name: Current display name.

    Returns:
        Display name to store.
    """
    if get_file_extension(new_name):
        return new_name
    return f'{new_name}{get_file_extension(original_name)}'
