"""Django storage configuration for uploaded file bytes.

``STORAGE_DRIVER`` selects the backend for the whole deployment:
- ``local``: files on disk under ``UPLOAD_DIR`` (default)
- ``s3``: S3-compatible bucket through django-storages

Each File record keeps the driver that stored it.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

STORAGE_DRIVER = config('STORAGE_DRIVER', default='local')

UPLOAD_DIR = config(
    'UPLOAD_DIR',
    default=str(BASE_DIR.joinpath('uploads')),
)

_STATICFILES_STORAGE: Final[dict[str, Any]] = {
    # Keep static files separate from user files
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

if STORAGE_DRIVER == 's3':
    STORAGES: dict[str, dict[str, Any]] = {
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.S3FileStorage',
            'OPTIONS': {
                'bucket_name': config('AWS_STORAGE_BUCKET_NAME'),
                'access_key': config('AWS_ACCESS_KEY_ID'),
                'secret_key': config('AWS_SECRET_ACCESS_KEY'),
                'endpoint_url': config(
                    'AWS_S3_ENDPOINT_URL',
                    default=None,
                ),
                'region_name': config(
                    'AWS_S3_REGION_NAME',
                    default='auto',
                ),
                'file_overwrite': False,  # Prevent accidental overwrites
                'default_acl': None,  # Inherit bucket ACL
            },
        },
        'staticfiles': _STATICFILES_STORAGE,
    }
else:
    STORAGES = {
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.LocalFileStorage',
            'OPTIONS': {
                'location': UPLOAD_DIR,
            },
        },
        'staticfiles': _STATICFILES_STORAGE,
    }
