"""Shared fixtures for files app tests."""

import uuid

import boto3
import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.files.logic.file_operations import upload_file
from server.apps.files.models import File

_TEST_BUCKET = 'file-vault'


@pytest.fixture
def mock_s3():
    """Mock S3 service with file-vault bucket.

    Yields:
        boto3 S3 resource with file-vault bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=_TEST_BUCKET)

        yield conn


@pytest.fixture
def s3_storage(settings, mock_s3):
    """Switch the default storage to the S3 backend on mocked S3.

    Returns:
        Default storage backed by the mocked bucket.
    """
    settings.STORAGES = {
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.S3FileStorage',
            'OPTIONS': {
                'bucket_name': _TEST_BUCKET,
                'access_key': 'testing',
                'secret_key': 'testing',
                'region_name': 'us-east-1',
                'file_overwrite': False,
                'default_acl': None,
            },
        },
        'staticfiles': {
            'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
        },
    }
    return default_storage


@pytest.fixture
def sample_upload():
    """Sample uploaded file.

    Returns:
        SimpleUploadedFile with test data.
    """
    return SimpleUploadedFile(
        'report.pdf',
        b'test file content',
        content_type='application/pdf',
    )


@pytest.fixture
def stored_file(user, sample_upload):
    """File uploaded through the regular upload path.

    Returns:
        File instance whose bytes are in the default storage.
    """
    return upload_file(user, sample_upload)


@pytest.fixture
def make_file(user):
    """Factory creating File records without stored bytes.

    Returns:
        Callable creating File instances.
    """
    def factory(original_name='file.txt', owner=None, **fields):
        fields.setdefault('size_bytes', 10)
        fields.setdefault('mime_type', 'text/plain')
        return File.objects.create(
            user=owner or user,
            original_name=original_name,
            stored_name=uuid.uuid4().hex,
            **fields,
        )

    return factory
