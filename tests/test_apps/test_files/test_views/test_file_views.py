"""Tests for file API endpoints."""

import json

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.signals import request_finished
from django.db import close_old_connections
from django.test import Client, RequestFactory
from django.urls import reverse

from server.apps.accounts.logic.token_operations import issue_token
from server.apps.files import views
from server.apps.files.logic import file_operations
from server.apps.files.models import File, StorageDriver, UserQuota


def _body(response):
    return b''.join(response.streaming_content)


@pytest.mark.django_db
def test_list_requires_token():
    """Test requests without a bearer token are rejected."""
    response = Client().get(reverse('files:file-list'))

    assert response.status_code == 401
    assert response.json() == {'message': 'Unauthorized'}


@pytest.mark.django_db
def test_list_rejects_bad_token():
    """Test a garbage token is rejected."""
    client = Client(headers={'Authorization': 'Bearer not-a-token'})

    response = client.get(reverse('files:file-list'))

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid token'}


@pytest.mark.django_db
def test_list_files(auth_client, make_file, settings):
    """Test listing returns items, paging and usage."""
    settings.DEFAULT_STORAGE_LIMIT_BYTES = 1000
    make_file('a.txt', folder='docs')
    make_file('b.txt')

    response = auth_client.get(reverse('files:file-list'), {'folder': 'docs'})

    assert response.status_code == 200
    payload = response.json()
    assert [item['originalName'] for item in payload['items']] == ['a.txt']
    assert payload['total'] == 1
    assert payload['page'] == 1
    assert payload['limit'] == 50
    assert payload['usage'] == {
        'usedStorageBytes': 0,
        'storageLimitBytes': 1000,
    }


@pytest.mark.django_db
def test_list_files_bad_limit(auth_client):
    """Test invalid paging is a validation error."""
    response = auth_client.get(reverse('files:file-list'), {'limit': 'abc'})

    assert response.status_code == 400
    assert response.json()['errors'] == {'limit': ['Must be a positive integer']}


@pytest.mark.django_db
def test_upload_file(auth_client, user):
    """Test multipart upload creates a file record."""
    upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

    response = auth_client.post(
        reverse('files:file-upload'),
        {'file': upload, 'folder': 'docs'},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload['originalName'] == 'notes.txt'
    assert payload['sizeBytes'] == 5
    assert payload['mimeType'] == 'text/plain'
    assert payload['folder'] == 'docs'
    assert payload['storageDriver'] == 'local'
    assert set(payload) == {
        'id',
        'originalName',
        'storedName',
        'sizeBytes',
        'mimeType',
        'folder',
        'storageDriver',
        'createdAt',
        'updatedAt',
    }
    assert UserQuota.objects.get(user=user).used_bytes == 5


@pytest.mark.django_db
def test_upload_without_file(auth_client):
    """Test upload without the file field is a bad request."""
    response = auth_client.post(reverse('files:file-upload'), {'folder': 'docs'})

    assert response.status_code == 400
    assert response.json() == {'message': 'No file uploaded'}


@pytest.mark.django_db
def test_upload_over_quota(auth_client, user, settings):
    """Test upload over the limit is rejected with 413."""
    settings.DEFAULT_STORAGE_LIMIT_BYTES = 100
    UserQuota.objects.create(user=user, quota_bytes=100, used_bytes=90)
    upload = SimpleUploadedFile('big.bin', b'x' * 20)

    response = auth_client.post(reverse('files:file-upload'), {'file': upload})

    assert response.status_code == 413
    assert 'Storage quota exceeded' in response.json()['message']
    assert not File.objects.exists()
    assert UserQuota.objects.get(user=user).used_bytes == 90


@pytest.mark.django_db
def test_upload_wrong_method(auth_client):
    """Test GET on the upload endpoint is not allowed."""
    response = auth_client.get(reverse('files:file-upload'))

    assert response.status_code == 405


@pytest.mark.django_db
def test_download_file(auth_client, user):
    """Test download streams the bytes as an attachment."""
    auth_client.post(
        reverse('files:file-upload'),
        {'file': SimpleUploadedFile('my report.pdf', b'%PDF-1.4')},
    )
    file_instance = File.objects.get(user=user)

    response = auth_client.get(reverse('files:file-download', args=[file_instance.id]))

    assert response.status_code == 200
    assert _body(response) == b'%PDF-1.4'
    assert response['Content-Disposition'] == (
        'attachment; filename="my%20report.pdf"'
    )
    assert response['Content-Length'] == '8'


@pytest.mark.django_db
def test_download_escapes_slash_in_name(auth_client, stored_file):
    """Test a slash in the display name cannot leak into the filename."""
    File.objects.filter(pk=stored_file.pk).update(original_name='q3/report.pdf')

    response = auth_client.get(reverse('files:file-download', args=[stored_file.id]))

    assert response['Content-Disposition'] == (
        'attachment; filename="q3%2Freport.pdf"'
    )
    _body(response)


@pytest.fixture
def opened_handles(monkeypatch):
    """Record storage handles opened by the file views.

    Returns:
        List filled with every handle ``open_file`` returns.
    """
    handles = []
    open_file = file_operations.open_file

    def recording_open_file(*args, **kwargs):
        file_instance, handle = open_file(*args, **kwargs)
        handles.append(handle)
        return file_instance, handle

    monkeypatch.setattr(file_operations, 'open_file', recording_open_file)
    return handles


@pytest.fixture
def keep_db_connection():
    """Stop response.close() from closing the test database connection."""
    request_finished.disconnect(close_old_connections)
    yield
    request_finished.connect(close_old_connections)


@pytest.mark.django_db
@pytest.mark.parametrize('view', [views.download_file, views.preview_file])
def test_closing_unread_response_closes_handle(
    view,
    user,
    stored_file,
    opened_handles,
    keep_db_connection,
):
    """Test a response closed before streaming starts releases the handle."""
    request = RequestFactory().get(
        '/',
        headers={'Authorization': f'Bearer {issue_token(user)}'},
    )

    response = view(request, stored_file.id)
    response.close()

    assert len(opened_handles) == 1
    assert opened_handles[0].closed


@pytest.mark.django_db
def test_preview_file(auth_client, stored_file):
    """Test preview streams the bytes inline with their MIME type."""
    response = auth_client.get(reverse('files:file-preview', args=[stored_file.id]))

    assert response.status_code == 200
    assert _body(response) == b'test file content'
    assert response['Content-Type'] == 'application/pdf'
    assert response['Content-Disposition'] == 'inline'


@pytest.mark.django_db
def test_download_other_users_file(other_user, make_file, auth_client):
    """Test files of other users look absent."""
    foreign = make_file(owner=other_user)

    response = auth_client.get(reverse('files:file-download', args=[foreign.id]))

    assert response.status_code == 404
    assert response.json() == {'message': 'Not found'}


@pytest.mark.django_db
def test_download_missing_bytes(auth_client, make_file):
    """Test a record without bytes is reported as not found."""
    file_instance = make_file()

    response = auth_client.get(reverse('files:file-download', args=[file_instance.id]))

    assert response.status_code == 404
    assert response.json() == {'message': 'File not found in storage'}


@pytest.mark.django_db
def test_download_other_driver(auth_client, make_file):
    """Test files of an inactive backend are not implemented."""
    file_instance = make_file(storage_driver=StorageDriver.S3)

    response = auth_client.get(reverse('files:file-preview', args=[file_instance.id]))

    assert response.status_code == 501


@pytest.mark.django_db
def test_rename_file(auth_client, make_file):
    """Test rename keeps the original extension."""
    file_instance = make_file('report.pdf')

    response = auth_client.patch(
        reverse('files:file-rename', args=[file_instance.id]),
        data=json.dumps({'name': 'summary'}),
        content_type='application/json',
    )

    assert response.status_code == 200
    assert response.json()['originalName'] == 'summary.pdf'


@pytest.mark.django_db
def test_rename_file_blank_name(auth_client, make_file):
    """Test blank names fail validation."""
    file_instance = make_file('report.pdf')

    response = auth_client.patch(
        reverse('files:file-rename', args=[file_instance.id]),
        data=json.dumps({'name': '   '}),
        content_type='application/json',
    )

    assert response.status_code == 400
    assert 'name' in response.json()['errors']


@pytest.mark.django_db
def test_rename_file_non_object_body(auth_client, make_file):
    """Test JSON bodies that are not objects are rejected."""
    file_instance = make_file('report.pdf')

    response = auth_client.patch(
        reverse('files:file-rename', args=[file_instance.id]),
        data=json.dumps(['summary']),
        content_type='application/json',
    )

    assert response.status_code == 400


@pytest.mark.django_db
def test_delete_file(auth_client, user, stored_file, django_capture_on_commit_callbacks):
    """Test delete removes the record and releases quota."""
    with django_capture_on_commit_callbacks(execute=True):
        response = auth_client.delete(reverse('files:file-delete', args=[stored_file.id]))

    assert response.status_code == 200
    assert response.json() == {'success': True}
    assert not File.objects.exists()
    assert UserQuota.objects.get(user=user).used_bytes == 0


@pytest.mark.django_db
def test_delete_file_not_found(auth_client):
    """Test deleting a missing file is a 404."""
    response = auth_client.delete(reverse('files:file-delete', args=[99999]))

    assert response.status_code == 404
