"""API views for files and folders.

All views require a bearer token and only ever touch the
authenticated user's records.
"""

from typing import Final
from urllib.parse import quote

from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.forms import Form
from django.http import HttpRequest, JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from server.apps.accounts.decorators import token_required
from server.apps.api.exceptions import BadRequestError
from server.apps.api.http import parse_json_body
from server.apps.files.forms import FolderCreateForm, RenameForm
from server.apps.files.infrastructure.metadata import resolve_mime_type
from server.apps.files.logic import file_operations, folder_operations
from server.apps.files.models import File
from server.apps.files.serializers import (
    serialize_file,
    serialize_file_page,
    serialize_folder,
)

_UPLOAD_FIELD: Final = 'file'
_SUCCESS: Final = {'success': True}


def _validated(form: Form) -> dict[str, str]:
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())
    return form.cleaned_data


def _stream(
    file_instance: File,
    handle: DjangoFile,
    content_type: str,
    disposition: str,
) -> StreamingHttpResponse:
    response = StreamingHttpResponse(
        file_operations.iter_file_chunks(handle, file_instance.stored_name),
        content_type=content_type,
    )
    # Released on response close even when no chunk was ever pulled
    response._resource_closers.append(handle.close)
    response['Content-Disposition'] = disposition
    response['Content-Length'] = str(file_instance.size_bytes)
    return response


@require_GET
@token_required
def list_files(request: HttpRequest) -> JsonResponse:
    """List files: ``{items, total, page, limit, usage}``."""
    page = file_operations.list_files(
        request.user,
        search=request.GET.get('search'),
        folder=request.GET.get('folder'),
        page=request.GET.get('page'),
        limit=request.GET.get('limit'),
    )
    return JsonResponse(serialize_file_page(page))


@csrf_exempt
@require_POST
@token_required
def upload_file(request: HttpRequest) -> JsonResponse:
    """Upload a single file from the ``file`` multipart field."""
    uploaded_file = request.FILES.get(_UPLOAD_FIELD)
    if uploaded_file is None:
        raise BadRequestError('No file uploaded')

    file_instance = file_operations.upload_file(
        request.user,
        uploaded_file,
        folder=request.POST.get('folder'),
    )
    return JsonResponse(serialize_file(file_instance), status=201)


@require_GET
@token_required
def download_file(request: HttpRequest, file_id: int) -> StreamingHttpResponse:
    """Stream a file as an attachment named after its display name."""
    file_instance, handle = file_operations.open_file(request.user, file_id)
    return _stream(
        file_instance,
        handle,
        content_type=file_instance.mime_type or 'application/octet-stream',
        disposition='attachment; filename="{0}"'.format(
            quote(file_instance.original_name, safe=''),
        ),
    )


@require_GET
@token_required
def preview_file(request: HttpRequest, file_id: int) -> StreamingHttpResponse:
    """Stream a file for inline display."""
    file_instance, handle = file_operations.open_file(request.user, file_id)
    return _stream(
        file_instance,
        handle,
        content_type=resolve_mime_type(
            file_instance.mime_type,
            file_instance.original_name,
        ),
        disposition='inline',
    )


@csrf_exempt
@require_http_methods(['PATCH'])
@token_required
def rename_file(request: HttpRequest, file_id: int) -> JsonResponse:
    """Rename a file, keeping its extension if the new name has none."""
    cleaned = _validated(RenameForm(parse_json_body(request)))
    file_instance = file_operations.rename_file(
        request.user,
        file_id,
        cleaned['name'],
    )
    return JsonResponse(serialize_file(file_instance))


@csrf_exempt
@require_http_methods(['DELETE'])
@token_required
def delete_file(request: HttpRequest, file_id: int) -> JsonResponse:
    """Delete a file and release its quota."""
    file_operations.delete_file(request.user, file_id)
    return JsonResponse(_SUCCESS)


@require_GET
@token_required
def list_folders(request: HttpRequest) -> JsonResponse:
    """List folders, newest first: ``{items}``."""
    folders = folder_operations.list_folders(request.user)
    return JsonResponse({'items': [serialize_folder(folder) for folder in folders]})


@csrf_exempt
@require_POST
@token_required
def create_folder(request: HttpRequest) -> JsonResponse:
    """Create a folder under ``parent`` (root by default)."""
    cleaned = _validated(FolderCreateForm(parse_json_body(request)))
    folder = folder_operations.create_folder(
        request.user,
        cleaned['name'],
        parent=cleaned['parent'],
    )
    return JsonResponse(serialize_folder(folder), status=201)


@csrf_exempt
@require_http_methods(['PATCH', 'DELETE'])
@token_required
def folder_detail(request: HttpRequest, folder_id: int) -> JsonResponse:
    """Rename (PATCH) or delete (DELETE) a folder."""
    if request.method == 'DELETE':
        folder_operations.delete_folder(request.user, folder_id)
        return JsonResponse(_SUCCESS)

    cleaned = _validated(RenameForm(parse_json_body(request)))
    folder = folder_operations.rename_folder(
        request.user,
        folder_id,
        cleaned['name'],
    )
    return JsonResponse(serialize_folder(folder))
