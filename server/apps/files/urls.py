from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    # Files:
    path('files/list', views.list_files, name='file-list'),
    path('files/upload', views.upload_file, name='file-upload'),
    path(
        'files/download/<int:file_id>',
        views.download_file,
        name='file-download',
    ),
    path(
        'files/preview/<int:file_id>',
        views.preview_file,
        name='file-preview',
    ),
    path(
        'files/rename/<int:file_id>',
        views.rename_file,
        name='file-rename',
    ),
    path('files/<int:file_id>', views.delete_file, name='file-delete'),

    # Folders:
    path('folders/list', views.list_folders, name='folder-list'),
    path('folders/create', views.create_folder, name='folder-create'),
    path('folders/<int:folder_id>', views.folder_detail, name='folder-detail'),
]
