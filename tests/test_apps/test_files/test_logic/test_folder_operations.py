"""Tests for folder operations business logic."""

import pytest
from django.core.exceptions import ValidationError

from server.apps.files.exceptions import (
    FolderNameConflictError,
    FolderNotEmptyError,
)
from server.apps.files.logic.folder_operations import (
    create_folder,
    delete_folder,
    list_folders,
    rename_folder,
)
from server.apps.files.models import File, Folder


@pytest.mark.django_db
def test_create_folder_under_root(user):
    """Test folder without parent lands under root."""
    folder = create_folder(user, '  Photos  ')

    assert folder.name == 'Photos'
    assert folder.parent == 'root'
    assert folder.user == user


@pytest.mark.django_db
def test_create_folder_under_parent(user):
    """Test folder keeps the given parent name."""
    folder = create_folder(user, '2024', parent='Photos')

    assert folder.parent == 'Photos'


@pytest.mark.django_db
def test_create_folder_duplicate_sibling(user):
    """Test a second sibling with the same name is a conflict."""
    create_folder(user, 'X', parent='root')

    with pytest.raises(FolderNameConflictError) as exc_info:
        create_folder(user, 'X', parent='root')

    assert exc_info.value.status_code == 409
    assert Folder.objects.filter(user=user, name='X').count() == 1


@pytest.mark.django_db
def test_create_folder_same_name_elsewhere(user, other_user):
    """Test names are unique per user and parent only."""
    create_folder(user, 'X')

    create_folder(user, 'X', parent='Photos')
    create_folder(other_user, 'X')

    assert Folder.objects.filter(name='X').count() == 3


@pytest.mark.django_db
@pytest.mark.parametrize('name', ['', '   ', None])
def test_create_folder_blank_name(user, name):
    """Test blank folder names are rejected."""
    with pytest.raises(ValidationError):
        create_folder(user, name)


@pytest.mark.django_db
def test_list_folders_only_own_newest_first(user, other_user):
    """Test listing is scoped to the owner and newest first."""
    create_folder(user, 'first')
    create_folder(user, 'second')
    create_folder(other_user, 'foreign')

    names = [folder.name for folder in list_folders(user)]

    assert names == ['second', 'first']


@pytest.mark.django_db
def test_rename_folder_moves_own_files(user, other_user, make_file):
    """Test rename moves exactly the user's files of that folder."""
    folder = create_folder(user, 'A')
    moved = make_file('moved.txt', folder='A')
    untouched = make_file('untouched.txt', folder='C')
    foreign = make_file('foreign.txt', owner=other_user, folder='A')

    renamed = rename_folder(user, folder.id, 'B')

    assert renamed.name == 'B'
    moved.refresh_from_db()
    untouched.refresh_from_db()
    foreign.refresh_from_db()
    assert moved.folder == 'B'
    assert untouched.folder == 'C'
    assert foreign.folder == 'A'


@pytest.mark.django_db
def test_rename_folder_conflict(user, make_file):
    """Test renaming onto an existing sibling name changes nothing."""
    folder = create_folder(user, 'A')
    create_folder(user, 'B')
    file_instance = make_file(folder='A')

    with pytest.raises(FolderNameConflictError):
        rename_folder(user, folder.id, 'B')

    folder.refresh_from_db()
    file_instance.refresh_from_db()
    assert folder.name == 'A'
    assert file_instance.folder == 'A'


@pytest.mark.django_db
def test_rename_folder_to_same_name(user):
    """Test renaming a folder to its own name is not a conflict."""
    folder = create_folder(user, 'A')

    renamed = rename_folder(user, folder.id, 'A')

    assert renamed.name == 'A'


@pytest.mark.django_db
def test_rename_folder_blank_name(user):
    """Test blank names are rejected."""
    folder = create_folder(user, 'A')

    with pytest.raises(ValidationError):
        rename_folder(user, folder.id, '  ')


@pytest.mark.django_db
def test_rename_folder_of_other_user(user, other_user):
    """Test folders of other users look absent."""
    foreign = create_folder(other_user, 'A')

    with pytest.raises(Folder.DoesNotExist):
        rename_folder(user, foreign.id, 'B')


@pytest.mark.django_db
def test_delete_empty_folder(user):
    """Test an empty folder is deleted."""
    folder = create_folder(user, 'A')

    delete_folder(user, folder.id)

    assert not Folder.objects.filter(id=folder.id).exists()


@pytest.mark.django_db
def test_delete_folder_with_file(user, make_file):
    """Test a folder holding a file is kept, and so is the file."""
    folder = create_folder(user, 'A')
    file_instance = make_file(folder='A')

    with pytest.raises(FolderNotEmptyError) as exc_info:
        delete_folder(user, folder.id)

    assert exc_info.value.status_code == 400
    assert Folder.objects.filter(id=folder.id).exists()
    assert File.objects.filter(id=file_instance.id).exists()


@pytest.mark.django_db
def test_delete_folder_with_subfolder(user):
    """Test a folder with child folders is kept."""
    folder = create_folder(user, 'A')
    create_folder(user, 'child', parent='A')

    with pytest.raises(FolderNotEmptyError):
        delete_folder(user, folder.id)

    assert Folder.objects.filter(id=folder.id).exists()


@pytest.mark.django_db
def test_delete_folder_ignores_other_users_files(user, other_user, make_file):
    """Test other users' files in a same-named folder don't block."""
    folder = create_folder(user, 'A')
    make_file(owner=other_user, folder='A')

    delete_folder(user, folder.id)

    assert not Folder.objects.filter(id=folder.id).exists()


@pytest.mark.django_db
def test_delete_folder_not_found(user):
    """Test deleting non-existent folder."""
    with pytest.raises(Folder.DoesNotExist):
        delete_folder(user, 99999)
