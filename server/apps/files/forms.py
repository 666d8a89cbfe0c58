"""Input validation for file and folder endpoints."""

from typing import Final

from django import forms

_NAME_MAX_LENGTH: Final = 255


class RenameForm(forms.Form):
    """Validate a rename payload (files and folders)."""

    name = forms.CharField(max_length=_NAME_MAX_LENGTH)


class FolderCreateForm(forms.Form):
    """Validate a folder creation payload."""

    name = forms.CharField(max_length=_NAME_MAX_LENGTH)
    parent = forms.CharField(max_length=_NAME_MAX_LENGTH, required=False)
