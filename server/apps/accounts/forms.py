"""Input validation for account endpoints."""

from typing import Any, ClassVar, Final

from django import forms
from django.contrib.auth import forms as auth_forms

from server.apps.accounts.models import User

_NAME_MIN_LENGTH: Final = 2
_PASSWORD_MIN_LENGTH: Final = 6


class SignupForm(forms.Form):
    """Validate signup payload."""

    name = forms.CharField(min_length=_NAME_MIN_LENGTH, max_length=150)
    email = forms.EmailField()
    password = forms.CharField(
        min_length=_PASSWORD_MIN_LENGTH,
        strip=False,
    )


class LoginForm(forms.Form):
    """Validate login payload."""

    email = forms.EmailField()
    password = forms.CharField(strip=False)


class UserCreationForm(auth_forms.UserCreationForm):
    """Admin form creating e-mail identified users."""

    class Meta(auth_forms.UserCreationForm.Meta):
        model = User
        fields = ('email', 'name')
        field_classes: ClassVar[dict[str, Any]] = {}


class UserChangeForm(auth_forms.UserChangeForm):
    """Admin form editing e-mail identified users."""

    class Meta(auth_forms.UserChangeForm.Meta):
        model = User
        fields = '__all__'
        field_classes: ClassVar[dict[str, Any]] = {}
