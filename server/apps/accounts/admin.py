"""Django admin configuration for accounts app."""

from typing import ClassVar

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from server.apps.accounts.forms import UserChangeForm, UserCreationForm
from server.apps.accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for e-mail identified users."""

    form = UserChangeForm
    add_form = UserCreationForm

    ordering: ClassVar[list[str]] = ['-date_joined']

    list_display = ['email', 'name', 'is_active', 'is_staff', 'date_joined']

    list_filter = ['is_active', 'is_staff']

    search_fields = ['email', 'name']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name',)}),
        ('Permissions', {
            'fields': (
                'is_active',
                'is_staff',
                'is_superuser',
                'groups',
                'user_permissions',
            ),
        }),
        ('Timestamps', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )
