"""Django admin configuration for files app."""

from typing import Final

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.template.defaultfilters import filesizeformat
from django.utils.html import format_html

from server.apps.files.logic.quota_operations import effective_limit
from server.apps.files.models import File, Folder, UserQuota

_WARNING_PERCENT: Final = 90

_STATUS_COLORS: Final = {
    'Full': '#dc3545',
    'Warning': '#ffc107',
    'OK': '#28a745',
}


class _OwnedByUserAdmin(admin.ModelAdmin):
    """Shared options of admins listing per-user records."""

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Load owners in the same query."""
        return super().get_queryset(request).select_related('user')


@admin.register(File)
class FileAdmin(_OwnedByUserAdmin):
    """Files of all users.

    Size, storage name and driver are read-only: changing them would
    break quota accounting or orphan the stored bytes.
    """

    list_display = (
        'original_name',
        'user',
        'folder',
        'human_size',
        'storage_driver',
        'created_at',
    )
    list_filter = ('storage_driver', 'created_at')
    search_fields = ('original_name', 'folder', 'user__email')
    date_hierarchy = 'created_at'
    readonly_fields = (
        'stored_name',
        'size_bytes',
        'storage_driver',
        'created_at',
        'modified_at',
    )
    fieldsets = (
        (None, {'fields': ('user', 'original_name', 'folder', 'mime_type')}),
        ('Stored bytes', {
            'fields': ('storage_driver', 'stored_name', 'size_bytes'),
        }),
        ('History', {'fields': ('created_at', 'modified_at')}),
    )

    @admin.display(description='Size', ordering='size_bytes')
    def human_size(self, obj: File) -> str:
        return filesizeformat(obj.size_bytes)


@admin.register(Folder)
class FolderAdmin(_OwnedByUserAdmin):
    """Folders of all users."""

    list_display = ('name', 'parent', 'user', 'created_at')
    search_fields = ('name', 'parent', 'user__email')
    readonly_fields = ('created_at',)


@admin.register(UserQuota)
class UserQuotaAdmin(_OwnedByUserAdmin):
    """Per-user storage limits and usage.

    Usage is maintained by uploads and deletes, edit only the limit;
    run ``recalculate_usage`` to repair drifted usage.
    """

    list_display = ('user', 'limit', 'used', 'usage_status')
    search_fields = ('user__email', 'user__name')
    readonly_fields = ('user', 'used_bytes', 'limit')
    fields = ('user', 'quota_bytes', 'limit', 'used_bytes')

    @admin.display(description='Effective limit')
    def limit(self, obj: UserQuota) -> str:
        return filesizeformat(effective_limit(obj.quota_bytes))

    @admin.display(description='Used', ordering='used_bytes')
    def used(self, obj: UserQuota) -> str:
        return filesizeformat(obj.used_bytes)

    @admin.display(description='Status')
    def usage_status(self, obj: UserQuota) -> str:
        """Colored usage percentage of the effective limit.

        Args:
            obj: UserQuota instance.

        Returns:
            HTML formatted status indicator.
        """
        percent = obj.used_bytes * 100 / effective_limit(obj.quota_bytes)
        if percent >= 100:
            status = 'Full'
        elif percent >= _WARNING_PERCENT:
            status = 'Warning'
        else:
            status = 'OK'

        return format_html(
            '<span style="color: {0}; font-weight: bold;">{1} ({2}%)</span>',
            _STATUS_COLORS[status],
            status,
            f'{percent:.1f}',
        )
