"""
Addon System Admin Configuration
"""

from django.contrib import admin
from django.utils.html import format_html
from .models import AddonRecord


@admin.register(AddonRecord)
class AddonRecordAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'display_label', 'version', 'status_badge',
        'installed', 'installed_at', 'updated_at'
    ]
    list_filter = ['active', 'installed', 'status', 'application']
    search_fields = ['name', 'display_label', 'summary', 'description']
    readonly_fields = [
        'active', 'installed', 'status', 'last_error',
        'installed_at', 'created_at', 'updated_at'
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'display_label', 'version', 'summary', 'description')
        }),
        ('Configuration', {
            'fields': (
                'application', 'auto_install', 'installable',
                'dependencies', 'model_names'
            )
        }),
        ('Lifecycle', {
            'fields': (
                'active', 'installed', 'status', 'last_error',
                'installed_at', 'created_at', 'updated_at'
            )
        }),
    )

    def status_badge(self, obj):
        colors = {
            'active': 'green',
            'failed': 'red',
            'unregistered': 'gray',
        }
        return format_html(
            '<span style="color: {};">{}</span>',
            colors.get(obj.status, 'orange'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
