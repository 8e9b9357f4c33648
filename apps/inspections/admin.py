# ==========================================
# apps/inspections/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Inspection, InspectionStatus, Store
from .services import summarize_inspection


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'id', 'created_at']
    search_fields = ['name', 'location', 'id']
    readonly_fields = ['id', 'created_at']
    ordering = ['name']


@admin.register(Inspection)
class InspectionAdmin(admin.ModelAdmin):
    """
    Admin interface for daily walk inspections.

    Provides:
    - Listing with status badge and pass/fail counts
    - Filtering by status, store and date
    - Read-only audit fields (inspector, timestamps, version)
    - Action to mark completed inspections as reviewed
    """

    list_display = [
        'id',
        'store_id',
        'date',
        'time',
        'status_badge',
        'get_inspector',
        'get_passed',
        'get_failed',
        'created_at',
    ]

    list_filter = [
        'status',
        'store_id',
        'date',
    ]

    search_fields = [
        'id',
        'store_id',
        'inspected_by__name',
    ]

    readonly_fields = [
        'id',
        'inspected_by',
        'checklist_version',
        'version',
        'created_at',
        'updated_at',
    ]

    date_hierarchy = 'date'
    ordering = ['-created_at']

    fieldsets = (
        ('Inspection', {
            'fields': ('id', 'store_id', 'date', 'time', 'status')
        }),
        ('Checklist', {
            'fields': ('items', 'checklist_version'),
        }),
        ('People', {
            'fields': ('inspected_by', 'corrected_by'),
        }),
        ('Audit', {
            'fields': ('version', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def status_badge(self, obj):
        """Display inspection status as colored badge."""
        colors = {
            InspectionStatus.DRAFT: ('#fde68a', '#78350f'),
            InspectionStatus.COMPLETED: ('#16a34a', 'white'),
            InspectionStatus.REVIEWED: ('#2563eb', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def get_inspector(self, obj):
        return (obj.inspected_by or {}).get('name', '')
    get_inspector.short_description = 'Inspected by'

    def get_passed(self, obj):
        return summarize_inspection(obj)['passed']
    get_passed.short_description = 'Passed'

    def get_failed(self, obj):
        summary = summarize_inspection(obj)
        return f"{summary['failed']} ({summary['fixed']} fixed)"
    get_failed.short_description = 'Failed'

    actions = ['mark_reviewed']

    @admin.action(description='Mark selected completed inspections as reviewed')
    def mark_reviewed(self, request, queryset):
        count = queryset.filter(status=InspectionStatus.COMPLETED).update(status=InspectionStatus.REVIEWED)
        skipped = queryset.count() - count
        msg = f'Marked {count} inspection(s) as reviewed.'
        if skipped:
            msg += f' Skipped {skipped} not yet completed.'
        self.message_user(request, msg)
