"""Admin registration for notifications."""

from __future__ import annotations

from django.contrib import admin

from .models import ActivityLog, Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "title", "type", "is_read", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("user__email", "title", "message")


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("user", "action_type", "reference_type", "reference_id", "created_at")
    list_filter = ("action_type",)
    search_fields = ("user__email", "reference_id")
    readonly_fields = ("user", "action_type", "reference_id", "reference_type", "metadata", "created_at")

    def has_add_permission(self, request):  # type: ignore
        return False
